"""Database configuration module."""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from api.settings import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency for database session."""
    async with async_session() as session:
        yield session


async def create_all_tables() -> None:
    """Create missing tables directly from the ORM metadata.

    Used for local development with DEBUG on; deployed databases are
    migrated with alembic.
    """
    # Register every model on Base.metadata
    from api.models import payment, transaction, vendor, wire  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
