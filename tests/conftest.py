"""Pytest fixtures for async SQLite test database."""
import os
from datetime import date, datetime, timedelta
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from api.app import app
from api.database.database import Base, get_db
from api.models import payment, transaction, vendor, wire  # noqa: F401
from api.models.transaction import TransactionType
from api.models.vendor import Vendor, WireAssignment
from api.models.wire import PayalType, WireItem
from api.schemas.ledger import LedgerTransaction

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


def make_txn(
    sequence: int,
    txn_type: TransactionType,
    qty,
    vendor: str = "Acme",
    item: str = "22mm",
    day: int = 1,
    payal_type: str = None,
    price="0",
    created_offset: int = None,
) -> LedgerTransaction:
    """Build a LedgerTransaction dated 2024-01-<day>.

    created_at defaults to ``sequence`` minutes after BASE_TIME so entry
    order and creation order agree unless ``created_offset`` says otherwise.
    """
    offset = sequence if created_offset is None else created_offset
    return LedgerTransaction(
        id=f"t{sequence}",
        sequence=sequence,
        type=txn_type,
        vendor=vendor,
        item=item,
        payal_type=payal_type if txn_type is TransactionType.IN else None,
        qty=Decimal(str(qty)),
        price=Decimal(str(price)),
        effective_date=date(2024, 1, day),
        created_at=BASE_TIME + timedelta(minutes=offset),
    )


@pytest.fixture
def txn():
    """Factory fixture for LedgerTransaction records."""
    return make_txn


@pytest_asyncio.fixture
async def db_session():
    """Create an in-memory SQLite async session for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session):
    """HTTP client bound to the app, sharing the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def catalogue(db_session):
    """Vendor "Acme" with a Moorni rate of 100/kg on wire 22mm.

    The catalogue also knows payal type "Silver" on 22mm, which Acme has no
    rate for.
    """
    wire_22 = WireItem(name="22mm", payal_types=[])
    wire_22.payal_types.append(PayalType(name="Moorni", legacy_price=Decimal("90")))
    wire_22.payal_types.append(PayalType(name="Silver", legacy_price=Decimal("120")))
    acme = Vendor(name="Acme", assigned_wires=[])
    acme.assigned_wires.append(
        WireAssignment(wire_name="22mm", payal_type="Moorni", price_per_kg=Decimal("100"))
    )
    db_session.add_all([wire_22, acme])
    await db_session.commit()
    return {"vendor": acme, "wire": wire_22}
