"""API exception module.

Every error raised by the ledger services is an HTTPException subclass so
routers can let it propagate; the status code and a short message reach the
client, never a stack trace.
"""
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
    ):
        super().__init__(status_code=status_code, detail=detail)


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationError(APIException):
    """Malformed or missing fields on a transaction, vendor or payment."""

    def __init__(self, detail: str = "Validation failed"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class PaymentExceedsBalanceError(ValidationError):
    """Payment amount is larger than the vendor's outstanding balance."""

    def __init__(
        self,
        vendor: str,
        amount: Decimal,
        total_payable: Decimal,
        total_paid: Decimal,
    ):
        self.vendor = vendor
        self.amount = amount
        self.remaining_balance = total_payable - total_paid
        super().__init__(
            detail=(
                f"Payment amount ({amount:.2f}) for '{vendor}' cannot exceed remaining "
                f"balance ({self.remaining_balance:.2f}); total payable {total_payable:.2f}, "
                f"already paid {total_paid:.2f}"
            )
        )


class UnknownReferenceError(APIException):
    """A transaction references a vendor or wire missing from the catalogue."""

    def __init__(self, kind: str, name: str, detail: Optional[str] = None):
        self.kind = kind
        self.name = name
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{kind.capitalize()} '{name}' not found; create it first",
        )


class InsufficientInventoryError(APIException):
    """Requested IN weight exceeds what the vendor still holds."""

    def __init__(self, vendor: str, item: str, requested: Decimal, available: Decimal):
        self.vendor = vendor
        self.item = item
        self.requested = requested
        self.available = available
        if available > 0:
            detail = (
                f"Only {available} kg of '{item}' from '{vendor}' are available for import; "
                f"requested {requested} kg"
            )
        else:
            detail = f"Item '{item}' from '{vendor}' is not available for import; issue it first"
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StoreUnavailableError(APIException):
    """The persistence store did not respond."""

    def __init__(self, detail: str = "Data store is unavailable; please try again later"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
