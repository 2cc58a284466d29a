"""Shared numeric field types.

Amounts and weights are carried as Decimal end to end and only rounded when
rendered to JSON.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated

from pydantic import PlainSerializer

CENT = Decimal("0.01")
GRAM = Decimal("0.001")


def round_money(value: Decimal) -> Decimal:
    """Round a currency amount to 2 decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_weight(value: Decimal) -> Decimal:
    """Round a weight in kilograms to grams."""
    return value.quantize(GRAM, rounding=ROUND_HALF_UP)


Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(round_money(v)), return_type=float, when_used="json"),
]

Weight = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(round_weight(v)), return_type=float, when_used="json"),
]
