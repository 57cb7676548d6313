# schemas/types.py
"""
Shared field types for request/response schemas.
"""
from decimal import Decimal
from typing import Annotated

from pydantic import Field, PlainSerializer

MAX_AMOUNT = Decimal("999999.99")

# Amounts are exact decimals internally and plain JSON numbers on the wire.
Money = Annotated[
     Decimal,
     PlainSerializer(lambda value: float(value), return_type=float, when_used="json"),
]

# Positive amount with at most two decimal places, for request bodies.
AmountIn = Annotated[
     Decimal,
     Field(gt=0, le=MAX_AMOUNT, max_digits=8, decimal_places=2),
]
