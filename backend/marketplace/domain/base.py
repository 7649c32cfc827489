"""
Shared model configuration and money type
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

CENTS = Decimal("0.01")

# Decimal internally, JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def quantize_money(value) -> Decimal:
    """Round a money amount to cents (half up)"""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python, buildable from ORM rows"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
