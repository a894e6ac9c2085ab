"""
Merchant and Order entities consumed by the gateway core.

Amounts on the wire are integer minor units (cents / fen); ``Order.amount``
is kept in major units as a ``Decimal``.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigurationError


def to_minor_units(amount: Union[Decimal, int, float, str]) -> int:
    """Convert a major-unit amount to integer minor units (19.99 -> 1999)."""
    value = Decimal(str(amount)) * 100
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(fee: Union[int, str]) -> Decimal:
    """Convert integer minor units back to a major-unit Decimal (1999 -> 19.99)."""
    return Decimal(int(fee)) / 100


class Merchant(BaseModel):
    """Merchant credentials. Immutable for the duration of an operation."""

    model_config = ConfigDict(frozen=True)

    account_id: str
    key: str = Field(repr=False)
    notify_url: str
    return_url: Optional[str] = None

    @field_validator("account_id", "key")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("notify_url", "return_url")
    @classmethod
    def http_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("must be an absolute http(s) URL")
        return v

    @model_validator(mode="before")
    @classmethod
    def default_return_url(cls, data):
        if isinstance(data, dict) and not data.get("return_url"):
            data = {**data, "return_url": data.get("notify_url")}
        return data

    @classmethod
    def create(cls, **kwargs) -> "Merchant":
        """Build a merchant, raising ConfigurationError instead of ValidationError."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ConfigurationError(f"Invalid merchant configuration: {', '.join(fields)}", {"fields": fields}) from e


class Order(BaseModel):
    """Order being paid. The verifier may overwrite ``id`` and ``amount``."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    subject: str = ""
    amount: Decimal = Decimal("0")

    @property
    def amount_minor(self) -> int:
        return to_minor_units(self.amount)
