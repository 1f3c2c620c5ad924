"""Pydantic models for SmartSpend entities and read models.

Stored entities (Category, Transaction, Budget) are frozen; repositories
replace them wholesale instead of mutating in place. Money is carried as
Decimal with at most two fractional digits, matching the DECIMAL(18,2)
columns of the relational backend so both backends round-trip identically.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ValidationError

Money = Annotated[Decimal, Field(max_digits=18, decimal_places=2)]
ShareMoney = Annotated[Decimal, Field(ge=0, max_digits=18, decimal_places=2)]

MONTH_YEAR_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
COLOR_HEX_PATTERN = r"^#[0-9A-Fa-f]{6}$"

# Last millisecond of 9999-12-30 UTC; stays within year 9999 in every zone
MAX_EPOCH_MS = 253402214399999


class PaymentMethod(str, Enum):
    """How a transaction was paid."""

    UPI = "UPI"
    CASH = "Cash"
    CARD = "Card"
    OTHER = "Other"


class EntityKind(str, Enum):
    """Entity types that own an id counter."""

    TRANSACTION = "transaction"
    CATEGORY = "category"
    BUDGET = "budget"


class Category(BaseModel):
    """User-facing spending classification with display glyph and color."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=64)
    emoji: str = Field(..., min_length=1, max_length=16)
    is_default: bool = False
    color_hex: str = Field(..., pattern=COLOR_HEX_PATTERN)


class TransactionData(BaseModel):
    """User-supplied fields of a transaction (everything but the id)."""

    model_config = ConfigDict(frozen=True)

    amount: Money = Field(..., gt=0)
    category_id: int
    note: str = ""
    date: int = Field(..., ge=0, le=MAX_EPOCH_MS, description="Epoch milliseconds")
    payment_method: PaymentMethod = PaymentMethod.UPI
    is_recurring: bool = False
    recurring_interval_days: Literal[7, 30] | None = None
    is_split: bool = False
    split_share: ShareMoney | None = None

    @field_validator("note", mode="before")
    @classmethod
    def _none_note_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @model_validator(mode="after")
    def _check_optional_pairs(self) -> "TransactionData":
        if self.is_recurring != (self.recurring_interval_days is not None):
            raise ValueError(
                "recurring_interval_days must be set if and only if is_recurring"
            )
        if self.is_split != (self.split_share is not None):
            raise ValueError("split_share must be set if and only if is_split")
        return self


class Transaction(TransactionData):
    """A stored transaction."""

    id: int = Field(..., ge=1)

    @property
    def data(self) -> TransactionData:
        """The user-supplied part of this transaction."""
        return TransactionData.model_validate(self.model_dump(exclude={"id"}))


class TransactionWithCategory(Transaction):
    """Transaction joined with its category's display attributes at read time."""

    category_name: str
    category_emoji: str
    category_color: str


class Budget(BaseModel):
    """Monthly spending limit for one category."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    category_id: int
    limit_amount: Money = Field(..., gt=0)
    month_year: str = Field(..., pattern=MONTH_YEAR_PATTERN)


class CategorySpending(BaseModel):
    """Total spent in one category over a range, with display attributes."""

    model_config = ConfigDict(frozen=True)

    category_id: int
    total: Decimal
    category_name: str
    category_emoji: str
    category_color: str


class DailySpending(BaseModel):
    """Total spent on one local calendar day (``YYYY-MM-DD``)."""

    model_config = ConfigDict(frozen=True)

    day: str
    total: Decimal


M = TypeVar("M", bound=BaseModel)


def parse_entity(model_cls: type[M], data: dict[str, Any]) -> M:
    """Validate ``data`` into ``model_cls``, raising the domain ValidationError.

    Callers of the repositories never see ``pydantic.ValidationError``.
    """
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'value'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"Invalid {model_cls.__name__}: {problems}") from e
