"""
Transaction Model

A transaction is one income or expense entry attributed to a calendar day.

DESIGN DECISION: The stored JSON shape is kept flat and stable
({"id", "date", "type", "category", "note", "amount"}) so existing
transactions.json documents load without migration.
"""

import datetime as dt
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_CATEGORY = "Umum"


class TransactionType(str, Enum):
    """Closed set of transaction types."""
    INCOME = "income"
    EXPENSE = "expense"


def new_transaction_id() -> str:
    """Generate an opaque, unique transaction id."""
    return uuid4().hex


class Transaction(BaseModel):
    """
    A single income/expense entry.

    The id is assigned once at creation and never changes; edits replace
    every other field.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_transaction_id,
        min_length=1,
        description="Opaque unique id"
    )
    date: dt.date = Field(
        ...,
        description="Calendar day the transaction is attributed to"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    category: str = Field(
        default=DEFAULT_CATEGORY,
        max_length=100,
        description="Free-form category label"
    )
    note: str = Field(
        default="",
        max_length=500,
        description="Optional note"
    )
    # No sign check: negative and zero amounts are stored as given
    amount: float = Field(
        default=0.0,
        description="Amount in the account currency"
    )

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_day(cls, v: Any) -> Any:
        """Accept timestamps and keep only their calendar day."""
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and len(v.strip()) > 10:
            try:
                return dt.datetime.fromisoformat(v.strip().replace("Z", "+00:00")).date()
            except ValueError:
                return v
        return v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CATEGORY
        return v

    @field_validator("note", mode="before")
    @classmethod
    def default_note(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("amount", mode="before")
    @classmethod
    def blank_amount_is_zero(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0.0
        return v

    @property
    def month_key(self) -> str:
        """YYYY-MM of the transaction date."""
        return self.date.strftime("%Y-%m")

    @property
    def day_key(self) -> str:
        """YYYY-MM-DD of the transaction date."""
        return self.date.isoformat()

    def to_record(self) -> dict:
        """Convert to the persisted JSON record."""
        return self.model_dump(mode="json")
