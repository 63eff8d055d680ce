"""
User Settings Model

The preferences record that the dashboard suggestions are computed against.
It is a singleton, persisted as one JSON document with camelCase keys:

    {"currency": "IDR", "monthlyExpenseTarget": 3000000,
     "dailyIncomeTarget": 200000, "startWeekOn": 1}
"""

import math
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TrackerSettings(BaseModel):
    """
    User preferences.

    start_week_on is stored and editable but no computation reads it yet.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    currency: str = Field(
        default="IDR",
        min_length=1,
        max_length=10,
        description="Currency code used for display"
    )
    monthly_expense_target: float = Field(
        default=3_000_000,
        ge=0,
        description="Ceiling for expenses in a calendar month"
    )
    daily_income_target: float = Field(
        default=200_000,
        ge=0,
        description="Expected income per day"
    )
    start_week_on: int = Field(
        default=1,
        ge=0,
        le=6,
        description="Weekday index a week starts on (0 = Sunday)"
    )

    @classmethod
    def defaults(cls) -> "TrackerSettings":
        """The fixed baseline used when nothing is stored yet."""
        return cls()

    def merge(self, update: Mapping[str, Any]) -> "TrackerSettings":
        """
        Apply a partial update field by field.

        Keys may be camelCase (form/JSON) or snake_case. Numeric values are
        parsed as numbers; anything missing, blank, not a number or out of
        range keeps the previous value. Targets are non-negative, so a
        negative number is treated as out of range and ignored rather than
        stored. Unknown keys are ignored.
        """
        values = self.model_dump()

        for name, field in type(self).model_fields.items():
            raw = update.get(field.alias) if field.alias in update else update.get(name)

            if name == "currency":
                if isinstance(raw, str) and raw.strip():
                    values[name] = raw.strip()
                continue

            parsed = _parse_number(raw)
            if parsed is None or parsed < 0:
                continue
            if name == "start_week_on":
                if not parsed.is_integer() or parsed > 6:
                    continue
                values[name] = int(parsed)
            else:
                values[name] = parsed

        return type(self).model_validate(values)

    def to_record(self) -> dict:
        """Convert to the persisted JSON record (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


def _parse_number(raw: Any) -> Optional[float]:
    """Parse a form/JSON value as a finite number, or None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        if not raw.strip():
            return None
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None
