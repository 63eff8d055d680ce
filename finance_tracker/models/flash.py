"""
Flash Messages

A one-time status message produced by a write (create/edit/delete
transaction, save settings) and shown on the next render only.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FlashType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class FlashMessage(BaseModel):
    """Status message carried from a write to the next render."""

    type: FlashType = Field(
        default=FlashType.SUCCESS,
        description="How the message should be styled"
    )
    msg: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Text shown to the user"
    )

    @classmethod
    def success(cls, msg: str) -> "FlashMessage":
        return cls(type=FlashType.SUCCESS, msg=msg)

    @classmethod
    def error(cls, msg: str) -> "FlashMessage":
        return cls(type=FlashType.ERROR, msg=msg)
