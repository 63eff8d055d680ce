"""Carry a flash message from a write to exactly one subsequent render."""

from collections.abc import MutableMapping
from typing import Any, Optional

from finance_tracker.models.flash import FlashMessage


FLASH_KEY = "flash"


def set_flash(session: MutableMapping[str, Any], message: FlashMessage) -> None:
    """Store a message for the next render, replacing any pending one."""
    session[FLASH_KEY] = message


def consume_flash(session: MutableMapping[str, Any]) -> Optional[FlashMessage]:
    """Return the pending message (if any) and clear it."""
    message = session.pop(FLASH_KEY, None)
    if message is None:
        return None
    if isinstance(message, dict):
        return FlashMessage.model_validate(message)
    return message
