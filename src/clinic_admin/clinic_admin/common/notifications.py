from __future__ import annotations

from flask import flash, get_flashed_messages

from ..core.enums import NotificationLevel


def notify(message: str, level: NotificationLevel) -> None:
    """Queue a transient notification (toast) for the next response."""
    flash(message, level.value)


def pending_notifications() -> list[dict]:
    return [{"level": level, "message": message} for level, message in get_flashed_messages(with_categories=True)]


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"
