from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import subtract_months
from .model import ArchiveSettings


def last_activity(dates: Iterable[datetime]) -> Optional[datetime]:
    """Most recent transactional date, or None for a never-engaged entity."""
    return max(dates, default=None)


def is_eligible_for_archive(
    *,
    inactive: bool,
    last_active: Optional[datetime],
    settings: ArchiveSettings,
    now: datetime,
) -> bool:
    """Automatic archival rule.

    Disabled settings or an entity that is not inactive never qualify. An
    entity without any activity qualifies immediately; otherwise its last
    activity must predate ``now`` minus ``settings.months`` calendar months.
    """

    if not settings.enabled:
        return False
    if not inactive:
        return False
    if last_active is None:
        return True
    return last_active < subtract_months(now, settings.months)
