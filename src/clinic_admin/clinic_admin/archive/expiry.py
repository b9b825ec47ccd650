from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_utc


def calculate_expiry(retention_days: int, *, now: Optional[datetime] = None) -> datetime:
    """Absolute purge date for an entry archived at ``now``.

    Day arithmetic, not calendar years: 730 days after 2023-01-01 is 2024-12-31.
    Values below 1 are rejected when settings are saved, not here.
    """

    return (now or now_utc()) + timedelta(days=int(retention_days))
