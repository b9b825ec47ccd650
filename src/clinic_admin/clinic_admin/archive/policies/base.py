from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Sequence

from ...core.enums import EntityStatus, EntityType
from ..eligibility import is_eligible_for_archive, last_activity
from ..model import ArchiveSettings


class ArchivePolicy(ABC):
    """Strategy Pattern: how one entity type is identified, named and judged for archival."""

    entity_type: EntityType

    @abstractmethod
    def entities(self, roster: Any) -> Sequence[Any]:
        raise NotImplementedError

    @abstractmethod
    def entity_id(self, entity: Any) -> str:
        raise NotImplementedError

    @abstractmethod
    def display_name(self, entity: Any) -> str:
        raise NotImplementedError

    @abstractmethod
    def activity_dates(self, entity: Any, roster: Any) -> list[datetime]:
        raise NotImplementedError

    def is_inactive(self, entity: Any) -> bool:
        return getattr(entity, "status", None) == EntityStatus.INACTIVE.value

    def last_activity(self, entity: Any, roster: Any) -> Optional[datetime]:
        return last_activity(self.activity_dates(entity, roster))

    def is_eligible(self, entity: Any, roster: Any, settings: ArchiveSettings, *, now: datetime) -> bool:
        return is_eligible_for_archive(
            inactive=self.is_inactive(entity),
            last_active=self.last_activity(entity, roster),
            settings=settings,
            now=now,
        )
