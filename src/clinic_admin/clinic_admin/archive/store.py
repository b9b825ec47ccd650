"""Pure operations over an archive store (entity id -> ordered archive entries).

Every function returns a new mapping and leaves its input untouched. An entity
never appears with an empty list: the key goes away with its last entry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from ..core.exceptions import NotFoundError
from .model import ArchiveEntry, ArchiveStore


def get(store: ArchiveStore, entity_id: str) -> list[ArchiveEntry]:
    return list(store.get(str(entity_id), []))


def append(store: ArchiveStore, entity_id: str, entry: ArchiveEntry) -> ArchiveStore:
    key = str(entity_id)
    out = dict(store)
    out[key] = [*store.get(key, []), entry]
    return out


def remove(store: ArchiveStore, entity_id: str, index: int) -> ArchiveStore:
    key = str(entity_id)
    entries = store.get(key, [])
    if not 0 <= index < len(entries):
        raise NotFoundError("Archive entry not found")

    remaining = entries[:index] + entries[index + 1 :]
    out = dict(store)
    if remaining:
        out[key] = remaining
    else:
        del out[key]
    return out


def is_expired(entry: ArchiveEntry, now: datetime) -> bool:
    if entry.expiry_date is None:
        return False
    return now > entry.expiry_date


def has_unexpired_entry(entries: Iterable[ArchiveEntry], now: datetime) -> bool:
    return any(not is_expired(e, now) for e in entries)


def purge_expired(store: ArchiveStore, now: datetime) -> tuple[ArchiveStore, int]:
    """Drop expired entries. Returns the new store and how many entries went."""

    out: ArchiveStore = {}
    purged = 0
    for key, entries in store.items():
        kept = [e for e in entries if not is_expired(e, now)]
        purged += len(entries) - len(kept)
        if kept:
            out[key] = kept
    return out, purged
