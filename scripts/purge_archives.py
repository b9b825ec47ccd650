"""Purge expired archive entries (patients and employees).

Same sweep the app runs shortly after startup; handy from cron.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.clinic_admin.clinic_admin.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), api_base_url=settings.API_BASE_URL)

    for entity_type, count in container.archive_service.purge_all_silently().items():
        print(f"OK: {entity_type.value}: {count} expired archive(s) purged")


if __name__ == "__main__":
    main()
