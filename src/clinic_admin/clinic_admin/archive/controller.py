from __future__ import annotations

import logging

from flask import Flask, abort, jsonify, redirect, request, url_for

from ..common.notifications import notify, pending_notifications, plural
from ..container import Container
from ..core.enums import EntityType, NotificationLevel
from ..core.exceptions import NotFoundError, ValidationError
from .model import ArchiveEntry, ArchiveSettings

logger = logging.getLogger(__name__)


def entry_to_json(entry: ArchiveEntry) -> dict:
    return {
        "archived_at": entry.archived_at.isoformat(),
        "expiry_date": entry.expiry_date.isoformat() if entry.expiry_date else None,
        "name": entry.name,
        "reason": entry.reason,
    }


def settings_to_json(settings: ArchiveSettings) -> dict:
    return {"enabled": settings.enabled, "months": settings.months, "retention_days": settings.retention_days}


def register(app: Flask, container: Container) -> None:
    def _entity_type(value: str) -> EntityType:
        try:
            return EntityType(value)
        except ValueError:
            abort(404)

    def _load_roster(entity_type: EntityType):
        if entity_type == EntityType.PATIENT:
            return container.patient_service.load_roster()
        return container.employee_service.load_roster()

    @app.route("/archives/<entity_type>", methods=["GET"], endpoint="archive_manager")
    def archive_manager(entity_type: str):
        et = _entity_type(entity_type)
        roster = _load_roster(et)
        rows = container.archive_service.eligibility_overview(et, roster)
        return jsonify(
            {
                "entity_type": et.value,
                "settings": settings_to_json(container.archive_service.get_settings(et)),
                "from_cache": roster.from_cache,
                "rows": [
                    {
                        "id": r.entity_id,
                        "name": r.name,
                        "last_activity": r.last_activity.isoformat() if r.last_activity else None,
                        "eligible": r.eligible,
                        "archive_count": r.archive_count,
                    }
                    for r in rows
                ],
                "notifications": pending_notifications(),
            }
        )

    @app.route("/archives/<entity_type>/settings", methods=["POST"], endpoint="archive_settings_save")
    def archive_settings_save(entity_type: str):
        et = _entity_type(entity_type)
        try:
            container.archive_service.save_settings(
                et,
                enabled=request.form.get("enabled", "").lower() in {"1", "on", "true", "yes"},
                months=request.form.get("months") or "6",
                retention_days=request.form.get("retentionDays") or "730",
            )
            notify("Archive settings saved successfully", NotificationLevel.SUCCESS)
        except ValidationError as e:
            notify(str(e), NotificationLevel.WARNING)
        except Exception:
            logger.exception("Saving %s archive settings failed", et.label)
            notify("Failed to save archive settings", NotificationLevel.ERROR)

        return redirect(url_for("archive_manager", entity_type=et.value))

    @app.route("/archives/<entity_type>/archive-eligible", methods=["POST"], endpoint="archive_eligible_now")
    def archive_eligible_now(entity_type: str):
        et = _entity_type(entity_type)
        try:
            archived = container.archive_service.archive_eligible(et, _load_roster(et))
            if archived:
                notify(f"{plural(len(archived), 'archived snapshot')} created", NotificationLevel.SUCCESS)
            else:
                notify(f"No eligible {et.label}s to archive", NotificationLevel.INFO)
        except Exception:
            logger.exception("Automatic %s archival failed", et.label)
            notify("Failed to archive eligible records", NotificationLevel.ERROR)

        return redirect(url_for("archive_manager", entity_type=et.value))

    @app.route("/archives/<entity_type>/browse", methods=["GET"], endpoint="archive_browser")
    def archive_browser(entity_type: str):
        et = _entity_type(entity_type)
        browser = container.archive_service.browse(et, roster=_load_roster(et))
        return jsonify(
            {
                "entity_type": et.value,
                "has_expired": browser.has_expired,
                "entities": [
                    {
                        "id": view.entity_id,
                        "name": view.name,
                        "entries": [
                            {"index": ev.index, "expired": ev.expired, **entry_to_json(ev.entry)} for ev in view.entries
                        ],
                    }
                    for view in browser.entities
                ],
                "notifications": pending_notifications(),
            }
        )

    @app.route("/archives/<entity_type>/<entity_id>/<int:index>", methods=["GET"], endpoint="archive_entry")
    def archive_entry(entity_type: str, entity_id: str, index: int):
        et = _entity_type(entity_type)
        try:
            entry = container.archive_service.get_entry(et, entity_id, index)
        except NotFoundError as e:
            notify(str(e), NotificationLevel.ERROR)
            return redirect(url_for("archive_browser", entity_type=et.value))

        return jsonify({"entity_id": entity_id, "index": index, **entry_to_json(entry)})

    @app.route("/archives/<entity_type>/<entity_id>/<int:index>/delete", methods=["POST"], endpoint="archive_entry_delete")
    def archive_entry_delete(entity_type: str, entity_id: str, index: int):
        et = _entity_type(entity_type)
        try:
            container.archive_service.delete_entry(et, entity_id, index)
            notify("Archive entry deleted successfully", NotificationLevel.SUCCESS)
        except NotFoundError as e:
            notify(str(e), NotificationLevel.ERROR)
        except Exception:
            logger.exception("Deleting %s archive entry %s/%s failed", et.label, entity_id, index)
            notify("Failed to delete archive entry", NotificationLevel.ERROR)

        return redirect(url_for("archive_browser", entity_type=et.value))

    @app.route("/archives/<entity_type>/purge", methods=["POST"], endpoint="archive_purge")
    def archive_purge(entity_type: str):
        et = _entity_type(entity_type)
        try:
            purged = container.archive_service.purge_expired(et)
            if purged > 0:
                notify(f"{plural(purged, 'expired archive')} permanently deleted", NotificationLevel.SUCCESS)
            else:
                notify("No expired archives found", NotificationLevel.INFO)
        except Exception:
            logger.exception("Manual purge of %s archives failed", et.label)
            notify("Failed to purge expired archives", NotificationLevel.ERROR)

        return redirect(url_for("archive_browser", entity_type=et.value))
