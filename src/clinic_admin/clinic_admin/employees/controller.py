from __future__ import annotations

import json
import logging
from datetime import datetime

from flask import Flask, Response, jsonify, redirect, request, url_for

from ..common.notifications import notify, pending_notifications
from ..container import Container
from ..core.enums import NotificationLevel
from ..core.exceptions import DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _json_attachment(payload, stem: str) -> Response:
    filename = f"{stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    return Response(
        json.dumps(payload, indent=2),
        mimetype="application/json",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/employees", methods=["GET"], endpoint="employees")
    def employees():
        roster = container.employee_service.load_roster()
        active = container.employee_service.list_active(
            roster,
            search=request.args.get("search", ""),
            status=request.args.get("status", "all"),
        )
        return jsonify(
            {
                "employees": [e.to_api() for e in active],
                "from_cache": roster.from_cache,
                "notifications": pending_notifications(),
            }
        )

    @app.route("/employees/<employee_id>/archive", methods=["POST"], endpoint="archive_employee")
    def archive_employee(employee_id: str):
        try:
            roster = container.employee_service.load_roster()
            result = container.employee_service.archive_employee(roster, employee_id)
            if result.local_only:
                notify("Employee deleted (local only - server may be unavailable)", NotificationLevel.WARNING)
            else:
                notify("Employee deleted successfully", NotificationLevel.SUCCESS)
        except DomainError as e:
            notify(f"Failed to delete employee: {e}", NotificationLevel.ERROR)
        except Exception:
            logger.exception("Archiving employee %s failed", employee_id)
            notify("Failed to delete employee", NotificationLevel.ERROR)

        return redirect(url_for("employees"))

    @app.route("/employees/archived", methods=["GET"], endpoint="archived_employees")
    def archived_employees():
        archived = container.employee_service.list_archived()
        return jsonify(
            {
                "employees": [a.to_dict() for a in archived.employees],
                "from_server": archived.from_server,
                "notifications": pending_notifications(),
            }
        )

    @app.route("/employees/archived/export", methods=["GET"], endpoint="export_archived_employees")
    def export_archived_employees():
        try:
            rows = container.employee_service.export_archived()
        except ValidationError as e:
            notify(str(e), NotificationLevel.WARNING)
            return redirect(url_for("archived_employees"))

        return _json_attachment(rows, "employee_archive")

    @app.route("/employees/archived/<archive_id>", methods=["GET"], endpoint="archived_employee")
    def archived_employee(archive_id: str):
        try:
            row = container.employee_service.get_archived(archive_id)
        except NotFoundError as e:
            notify(str(e), NotificationLevel.ERROR)
            return redirect(url_for("archived_employees"))

        return jsonify({"employee": row.to_dict(), "notifications": pending_notifications()})

    @app.route("/employees/archived/<archive_id>/export", methods=["GET"], endpoint="export_archived_employee")
    def export_archived_employee(archive_id: str):
        try:
            row = container.employee_service.get_archived(archive_id)
        except NotFoundError as e:
            notify(str(e), NotificationLevel.ERROR)
            return redirect(url_for("archived_employees"))

        stem = "employee_archive_" + "_".join((row.name or row.employee_id).split())
        return _json_attachment(row.to_dict(), stem)
