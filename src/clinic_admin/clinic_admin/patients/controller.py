from __future__ import annotations

import logging

from flask import Flask, jsonify, redirect, request, url_for

from ..archive.controller import entry_to_json
from ..common.notifications import notify, pending_notifications
from ..container import Container
from ..core.enums import NotificationLevel
from ..core.exceptions import CollaboratorUnavailableError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/patients", methods=["GET"], endpoint="patients")
    def patients():
        roster = container.patient_service.load_roster()
        active = container.patient_service.list_active(
            roster,
            search=request.args.get("search", ""),
            status=request.args.get("status", "all"),
        )
        return jsonify(
            {
                "patients": [p.to_api() for p in active],
                "count": len(active),
                "from_cache": roster.from_cache,
                "notifications": pending_notifications(),
            }
        )

    @app.route("/patients", methods=["POST"], endpoint="add_patient")
    def add_patient():
        try:
            roster = container.patient_service.load_roster()
            patient = container.patient_service.create_patient(
                roster,
                first_name=request.form.get("firstName", ""),
                middle_name=request.form.get("middleName"),
                last_name=request.form.get("lastName", ""),
                mobile=request.form.get("contactNumber", ""),
                status=request.form.get("status", "active"),
            )
            notify(f"Patient {patient.name} added successfully", NotificationLevel.SUCCESS)
        except ValidationError as e:
            notify(str(e), NotificationLevel.ERROR)
        except CollaboratorUnavailableError:
            logger.exception("Creating patient failed")
            notify("Failed to save patient", NotificationLevel.ERROR)

        return redirect(url_for("patients"))

    @app.route("/patients/<patient_id>/delete", methods=["POST"], endpoint="delete_patient")
    def delete_patient(patient_id: str):
        try:
            roster = container.patient_service.load_roster()
            entry = container.patient_service.delete_patient(roster, patient_id)
            notify(
                "Patient archived successfully. "
                f"Will be permanently deleted on {entry.expiry_date.strftime('%Y-%m-%d')}.",
                NotificationLevel.SUCCESS,
            )
        except NotFoundError as e:
            notify(str(e), NotificationLevel.WARNING)
        except Exception:
            logger.exception("Archiving patient %s failed", patient_id)
            notify("Failed to archive patient", NotificationLevel.ERROR)

        return redirect(url_for("patients"))

    @app.route("/patients/<patient_id>/archive", methods=["GET"], endpoint="archived_patient_details")
    def archived_patient_details(patient_id: str):
        try:
            details = container.patient_service.archived_details(container.patient_service.load_roster(), patient_id)
        except NotFoundError as e:
            notify(str(e), NotificationLevel.ERROR)
            return redirect(url_for("archive_browser", entity_type="patients"))

        return jsonify(
            {
                "patient_id": details.patient_id,
                "entries": [entry_to_json(e) for e in details.entries],
                "appointments": [a.to_api() for a in details.appointments],
            }
        )
