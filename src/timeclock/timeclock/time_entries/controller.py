from __future__ import annotations

import hmac
import logging
from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_utc, parse_iso_date
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.exceptions import AuthorizationError, ConcurrentUpdateError, NotFoundError, ValidationError
from .model import ShiftCapRecord

logger = logging.getLogger(__name__)


def _entry_json(record: ShiftCapRecord) -> dict:
    return {
        "entry_id": record.id,
        "user_id": record.user_id,
        "state": record.state.value,
        "clock_in": record.clock_in.isoformat(),
        "clock_out": record.clock_out.isoformat() if record.clock_out else None,
        "work_accum_seconds": record.work_accum_seconds,
        "cap_minutes": record.cap_minutes,
        "flag_status": record.flag_status.value,
        "over_cap_at": record.over_cap_at.isoformat() if record.over_cap_at else None,
    }


def register(app: Flask, container: Container) -> None:
    def check_cron_secret() -> None:
        secret = app.config.get("CRON_SECRET")
        if not secret:
            return
        header = request.headers.get("Authorization", "")
        if not hmac.compare_digest(header, f"Bearer {secret}"):
            raise AuthorizationError("Unauthorized")

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def handle_authorization(e):
        return jsonify({"error": str(e)}), 401

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(ConcurrentUpdateError)
    def handle_conflict(e):
        return jsonify({"error": str(e)}), 409

    @app.route("/api/time-entries/clock-in", methods=["POST"], endpoint="clock_in")
    def clock_in():
        payload = request.get_json(silent=True) or {}
        try:
            user_id = int(payload["user_id"])
            cap_minutes = payload.get("cap_minutes")
            cap_minutes = int(cap_minutes) if cap_minutes is not None else None
        except (KeyError, TypeError, ValueError):
            raise ValidationError("user_id (and optional cap_minutes) must be integers")

        record = container.time_clock_service.clock_in(user_id, cap_minutes=cap_minutes)
        return jsonify(_entry_json(record)), 201

    @app.route("/api/time-entries/<int:entry_id>/start-break", methods=["POST"], endpoint="start_break")
    def start_break(entry_id: int):
        return jsonify(_entry_json(container.time_clock_service.start_break(entry_id)))

    @app.route("/api/time-entries/<int:entry_id>/end-break", methods=["POST"], endpoint="end_break")
    def end_break(entry_id: int):
        return jsonify(_entry_json(container.time_clock_service.end_break(entry_id)))

    @app.route("/api/time-entries/<int:entry_id>/clock-out", methods=["POST"], endpoint="clock_out")
    def clock_out(entry_id: int):
        return jsonify(_entry_json(container.time_clock_service.clock_out(entry_id)))

    @app.route("/api/time-entries/<int:entry_id>", methods=["GET"], endpoint="entry_status")
    def entry_status(entry_id: int):
        return jsonify(container.time_clock_service.get_status(entry_id).to_dict())

    @app.route("/api/cron/soft-cap-evaluation", methods=["GET", "POST"], endpoint="soft_cap_evaluation")
    def soft_cap_evaluation():
        check_cron_secret()
        try:
            result = container.soft_cap_service.evaluate_open_entries()
        except Exception:
            logger.exception("soft cap evaluation failed")
            return jsonify({"error": "Internal server error"}), 500

        body = {
            "success": result.ok,
            "message": f"Processed {result.processed} entries, flagged {len(result.flagged)}",
        }
        body.update(result.to_dict())
        return jsonify(body)

    @app.route("/api/reports/soft-cap", methods=["GET"], endpoint="soft_cap_report")
    def soft_cap_report():
        # Defaults to the last DEFAULT_REPORT_DAYS days, today included.
        try:
            end = parse_iso_date(request.args["end"]) if request.args.get("end") else now_utc().date()
            if request.args.get("start"):
                start = parse_iso_date(request.args["start"])
            else:
                start = end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
            user_id = int(request.args["user_id"]) if request.args.get("user_id") else None
        except ValueError:
            raise ValidationError("start/end must be YYYY-MM-DD and user_id an integer")
        if start > end:
            raise ValidationError("start must not be after end")

        report = container.cap_report_service.build_cap_report(start=start, end=end, user_id=user_id)
        return jsonify(
            {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "rows": report.rows,
                "summary": report.summary,
                "exceptions": report.exceptions,
            }
        )
