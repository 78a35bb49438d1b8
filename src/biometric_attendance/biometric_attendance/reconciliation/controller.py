from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import optional_clock, require_date, require_non_empty
from ..core.exceptions import ValidationError
from ..common.responses import error_response
from ..container import Container
from .engine import UNCHANGED


def register(app: Flask, container: Container) -> None:
    service = container.scan_service

    @app.route("/api/biometric-logs", methods=["POST"], endpoint="api_record_scan")
    def api_record_scan():
        data = request.get_json(silent=True) or {}
        try:
            result = service.record_scan(str(data.get("employee_code") or ""), data.get("timestamp"))
        except Exception as e:
            return error_response(e)

        body = {"success": True, "message": "Scan recorded"}
        body.update(result.to_dict())
        return jsonify(body), 201

    @app.route("/api/biometric-logs/<int:scan_id>", methods=["DELETE"], endpoint="api_delete_scan")
    def api_delete_scan(scan_id: int):
        try:
            record = service.delete_scan(scan_id)
        except Exception as e:
            return error_response(e)

        return jsonify({
            "success": True,
            "message": "Scan deleted",
            "attendance": record.to_dict() if record else None,
        }), 200

    @app.route("/api/attendance/sync", methods=["POST"], endpoint="api_sync_attendance")
    def api_sync_attendance():
        try:
            report = service.sync_all()
        except Exception as e:
            return error_response(e)

        body = {"success": not report.errors, "message": "Sync finished"}
        body.update(report.to_dict())
        return jsonify(body), 200

    @app.route("/api/attendance/<int:employee_id>/<work_date>", methods=["GET"], endpoint="api_get_attendance")
    def api_get_attendance(employee_id: int, work_date: str):
        try:
            record = service.get_record(employee_id, require_date(work_date, "date"))
            periods = service.periods(record)
        except Exception as e:
            return error_response(e)

        return jsonify({"success": True, "attendance": record.to_dict(), "periods": periods.to_dict()}), 200

    @app.route("/api/attendance/<int:employee_id>/<work_date>", methods=["PUT"], endpoint="api_update_attendance")
    def api_update_attendance(employee_id: int, work_date: str):
        data = request.get_json(silent=True) or {}
        try:
            day = require_date(work_date, "date")
            # Absent keys stay as they are; null clears the field.
            time_in = optional_clock(data["time_in"], "time_in") if "time_in" in data else UNCHANGED
            time_out = optional_clock(data["time_out"], "time_out") if "time_out" in data else UNCHANGED
            record = service.update_times(employee_id, day, time_in=time_in, time_out=time_out)
        except Exception as e:
            return error_response(e)

        return jsonify({"success": True, "message": "Attendance updated", "attendance": record.to_dict()}), 200

    @app.route(
        "/api/attendance/<int:employee_id>/<work_date>/override",
        methods=["POST"],
        endpoint="api_set_override",
    )
    def api_set_override(employee_id: int, work_date: str):
        data = request.get_json(silent=True) or {}
        try:
            record = service.set_override(
                employee_id,
                require_date(work_date, "date"),
                status=require_non_empty(str(data.get("status") or ""), "status"),
                remarks=data.get("remarks"),
            )
        except Exception as e:
            return error_response(e)

        return jsonify({"success": True, "message": "Override set", "attendance": record.to_dict()}), 200

    @app.route(
        "/api/attendance/<int:employee_id>/<work_date>/override",
        methods=["DELETE"],
        endpoint="api_clear_override",
    )
    def api_clear_override(employee_id: int, work_date: str):
        try:
            record = service.clear_override(employee_id, require_date(work_date, "date"))
        except Exception as e:
            return error_response(e)

        return jsonify({"success": True, "message": "Override cleared", "attendance": record.to_dict()}), 200

    @app.route(
        "/api/attendance/<int:employee_id>/<work_date>/overtime",
        methods=["PUT"],
        endpoint="api_set_overtime",
    )
    def api_set_overtime(employee_id: int, work_date: str):
        data = request.get_json(silent=True) or {}
        try:
            if "is_overtime" not in data:
                raise ValidationError("is_overtime is required")
            record = service.set_overtime(employee_id, require_date(work_date, "date"), data["is_overtime"])
        except Exception as e:
            return error_response(e)

        return jsonify({"success": True, "message": "Overtime status updated", "attendance": record.to_dict()}), 200

    @app.route("/api/attendance/overtime", methods=["PUT"], endpoint="api_set_overtime_bulk")
    def api_set_overtime_bulk():
        data = request.get_json(silent=True) or {}
        try:
            if "is_overtime" not in data:
                raise ValidationError("is_overtime is required")
            updated = service.set_overtime_bulk(
                data.get("employee_ids"),
                require_date(str(data.get("date") or ""), "date"),
                data["is_overtime"],
            )
        except Exception as e:
            return error_response(e)

        return jsonify({
            "success": True,
            "message": f"Overtime status updated for {updated} attendance record(s)",
            "updated_count": updated,
        }), 200
