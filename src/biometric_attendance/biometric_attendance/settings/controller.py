from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import error_response
from ..container import Container
from .model import AttendanceSettings


def _to_dict(settings: AttendanceSettings) -> dict:
    return {
        "required_time_in": settings.required_time_in.strftime("%H:%M:%S"),
        "required_time_out": settings.required_time_out.strftime("%H:%M:%S"),
        "break_duration_minutes": int(settings.break_duration_minutes),
        "break_is_counted": bool(settings.break_is_counted),
    }


def register(app: Flask, container: Container) -> None:
    service = container.settings_service

    @app.route("/api/attendance-settings", methods=["GET"], endpoint="api_get_settings")
    def api_get_settings():
        try:
            settings = service.get()
        except Exception as e:
            return error_response(e)
        return jsonify({"success": True, "settings": _to_dict(settings)}), 200

    @app.route("/api/attendance-settings", methods=["PUT"], endpoint="api_save_settings")
    def api_save_settings():
        data = request.get_json(silent=True) or {}
        try:
            result = service.save(
                required_time_in=str(data.get("required_time_in") or ""),
                required_time_out=str(data.get("required_time_out") or ""),
                break_duration_minutes=data.get("break_duration_minutes", 0),
                break_is_counted=data.get("break_is_counted", False),
            )
        except Exception as e:
            return error_response(e)
        body = {"success": True, "message": "Settings saved", "settings": _to_dict(result.settings)}
        if result.recompute is not None:
            body["recompute"] = result.recompute.to_dict()
            if result.recompute.errors:
                body["message"] = f"Settings saved; {len(result.recompute.errors)} record(s) could not be re-derived"
        return jsonify(body), 200
