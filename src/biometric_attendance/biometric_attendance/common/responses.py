from __future__ import annotations

import logging

from flask import jsonify, request

from ..core.exceptions import ConcurrencyConflict, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def error_response(exc: Exception):
    """Map a service exception to the JSON error body and HTTP status.

    Call from inside the `except` block so unexpected errors keep their traceback
    in the log.
    """
    if isinstance(exc, ValidationError):
        return jsonify({"success": False, "message": str(exc)}), 400
    if isinstance(exc, NotFoundError):
        return jsonify({"success": False, "message": str(exc)}), 404
    if isinstance(exc, ConcurrencyConflict):
        return jsonify({"success": False, "message": "Attendance is busy, please retry"}), 409

    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"success": False, "message": "Internal error"}), 500
