from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
}


def error_response(e: Exception):
    """Map core errors to JSON responses; anything unexpected is a 500."""

    for exc_type, status in _STATUS.items():
        if isinstance(e, exc_type):
            return jsonify({"message": str(e)}), status

    if isinstance(e, DomainError):
        logger.error("Request failed: %s", e)
        return jsonify({"message": "Server error", "error": str(e)}), 500

    logger.exception("Unexpected error while handling request")
    return jsonify({"message": "Server error"}), 500
