from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthorizationError,
    InvalidOperationError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def ok(data: Any = None, message: str = "OK", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    """Translate domain errors into JSON responses in one place."""

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(InvalidOperationError)
    def _invalid_operation(e: InvalidOperationError):
        return fail(str(e), 400)

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(str(e), 403)

    @app.errorhandler(StorageError)
    def _storage(e: StorageError):
        logger.error("Storage failure: %s", e)
        return fail("System error, please retry later", 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error while serving request")
        return fail("System error", 500)
