"""API error handling utilities."""

from __future__ import annotations

import functools
import logging
from typing import Any

import pydantic
from flask import jsonify

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    status_code: int,
    details: Any = None,
) -> tuple:
    """Return a consistent JSON error response."""
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status_code


def _validation_details(exc: pydantic.ValidationError) -> list[dict[str, Any]]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def handle_errors(f):
    """Decorator that catches common exceptions and returns JSON errors."""
    from api.exceptions import AppError

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except AppError as exc:
            return error_response(str(exc), exc.status_code, exc.details)
        except pydantic.ValidationError as exc:
            return error_response("Invalid request", 400, _validation_details(exc))
        except (ValueError, TypeError) as exc:
            return error_response(str(exc), 400)
        except FileNotFoundError as exc:
            return error_response(str(exc), 404)
        except (SystemExit, KeyboardInterrupt):
            raise
        except Exception:
            logger.exception("Unexpected error in %s", f.__name__)
            return error_response("Internal server error", 500)

    return wrapper
