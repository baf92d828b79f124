"""JSON plumbing shared by the feature controllers."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthorizationError,
    BusinessRuleViolation,
    DomainError,
    NotFoundError,
    PartialBatchFailure,
    ValidationError,
)
from .datetime_utils import coerce_date

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (BusinessRuleViolation, 409),
)


def to_jsonable(value: Any) -> Any:
    """Dataclasses, enums and dates to plain JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        for name in ("take_home_pay", "total_deductions", "total_incentives", "full_name"):
            if hasattr(type(value), name):
                out[name] = to_jsonable(getattr(value, name))
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [to_jsonable(v) for v in value]
        return sorted(items) if isinstance(value, (set, frozenset)) else items
    return value


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True, "data": to_jsonable(data)}
    body.update({k: to_jsonable(v) for k, v in extra.items()})
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def current_role() -> Optional[str]:
    return request.headers.get("X-User-Role")


def current_user_id() -> Optional[int]:
    raw = request.headers.get("X-User-Id")
    return int(raw) if raw and raw.isdigit() else None


def organization_id(default: int) -> int:
    raw = request.args.get("organizationId") or request.headers.get("X-Organization-Id")
    if raw is None:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("organizationId must be a number", field="organizationId") from None


def date_arg(name: str) -> date:
    raw = request.args.get(name)
    if not raw:
        raise ValidationError(f"{name} is required", field=name)
    return coerce_date(raw, name)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(ex: DomainError):
        if isinstance(ex, PartialBatchFailure):
            return jsonify({"success": False, "message": str(ex), "result": ex.result.to_dict()}), 400
        status = next((code for kind, code in _STATUS_CODES if isinstance(ex, kind)), 400)
        body = {"success": False, "message": str(ex)}
        if isinstance(ex, ValidationError):
            body["field"] = ex.field
            body["context"] = ex.context
        return jsonify(body), status

    @app.errorhandler(Exception)
    def handle_unexpected(ex: Exception):
        if isinstance(ex, HTTPException):
            return jsonify({"success": False, "message": ex.description}), ex.code
        logger.exception("[api] unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": "Internal server error"}), 500


def batch_response(result):
    """200 when every item went through, 207 when some failed."""
    return ok(result.to_dict(), status=207 if result.is_partial_failure else 200)
