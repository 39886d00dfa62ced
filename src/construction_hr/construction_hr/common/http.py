from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from flask import jsonify, request

from ..core.exceptions import DomainError


def json_error(error: Union[DomainError, str], status: Optional[int] = None):
    """Map a domain exception (or plain message) to a JSON error response."""
    if isinstance(error, DomainError):
        return jsonify({"message": str(error)}), status or error.status_code
    return jsonify({"message": error}), status or 500


def json_body() -> dict:
    """Request body as a dict: JSON when sent as JSON, otherwise form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def to_jsonable(value: Any) -> Any:
    """Render dataclass-derived dicts (dates, decimals, enums) for JSON output."""
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value
