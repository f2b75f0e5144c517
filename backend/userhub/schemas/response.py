# userhub/schemas/response.py
"""
Uniform response envelope.

Success: {statusCode, data, message, success}
Failure: {statusCode, data: null, message, success: false, errors}
"""
from typing import Any

from pydantic import BaseModel


def api_response(data: Any = None, message: str = "Success", status_code: int = 200) -> dict:
    """Build the success envelope; pydantic models in `data` are dumped to JSON-ready dicts."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return {
        "statusCode": status_code,
        "data": data,
        "message": message,
        "success": status_code < 400,
    }


def api_error(status_code: int, message: str, errors: list[Any] | None = None) -> dict:
    return {
        "statusCode": status_code,
        "data": None,
        "message": message,
        "success": False,
        "errors": errors or [],
    }
