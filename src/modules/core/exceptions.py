"""Standard error envelope for every API response that is not a success.

Shape::

    {
        "type": "validation_error" | "client_error" | "server_error",
        "errors": [{"code": "...", "detail": "...", "attr": "field" | None}],
    }

DRF exceptions are converted by ``standard_exception_handler`` (wired via
``REST_FRAMEWORK["EXCEPTION_HANDLER"]``).  Views translating domain
exceptions build the same shape with ``error_response``, and DTO failures
with ``validation_error_response``.  Request validation failures are
reported as 422.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler


def standard_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        response.data = {
            "type": "validation_error",
            "errors": list(_flatten(exc.detail)),
        }
        return response

    data = response.data
    detail = data.get("detail", "") if isinstance(data, dict) else data
    if isinstance(data, dict) and "code" in data:
        code = data["code"]
    else:
        code = getattr(detail, "code", "error")

    response.data = {
        "type": _error_type(response.status_code),
        "errors": [{"code": str(code), "detail": str(detail), "attr": None}],
    }
    return response


def error_response(
    status_code: int,
    code: str,
    detail: str,
    attr: Optional[str] = None,
    **extra: Any,
) -> Response:
    """Render a domain error in the standard envelope.

    ``extra`` keys are merged into the single error entry (e.g. the
    product id and quantities of an insufficient-stock failure).
    """
    error = {"code": code, "detail": detail, "attr": attr, **extra}
    return Response(
        {"type": _error_type(status_code), "errors": [error]},
        status=status_code,
    )


def validation_error_response(exc: PydanticValidationError) -> Response:
    """Render a DTO validation failure as a 422 envelope."""
    errors = [
        {
            "code": error["type"],
            "detail": error["msg"],
            "attr": ".".join(str(part) for part in error["loc"]) or None,
        }
        for error in exc.errors()
    ]
    return Response(
        {"type": "validation_error", "errors": errors},
        status=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


def _error_type(status_code: int) -> str:
    if status_code == status.HTTP_422_UNPROCESSABLE_ENTITY:
        return "validation_error"
    if status_code >= 500:
        return "server_error"
    return "client_error"


def _flatten(detail: Any, attr: Optional[str] = None) -> Iterator[dict]:
    if isinstance(detail, dict):
        for key, value in detail.items():
            yield from _flatten(value, key if attr is None else f"{attr}.{key}")
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                nested = str(index) if attr is None else f"{attr}.{index}"
                yield from _flatten(value, nested)
            else:
                yield from _flatten(value, attr)
    else:
        yield {
            "code": str(getattr(detail, "code", "invalid")),
            "detail": str(detail),
            "attr": attr,
        }
