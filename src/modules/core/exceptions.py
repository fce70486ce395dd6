"""Base domain error and the API-wide error format.

Every module raises subclasses of ``DomainError`` from its Service Layer.
``standardized_exception_handler`` (wired as DRF ``EXCEPTION_HANDLER``)
renders them, together with DRF's own validation / authentication errors,
as::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Dict, List, Optional, TypeVar

import structlog
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)

R = TypeVar("R")


class DomainError(Exception):
    """Business-rule violation with a stable machine-readable ``code``.

    Keyword arguments passed to the constructor are exposed as ``extra`` and
    rendered next to ``code`` / ``detail`` (e.g. ``count`` for a status that
    is still in use).
    """

    code = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "", **extra: Any) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.extra = extra


class PersistenceError(DomainError):
    """The store rejected or failed a write; the whole operation was rolled back."""

    code = "persistence_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def error_body(
    code: str,
    detail: str,
    attr: Optional[str] = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    **extra: Any,
) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "detail": detail, "attr": attr}
    error.update(extra)
    return {
        "type": "server_error" if status_code >= 500 else "client_error",
        "errors": [error],
    }


def domain_error_response(exc: DomainError) -> Response:
    return Response(
        error_body(exc.code, str(exc), status_code=exc.status_code, **exc.extra),
        status=exc.status_code,
    )


def standardized_exception_handler(exc: Exception, context: Dict[str, Any]):
    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            code=exc.code,
            status_code=exc.status_code,
            view=context.get("view").__class__.__name__,
        )
        return domain_error_response(exc)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        errors = _flatten_validation_errors(exc.get_codes(), exc.detail)
    else:
        code = getattr(exc, "default_code", "error")
        codes = exc.get_codes() if hasattr(exc, "get_codes") else code
        errors = [
            {
                "code": codes if isinstance(codes, str) else code,
                "detail": str(getattr(exc, "detail", exc)),
                "attr": None,
            }
        ]

    response.data = {
        "type": "server_error" if response.status_code >= 500 else "client_error",
        "errors": errors,
    }
    return response


def _flatten_validation_errors(
    codes: Any, details: Any, attr: Optional[str] = None
) -> List[Dict[str, Any]]:
    if isinstance(details, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in details.items():
            name = key if attr is None else f"{attr}.{key}"
            if name == "non_field_errors":
                name = attr
            errors.extend(_flatten_validation_errors(codes.get(key), value, name))
        return errors
    if isinstance(details, list):
        errors = []
        for index, value in enumerate(details):
            item_code = codes[index] if isinstance(codes, list) else codes
            if isinstance(value, (dict, list)):
                name = f"{attr}.{index}" if attr else str(index)
                errors.extend(_flatten_validation_errors(item_code, value, name))
            else:
                errors.append({"code": item_code, "detail": str(value), "attr": attr})
        return errors
    return [{"code": codes, "detail": str(details), "attr": attr}]


def validation_error_from_pydantic(exc: Any) -> ValidationError:
    """Convert a Pydantic ``ValidationError`` into DRF's field-keyed form."""
    detail: Dict[str, List[str]] = {}
    for error in exc.errors():
        attr = ".".join(str(part) for part in error.get("loc", ())) or "non_field_errors"
        detail.setdefault(attr, []).append(error.get("msg", "Invalid value."))
    return ValidationError(detail)


def translate_persistence_errors(func: Callable[..., R]) -> Callable[..., R]:
    """Re-raise ``DatabaseError`` escaping a write use case as ``PersistenceError``.

    Apply it outside ``transaction.atomic`` so the rollback has already
    happened when the caller sees the error.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> R:
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.error(
                "persistence.write_failed",
                operation=func.__qualname__,
                error=exc.__class__.__name__,
            )
            raise PersistenceError(
                "The operation could not be saved; nothing was changed. Retry it."
            ) from exc

    return wrapper
