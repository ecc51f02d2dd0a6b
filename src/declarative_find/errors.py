# declarative_find/errors.py
from __future__ import annotations

from http import HTTPStatus
from typing import NoReturn

from fastapi import HTTPException


class FindError(Exception):
    pass


class ConfigurationError(FindError, ValueError):
    """Raised while wiring controllers: bad names, unknown models, bad scopes."""


def http_error(status_code: int, detail: str | None = None) -> NoReturn:
    """Halt the current request with an HTTP error response.

    Raises ``HTTPException``; FastAPI stops running the remaining hooks and
    the action and renders its standard error body. ``detail`` defaults to
    the status phrase (``"Not Found"`` for 404).
    """
    if not 400 <= status_code <= 599:
        raise ValueError(f"http_error expects a 4xx/5xx status, got {status_code}")
    if detail is None:
        try:
            detail = HTTPStatus(status_code).phrase
        except ValueError:
            detail = "Error"
    raise HTTPException(status_code=status_code, detail=detail)
