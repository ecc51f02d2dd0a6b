"""Declarative find-or-404 entity binding for FastAPI controllers."""
from declarative_find.controller import (
    Controller,
    ControllerDescriptor,
    action,
    build_controller_router,
)
from declarative_find.errors import ConfigurationError, http_error
from declarative_find.finder import find, resolve_binding

__all__ = [
    "ConfigurationError",
    "Controller",
    "ControllerDescriptor",
    "action",
    "build_controller_router",
    "find",
    "http_error",
    "resolve_binding",
]
