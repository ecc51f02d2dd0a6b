# declarative_find/main.py
"""
Application factory.

Mounts ``ControllerDescriptor`` routers on a FastAPI application, wires the
async database engine and logging, and exposes discovery endpoints.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Iterable

from fastapi import FastAPI

from declarative_find.api.discovery import router as discovery_router
from declarative_find.controller.descriptor import ControllerDescriptor
from declarative_find.controller.router import build_controller_router
from declarative_find.core.config import settings
from declarative_find.core.db import dispose_engine, init_engine
from declarative_find.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await dispose_engine()


def create_app(
    controllers: Iterable[ControllerDescriptor] = (),
    *,
    database_url: str | None = None,
    title: str = "declarative-find",
) -> FastAPI:
    """Build a FastAPI application serving ``controllers``.

    Routers are built eagerly, so misconfigured hook scopes fail here,
    before any request is served.
    """
    configure_logging(settings.log_level, json=settings.log_json)
    logger.info("Creating application (env=%s)", settings.app_env)

    init_engine(database_url)

    descriptors = list(controllers)
    app = FastAPI(title=title, lifespan=lifespan)
    app.state.controllers = descriptors

    app.include_router(discovery_router)

    for descriptor in descriptors:
        app.include_router(build_controller_router(descriptor))
        logger.info(
            "Mounted controller '%s' at '%s' (%d action(s), %d binding(s))",
            descriptor.name,
            descriptor.prefix or "/",
            len(descriptor.actions),
            len(descriptor.bindings),
        )

    return app
