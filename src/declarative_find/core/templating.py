# declarative_find/core/templating.py
"""
Jinja2 rendering for controller actions.

Variables bound by ``find`` (and anything else passed to
``Controller.bind``) form the template context.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Mapping

from jinja2 import BaseLoader, Environment, FileSystemLoader, select_autoescape

from declarative_find.core.config import settings

logger = logging.getLogger(__name__)


def create_environment(loader: BaseLoader | None = None) -> Environment:
    return Environment(
        loader=loader or FileSystemLoader(settings.templates_dir),
        autoescape=select_autoescape(["html", "htm", "xml", "j2"]),
        keep_trailing_newline=True,
    )


@functools.lru_cache(maxsize=1)
def default_environment() -> Environment:
    logger.debug("Creating template environment for '%s'", settings.templates_dir)
    return create_environment()


def render_template(
    name: str,
    context: Mapping[str, Any],
    environment: Environment | None = None,
) -> str:
    env = environment or default_environment()
    return env.get_template(name).render(**context)
