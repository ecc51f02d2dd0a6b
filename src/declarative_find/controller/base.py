# declarative_find/controller/base.py
"""
Per-request controller context.

A fresh ``Controller`` instance is built for every request by the router
(see ``controller/router.py``). Before-action hooks and the action itself
all receive that same instance, so anything a hook binds is visible to the
action and to the templates it renders.
"""
from __future__ import annotations

import logging
from typing import Any, ClassVar

from fastapi import Request
from fastapi.responses import HTMLResponse
from jinja2 import Environment
from sqlalchemy.ext.asyncio import AsyncSession

from declarative_find.core.templating import render_template

logger = logging.getLogger(__name__)


class Controller:
    """Base class for controllers mounted through a ``ControllerDescriptor``.

    Instance attributes
    ~~~~~~~~~~~~~~~~~~~
    request
        The current Starlette/FastAPI request.
    session
        Request-scoped ``AsyncSession``.
    params
        Query parameters merged with path parameters (path wins).
    assigns
        Everything bound via ``bind``; the template context.

    Subclasses may define ``find_<name>`` methods to customise how ``find``
    looks an entity up.
    """

    # Names ``bind`` refuses so bound entities never hide the context itself.
    RESERVED: ClassVar[frozenset[str]] = frozenset(
        {"request", "session", "params", "assigns", "templates", "RESERVED"}
    )

    # Template environment; ``None`` uses the settings-driven default.
    templates: ClassVar[Environment | None] = None

    def __init__(self, request: Request, session: AsyncSession) -> None:
        self.request = request
        self.session = session
        self.params: dict[str, Any] = {
            **request.query_params,
            **request.path_params,
        }
        self.assigns: dict[str, Any] = {}

    def bind(self, name: str, value: Any) -> None:
        """Expose ``value`` as ``self.<name>``, in ``assigns`` and on ``request.state``."""
        if name in self.RESERVED:
            raise ValueError(f"Cannot bind reserved controller attribute '{name}'")
        setattr(self, name, value)
        self.assigns[name] = value
        setattr(self.request.state, name, value)

    def render(
        self,
        template: str,
        *,
        status_code: int = 200,
        **extra: Any,
    ) -> HTMLResponse:
        context = {**self.assigns, **extra, "request": self.request}
        body = render_template(template, context, self.templates)
        return HTMLResponse(body, status_code=status_code)
