# declarative_find/controller/router.py
"""
Controller router factory.

For a ``ControllerDescriptor`` this module builds a FastAPI router where:
1. Each ``@action`` method becomes one route.
2. A per-request ``Controller`` instance is provided by a dependency that
   FastAPI caches for the duration of the request.
3. Every before-action hook whose scope matches the action is attached as a
   route dependency, so hooks run in registration order before the action
   and an ``HTTPException`` raised by a hook stops the request.
"""
from __future__ import annotations

import inspect
import logging
from typing import Any, Callable

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from declarative_find.contracts.controller import HookDef
from declarative_find.controller.base import Controller
from declarative_find.controller.descriptor import ControllerDescriptor
from declarative_find.core.db import get_session

logger = logging.getLogger(__name__)


def _hook_dependency(
    hook_def: HookDef,
    get_controller: Callable[..., Any],
) -> Callable[..., Any]:
    async def run_hook(controller: Controller = Depends(get_controller)) -> None:
        result = hook_def.hook(controller)
        if inspect.isawaitable(result):
            await result

    run_hook.__name__ = f"before_{hook_def.name}"
    return run_hook


def _action_endpoint(
    fn: Callable[..., Any],
    get_controller: Callable[..., Any],
) -> Callable[..., Any]:
    async def endpoint(controller: Controller = Depends(get_controller)):
        result = fn(controller)
        if inspect.isawaitable(result):
            result = await result
        return result

    endpoint.__name__ = fn.__name__
    endpoint.__doc__ = fn.__doc__
    return endpoint


def build_controller_router(descriptor: ControllerDescriptor) -> APIRouter:
    """Build the router for one controller.

    Raises:
        ConfigurationError: A hook is scoped to an action the controller
            does not define.
    """
    descriptor.validate()

    router = APIRouter(prefix=descriptor.prefix, tags=descriptor.tags)
    controller_cls = descriptor.controller_cls

    async def get_controller(
        request: Request,
        session: AsyncSession = Depends(get_session),
    ) -> Controller:
        return controller_cls(request, session)

    for action_name, (action_def, fn) in descriptor.actions.items():
        hooks = descriptor.hooks_for(action_name)
        router.add_api_route(
            action_def.path,
            _action_endpoint(fn, get_controller),
            methods=[action_def.method],
            name=f"{descriptor.name}.{action_name}",
            dependencies=[Depends(_hook_dependency(h, get_controller)) for h in hooks],
            **action_def.route_kwargs,
        )
        logger.debug(
            "Mounted %s %s%s -> %s.%s (%d hook(s))",
            action_def.method,
            descriptor.prefix,
            action_def.path,
            descriptor.name,
            action_name,
            len(hooks),
        )

    return router
