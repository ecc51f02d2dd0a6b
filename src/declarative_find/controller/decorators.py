# declarative_find/controller/decorators.py
from __future__ import annotations

from typing import Any, Callable, TypeVar

from declarative_find.contracts.controller import ActionDef

F = TypeVar("F", bound=Callable[..., Any])

ACTION_ATTR = "_df_action"


def action(
    method: str = "GET",
    path: str = "",
    *,
    name: str | None = None,
    **route_kwargs: Any,
) -> Callable[[F], F]:
    """Declare a controller method as a routed action.

    The action name (used by ``only``/``except_`` hook scoping) defaults to
    the method name. Extra keyword arguments go to ``APIRouter.add_api_route``::

        class UsersController(Controller):
            @action("GET", "/{id}")
            async def show(self) -> dict:
                return {"name": self.user.name}

            @action("DELETE", "/{id}", status_code=204)
            async def delete(self) -> None:
                await self.session.delete(self.user)
    """

    def _decorator(fn: F) -> F:
        setattr(
            fn,
            ACTION_ATTR,
            ActionDef(
                name=name or fn.__name__,
                method=method.upper(),
                path=path,
                route_kwargs=dict(route_kwargs),
            ),
        )
        return fn

    return _decorator
