# declarative_find/controller/descriptor.py
"""
Controller descriptor - the wiring object for one controller class.

A descriptor is built once during application setup. It collects the
``@action`` methods of the controller class, an ordered list of
before-action hooks and the ``find`` bindings registered on it. The router
factory turns it into a FastAPI ``APIRouter``.
"""
from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Iterable

from sqlalchemy.orm import DeclarativeBase

from declarative_find import finder as _finder
from declarative_find.contracts.binding import BindingDeclaration, FinderFn
from declarative_find.contracts.controller import ActionDef, Hook, HookDef, HookScope
from declarative_find.controller.base import Controller
from declarative_find.controller.decorators import ACTION_ATTR
from declarative_find.core.db import Base
from declarative_find.errors import ConfigurationError

logger = logging.getLogger(__name__)

SCOPE_KEYS = frozenset({"only", "except_"})


def _names(value: str | Iterable[str]) -> frozenset[str]:
    if isinstance(value, str):
        return frozenset({value})
    return frozenset(value)


def parse_scope(scope: dict[str, Any]) -> HookScope:
    """Build a ``HookScope`` from ``only=`` / ``except_=`` keyword options."""
    unknown = set(scope) - SCOPE_KEYS
    if unknown:
        raise ConfigurationError(
            f"Unknown hook scope option(s) {sorted(unknown)}; "
            f"expected one of {sorted(SCOPE_KEYS)}"
        )

    only = scope.get("only")
    except_ = scope.get("except_")
    if only is not None and except_ is not None:
        raise ConfigurationError("Use either 'only' or 'except_', not both")

    return HookScope(
        only=_names(only) if only is not None else None,
        except_=_names(except_) if except_ is not None else frozenset(),
    )


class ControllerDescriptor:
    """Actions, hooks and bindings of one controller class.

    Args:
        controller_cls: ``Controller`` subclass; a new instance serves each request.
        prefix: URL prefix for every action route (e.g. ``"/users"``).
        tags: OpenAPI tags, defaults to the class name.
        model_base: Declarative base searched when ``find`` resolves an
            entity type from its name.
    """

    def __init__(
        self,
        controller_cls: type[Controller],
        *,
        prefix: str = "",
        tags: list[str] | None = None,
        model_base: type[DeclarativeBase] | None = None,
    ) -> None:
        if not (isinstance(controller_cls, type) and issubclass(controller_cls, Controller)):
            raise ConfigurationError(
                f"{controller_cls!r} is not a Controller subclass"
            )
        self.controller_cls = controller_cls
        self.prefix = prefix.rstrip("/")
        self.tags: list[str] = list(tags) if tags else [controller_cls.__name__]
        self.model_base: type[DeclarativeBase] = model_base or Base

        self.actions: dict[str, tuple[ActionDef, Callable[..., Any]]] = self._collect_actions()
        self.hooks: list[HookDef] = []
        self.bindings: list[BindingDeclaration] = []

    @property
    def name(self) -> str:
        return self.controller_cls.__name__

    def _collect_actions(self) -> dict[str, tuple[ActionDef, Callable[..., Any]]]:
        actions: dict[str, tuple[ActionDef, Callable[..., Any]]] = {}
        for _attr, member in inspect.getmembers(self.controller_cls, inspect.isfunction):
            action_def: ActionDef | None = getattr(member, ACTION_ATTR, None)
            if action_def is None:
                continue
            if action_def.name in actions:
                raise ConfigurationError(
                    f"Duplicate action '{action_def.name}' on {self.name}"
                )
            actions[action_def.name] = (action_def, member)
        return actions

    # -- hooks ---------------------------------------------------------------

    def before_action(self, hook: Hook, **scope: Any) -> HookDef:
        """Run ``hook(controller)`` before matching actions, in registration order.

        Accepted scope options: ``only`` and ``except_`` (an action name or
        an iterable of names).
        """
        hook_def = HookDef(
            hook=hook,
            scope=parse_scope(scope),
            name=getattr(hook, "__name__", repr(hook)),
        )
        self.hooks.append(hook_def)
        return hook_def

    def hooks_for(self, action_name: str) -> list[HookDef]:
        return [h for h in self.hooks if h.scope.applies_to(action_name)]

    def validate(self) -> None:
        """Fail fast if a hook scope names an action this controller lacks."""
        for hook_def in self.hooks:
            missing = hook_def.scope.names() - set(self.actions)
            if missing:
                raise ConfigurationError(
                    f"Hook '{hook_def.name}' on {self.name} is scoped to unknown "
                    f"action(s) {sorted(missing)}. Available: {sorted(self.actions)}"
                )

    # -- bindings ------------------------------------------------------------

    def find(self, entity_name: str, **options: Any) -> BindingDeclaration:
        """Shortcut for ``find(self, entity_name, **options)``."""
        return _finder.find(self, entity_name, **options)

    def finder(
        self, entity_name: str, **options: Any
    ) -> Callable[[FinderFn], FinderFn]:
        """Register ``find`` with the decorated function as its inline lookup::

            @users.finder("user", only="show")
            async def by_email(controller):
                ...
        """

        def _decorator(fn: FinderFn) -> FinderFn:
            _finder.find(self, entity_name, block=fn, **options)
            return fn

        return _decorator

    def describe(self) -> dict[str, Any]:
        return {
            "controller": self.name,
            "prefix": self.prefix,
            "actions": [
                {"name": a.name, "method": a.method, "path": self.prefix + a.path}
                for a, _fn in self.actions.values()
            ],
            "bindings": [b.describe() for b in self.bindings],
        }
