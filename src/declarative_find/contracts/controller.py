# declarative_find/contracts/controller.py
"""
Controller-side contracts: actions and before-action hooks.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Union

# Before-action hook: receives the per-request controller, sync or async.
Hook = Callable[[Any], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class ActionDef:
    """Route metadata attached to a controller method by ``@action``."""

    name: str
    method: str
    path: str
    route_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HookScope:
    """Which actions a hook applies to.

    A hook with ``only`` runs for exactly those actions; otherwise it runs
    for every action not listed in ``except_``.
    """

    only: frozenset[str] | None = None
    except_: frozenset[str] = frozenset()

    def applies_to(self, action_name: str) -> bool:
        if self.only is not None:
            return action_name in self.only
        return action_name not in self.except_

    def names(self) -> frozenset[str]:
        return (self.only or frozenset()) | self.except_


@dataclass(frozen=True)
class HookDef:
    hook: Hook
    scope: HookScope
    name: str
