# declarative_find/contracts/binding.py
"""
Binding contracts.

A ``BindingDeclaration`` is captured once, when ``find`` is called during
application wiring, and is read-only afterwards. Its lookup strategy is one
of four variants, chosen at registration time and checked in this order:

1. ``InlineLookup``   - closure passed as ``block`` (or via ``@finder``)
2. ``CallableLookup`` - callable passed as ``using``
3. ``MethodLookup``   - the controller implements the finder method
4. ``DefaultLookup``  - identifier from params, ``AsyncSession.get``
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Union

# Finder callables receive the per-request controller (or nothing) and may be
# sync or async.
FinderFn = Callable[[Any], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class InlineLookup:
    fn: FinderFn
    # False for zero-argument callables, which are called without the controller.
    takes_controller: bool = True


@dataclass(frozen=True)
class CallableLookup:
    fn: FinderFn
    takes_controller: bool = True


@dataclass(frozen=True)
class MethodLookup:
    """The controller class implements ``method_name`` (no arguments)."""

    method_name: str


@dataclass(frozen=True)
class DefaultLookup:
    """No custom finder: look the entity up by identifier."""


LookupStrategy = Union[InlineLookup, CallableLookup, MethodLookup, DefaultLookup]


@dataclass(frozen=True)
class BindingDeclaration:
    """Immutable result of one ``find`` registration.

    Attributes:
        entity_name: Symbolic name given to ``find`` (e.g. ``"user"``).
        entity_type: Mapped class resolved from the name (e.g. ``User``).
        param: Request parameter read when ``id`` is absent or empty.
        variable: Name the resolved entity is bound under.
        strategy: Lookup strategy fixed at registration.
        scope: Hook scoping options forwarded verbatim to ``before_action``.
    """

    entity_name: str
    entity_type: type
    param: str
    variable: str
    strategy: LookupStrategy
    scope: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def describe(self) -> dict[str, Any]:
        return {
            "entity": self.entity_name,
            "model": self.entity_type.__name__,
            "param": self.param,
            "variable": self.variable,
            "lookup": type(self.strategy).__name__,
            "scope": {k: _jsonable(v) for k, v in self.scope.items()},
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, (set, frozenset, tuple)):
        return sorted(value)
    return value
