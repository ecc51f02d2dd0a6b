from declarative_find.contracts.binding import (
    BindingDeclaration,
    CallableLookup,
    DefaultLookup,
    FinderFn,
    InlineLookup,
    LookupStrategy,
    MethodLookup,
)
from declarative_find.contracts.controller import ActionDef, Hook, HookDef, HookScope

__all__ = [
    "ActionDef",
    "BindingDeclaration",
    "CallableLookup",
    "DefaultLookup",
    "FinderFn",
    "Hook",
    "HookDef",
    "HookScope",
    "InlineLookup",
    "LookupStrategy",
    "MethodLookup",
]
