# declarative_find/finder.py
"""
Declarative record lookup for controller actions.

``find`` registers a before-action hook on a ``ControllerDescriptor`` that
loads an entity for the current request and binds it on the controller, or
halts the request with 404 when nothing is found::

    users = ControllerDescriptor(UsersController, prefix="/users")

    find(users, "user")                          # params id / user -> User
    find(users, "user", param="user_id")         # read params["user_id"]
    find(users, "user", variable="target")       # bind as controller.target
    find(users, "user", using="by_email")        # call controller.by_email()
    find(users, "user", using=lambda c: ...)     # call with the controller
    find(users, "user", using=lambda: ...)       # or with no arguments
    find(users, "user", only=["show", "delete"]) # hook scope, passed through

Lookup precedence is fixed and part of the public contract:
inline ``block`` > callable ``using`` > controller finder method
(``using`` name, default ``find_<name>``) > lookup by identifier.
"""
from __future__ import annotations

import inspect
import keyword
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import DataError
from sqlalchemy.ext.asyncio import AsyncSession

from declarative_find.contracts.binding import (
    BindingDeclaration,
    CallableLookup,
    DefaultLookup,
    FinderFn,
    InlineLookup,
    LookupStrategy,
    MethodLookup,
)
from declarative_find.controller.base import Controller
from declarative_find.core.config import settings
from declarative_find.core.models import coerce_identifier, resolve_entity_type
from declarative_find.errors import ConfigurationError, http_error

if TYPE_CHECKING:
    from declarative_find.controller.descriptor import ControllerDescriptor

logger = logging.getLogger(__name__)


# -- registration --------------------------------------------------------------


def find(
    descriptor: ControllerDescriptor,
    entity_name: str,
    *,
    param: str | None = None,
    variable: str | None = None,
    using: str | FinderFn | None = None,
    block: FinderFn | None = None,
    model: type | None = None,
    **scope: Any,
) -> BindingDeclaration:
    """Register a find-or-404 before-action hook on ``descriptor``.

    Args:
        descriptor: Controller wiring object receiving the hook.
        entity_name: Symbolic entity name, e.g. ``"user"``. Also the default
            ``param`` and ``variable``.
        param: Request parameter holding the identifier when ``id`` is
            absent or empty.
        variable: Controller attribute the entity is bound to.
        using: Controller method name or callable performing the lookup.
            Defaults to the ``find_<entity_name>`` convention.
        block: Inline lookup callable; overrides ``using``.
        model: Mapped class to look up; resolved from ``entity_name`` when omitted.
        **scope: Forwarded verbatim to ``descriptor.before_action``
            (``only`` / ``except_``).

    Returns:
        The immutable ``BindingDeclaration``.

    Raises:
        ConfigurationError: Unknown entity type, bad names or bad scope.
    """
    if not isinstance(entity_name, str) or not entity_name:
        raise ConfigurationError(f"find() needs a non-empty entity name, got {entity_name!r}")

    controller_cls = descriptor.controller_cls
    entity_type = _entity_type(descriptor, entity_name, model)
    param_name = param or entity_name
    variable_name = variable or entity_name
    _check_variable(controller_cls, variable_name)

    declaration = BindingDeclaration(
        entity_name=entity_name,
        entity_type=entity_type,
        param=param_name,
        variable=variable_name,
        strategy=select_strategy(controller_cls, entity_name, using=using, block=block),
        scope=MappingProxyType(dict(scope)),
    )

    async def hook(controller: Controller) -> None:
        await resolve_binding(declaration, controller)

    hook.__name__ = f"bind_{variable_name}"
    descriptor.before_action(hook, **scope)
    descriptor.bindings.append(declaration)

    logger.debug(
        "Registered find(%s) on %s: model=%s lookup=%s",
        entity_name,
        descriptor.name,
        entity_type.__name__,
        type(declaration.strategy).__name__,
    )
    return declaration


def _entity_type(
    descriptor: ControllerDescriptor, entity_name: str, model: type | None
) -> type:
    if model is None:
        return resolve_entity_type(entity_name, descriptor.model_base)
    if sa_inspect(model, raiseerr=False) is None:
        raise ConfigurationError(f"{model!r} is not a mapped class")
    return model


def _check_variable(controller_cls: type[Controller], name: str) -> None:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise ConfigurationError(f"'{name}' is not a valid variable name")
    if (
        name in Controller.RESERVED
        or hasattr(Controller, name)
        or callable(getattr(controller_cls, name, None))
    ):
        raise ConfigurationError(
            f"Variable '{name}' would shadow {controller_cls.__name__}.{name}"
        )


def _takes_controller(fn: FinderFn, option: str) -> bool:
    """Whether ``fn`` is called with the controller or with no arguments."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return True

    positional = [
        p
        for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    required = [p for p in positional if p.default is p.empty]
    required_kw = [
        p
        for p in signature.parameters.values()
        if p.kind is p.KEYWORD_ONLY and p.default is p.empty
    ]
    if len(required) > 1 or required_kw:
        raise ConfigurationError(
            f"{option} must accept the controller or no arguments, got {fn!r}{signature}"
        )
    has_varargs = any(p.kind is p.VAR_POSITIONAL for p in signature.parameters.values())
    return bool(positional) or has_varargs


def select_strategy(
    controller_cls: type[Controller],
    entity_name: str,
    *,
    using: str | FinderFn | None = None,
    block: FinderFn | None = None,
) -> LookupStrategy:
    """Pick the lookup strategy once, at registration time."""
    if block is not None:
        if not callable(block):
            raise ConfigurationError(f"block must be callable, got {block!r}")
        return InlineLookup(block, _takes_controller(block, "block"))

    if callable(using):
        return CallableLookup(using, _takes_controller(using, "using"))

    if using is not None and not isinstance(using, str):
        raise ConfigurationError(
            f"using must be a method name or a callable, got {type(using).__name__}"
        )

    method_name = using or f"{settings.finder_method_prefix}{entity_name}"
    if callable(getattr(controller_cls, method_name, None)):
        return MethodLookup(method_name)

    if using is not None:
        logger.warning(
            "%s has no finder method '%s'; '%s' will be looked up by identifier",
            controller_cls.__name__,
            method_name,
            entity_name,
        )
    return DefaultLookup()


# -- per-request resolution ----------------------------------------------------


def lookup_identifier(params: Mapping[str, Any], param: str) -> Any:
    """``params["id"]`` if present and non-empty, else ``params[param]``."""
    value = params.get(settings.id_param)
    if value is None or value == "":
        value = params.get(param)
    return value


async def find_by_identifier(session: AsyncSession, model: type, raw: Any) -> Any:
    """Return the row with primary key ``raw`` or ``None``; never raises on a miss."""
    identifier = coerce_identifier(model, raw)
    if identifier is None:
        return None
    try:
        return await session.get(model, identifier)
    except (OverflowError, DataError) as exc:
        # e.g. an integer wider than the column: no row can match it
        logger.debug("Identifier %r not representable for %s: %s", raw, model.__name__, exc)
        return None


async def _lookup(declaration: BindingDeclaration, controller: Controller) -> Any:
    strategy = declaration.strategy

    if isinstance(strategy, (InlineLookup, CallableLookup)):
        result = strategy.fn(controller) if strategy.takes_controller else strategy.fn()
    elif isinstance(strategy, MethodLookup):
        result = getattr(controller, strategy.method_name)()
    else:
        raw = lookup_identifier(controller.params, declaration.param)
        return await find_by_identifier(controller.session, declaration.entity_type, raw)

    if inspect.isawaitable(result):
        result = await result
    return result


async def resolve_binding(declaration: BindingDeclaration, controller: Controller) -> Any:
    """Look the entity up and bind it, or halt the request with 404."""
    entity = await _lookup(declaration, controller)

    if entity is None or entity is False:
        logger.debug(
            "%s not found for %s %s",
            declaration.entity_type.__name__,
            controller.request.method,
            controller.request.url.path,
        )
        http_error(404, f"{declaration.entity_type.__name__} not found")

    controller.bind(declaration.variable, entity)
    return entity
