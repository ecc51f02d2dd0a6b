# declarative_find/core/models.py
"""
Entity-type resolution and identifier coercion.

``find("line_item")`` names a mapped class by convention: the symbolic name
is camel-cased (``LineItem``) and looked up among the mappers of a
declarative base. Identifiers arrive as request strings and are coerced to
the primary key's Python type before ``AsyncSession.get``.
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import DeclarativeBase

from declarative_find.errors import ConfigurationError

logger = logging.getLogger(__name__)


def camelize(name: str) -> str:
    """``"line_item"`` -> ``"LineItem"``; already camel-cased names pass through."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def mapped_classes(base: type[DeclarativeBase]) -> dict[str, type]:
    return {m.class_.__name__: m.class_ for m in base.registry.mappers}


def resolve_entity_type(name: str, base: type[DeclarativeBase]) -> type:
    """Map a symbolic name to a mapped class of ``base``.

    Raises:
        ConfigurationError: no mapped class matches.
    """
    classes = mapped_classes(base)
    class_name = camelize(name)
    try:
        return classes[class_name]
    except KeyError:
        raise ConfigurationError(
            f"Cannot resolve entity type '{class_name}' for '{name}'. "
            f"Mapped classes: {sorted(classes)}"
        ) from None


def coerce_identifier(model: type, raw: Any) -> Any:
    """Convert a request parameter to the model's primary-key type.

    Returns ``None`` when the value cannot be converted, so that a
    malformed identifier is a miss rather than a server error. Composite
    keys are passed through untouched.
    """
    if raw is None or raw == "":
        return None

    pk = sa_inspect(model).primary_key
    if len(pk) != 1:
        return raw

    try:
        python_type = pk[0].type.python_type
    except NotImplementedError:
        return raw

    if isinstance(raw, python_type):
        return raw
    try:
        return python_type(raw)
    except (TypeError, ValueError):
        logger.debug("Identifier %r is not a valid %s", raw, python_type.__name__)
        return None
