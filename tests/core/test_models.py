from __future__ import annotations

import pytest

from declarative_find.core.models import (
    camelize,
    coerce_identifier,
    mapped_classes,
    resolve_entity_type,
)
from declarative_find.errors import ConfigurationError
from helpers.models import LineItem, ModelBase, User


@pytest.mark.parametrize(
    "name,expected",
    [
        ("user", "User"),
        ("line_item", "LineItem"),
        ("LineItem", "LineItem"),
        ("_user_", "User"),
    ],
)
def test_camelize(name, expected):
    assert camelize(name) == expected


def test_mapped_classes():
    classes = mapped_classes(ModelBase)
    assert classes["User"] is User
    assert classes["LineItem"] is LineItem


def test_resolve_entity_type():
    assert resolve_entity_type("line_item", ModelBase) is LineItem


def test_resolve_entity_type_unknown():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve_entity_type("invoice", ModelBase)
    assert "Invoice" in str(exc_info.value)
    assert "User" in str(exc_info.value)


class TestCoerceIdentifier:
    def test_integer_key(self):
        assert coerce_identifier(User, "42") == 42
        assert coerce_identifier(User, 42) == 42

    def test_string_key(self):
        assert coerce_identifier(LineItem, "abc-1") == "abc-1"

    @pytest.mark.parametrize("raw", [None, "", "4x2"])
    def test_unusable_values(self, raw):
        assert coerce_identifier(User, raw) is None
