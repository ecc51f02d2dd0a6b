from __future__ import annotations

import pytest
from fastapi import HTTPException

from declarative_find.errors import ConfigurationError, http_error


def test_http_error_defaults_to_status_phrase():
    with pytest.raises(HTTPException) as exc_info:
        http_error(404)
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Not Found"


def test_http_error_custom_detail():
    with pytest.raises(HTTPException) as exc_info:
        http_error(410, "gone for good")
    assert exc_info.value.detail == "gone for good"


@pytest.mark.parametrize("status", [200, 302, 600])
def test_http_error_rejects_non_error_status(status):
    with pytest.raises(ValueError):
        http_error(status)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)
