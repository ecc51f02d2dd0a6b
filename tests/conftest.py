from __future__ import annotations

import pytest

from helpers.models import seed_database


@pytest.fixture
def database_url(tmp_path) -> str:
    path = tmp_path / "find.db"
    seed_database(str(path))
    return f"sqlite+aiosqlite:///{path}"
