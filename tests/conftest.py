# tests/conftest.py
from __future__ import annotations

import pytest

from quizwheel.database import Database


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'quizwheel_test.db'}"


@pytest.fixture
async def db(sqlite_url):
    database = Database(sqlite_url)
    await database.init_models()
    yield database
    await database.close()


@pytest.fixture
async def session(db):
    async with db.session() as s:
        yield s
