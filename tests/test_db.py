"""
Tests for the pool owner and SQL helpers.
"""

import pytest

from core import db, settings


@pytest.mark.parametrize(
    "status, expected",
    [("UPDATE 3", 3), ("DELETE 0", 0), ("INSERT 0 1", 1), ("", 0), (None, 0), ("CREATE TABLE", 0)],
)
def test_affected_rows(status, expected):
    assert db.affected_rows(status) == expected


def test_quote_identifier_doubles_quotes():
    assert db.quote_identifier("city") == '"city"'
    assert db.quote_identifier('a"b') == '"a""b"'


@pytest.mark.parametrize("name", ["", None, "bad\x00name"])
def test_quote_identifier_rejects_bad_names(name):
    with pytest.raises(ValueError):
        db.quote_identifier(name)


def test_pool_property_requires_connect():
    database = db.Database(settings.database_settings())
    assert not database.is_connected
    with pytest.raises(RuntimeError):
        database.pool


async def test_connect_creates_pool_once(monkeypatch):
    calls = []

    class StubPool:
        async def close(self):
            calls.append("close")

    async def fake_create_pool(**kwargs):
        calls.append(kwargs)
        return StubPool()

    monkeypatch.setattr(db.asyncpg, "create_pool", fake_create_pool)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_HOST", "db.internal")
    database = db.Database(settings.database_settings())

    await database.connect()
    await database.connect()

    assert len(calls) == 1
    assert calls[0]["host"] == "db.internal"
    assert calls[0]["max_size"] == 10

    await database.close()
    assert calls[-1] == "close"
    assert not database.is_connected


async def test_execute_returns_affected_rows(database, fake_pool):
    city_id = fake_pool.seed("Apex", "US", "Central", 1)

    count = await database.execute('DELETE FROM "city" WHERE "ID" = $1', city_id)

    assert count == 1
