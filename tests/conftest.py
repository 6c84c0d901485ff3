"""
Test fixtures for the city API.

`FakePool` stands in for an asyncpg pool: it understands the handful of
statements the repository issues and keeps rows in memory.
"""

import re

import pytest
from fastapi.testclient import TestClient

from cities.repository import CityRepository
from core.db import Database
from core.settings import DatabaseSettings
from main import create_app

_SET_COLUMN = re.compile(r'SET\s+"((?:[^"]|"")+)"\s*=\s*\$1')


class FakePool:
    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.statements = []
        self.fail_with = None
        self.closed = False

    def _record(self, sql, args):
        self.statements.append((" ".join(sql.split()), args))
        if self.fail_with is not None:
            raise self.fail_with

    def seed(self, name, country_code, district, population):
        city_id = self.next_id
        self.next_id += 1
        self.rows[city_id] = {
            "ID": city_id,
            "Name": name,
            "CountryCode": country_code,
            "District": district,
            "Population": population,
        }
        return city_id

    async def fetch(self, sql, *args):
        self._record(sql, args)
        return [dict(row) for _, row in sorted(self.rows.items())]

    async def fetchrow(self, sql, *args):
        self._record(sql, args)
        row = self.rows.get(args[0])
        return dict(row) if row is not None else None

    async def fetchval(self, sql, *args):
        self._record(sql, args)
        return self.seed(*args)

    async def execute(self, sql, *args):
        self._record(sql, args)
        if sql.lstrip().upper().startswith("UPDATE"):
            value, city_id = args
            column = _SET_COLUMN.search(sql).group(1).replace('""', '"')
            if city_id not in self.rows:
                return "UPDATE 0"
            self.rows[city_id][column] = value
            return "UPDATE 1"
        if sql.lstrip().upper().startswith("DELETE"):
            removed = self.rows.pop(args[0], None)
            return f"DELETE {1 if removed is not None else 0}"
        raise AssertionError(f"unexpected statement: {sql}")

    async def close(self):
        self.closed = True


def make_settings(table_name="city"):
    return DatabaseSettings(
        dsn=None,
        host="localhost",
        port=5432,
        user="test",
        password="test",
        database="world",
        table_name=table_name,
        min_size=1,
        max_size=10,
        command_timeout=None,
    )


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def database(fake_pool):
    return Database(make_settings(), pool=fake_pool)


@pytest.fixture
def repository(database):
    return CityRepository(database, "city")


@pytest.fixture
def client(database):
    with TestClient(create_app(database), raise_server_exceptions=False) as test_client:
        yield test_client
