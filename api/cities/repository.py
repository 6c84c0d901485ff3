"""
City persistence (raw SQL).

Every value is bound as a `$n` parameter. The table name and column names
are quoted identifiers; column names come only from `CityColumn`.
"""

from __future__ import annotations

import logging
from typing import Any

from core import db as core_db
from core.errors import DatabaseError, ValidationError

from .schemas import MAX_INT4, CityColumn

logger = logging.getLogger(__name__)

_COLUMNS = '"ID", "Name", "CountryCode", "District", "Population"'


def _require_city_id(city_id: Any) -> int:
    if isinstance(city_id, bool) or not isinstance(city_id, int) or city_id <= 0:
        raise ValidationError("Invalid city ID", field="id")
    return city_id


def _require_text(value: Any, *, field: str, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message, field=field)
    return value


def _require_population(value: Any) -> int:
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise ValidationError("Invalid population", field="population")
        try:
            value = int(text)
        except ValueError as exc:
            raise ValidationError("Invalid population", field="population") from exc
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_INT4:
        raise ValidationError("Invalid population", field="population")
    return value


def _coerce_column_value(column: CityColumn, value: Any) -> str | int:
    if column is CityColumn.POPULATION:
        return _require_population(value)
    return _require_text(value, field=column.value, message="Invalid data value")


class CityRepository:
    def __init__(self, database: core_db.Database, table_name: str) -> None:
        self.db = database
        self.table_name = table_name
        self._table = core_db.quote_identifier(table_name)

    async def list_cities(self) -> list[dict]:
        try:
            return await self.db.fetch_all(
                f"""
                SELECT {_COLUMNS}
                FROM {self._table}
                ORDER BY "ID"
                """
            )
        except Exception as exc:
            logger.exception("city_list_failed table=%s", self.table_name)
            raise DatabaseError("Failed to fetch cities from database") from exc

    async def get_city(self, city_id: int) -> dict | None:
        city_id = _require_city_id(city_id)
        if city_id > MAX_INT4:
            return None
        try:
            return await self.db.fetch_one(
                f"""
                SELECT {_COLUMNS}
                FROM {self._table}
                WHERE "ID" = $1
                """,
                city_id,
            )
        except Exception as exc:
            logger.exception("city_fetch_failed city_id=%s", city_id)
            raise DatabaseError("Failed to fetch city from database") from exc

    async def create_city(
        self,
        name: str,
        country_code: str,
        district: str,
        population: int,
    ) -> int:
        name = _require_text(name, field="name", message="Invalid city name")
        country_code = _require_text(country_code, field="countrycode", message="Invalid country code")
        district = _require_text(district, field="district", message="Invalid district")
        if isinstance(population, bool) or not isinstance(population, int) or not 0 <= population <= MAX_INT4:
            raise ValidationError("Invalid population", field="population")

        try:
            new_id = await self.db.fetch_value(
                f"""
                INSERT INTO {self._table} ("Name", "CountryCode", "District", "Population")
                VALUES ($1, $2, $3, $4)
                RETURNING "ID"
                """,
                name,
                country_code,
                district,
                population,
            )
        except Exception as exc:
            logger.exception("city_create_failed name=%s country_code=%s", name, country_code)
            raise DatabaseError("Failed to create city in database") from exc

        if new_id is None:
            raise DatabaseError("Failed to create city in database")
        logger.info("city_created city_id=%s", new_id)
        return int(new_id)

    async def update_city_field(self, column: Any, city_id: int, value: Any) -> int:
        """
        Set one column of one city. Returns affected rows (0 when the id is unknown).
        """
        if not isinstance(column, (str, CityColumn)) or not column:
            raise ValidationError("Invalid column name", field="colName")
        city_id = _require_city_id(city_id)
        if value is None:
            raise ValidationError("Invalid data value", field="data")

        parsed = CityColumn.parse(column)
        bound = _coerce_column_value(parsed, value)
        target = core_db.quote_identifier(parsed.value)
        if city_id > MAX_INT4:
            return 0

        try:
            count = await self.db.execute(
                f"""
                UPDATE {self._table}
                SET {target} = $1
                WHERE "ID" = $2
                """,
                bound,
                city_id,
            )
        except Exception as exc:
            logger.exception("city_update_failed city_id=%s column=%s", city_id, parsed.value)
            raise DatabaseError("Failed to update city in database") from exc
        return count

    async def delete_city(self, city_id: int) -> int:
        city_id = _require_city_id(city_id)
        if city_id > MAX_INT4:
            return 0
        try:
            count = await self.db.execute(
                f"""
                DELETE FROM {self._table}
                WHERE "ID" = $1
                """,
                city_id,
            )
        except Exception as exc:
            logger.exception("city_delete_failed city_id=%s", city_id)
            raise DatabaseError("Failed to delete city from database") from exc
        if count:
            logger.info("city_deleted city_id=%s", city_id)
        return count
