"""
Pydantic schemas and column allow-list for the city endpoints.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from core.errors import ValidationError

# "ID" and "Population" are int4 columns.
MAX_INT4 = 2_147_483_647


class CityColumn(str, Enum):
    """
    Columns a client may update. Only members of this enum reach SQL text.
    """

    NAME = "Name"
    COUNTRY_CODE = "CountryCode"
    DISTRICT = "District"
    POPULATION = "Population"

    @classmethod
    def parse(cls, raw: Any) -> "CityColumn":
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            raise ValidationError("Invalid column name", field="colName")
        key = raw.strip().lower()
        for column in cls:
            if column.value.lower() == key:
                return column
        raise ValidationError("Invalid column name", field="colName")


class City(BaseModel):
    ID: int
    Name: str
    CountryCode: str
    District: str
    Population: int


class CreateCityRequest(BaseModel):
    name: str = Field(..., min_length=1)
    countrycode: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("countrycode", "countryCode", "CountryCode"),
    )
    district: str = Field(..., min_length=1)
    population: int = Field(..., ge=0, le=MAX_INT4)

    @field_validator("population", mode="before")
    @classmethod
    def _reject_bool_population(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("population must be an integer")
        return value


class UpdateCityRequest(BaseModel):
    col_name: str = Field(..., alias="colName", min_length=1)
    data: Any = Field(...)


class CreatedResponse(BaseModel):
    msg: str = "Success"
    id: int


class UpdateResult(BaseModel):
    affectedRows: int


class UpdatedResponse(BaseModel):
    msg: str = "successful"
    data: UpdateResult


class DeletedResponse(BaseModel):
    msg: str = "City deleted successfully"
