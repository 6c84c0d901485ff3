"""
City API endpoints.

Routes stay thin: parse the request, call the repository, map "no row" to
404. `ValidationError` and `DatabaseError` propagate to the handlers
registered in `main.py` (400 and 500).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from core.errors import ValidationError

from . import schemas
from .dependencies import get_repository, parse_model, read_body
from .repository import CityRepository

router = APIRouter(prefix="/api/city")

_NOT_FOUND = "City not found"


def _parse_city_id(raw: str) -> int:
    value = (raw or "").strip()
    if not (value.isascii() and value.isdigit()):
        raise ValidationError("Invalid city ID", field="id")
    try:
        city_id = int(value)
    except ValueError as exc:
        raise ValidationError("Invalid city ID", field="id") from exc
    if city_id <= 0:
        raise ValidationError("Invalid city ID", field="id")
    return city_id


@router.get("", response_model=list[schemas.City])
async def list_cities(repo: CityRepository = Depends(get_repository)) -> list[dict]:
    return await repo.list_cities()


@router.get("/{city_id}", response_model=schemas.City)
async def get_city(city_id: str, repo: CityRepository = Depends(get_repository)) -> dict:
    city = await repo.get_city(_parse_city_id(city_id))
    if city is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return city


@router.post("", status_code=status.HTTP_201_CREATED, response_model=schemas.CreatedResponse)
async def create_city(
    request: Request,
    repo: CityRepository = Depends(get_repository),
) -> schemas.CreatedResponse:
    payload = parse_model(schemas.CreateCityRequest, await read_body(request))
    new_id = await repo.create_city(
        payload.name,
        payload.countrycode,
        payload.district,
        payload.population,
    )
    return schemas.CreatedResponse(id=new_id)


@router.patch("/{city_id}", response_model=schemas.UpdatedResponse)
async def update_city(
    city_id: str,
    request: Request,
    repo: CityRepository = Depends(get_repository),
) -> schemas.UpdatedResponse:
    parsed_id = _parse_city_id(city_id)
    payload = parse_model(schemas.UpdateCityRequest, await read_body(request))
    count = await repo.update_city_field(payload.col_name, parsed_id, payload.data)
    if not count:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return schemas.UpdatedResponse(data=schemas.UpdateResult(affectedRows=count))


@router.delete("/{city_id}", response_model=schemas.DeletedResponse)
async def delete_city(
    city_id: str,
    repo: CityRepository = Depends(get_repository),
) -> schemas.DeletedResponse:
    count = await repo.delete_city(_parse_city_id(city_id))
    if not count:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return schemas.DeletedResponse()
