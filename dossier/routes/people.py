"""API routes for the people roster."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import InvalidPayloadError, PersonNotFoundError
from ..schemas.person import LastSeenUpdate, PersonPayload, PersonResponse
from ..services import people as people_service
from ..services.normalizer import coerce_coordinate

router = APIRouter(prefix="/api/people", tags=["people"])
logger = logging.getLogger(__name__)


def _require_name(data: PersonPayload | None) -> PersonPayload:
    if data is None or not data.name:
        raise InvalidPayloadError("name is required")
    return data


@router.get(
    "",
    response_model=list[PersonResponse],
    summary="List the roster",
)
async def list_people(db: AsyncSession = Depends(get_db)) -> list[PersonResponse]:
    return await people_service.list_people(db)


@router.post(
    "",
    response_model=PersonResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a person",
)
async def create_person(
    data: PersonPayload | None = None,
    db: AsyncSession = Depends(get_db),
) -> PersonResponse:
    data = _require_name(data)
    return await people_service.create_person(db, data.present_fields())


@router.get(
    "/{person_id}",
    response_model=PersonResponse,
    summary="Get one dossier",
)
async def get_person(
    person_id: int,
    db: AsyncSession = Depends(get_db),
) -> PersonResponse:
    person = await people_service.get_person(db, person_id)
    if person is None:
        raise PersonNotFoundError(person_id)
    return person


@router.put(
    "/{person_id}/profile",
    response_model=PersonResponse,
    summary="Update profile fields",
    description="Only fields present in the body are changed.",
)
async def update_profile(
    person_id: int,
    data: PersonPayload | None = None,
    db: AsyncSession = Depends(get_db),
) -> PersonResponse:
    data = _require_name(data)
    person = await people_service.update_profile(db, person_id, data.present_fields())
    if person is None:
        raise PersonNotFoundError(person_id)
    return person


@router.put(
    "/{person_id}/last-seen",
    response_model=PersonResponse,
    summary="Record a last-seen heartbeat",
)
async def update_last_seen(
    person_id: int,
    data: LastSeenUpdate | None = None,
    db: AsyncSession = Depends(get_db),
) -> PersonResponse:
    data = data or LastSeenUpdate()
    lat = coerce_coordinate(data.lat)
    lng = coerce_coordinate(data.lng)
    if lat is None or lng is None:
        raise InvalidPayloadError("lat and lng must be numbers")

    person = await people_service.update_last_seen(
        db, person_id, lat=lat, lng=lng, notes=data.notes
    )
    if person is None:
        raise PersonNotFoundError(person_id)
    return person
