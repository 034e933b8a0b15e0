"""Persistence gateway for the ``people`` table.

Every function takes the request's session, talks to the table once (twice
for profile edits, which need the stored stats), and hands back normalized
records. Storage failures surface as :class:`StorageError`.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import StorageError
from ..models.person import Person
from ..schemas.person import PersonResponse
from .normalizer import (
    build_partial_update,
    build_write_payload,
    merge_stats,
    normalize_record,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("dossier-api.people")


@asynccontextmanager
async def _storage_call(db: AsyncSession, operation: str) -> AsyncIterator[None]:
    with tracer.start_as_current_span(f"people.{operation}"):
        try:
            yield
        except SQLAlchemyError as exc:
            logger.exception(
                "person.storage_error",
                extra={"operation": operation},
            )
            await db.rollback()
            raise StorageError(f"{operation} failed") from exc


def _to_response(person: Person) -> PersonResponse:
    return PersonResponse.model_validate(normalize_record(person.to_raw()))


async def list_people(db: AsyncSession) -> list[PersonResponse]:
    """Full roster, alphabetized by name."""
    async with _storage_call(db, "list"):
        result = await db.execute(select(Person).order_by(Person.name.asc()))
        people = result.scalars().all()

    return [_to_response(person) for person in people]


async def get_person(db: AsyncSession, person_id: int) -> PersonResponse | None:
    async with _storage_call(db, "get"):
        person = await db.get(Person, person_id)

    return _to_response(person) if person is not None else None


async def create_person(
    db: AsyncSession, payload: Mapping[str, Any]
) -> PersonResponse:
    """Insert a new person; the store assigns the id and timestamps."""
    async with _storage_call(db, "create"):
        person = Person(**build_write_payload(payload))
        db.add(person)
        await db.commit()
        await db.refresh(person)

    logger.info(
        "person.created",
        extra={"person_id": person.id, "person_name": person.name},
    )

    return _to_response(person)


async def update_profile(
    db: AsyncSession, person_id: int, payload: Mapping[str, Any]
) -> PersonResponse | None:
    """Apply a partial profile edit.

    Only keys present in ``payload`` are written. A stats patch is merged
    over the stored stats, so sending just ``threat`` keeps the stored
    affiliation and loyalty.

    Returns:
        The updated record, the unchanged record when ``payload`` carries
        no profile fields, or None when ``person_id`` does not exist.
    """
    update = build_partial_update(person_id, payload)
    if update.is_empty:
        return await get_person(db, person_id)

    async with _storage_call(db, "update_profile"):
        person = await db.get(Person, person_id)
        if person is None:
            return None

        values = dict(update.values)
        if update.stats_patch:
            current = normalize_record(person.to_raw()) or {}
            stats = merge_stats(current.get("stats"), update.stats_patch)
            values["stats"] = stats
            values["affiliation"] = stats["affiliation"]

        for column, value in values.items():
            setattr(person, column, value)
        person.updated_at = datetime.now(timezone.utc)

        await db.commit()
        await db.refresh(person)

    logger.info(
        "person.profile_updated",
        extra={"person_id": person_id, "fields": sorted(values)},
    )

    return _to_response(person)


async def update_last_seen(
    db: AsyncSession,
    person_id: int,
    lat: float,
    lng: float,
    notes: str | None = None,
) -> PersonResponse | None:
    """Record a location heartbeat.

    All four location fields are overwritten on every call and the
    timestamp is always the current time, even if the coordinates did not
    move.
    """
    async with _storage_call(db, "update_last_seen"):
        person = await db.get(Person, person_id)
        if person is None:
            return None

        now = datetime.now(timezone.utc)
        person.last_seen_lat = lat
        person.last_seen_lng = lng
        person.last_seen_notes = notes or ""
        person.last_seen_timestamp = now
        person.updated_at = now

        await db.commit()
        await db.refresh(person)

    logger.info(
        "person.last_seen_updated",
        extra={"person_id": person_id, "lat": lat, "lng": lng},
    )

    return _to_response(person)
