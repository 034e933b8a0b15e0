#!/usr/bin/env python3
"""
Database seed script for the dossier console.

Populates the people table with sample dossiers for development.
Can be run with: python -m scripts.seed
"""

import asyncio
import logging

from sqlalchemy import func, select

from dossier.config import get_settings
from dossier.database import Base, get_async_engine, get_async_session_factory
from dossier.logging import configure_logging
from dossier.models.person import Person
from dossier.services.people import create_person, update_last_seen

logger = logging.getLogger("scripts.seed")

# Mixed legacy and canonical field names on purpose
SAMPLE_PEOPLE = [
    {
        "profile": {
            "name": "Ada Vance",
            "callsign": "LANTERN",
            "role": "Field analyst",
            "workplace": "Northern Desk",
            "traits": "patient, meticulous, dry humour",
            "proficiencies": ["cartography", "signals", "Portuguese"],
            "stats": {"affiliation": "Directorate", "threat": "Low", "loyalty": "High"},
            "description": "Keeps the northern map current.",
        },
        "last_seen": {"lat": 59.3293, "lng": 18.0686, "notes": "Stockholm, ferry terminal"},
    },
    {
        "profile": {
            "name": "Bram Okafor",
            "callsign": "TIDEWATER",
            "role": "Courier",
            "unit": "Harbour Section",
            "traits": ["punctual", "quiet"],
            "proficiencies": "boats, locks",
            "stats": {"clearance": "Contractor", "threat": "Medium"},
        },
        "last_seen": {"lat": 51.9225, "lng": 4.47917, "notes": "Rotterdam docks"},
    },
    {
        "profile": {
            "name": "Celine Marr",
            "role": "Unknown",
            "clearance": "Unaffiliated",
            "threat": "High",
            "dossier_notes": "No confirmed sightings since spring.",
        },
        "last_seen": None,
    },
]


async def seed() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, service_name="dossier-seed")

    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = get_async_session_factory()
    async with session_factory() as db:
        existing = await db.scalar(select(func.count()).select_from(Person))
        if existing:
            logger.info("seed.skipped", extra={"existing_people": existing})
            return

        for sample in SAMPLE_PEOPLE:
            person = await create_person(db, sample["profile"])
            if sample["last_seen"]:
                await update_last_seen(db, person.id, **sample["last_seen"])

    logger.info("seed.done", extra={"people": len(SAMPLE_PEOPLE)})
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
