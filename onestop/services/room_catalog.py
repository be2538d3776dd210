# onestop/services/room_catalog.py
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.core.logging import get_logger
from onestop.models.room import Room
from onestop.schemas.room import RoomLevel

logger = get_logger(__name__)


DEFAULT_ROOMS: tuple[dict, ...] = (
    {"name": "Elaiese", "level": "LEVEL_6", "type": "elaiese", "capacity": 20, "description": "Meeting Room"},
    {"name": "Olivie", "level": "LEVEL_6", "type": "olivie", "capacity": 30, "description": "Training Room 1"},
    {"name": "PowerUp", "level": "LEVEL_6", "type": "power-up", "capacity": 30, "description": "Training Room 2"},
    {"name": "Phenoliv", "level": "LEVEL_6", "type": "phenoliv", "capacity": 10, "description": "Discussion Room"},
    {"name": "Choco", "level": "LEVEL_5", "type": "choco", "capacity": 15, "description": None},
    {"name": "Delima", "level": "LEVEL_5", "type": "delima", "capacity": 15, "description": None},
    {"name": "Sauda & Ajwa", "level": "LEVEL_5", "type": "sauda-ajwa", "capacity": 20, "description": None},
)


def room_sort_key(room: Room) -> tuple[int, str]:
    """LEVEL_6 rooms first, then alphabetical by name."""
    return (0 if room.level == RoomLevel.LEVEL_6.value else 1, room.name.lower())


async def seed_rooms(db: AsyncSession) -> int:
    """
    Insert any default room whose type is not stored yet.

    Returns the number of rooms created; running it again is a no-op.
    """
    result = await db.execute(select(Room.type))
    existing = set(result.scalars().all())

    created = 0
    for room in DEFAULT_ROOMS:
        if room["type"] in existing:
            continue
        db.add(Room(**room))
        created += 1

    if created:
        await db.commit()
        logger.info("Seeded %d rooms", created)
    return created


async def list_rooms(db: AsyncSession) -> list[Room]:
    result = await db.execute(select(Room))
    return sorted(result.scalars().all(), key=room_sort_key)

