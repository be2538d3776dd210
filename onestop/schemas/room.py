# onestop/schemas/room.py
from enum import Enum

from pydantic import BaseModel, Field


class RoomLevel(str, Enum):
    LEVEL_6 = "LEVEL_6"
    LEVEL_5 = "LEVEL_5"


class RoomType(str, Enum):
    """
    Stable slugs of the bookable rooms.
    """

    ELAIESE = "elaiese"
    OLIVIE = "olivie"
    POWER_UP = "power-up"
    PHENOLIV = "phenoliv"
    CHOCO = "choco"
    DELIMA = "delima"
    SAUDA_AJWA = "sauda-ajwa"


class RoomRead(BaseModel):
    """
    Public representation of a room.
    """

    id: int = Field(..., examples=[1], description="Database identifier of the room.")
    name: str = Field(..., examples=["Elaiese"], description="Display name.")
    level: RoomLevel = Field(..., examples=["LEVEL_6"], description="Building level.")
    type: RoomType = Field(..., examples=["elaiese"], description="Room type slug.")
    capacity: int | None = Field(None, examples=[20], description="Seated capacity.")
    description: str | None = Field(None, examples=["Meeting Room"])

    class Config:
        from_attributes = True
