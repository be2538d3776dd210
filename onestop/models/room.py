# onestop/models/room.py
from sqlalchemy import Column, Integer, String

from onestop.db.base import Base


class Room(Base):
    """
    Static reference data for a bookable room.

    `type` is the stable slug used by bookings (`selected_rooms`) and by the
    availability grid.
    """

    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), nullable=False)
    level = Column(String(16), nullable=False)
    type = Column(String(32), nullable=False, unique=True, index=True)
    capacity = Column(Integer, nullable=True)
    description = Column(String(128), nullable=True)

    def __repr__(self) -> str:
        return f"<Room id={self.id} type={self.type} level={self.level}>"
