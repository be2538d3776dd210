# onestop/models/room_booking.py
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from onestop.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class RoomBooking(Base):
    """
    A room booking request covering one or more rooms and one or more
    schedules (date + time range). Schedules are created together with the
    booking and are not edited afterwards.
    """

    __tablename__ = "room_bookings"

    id = Column(Integer, primary_key=True, index=True)

    requestor_id = Column(String(64), nullable=False, index=True)
    requestor_name = Column(String(128), nullable=False)
    division = Column(String(128), nullable=True)
    request_date = Column(Date, nullable=False)
    event_name = Column(String(255), nullable=False)

    # List of room type slugs, e.g. ["elaiese", "olivie"]
    selected_rooms = Column(JSON, nullable=False, default=list)
    extra_items = Column(Text, nullable=True)
    room_arrangement = Column(JSON, nullable=True)

    requestor_signature_name = Column(String(128), nullable=True)
    requestor_signature_date = Column(Date, nullable=True)

    # Set when an approver approves or rejects the booking
    final_approval = Column(String(16), nullable=True)
    final_approver_name = Column(String(128), nullable=True)
    final_approval_date = Column(Date, nullable=True)

    status = Column(String(16), nullable=False, default="PENDING", index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    schedules = relationship(
        "BookingSchedule",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BookingSchedule.id",
    )

    def __repr__(self) -> str:
        return (
            f"<RoomBooking id={self.id} event={self.event_name!r} "
            f"rooms={self.selected_rooms} status={self.status}>"
        )


class BookingSchedule(Base):
    """
    One [start_time, end_time) slot of a booking on a single date.

    Times are stored as zero-padded "HH:MM" strings.
    """

    __tablename__ = "booking_schedules"

    id = Column(Integer, primary_key=True, index=True)

    booking_id = Column(
        Integer,
        ForeignKey("room_bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    participants = Column(Integer, nullable=False, default=1)

    # {"bf": {"lunch": bool, "dinner": bool}, "atb": {"lunch": bool, "dinner": bool}}
    refreshment = Column(JSON, nullable=True)

    booking = relationship("RoomBooking", back_populates="schedules")

    def __repr__(self) -> str:
        return (
            f"<BookingSchedule id={self.id} booking_id={self.booking_id} "
            f"date={self.date} {self.start_time}-{self.end_time}>"
        )


class BookingLog(Base):
    """
    Audit trail entry for a room booking (creation, status changes).
    """

    __tablename__ = "booking_logs"

    id = Column(Integer, primary_key=True, index=True)

    booking_id = Column(
        Integer,
        ForeignKey("room_bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    action = Column(String(16), nullable=False)
    performed_by = Column(String(64), nullable=False)
    performed_by_name = Column(String(128), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    notes = Column(Text, nullable=True)
    changes = Column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<BookingLog id={self.id} booking_id={self.booking_id} action={self.action}>"
