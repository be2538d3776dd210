# onestop/models/travel_request.py
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from onestop.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TravelRequest(Base):
    """
    A staff travel request with its server-computed meal allowance.
    """

    __tablename__ = "travel_requests"

    id = Column(Integer, primary_key=True, index=True)

    staff_id = Column(String(64), nullable=False, index=True)
    staff_name = Column(String(128), nullable=True)
    department = Column(String(128), nullable=True)

    destination = Column(String(255), nullable=False)
    reason = Column(Text, nullable=True)

    # Local wall-clock times as entered by the requestor
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=False)

    total_meal_allowance = Column(Integer, nullable=False, default=0)
    meal_days = Column(JSON, nullable=True)

    status = Column(String(16), nullable=False, default="PENDING", index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return (
            f"<TravelRequest id={self.id} staff_id={self.staff_id} "
            f"destination={self.destination!r} status={self.status}>"
        )
