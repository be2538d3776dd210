# onestop/models/vehicle_request.py
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from onestop.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class VehicleRequest(Base):
    """
    A request for a company vehicle (optionally with a driver).
    """

    __tablename__ = "vehicle_requests"

    id = Column(Integer, primary_key=True, index=True)

    staff_id = Column(String(64), nullable=False, index=True)
    staff_name = Column(String(128), nullable=True)
    department = Column(String(128), nullable=True)

    purpose = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=True)
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=False)

    vehicle_type = Column(String(64), nullable=True)
    driver_required = Column(Boolean, nullable=False, default=False)
    passenger_count = Column(Integer, nullable=True)
    team_members = Column(Text, nullable=True)
    remarks = Column(Text, nullable=True)
    travel_no = Column(String(64), nullable=True)

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
            f"<VehicleRequest id={self.id} staff_id={self.staff_id} "
            f"purpose={self.purpose!r} status={self.status}>"
        )
