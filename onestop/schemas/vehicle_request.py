# onestop/schemas/vehicle_request.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from onestop.schemas.travel import RequestStatus


class VehicleRequestCreate(BaseModel):
    staff_id: str = Field(..., min_length=1, examples=["staff-001"])
    staff_name: str | None = None
    department: str | None = None
    purpose: str = Field(..., min_length=1, examples=["Site visit"])
    destination: str | None = Field(None, examples=["Port Klang"])
    start_datetime: datetime = Field(..., examples=["2025-11-20T08:00:00"])
    end_datetime: datetime = Field(..., examples=["2025-11-20T17:00:00"])
    vehicle_type: str | None = Field(None, examples=["MPV"])
    driver_required: bool = False
    passenger_count: int | None = Field(None, ge=1)
    team_members: str | None = None
    remarks: str | None = None
    travel_no: str | None = None

    @model_validator(mode="after")
    def end_not_before_start(self) -> "VehicleRequestCreate":
        if self.end_datetime < self.start_datetime:
            raise ValueError("end_datetime must be greater than or equal to start_datetime")
        return self


class VehicleRequestRead(BaseModel):
    id: int
    staff_id: str
    staff_name: str | None = None
    department: str | None = None
    purpose: str
    destination: str | None = None
    start_datetime: datetime
    end_datetime: datetime
    vehicle_type: str | None = None
    driver_required: bool
    passenger_count: int | None = None
    status: RequestStatus
    created_at: datetime

    class Config:
        from_attributes = True
