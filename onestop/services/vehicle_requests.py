# onestop/services/vehicle_requests.py
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.core.logging import get_logger
from onestop.models.vehicle_request import VehicleRequest
from onestop.schemas.travel import RequestStatus
from onestop.schemas.vehicle_request import VehicleRequestCreate
from onestop.services.travel_requests import RequestNotFoundError

logger = get_logger(__name__)


async def create_vehicle_request(db: AsyncSession, payload: VehicleRequestCreate) -> VehicleRequest:
    request = VehicleRequest(
        **payload.model_dump(),
        status=RequestStatus.PENDING.value,
    )
    db.add(request)
    await db.commit()
    await db.refresh(request)

    logger.info(
        "Created vehicle request id=%s staff=%s purpose=%r",
        request.id,
        request.staff_id,
        request.purpose,
    )
    return request


async def list_vehicle_requests(db: AsyncSession) -> list[VehicleRequest]:
    result = await db.execute(
        select(VehicleRequest).order_by(VehicleRequest.created_at.desc(), VehicleRequest.id.desc())
    )
    return list(result.scalars().all())


async def update_vehicle_request_status(
    db: AsyncSession,
    request_id: int,
    status: RequestStatus,
) -> VehicleRequest:
    result = await db.execute(select(VehicleRequest).where(VehicleRequest.id == request_id))
    request = result.scalar_one_or_none()
    if request is None:
        raise RequestNotFoundError(f"Vehicle request with id={request_id} not found")

    old_status = request.status
    request.status = status.value
    await db.commit()
    await db.refresh(request)

    logger.info("Vehicle request id=%s status %s -> %s", request.id, old_status, status.value)
    return request
