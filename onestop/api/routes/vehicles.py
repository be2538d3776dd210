# onestop/api/routes/vehicles.py
from http import HTTPStatus

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.db.session import get_db
from onestop.schemas.vehicle_request import VehicleRequestCreate, VehicleRequestRead
from onestop.services.vehicle_requests import create_vehicle_request, list_vehicle_requests

router = APIRouter(prefix="/vehicle-requests", tags=["Vehicles"])


@router.post(
    "",
    response_model=VehicleRequestRead,
    status_code=HTTPStatus.CREATED,
    summary="Submit a vehicle request",
)
async def post_vehicle_request(
    payload: VehicleRequestCreate,
    db: AsyncSession = Depends(get_db),
) -> VehicleRequestRead:
    request = await create_vehicle_request(db, payload)
    return VehicleRequestRead.model_validate(request)


@router.get(
    "",
    response_model=list[VehicleRequestRead],
    summary="List vehicle requests",
    description="Newest first.",
)
async def get_vehicle_requests(db: AsyncSession = Depends(get_db)) -> list[VehicleRequestRead]:
    requests = await list_vehicle_requests(db)
    return [VehicleRequestRead.model_validate(r) for r in requests]
