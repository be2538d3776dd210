# onestop/main.py
from fastapi import FastAPI

from onestop.api.routes import admin, health, library, room_bookings, rooms, travel, vehicles
from onestop.core.config import get_settings
from onestop.core.logging import configure_logging, get_logger
from onestop.db.session import AsyncSessionLocal, init_db_for_startup
from onestop.services.room_catalog import seed_rooms

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the One-Stop staff portal backend.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend for the staff self-service portal: meeting room booking with\n"
            "half-hour availability grids and conflict checks, travel requests with\n"
            "per-day meal allowance, vehicle requests, the staff library and admin approval."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(rooms.router)
    app.include_router(room_bookings.router)
    app.include_router(travel.router)
    app.include_router(vehicles.router)
    app.include_router(library.router)
    app.include_router(admin.router)

    @app.on_event("startup")
    async def on_startup() -> None:
        await init_db_for_startup()
        if settings.SEED_REFERENCE_DATA:
            async with AsyncSessionLocal() as session:
                await seed_rooms(session)
        logger.info("%s started (env=%s)", settings.APP_NAME, settings.APP_ENV)

    return app


app = create_app()
