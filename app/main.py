import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app import config
from app.routers import activities, auth, bookings, profiles, rooms
from app.db import init_database
from app.utils.errors import BookingError

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for initing database"
    init_database()
    yield


app = FastAPI(
    lifespan=lifespan,
    title="CampusRoomz",
    description="Room and lab booking service for college staff.",
    version="0.1.0",
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
)


@app.exception_handler(BookingError)
async def booking_error_handler(_: Request, exc: BookingError):
    logger.debug(f"Booking error {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


app.include_router(auth.router)
app.include_router(profiles.router)
app.include_router(profiles.departments_router)
app.include_router(rooms.router)
app.include_router(rooms.equipment_router)
app.include_router(bookings.router)
app.include_router(activities.router)
app.include_router(activities.notifications_router)
