from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.db import SessionLocal, init_database
from app.routers import auth, bookings, hostels, rooms, users
from app.services.users import ensure_admin
from app.store import Store
from app.utils.exceptions import AppError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def bootstrap_admin():
    """Create the configured administrator account if it is missing."""
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return
    db = SessionLocal()
    try:
        ensure_admin(Store(db), settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_NAME)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for initing database"
    init_database()
    bootstrap_admin()
    yield


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="Hostel listings and room bookings based on FastAPI.",
    version="0.1.0",
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(auth.router)
app.include_router(hostels.router)
app.include_router(rooms.router)
app.include_router(bookings.router)
app.include_router(users.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
