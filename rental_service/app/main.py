import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.core.config import settings
from shared.core.database import Base, rental_engine
from shared.helpers.json_response_helper import failure_envelope
from shared.helpers.exception_handler import setup_exception_handlers
from shared.utils.app_status_code import AppStatusCode
from .core.exceptions import PropertyConfigError
from .models import bookings, platforms, properties
from .router import bookings_router, calendar_router, configuration_router
from .services.calendar_sync_service import run_scheduled_sync

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger("rental_service")


def start_scheduler() -> BackgroundScheduler | None:
    if settings.CALENDAR_SYNC_INTERVAL_MINUTES <= 0:
        return None
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_scheduled_sync,
        IntervalTrigger(minutes=settings.CALENDAR_SYNC_INTERVAL_MINUTES),
        id="calendar_sync",
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info("Calendar sync scheduled every %d min",
                settings.CALENDAR_SYNC_INTERVAL_MINUTES)
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    Base.metadata.create_all(bind=rental_engine)
    scheduler = start_scheduler()
    yield
    if scheduler:
        scheduler.shutdown(wait=False)


app = FastAPI(title="Rental Calendar Service API", lifespan=lifespan)

# Allow requests from the web app
origins = [
    "http://localhost:8080",
    "http://127.0.0.1:8002"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
setup_exception_handlers(app)


@app.exception_handler(PropertyConfigError)
async def property_config_exception_handler(request: Request, exc: PropertyConfigError):
    body = failure_envelope(str(exc), AppStatusCode.CALENDAR_CONFIGURATION_UNAVAILABLE)
    return JSONResponse(content=body, status_code=503)


# Include routers
app.include_router(calendar_router.router)
app.include_router(bookings_router.router)
app.include_router(configuration_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
