"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tennismate.config import settings
from tennismate.database import Base, engine
from tennismate.routers import users, events, join_requests, calendar, notifications
from tennismate.scheduler import start_scheduler, shutdown_scheduler

# Import all models so Base.metadata knows about them
import tennismate.models  # noqa: F401

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables for SQLite dev mode and run the reminder scheduler."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    if settings.ENABLE_SCHEDULER:
        start_scheduler()
    logger.info("TennisMate events service started")
    yield
    shutdown_scheduler()
    logger.info("TennisMate events service shut down")


app = FastAPI(
    title="TennisMate Events",
    description="Host and join tennis events — join requests, capacity tracking and personal calendars",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(join_requests.router, prefix="/api/join-requests", tags=["JoinRequests"])
app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
