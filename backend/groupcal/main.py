"""
FastAPI app entrypoint.

Calendar availability, group aggregation and scheduled sessions. A background scheduler
sweeps the presence store.
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any groupcal code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from groupcal.api.routes import calendar, presence, sessions, settings as settings_routes
from groupcal.config import settings
from groupcal.core.constants import PRESENCE_SWEEP_JOB_ID
from groupcal.scheduler.presence_job import run_presence_sweep
from groupcal.services.presence import PresenceStore

logger = logging.getLogger(__name__)

# Scheduler: evict stale presence entries every PRESENCE_SWEEP_SECONDS
_scheduler = BackgroundScheduler()
_presence = PresenceStore(timeout=timedelta(minutes=settings.presence_timeout_minutes))


@asynccontextmanager
async def lifespan(app: FastAPI):
    _scheduler.add_job(
        run_presence_sweep,
        "interval",
        seconds=settings.presence_sweep_seconds,
        id=PRESENCE_SWEEP_JOB_ID,
        args=[_presence],
        replace_existing=True,
    )
    _scheduler.start()
    app.state.scheduler = _scheduler
    logger.info(
        "Backend ready; presence timeout %sm, sweep every %ss",
        settings.presence_timeout_minutes,
        settings.presence_sweep_seconds,
    )
    yield
    _scheduler.shutdown(wait=False)


app = FastAPI(title="Group Calendar", version="0.1.0", lifespan=lifespan)
app.state.presence = _presence

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for the production frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calendar.router, prefix="/calendar", tags=["calendar"])
app.include_router(sessions.router, prefix="/scheduled-sessions", tags=["sessions"])
app.include_router(settings_routes.router, prefix="/settings", tags=["settings"])
app.include_router(presence.router, prefix="/admin/active-users", tags=["presence"])


@app.get("/", include_in_schema=False)
def root():
    return {"message": "Group Calendar API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
