from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from app.db.base import SessionLocal, engine, get_db
from app.core.config import settings
from app.core.deps import get_calendar
from app.core.logging import setup_logging
from app.routers import auth as auth_router
from app.routers import activities as activities_router
from app.routers import activity_logs as activity_logs_router
from app.services.scheduler import DailyGenerationScheduler
from app.core.errors import (
    TrackerException,
    tracker_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    scheduler = DailyGenerationScheduler(
        session_factory=SessionLocal,
        calendar=get_calendar(),
        run_at=settings.scheduler_run_at,
    )
    app.state.scheduler = scheduler
    if settings.SCHEDULER_ENABLED:
        scheduler.start()
    try:
        yield
    finally:
        await scheduler.stop()
        engine.dispose()


app = FastAPI(
    title="Activity Tracker API",
    description=(
        "**Recurring activity tracking**\n\n"
        "Define daily / weekly / monthly activities; the generator materializes one "
        "activity log per period, honouring per-user excluded intervals, and the "
        "today view merges current, still-open and completed-today logs.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(TrackerException, tracker_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(auth_router.router)
app.include_router(activities_router.router)
app.include_router(activity_logs_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV, "timezone": settings.TIMEZONE}
