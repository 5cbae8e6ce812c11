import logging
import os
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from .config import Settings
from .errors import AuthRequired, UpstreamError, ValidationError
from .providers.google_client import GoogleClient
from .schedule import DaySchedule
from .service import CalendarSource, compute_schedule, parse_query


def logging_config(env: Optional[str]) -> dict:
    if env != "production":
        return {"level": logging.DEBUG}
    return {"level": logging.INFO, "format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}


logging.basicConfig(**logging_config(os.getenv("ENV")))
logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def get_calendar_source(settings: Settings = Depends(get_settings)) -> CalendarSource:
    return GoogleClient(settings)


app = FastAPI(title="Free Schedule", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_methods=["GET"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(AuthRequired)
async def auth_required_handler(request: Request, exc: AuthRequired) -> JSONResponse:
    return JSONResponse(status_code=401, content={"detail": str(exc), "auth_url": "/oauth/start"})


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error("Calendar source failed: %s", exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


# --- Google OAuth ---
@app.get("/oauth/start")
def oauth_start(settings: Settings = Depends(get_settings)):
    return RedirectResponse(GoogleClient(settings).auth_url())


@app.get("/oauth/callback")
def oauth_callback(request: Request, settings: Settings = Depends(get_settings)):
    GoogleClient(settings).fetch_token(str(request.url))
    return {"ok": True, "provider": "google"}


# --- Free schedule ---
@app.get("/api/free-schedule", response_model=List[DaySchedule])
async def free_schedule(
    days: Optional[str] = Query(None, description="Comma separated weekday indices, 0 = Sunday"),
    hours_range: Optional[str] = Query(None, alias="hoursRange", description="Start and end hour, e.g. 8,20"),
    meeting_length: Optional[str] = Query(None, alias="meetingLength", description="Minimum block length in minutes"),
    settings: Settings = Depends(get_settings),
    source: CalendarSource = Depends(get_calendar_source),
) -> List[DaySchedule]:
    day_set, hours, length = parse_query(days, hours_range, meeting_length, settings)
    return await compute_schedule(day_set, hours, length, source, settings)
