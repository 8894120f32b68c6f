"""pageperf API: analyze snapshots, keep per-session results and user settings."""

import logging
import os

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from pageperf.core.analyzer import analyze
from pageperf.core.collector import collect_snapshot
from pageperf.utils.storage import SessionStore, SettingsStore

logger = logging.getLogger("pageperf.api")

DEFAULT_CORS_ORIGINS = "http://localhost:3000"

app = FastAPI(title="pageperf API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip()
        for o in os.environ.get("PAGEPERF_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
        if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AnalyzeRequest(BaseModel):
    url: str = ""
    metrics: dict | None = None
    resources: list[dict] | None = None
    level: str | None = None
    session: str | None = None


class SettingsUpdate(BaseModel):
    autoAnalysis: bool | None = None
    networkThrottling: str | None = None
    showMetrics: dict[str, bool] | None = None
    suggestionLevel: str | None = None


class SessionSummary(BaseModel):
    key: str
    data: dict = Field(default_factory=dict)


def get_settings_store() -> SettingsStore:
    return SettingsStore()


def get_session_store() -> SessionStore:
    return SessionStore()


@app.get("/health")
def health():
    return {"status": "ok", "service": "pageperf-api", "version": "0.1.0"}


@app.post("/api/v1/analyze")
async def analyze_page(
    req: AnalyzeRequest,
    settings_store: SettingsStore = Depends(get_settings_store),
    sessions: SessionStore = Depends(get_session_store),
):
    settings = settings_store.get()
    metrics, resources = req.metrics, req.resources

    if metrics is None and resources is None:
        url = req.url.strip()
        if not url:
            raise HTTPException(status_code=422, detail="Provide metrics and resources, or a url to load")
        if not url.startswith("http"):
            url = f"https://{url}"
        try:
            metrics, resources = await collect_snapshot(url, throttling=settings.network_throttling)
        except Exception as e:
            logger.exception("collection failed for %s", url)
            raise HTTPException(status_code=502, detail=f"Could not load page: {str(e)[:200]}")
        req.url = url

    result = analyze(metrics, resources, level=req.level or settings.suggestion_level, url=req.url)
    data = result.to_dict()

    if req.session:
        try:
            sessions.save(req.session, data)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    return data


@app.get("/api/v1/sessions")
def list_sessions(sessions: SessionStore = Depends(get_session_store)):
    return {"sessions": sessions.keys()}


@app.get("/api/v1/sessions/{key}", response_model=SessionSummary)
def get_session(key: str, sessions: SessionStore = Depends(get_session_store)):
    try:
        data = sessions.get(key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if data is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return SessionSummary(key=key, data=data)


@app.delete("/api/v1/sessions/{key}")
def clear_session(key: str, sessions: SessionStore = Depends(get_session_store)):
    try:
        removed = sessions.clear(key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"key": key, "cleared": True}


@app.get("/api/v1/settings")
def get_settings(settings_store: SettingsStore = Depends(get_settings_store)):
    return settings_store.get().to_dict()


@app.put("/api/v1/settings")
def update_settings(update: SettingsUpdate, settings_store: SettingsStore = Depends(get_settings_store)):
    changes = {k: v for k, v in update.model_dump().items() if v is not None}
    return settings_store.save(changes).to_dict()


@app.post("/api/v1/settings/reset")
def reset_settings(settings_store: SettingsStore = Depends(get_settings_store)):
    return settings_store.reset().to_dict()
