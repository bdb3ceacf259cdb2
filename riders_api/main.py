from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text

from riders_api.api.routes import events
from riders_api.core.config import settings
from riders_api.core.observability import MetricsRegistry, ObservabilityMiddleware, configure_logging
from riders_api.db import session as db_session
from riders_api.db.base import Base
import riders_api.models.event  # noqa: F401  registers the events table

configure_logging(settings.log_level)

app = FastAPI(title="LS Riders")
metrics_registry = MetricsRegistry()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
    expose_headers=[
        "Location",
        "X-Total-Count",
        f"X-{settings.app_name}-alert",
        f"X-{settings.app_name}-error",
        f"X-{settings.app_name}-params",
    ],
)
app.add_middleware(
    ObservabilityMiddleware,
    registry=metrics_registry,
    exclude_paths={"/metrics", "/health"},
)

app.include_router(events.router)


@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=db_session.engine)


@app.get("/health")
def health():
    details = {"api": "ok"}
    failures: list[str] = []

    try:
        with db_session.SessionLocal() as db:
            db.execute(text("SELECT 1"))
        details["db"] = "ok"
    except Exception as exc:
        details["db"] = "error"
        details["db_error"] = str(exc)
        failures.append("db")

    status = "ok" if not failures else "degraded"
    payload = {"status": status, "checks": details}
    return JSONResponse(payload, status_code=200 if not failures else 503)


@app.get("/metrics", response_class=PlainTextResponse)
def metrics():
    return PlainTextResponse(
        metrics_registry.render_prometheus(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
