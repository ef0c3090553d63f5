"""FastAPI application entry point for the GazaPay voice assistant backend."""

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gazapay.api.dialogue import create_dialogue_router
from gazapay.core.config import get_settings
from gazapay.core.errors import unhandled_exception_handler
from gazapay.core.logging import configure_logging, request_id_middleware
from gazapay.core.metrics import MetricsCollector
from gazapay.dialogue.manager import DialogueManager
from gazapay.dialogue.templates import load_catalog
from gazapay.memory.store import create_session_store

settings = get_settings()
logger = logging.getLogger("gazapay.app")

session_store = create_session_store(
    settings.session_backend,
    capacity=settings.session_capacity,
    sqlite_path=settings.sqlite_path,
)
dialogue_manager = DialogueManager(
    catalog=load_catalog(settings.templates_path),
    mock_balance=settings.mock_balance,
)
metrics = MetricsCollector()

app = FastAPI(title=settings.app_name, version="0.1.0", docs_url="/docs")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(request_id_middleware)

app.include_router(create_dialogue_router(dialogue_manager, session_store, metrics))


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Return basic service status for monitoring."""

    return {"status": "ok"}


@app.get("/ready", tags=["health"])
async def readiness_probe() -> dict[str, Any]:
    """Readiness endpoint that verifies the session store is usable."""

    store_ok = session_store.ping()
    components: dict[str, dict[str, Any]] = {
        "session_store": {
            "backend": settings.session_backend,
            "capacity": session_store.capacity,
            "ok": store_ok,
        },
        "dialogue": {
            "engine": dialogue_manager.describe(),
            "templates": len(dialogue_manager.catalog.keys()),
            "ok": True,
        },
    }
    if settings.session_backend == "sqlite":
        components["session_store"]["path"] = str(settings.sqlite_path)

    return {
        "status": "ok" if store_ok else "fail",
        "environment": settings.environment,
        "components": components,
    }


@app.on_event("startup")
async def configure_app_logging() -> None:
    level = configure_logging(settings.log_level)
    logger.info("Logging configured at %s level for %s environment", logging.getLevelName(level), settings.environment)


app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/metrics", tags=["metrics"])
async def metrics_endpoint() -> dict:
    snapshot = metrics.snapshot()
    return {
        "total_requests": snapshot.total_requests,
        "intents": snapshot.intents,
        "stages": snapshot.stages,
        "active_sessions": len(session_store),
    }
