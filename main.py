# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
courtdesk
=========
Backend for a legal-practice dashboard: live case lookups against the
Kleopatra eCourts API, a route guard for the web client, the dashboard
greeting resolved from the team roster, and the firm's team, task and
project records.

Port: 8000
"""
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from courtdesk.controllers import (
    auth_controller,
    dashboard_controller,
    ecourts_controller,
    navigation_controller,
    project_controller,
    system_controller,
    task_controller,
    team_controller,
)
from courtdesk.core.config import settings
from courtdesk.core.dependencies import (
    close_http_client,
    get_project_service,
    get_task_service,
    get_team_service,
    init_http_client,
)
from courtdesk.core.logging import get_logger
from courtdesk.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger("courtdesk")


def seed_demo_data() -> None:
    member_ids = get_team_service().seed_defaults()
    project_ids = get_project_service().seed_defaults(member_ids)
    get_task_service().seed_defaults(member_ids, project_ids)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Open the shared roster client; seed demo data when asked to."""
    init_http_client()
    if settings.ecourts_api_key() is None:
        logger.warning("No eCourts API key configured; case lookups will return 503")
    if settings.SEED_DEMO_DATA:
        seed_demo_data()
    logger.info("%s starting, remote roster: %s", settings.SERVICE_NAME, settings.TEAM_ROSTER_URL or "off")
    yield
    await close_http_client()
    logger.info("%s shutting down", settings.SERVICE_NAME)


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="courtdesk",
    description="Case lookups, route guard, dashboard, team, tasks and projects for a legal practice.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


# ── Global exception handler ─────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


app.include_router(system_controller.router)
app.include_router(ecourts_controller.router)
app.include_router(auth_controller.router)
app.include_router(navigation_controller.router)
app.include_router(dashboard_controller.router)
app.include_router(team_controller.router)
app.include_router(task_controller.router)
app.include_router(project_controller.router)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVICE_PORT)
