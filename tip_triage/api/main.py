"""FastAPI application entry point for the Tip Triage engine."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tip_triage.api.dependencies.triage import set_triage_services
from tip_triage.api.middleware.logging_middleware import LoggingMiddleware
from tip_triage.api.problem_details import problem
from tip_triage.api.routes import (
    health_router,
    queue_router,
    review_router,
    stats_router,
    tips_router,
    tipsters_router,
)
from tip_triage.api.startup import (
    build_triage_services,
    configure_logging,
    start_background_tasks,
    stop_background_tasks,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    services = build_triage_services()
    set_triage_services(services)
    await start_background_tasks(services)
    try:
        yield
    finally:
        await stop_background_tasks(services)
        set_triage_services(None)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Schema violations answer 400 problem+json like domain validation."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return problem(
        400,
        "validation",
        "Invalid Request",
        first.get("msg", "request validation failed"),
        request.url.path,
        field=field or None,
        errors=len(errors),
    )


app = FastAPI(
    title="Tip Triage API",
    description="Credibility scoring and review queues for missing-person tips",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(health_router)
app.include_router(tips_router)
app.include_router(queue_router)
app.include_router(review_router)
app.include_router(tipsters_router)
app.include_router(stats_router)


def run() -> None:
    """Serve the API with uvicorn (TRIAGE_HOST / TRIAGE_PORT)."""
    uvicorn.run(
        "tip_triage.api.main:app",
        host=os.getenv("TRIAGE_HOST", "127.0.0.1"),
        port=int(os.getenv("TRIAGE_PORT", "8000")),
    )
