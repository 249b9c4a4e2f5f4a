"""
Governance Proposal Agent application.

    uvicorn governance_agent.main:app --reload --port 8000
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from governance_agent.core.config import get_settings
from governance_agent.api.proposals import router as proposal_router, health_router

SERVICE_NAME = "Governance Proposal Agent"
VERSION = "1.0.0"

_QUIET_LOGGERS = ("httpx", "httpcore", "markdown")


def setup_logging() -> logging.Logger:
    level = logging.DEBUG if get_settings().DEBUG else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    settings = get_settings()
    logger.info(f"{SERVICE_NAME} {VERSION} starting, Langflow at {settings.LANGFLOW_BASE_URL}")
    if not settings.LANGFLOW_API_KEY:
        logger.warning("LANGFLOW_API_KEY is not set; generation calls will fail")

    yield

    logger.info(f"{SERVICE_NAME} stopped")


async def root():
    """List the service endpoints."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running",
        "endpoints": {
            "proposals": {
                "generate": "POST /proposals",
                "parse": "POST /proposals/parse",
                "get": "GET /proposals/{id}",
                "submit": "POST /proposals/{id}/submit",
                "export": "GET /proposals/{id}/export"
            },
            "health": "GET /health",
            "docs": "GET /docs"
        }
    }


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if get_settings().DEBUG else "An error occurred"
        }
    )


def create_app() -> FastAPI:
    """Build the application with its routers, CORS and the 500 handler."""
    debug = get_settings().DEBUG

    app = FastAPI(
        title=SERVICE_NAME,
        description=(
            "Turns governance ideas into structured proposals whose sections "
            "can be edited, locked and regenerated before submission."
        ),
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if debug else None,
        redoc_url="/redoc" if debug else None,
    )

    # The proposal form is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_api_route("/", root, methods=["GET"], tags=["root"])
    app.include_router(proposal_router)
    app.include_router(health_router)
    app.add_exception_handler(Exception, unhandled_error)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    debug = get_settings().DEBUG
    uvicorn.run(
        "governance_agent.main:app",
        host="0.0.0.0",
        port=8000,
        reload=debug,
        log_level="debug" if debug else "info"
    )
