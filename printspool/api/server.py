"""
FastAPI application factory.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from printspool.api.dependencies import init_dependencies
from printspool.api.routes import router
from printspool.errors import SpoolerError
from printspool.facade import PrintSpooler

logger = logging.getLogger(__name__)


def create_app(
    spooler: PrintSpooler,
    cors_origins: list[str] = None,
    debug: bool = False,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        spooler: Configured spooler facade
        cors_origins: List of allowed CORS origins (None = allow all)
        debug: Enable debug mode

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="printspool",
        description="HTTP binding for the OS print spooler",
        version="1.0.0",
        debug=debug
    )

    # CORS configuration
    if cors_origins is None:
        # Development: allow all origins
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    init_dependencies(spooler)

    app.include_router(router)

    @app.on_event("startup")
    async def startup():
        logger.info(f"printspool starting with {spooler.backend.name} backend...")
        try:
            printers = await spooler.get_printers()
        except SpoolerError as e:
            logger.warning(f"Could not list printers at startup: {e}")
            return
        for record in printers:
            marker = " (default)" if record.is_default else ""
            logger.info(f"  {record.name}{marker}: {record.status or 'unknown'}")

    @app.on_event("shutdown")
    async def shutdown():
        logger.info("printspool shutting down...")
        spooler.close(wait=False)

    return app
