#!/usr/bin/env python3
"""Form Builder - designer API and public form server"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from form_builder.config import config
from form_builder.exceptions import (
    DesignerInvariantError,
    TransportFailure,
    ValidationFailure,
)
from form_builder.logging_config import get_logger, setup_logging
from form_builder.models.database import init_db
from form_builder.routers.designer import router as designer_router
from form_builder.routers.forms_api import router as forms_router
from form_builder.routers.health import health
from form_builder.routers.public_forms import router as public_router

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database tables ready")
    yield


# Create FastAPI app
app = FastAPI(
    title="Form Builder",
    description="Design forms by drag and drop, share them and collect responses",
    version="1.0.0",
    license_info={
        "name": "MIT",
    },
    lifespan=lifespan,
)


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    return JSONResponse(
        status_code=422, content={"detail": exc.message, "errors": exc.errors}
    )


@app.exception_handler(DesignerInvariantError)
async def designer_invariant_handler(request: Request, exc: DesignerInvariantError):
    logger.error(f"Rejected designer request {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(TransportFailure)
async def transport_failure_handler(request: Request, exc: TransportFailure):
    logger.error(f"Storage unavailable during {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": "Service temporarily unavailable. Please try again."},
    )


# Include routers
app.include_router(health)
app.include_router(forms_router)
app.include_router(designer_router)
app.include_router(public_router)


if __name__ == "__main__":
    port = config.get("port")
    logger.info(f"Starting Form Builder on 0.0.0.0:{port}")
    logger.info(f"Health check available at /health")

    try:
        uvicorn.run(
            app, host="0.0.0.0", port=port, log_level=config["log_level"].lower()
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
