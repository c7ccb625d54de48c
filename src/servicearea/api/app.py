"""
FastAPI application wiring.

This file creates the `FastAPI` instance and loads the service configuration at startup,
so a bad center or radius stops the server before it accepts requests.
Business logic lives in `servicearea.api.routes` and `servicearea.service`.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from servicearea.config.settings import get_settings
from servicearea.core.logging import configure_logging

from .routes import get_evaluator, router

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    evaluator = get_evaluator()
    # Build the display polygon once so a bad vertex step fails before serving.
    evaluator.boundary_polygon(get_settings().service.polygon_step_degrees)
    config = evaluator.config
    logger.info(
        "Service area: center=(%s, %s) radius=%s mi",
        config.center.latitude,
        config.center.longitude,
        config.radius_miles,
    )
    yield


app = FastAPI(title="ServiceArea API", version="0.1.0", lifespan=lifespan)

# CORS (dev-friendly): allow the local map frontend to call this API.
# Configure via env:
# - SERVICEAREA_CORS_ORIGINS="http://localhost:5173,http://127.0.0.1:5173"
# - SERVICEAREA_CORS_ALLOW_LOCAL=0 to disable the default localhost allowance
cors_origins = [s.strip() for s in os.getenv("SERVICEAREA_CORS_ORIGINS", "").split(",") if s.strip()]
cors_allow_local = os.getenv("SERVICEAREA_CORS_ALLOW_LOCAL", "1").strip().lower() in {"1", "true", "yes", "y"}
cors_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if cors_allow_local and not cors_origins else ""
if cors_origins or cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=cors_origin_regex or None,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

app.include_router(router)
