"""
FastAPI application factory
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Config, get_config
from ..service import AnalysisService
from .analysis import router as analysis_router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Config] = None,
    service: Optional[AnalysisService] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Configuration (default: global config)
        service: Prebuilt analysis service (default: wired from config)

    Returns:
        FastAPI app
    """
    if config is None:
        config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        logger.info("Starting ClipCheck backend...")
        owns_service = app.state.service is None
        if owns_service:
            app.state.service = AnalysisService.from_config(config)
        yield
        logger.info("Shutting down ClipCheck backend...")
        if owns_service:
            await app.state.service.pipeline.client.close()

    app = FastAPI(
        title="ClipCheck API",
        description="Credibility analysis of copied text with a local language model",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service

    # CORS configuration for the desktop shell's renderer
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "ClipCheck API",
            "version": __version__,
            "status": "running"
        }

    app.include_router(analysis_router)
    return app
