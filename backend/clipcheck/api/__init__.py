"""
API package
"""

from .analysis import router as analysis_router
from .app import create_app

__all__ = ["analysis_router", "create_app"]
