"""
ClipCheck Backend
FastAPI application serving credibility analysis to the desktop shell
"""

import logging

import uvicorn

from clipcheck.api import create_app
from clipcheck.config import get_config

config = get_config()

# Configure logging
logging.basicConfig(level=config.logging.level, format=config.logging.format)
logger = logging.getLogger(__name__)

app = create_app(config)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.api.host,
        port=config.api.port,
        log_level=config.logging.level.lower()
    )
