"""
ASGI entry point for uvicorn
This module exposes the FastAPI app for use with uvicorn command line
"""

import asyncio
import logging
import os

from config_loader import DEFAULT_CONFIG_PATH, load_config, setup_logging
from api.main_api import LocalServiceAPI
from services.local_service import LocalServiceManager

# Load configuration
config = load_config(os.environ.get('CONFIG_FILE', DEFAULT_CONFIG_PATH))
setup_logging(config)

logger = logging.getLogger(__name__)

logger.info("Initializing application components...")

manager = LocalServiceManager(config)
api = LocalServiceAPI(manager, config)

# Expose the FastAPI app for uvicorn
app = api.app

_init_task = None

@app.on_event("startup")
async def startup_event():
    """Run initialization in the background; the API answers while it polls"""
    global _init_task
    logger.info("Starting up application...")
    _init_task = asyncio.create_task(manager.initialize())

@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on shutdown"""
    logger.info("Shutting down application...")
    if _init_task and not _init_task.done():
        _init_task.cancel()
    await manager.close()
    logger.info("Application shut down complete")

logger.info("ASGI app ready for uvicorn")
