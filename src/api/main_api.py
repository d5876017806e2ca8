"""
Main FastAPI application setup
Local HTTP API exposing discovery, endpoint selection and model listing to a UI process
"""

from fastapi import FastAPI
import logging

from .service_routes import create_service_routes
from .system_routes import create_system_routes

logger = logging.getLogger(__name__)

class LocalServiceAPI:
    """Local HTTP API wrapping a LocalServiceManager"""

    def __init__(self, manager, config=None):
        self.manager = manager
        self.config = config or {}
        self.app = FastAPI(
            title="Local Inference Service Discovery",
            description="Discovers, verifies and caches the local inference service endpoint",
            version="1.0.0"
        )
        self._setup_routes()

    def _setup_routes(self):
        """Setup FastAPI routes using modular approach"""
        self.app.include_router(create_system_routes(self.manager))
        self.app.include_router(create_service_routes(self.manager))
