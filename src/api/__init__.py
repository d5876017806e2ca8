"""
API module for local service discovery and model listing
"""

from .main_api import LocalServiceAPI
from .service_routes import create_service_routes
from .system_routes import create_system_routes

__all__ = ['LocalServiceAPI', 'create_service_routes', 'create_system_routes']
