"""
Service layer: session state and composite flows over discovery
"""

from .local_service import LocalServiceManager, ServiceSession

__all__ = ['LocalServiceManager', 'ServiceSession']
