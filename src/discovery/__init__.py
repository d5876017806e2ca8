"""
Discovery module for the locally running inference service
"""

from .manager import ServiceDiscovery
from .models import DiscoveryResult, DiscoveryState, StartOutcome, ModelRecord, CacheEntry
from .endpoint import normalize_endpoint
from .endpoint_cache import EndpointCache
from .liveness import verify_endpoint
from .model_lister import list_models
from .output_parser import parse_status_output
from .service_cli import ServiceCLI
from .status_poller import StatusPoller

__all__ = [
    'ServiceDiscovery', 'DiscoveryResult', 'DiscoveryState', 'StartOutcome', 'ModelRecord',
    'CacheEntry', 'normalize_endpoint', 'EndpointCache', 'verify_endpoint', 'list_models',
    'parse_status_output', 'ServiceCLI', 'StatusPoller'
]
