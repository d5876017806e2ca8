"""
Local Service Manager - wires discovery components and owns session state
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from discovery.endpoint import normalize_endpoint
from discovery.endpoint_cache import EndpointCache
from discovery.manager import ServiceDiscovery
from discovery.model_lister import list_models
from discovery.models import (
    ConnectionTestResult, DiscoveryResult, InitStatus, ModelRecord, StartOutcome
)
from discovery.service_cli import ServiceCLI
from discovery.status_poller import StatusPoller

logger = logging.getLogger(__name__)

@dataclass
class ServiceSession:
    """Endpoint state shared by the UI layer, passed explicitly instead of held in globals"""
    auto_discovered: Optional[str] = None
    custom_endpoint: Optional[str] = None
    last_result: Optional[DiscoveryResult] = None
    last_models: List[ModelRecord] = field(default_factory=list)

    @property
    def current_endpoint(self) -> Optional[str]:
        return self.custom_endpoint or self.auto_discovered

    def to_config_view(self) -> Dict[str, Optional[str]]:
        return {
            'autoDiscovered': self.auto_discovered,
            'custom': self.custom_endpoint,
            'currentEndpoint': self.current_endpoint
        }

class LocalServiceManager:
    """Discovery, verification and model listing for one calling application"""

    def __init__(self, config: Dict, session: Optional[ServiceSession] = None,
                 discovery: Optional[ServiceDiscovery] = None):
        self.config = config
        self.session = session or ServiceSession()

        network = config['network']
        self.models_timeout = network['models_timeout_seconds']
        self.models_path = network['models_path']

        if discovery is None:
            discovery = self._build_discovery(config)
        self.discovery = discovery

    @staticmethod
    def _build_discovery(config: Dict) -> ServiceDiscovery:
        service = config['service']
        poll = config['poll']
        network = config['network']
        cache_config = config['cache']

        cli = ServiceCLI(
            start_command=service['start_command'],
            status_command=service['status_command'],
            status_timeout=service['status_timeout_seconds']
        )
        cache = EndpointCache(
            directory=cache_config.get('directory'),
            file_name=cache_config['file_name'],
            ttl_hours=cache_config['ttl_hours']
        )
        poller = StatusPoller(
            cli,
            max_attempts=poll['max_attempts'],
            interval_seconds=poll['interval_seconds'],
            initial_delay_seconds=poll['initial_delay_seconds'],
            progress_log_every=poll['progress_log_every']
        )
        return ServiceDiscovery(
            cli,
            cache,
            poller=poller,
            verify_timeout=network['verify_timeout_seconds'],
            models_path=network['models_path'],
            settle_delay_seconds=poll['settle_delay_seconds']
        )

    # ================== RAW PRIMITIVES ==================

    async def start_service(self) -> StartOutcome:
        return await self.discovery.poller.start_service()

    async def query_status(self) -> DiscoveryResult:
        return await self.discovery.cli.query_status()

    async def discover(self) -> DiscoveryResult:
        """Run discovery and remember a verified endpoint on the session"""
        result = await self.discovery.discover()
        self.session.last_result = result
        if result.is_running and result.endpoint:
            self.session.auto_discovered = result.endpoint
        return result

    async def verify(self, endpoint: str, timeout: Optional[float] = None) -> bool:
        return await self.discovery.verify(endpoint, timeout)

    def normalize(self, endpoint: str) -> Optional[str]:
        return normalize_endpoint(endpoint)

    async def list_models(self, endpoint: Optional[str]) -> List[ModelRecord]:
        return await list_models(endpoint, timeout=self.models_timeout, models_path=self.models_path)

    # ================== COMPOSITE FLOWS ==================

    async def initialize(self) -> InitStatus:
        """
        Complete startup flow: ensure the service runs, discover its
        endpoint, then list its models. Never raises.
        """
        logger.info("========== Local Service Initialization Started ==========")
        try:
            start_result = await self.start_service()
            logger.info(start_result.message)
            if start_result.was_already_running:
                logger.info("[OK] Service was already running")
            elif start_result.started:
                logger.info("[OK] Service successfully started")
            else:
                logger.warning("[WARN] Service start status unclear, attempting to discover...")

            result = await self.discover()
            if not result.endpoint:
                logger.error("[ERR] Failed to discover local service endpoint")
                logger.error("Troubleshooting:")
                logger.error(f"  - Ensure the service manager is installed ({self.config['service']['status_command'][0]})")
                logger.error(f"  - Try running manually: {' '.join(self.config['service']['start_command'])}")
                logger.error("  - Check the service logs")
                return InitStatus(status="failed", message="Failed to discover local inference service")

            logger.info(f"[OK] Service endpoint discovered: {result.endpoint}")
            if result.port:
                logger.info(f"[OK] Service port: {result.port}")
            if not result.is_running:
                logger.warning(f"[WARN] Endpoint did not pass verification: {result.failure_reason}")
                # Still the best endpoint known; later model requests retry it
                self.session.auto_discovered = result.endpoint

            models = await self.list_models(result.endpoint)
            self.session.last_models = models
            if not models:
                logger.warning("[WARN] No models currently available")
            else:
                logger.info(f"[OK] Found {len(models)} available model(s):")
                for idx, model in enumerate(models, start=1):
                    logger.info(f"  [{idx}] {model.id}")

            logger.info("========== Initialization Complete ==========")
            return InitStatus(
                status="ready",
                message="Local inference service ready",
                endpoint=result.endpoint,
                models=models
            )

        except Exception as e:
            logger.exception(f"Error during initialization: {e}")
            return InitStatus(status="error", message=f"Initialization error: {e}")

    async def set_custom_endpoint(self, endpoint: Optional[str]) -> Dict[str, Any]:
        """Pin a user-supplied endpoint after verifying it; empty clears the pin"""
        if not endpoint:
            self.session.custom_endpoint = None
            return {'success': True, 'message': 'Custom endpoint cleared'}

        normalized = self.normalize(endpoint)
        if not await self.verify(normalized):
            return {'success': False, 'error': 'Endpoint is not responding'}

        self.session.custom_endpoint = normalized
        self.discovery.cache.write(normalized)
        logger.info(f"[OK] Custom endpoint set: {normalized}")
        return {'success': True, 'message': f'Connected to: {normalized}'}

    async def get_local_models(self) -> Dict[str, Any]:
        """Models of the session's current endpoint, in a UI-friendly envelope"""
        endpoint = self.session.current_endpoint
        if not endpoint:
            logger.warning("No endpoint available")
            return {'success': False, 'error': 'Local service not available', 'models': []}

        models = await self.list_models(endpoint)
        self.session.last_models = models
        if not models:
            logger.warning("No models available")
            return {
                'success': True,
                'models': [],
                'warning': 'No models available. Please check the local inference service.'
            }

        logger.info(f"[OK] Found {len(models)} model(s)")
        return {'success': True, 'models': [m.to_dict() for m in models]}

    async def test_connection(self, endpoint: Optional[str] = None) -> ConnectionTestResult:
        test_endpoint = endpoint or self.session.current_endpoint
        if not test_endpoint:
            return ConnectionTestResult(success=False, error='No endpoint configured')

        if not await self.verify(test_endpoint):
            return ConnectionTestResult(success=False, error='Connection failed', endpoint=test_endpoint)

        models = await self.list_models(test_endpoint)
        return ConnectionTestResult(
            success=True,
            message=f'Connected! {len(models)} model(s) available',
            endpoint=test_endpoint,
            model_count=len(models)
        )

    async def close(self):
        await self.discovery.cli.close()
