"""
Discovery orchestrator: cache -> launch -> query -> verify -> persist
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from .endpoint import DEFAULT_MODELS_PATH, endpoint_port, normalize_endpoint
from .endpoint_cache import EndpointCache
from .liveness import DEFAULT_VERIFY_TIMEOUT, verify_endpoint
from .models import DiscoveryResult, DiscoveryState
from .service_cli import ServiceCLI
from .status_poller import Sleep, StatusPoller

logger = logging.getLogger(__name__)

Verifier = Callable[..., Awaitable[bool]]

FAILED_NO_ENDPOINT = "no endpoint"
FAILED_VERIFICATION = "verification failed"

class ServiceDiscovery:
    """
    Locates the local inference service and returns a verified endpoint.

    Each discover() call runs its own linear sequence with only local
    state, so concurrent calls are independent. The cache file is the only
    shared resource.
    """

    def __init__(
        self,
        cli: ServiceCLI,
        cache: EndpointCache,
        poller: Optional[StatusPoller] = None,
        verify_timeout: float = DEFAULT_VERIFY_TIMEOUT,
        models_path: str = DEFAULT_MODELS_PATH,
        settle_delay_seconds: float = 1.0,
        verifier: Optional[Verifier] = None,
        sleep: Optional[Sleep] = None
    ):
        self.cli = cli
        self.cache = cache
        self.sleep = sleep or asyncio.sleep
        self.poller = poller or StatusPoller(cli, sleep=self.sleep)
        self.verify_timeout = verify_timeout
        self.models_path = models_path
        self.settle_delay_seconds = settle_delay_seconds
        self.verifier = verifier or verify_endpoint

    async def verify(self, endpoint: str, timeout: Optional[float] = None) -> bool:
        return await self.verifier(
            endpoint,
            timeout=timeout if timeout is not None else self.verify_timeout,
            models_path=self.models_path
        )

    async def discover(self) -> DiscoveryResult:
        """Run the full discovery sequence; failures come back as values"""
        logger.info("Starting local service discovery...")
        start_time = time.time()
        states: List[DiscoveryState] = []

        # Step 1: cached endpoint, probed directly
        states.append(DiscoveryState.CHECK_CACHE)
        logger.info("[1/5] Checking cache...")
        cached = self.cache.read()
        if cached:
            if await self.verify(cached):
                states.append(DiscoveryState.READY)
                logger.info(f"[OK] Using cached endpoint: {cached}")
                return DiscoveryResult(endpoint=cached, port=endpoint_port(cached),
                                       is_running=True, states=tuple(states))
            logger.info("Cached endpoint is no longer valid")

        # Step 2: launch and poll; a soft timeout is not terminal
        states.append(DiscoveryState.LAUNCH)
        logger.info("[2/5] Starting service...")
        outcome = await self.poller.start_service()
        if not outcome.started and not outcome.was_already_running:
            logger.warning(f"[WARN] Service start status unclear ({outcome.message}), attempting to discover...")

        # Step 3: settle, then ask for the actual address
        await self.sleep(self.settle_delay_seconds)
        states.append(DiscoveryState.QUERY)
        logger.info("[3/5] Querying service status from CLI...")
        status = await self.cli.query_status()
        if not status.endpoint:
            states.append(DiscoveryState.FAILED)
            logger.error("[ERR] Failed to get endpoint from CLI")
            return DiscoveryResult(endpoint=None, port=status.port, is_running=False,
                                   raw=status.raw, failure_reason=FAILED_NO_ENDPOINT,
                                   states=tuple(states))

        # Step 4: the endpoint goes back to the caller even when unreachable
        states.append(DiscoveryState.VERIFY)
        logger.info("[4/5] Verifying endpoint...")
        if not await self.verify(status.endpoint):
            states.append(DiscoveryState.FAILED)
            logger.error(f"[ERR] Endpoint verification failed: {status.endpoint}")
            return DiscoveryResult(endpoint=status.endpoint, port=status.port, is_running=False,
                                   raw=status.raw, failure_reason=FAILED_VERIFICATION,
                                   states=tuple(states))

        # Step 5: persist the origin so the fast path probes the models listing
        states.append(DiscoveryState.PERSIST)
        logger.info("[5/5] Caching endpoint...")
        self.cache.write(normalize_endpoint(status.endpoint))

        states.append(DiscoveryState.READY)
        logger.info(f"[OK] Discovery complete: {status.endpoint} ({time.time() - start_time:.1f}s)")
        return DiscoveryResult(endpoint=status.endpoint, port=status.port, is_running=True,
                               raw=status.raw, states=tuple(states))
