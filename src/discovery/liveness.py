"""
Liveness probing for a candidate local service endpoint
"""

import asyncio
import logging

import aiohttp

from http_helper import create_local_service_session
from .endpoint import DEFAULT_MODELS_PATH, build_probe_url

logger = logging.getLogger(__name__)

DEFAULT_VERIFY_TIMEOUT = 3.0

async def verify_endpoint(
    endpoint: str,
    timeout: float = DEFAULT_VERIFY_TIMEOUT,
    models_path: str = DEFAULT_MODELS_PATH
) -> bool:
    """
    True iff the endpoint answers with any HTTP response at all.

    4xx/5xx still count as alive: some builds of the service reject bare
    health-check paths while serving normally. Only network errors,
    timeouts and malformed URLs resolve to False.
    """
    if not endpoint:
        return False

    try:
        url = build_probe_url(endpoint, models_path)
    except ValueError as e:
        logger.warning(f"Endpoint verification skipped, malformed URL: {e}")
        return False

    try:
        async with create_local_service_session(timeout) as session:
            async with session.get(url, allow_redirects=False) as response:
                logger.info(f"[OK] Endpoint verified: {endpoint} (HTTP {response.status})")
                return True

    except asyncio.TimeoutError:
        logger.warning(f"Endpoint verification timeout after {timeout}s: {url}")
        return False
    except (aiohttp.ClientError, ValueError) as e:
        logger.warning(f"Endpoint verification failed for {url}: {e}")
        return False
