# HTTP Helper for Local Inference Service Connections
# Plain-HTTP session configuration for loopback probes and model listing

import aiohttp
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

def create_local_service_session(
    timeout_seconds: float = 3,
    headers: Optional[Dict[str, str]] = None
) -> aiohttp.ClientSession:
    """
    Create properly configured aiohttp session for local service connections (always HTTP)
    One short-lived session per call; connections are closed with the session
    """
    connector = aiohttp.TCPConnector(
        limit_per_host=2,           # Probes and listings never fan out
        ssl=False,                  # Local service speaks plaintext HTTP
        force_close=True,           # Force connection cleanup
        enable_cleanup_closed=True  # Additional cleanup
    )

    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds),
        headers=headers
    )
