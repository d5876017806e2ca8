"""
Model listing against a verified endpoint
"""

import asyncio
import logging
from typing import List, Optional

import aiohttp

from http_helper import create_local_service_session
from .endpoint import DEFAULT_MODELS_PATH, normalize_endpoint
from .models import ModelRecord

logger = logging.getLogger(__name__)

DEFAULT_MODELS_TIMEOUT = 5.0

async def list_models(
    endpoint: Optional[str],
    timeout: float = DEFAULT_MODELS_TIMEOUT,
    models_path: str = DEFAULT_MODELS_PATH
) -> List[ModelRecord]:
    """
    GET <origin>/v1/models and decorate each entry for display.

    Order is the service's order. Any network or parse failure yields an
    empty list; nothing is raised to the caller.
    """
    origin = normalize_endpoint(endpoint)
    if not origin:
        return []

    url = f"{origin}{models_path}"
    try:
        async with create_local_service_session(timeout, headers={'Accept': 'application/json'}) as session:
            async with session.get(url) as response:
                payload = await response.json(content_type=None)

    except asyncio.TimeoutError:
        logger.warning(f"Get models request timeout: {url}")
        return []
    except (aiohttp.ClientError, ValueError) as e:
        logger.warning(f"Error getting models from {url}: {e}")
        return []

    raw_models = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(raw_models, list):
        logger.warning(f"Unexpected models payload from {url}")
        return []

    models = []
    for raw in raw_models:
        if not isinstance(raw, dict) or raw.get('id') in (None, ''):
            logger.debug(f"Skipping model entry without id: {raw!r}")
            continue
        models.append(ModelRecord.from_raw(raw))

    logger.info(f"[OK] Retrieved {len(models)} models from service")
    return models
