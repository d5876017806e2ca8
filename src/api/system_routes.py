"""
System health API routes
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

class HealthResponse(BaseModel):
    status: str
    currentEndpoint: Optional[str]
    timestamp: datetime

def create_system_routes(manager):
    """Create system monitoring routes"""
    router = APIRouter(prefix="/api", tags=["system"])

    @router.get("/system/health", response_model=HealthResponse)
    async def system_health():
        """Health of this API; 'degraded' until an endpoint is known"""
        endpoint = manager.session.current_endpoint
        return HealthResponse(
            status="healthy" if endpoint else "degraded",
            currentEndpoint=endpoint,
            timestamp=datetime.now(timezone.utc)
        )

    return router
