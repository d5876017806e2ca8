"""
Local service discovery and model API routes
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Request/response models
class EndpointRequest(BaseModel):
    endpoint: Optional[str] = None

class ServiceConfigResponse(BaseModel):
    autoDiscovered: Optional[str]
    custom: Optional[str]
    currentEndpoint: Optional[str]

class DiscoveryResponse(BaseModel):
    endpoint: Optional[str]
    port: Optional[int]
    isRunning: bool
    failureReason: Optional[str] = None
    states: List[str] = []

class StartOutcomeResponse(BaseModel):
    started: bool
    wasAlreadyRunning: bool
    message: str

class EndpointUpdateResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None

class ConnectionTestResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    endpoint: Optional[str] = None
    modelCount: int = 0

class ModelsResponse(BaseModel):
    success: bool
    models: List[Dict[str, Any]]
    error: Optional[str] = None
    warning: Optional[str] = None

def create_service_routes(manager):
    """Create local service routes backed by a LocalServiceManager"""
    router = APIRouter(prefix="/api", tags=["service"])

    @router.get("/service/config", response_model=ServiceConfigResponse)
    async def get_service_config():
        """Auto-discovered, custom and effective endpoints"""
        return ServiceConfigResponse(**manager.session.to_config_view())

    @router.get("/service/status", response_model=DiscoveryResponse)
    async def get_service_status():
        """One raw status query against the service manager"""
        try:
            result = await manager.query_status()
            return DiscoveryResponse(**result.to_dict())
        except Exception as e:
            logger.error(f"Error querying service status: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/service/start", response_model=StartOutcomeResponse)
    async def start_service():
        """Launch the service if needed and wait for it to report running"""
        try:
            outcome = await manager.start_service()
            return StartOutcomeResponse(**outcome.to_dict())
        except Exception as e:
            logger.error(f"Error starting service: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/service/discover", response_model=DiscoveryResponse)
    async def discover_service():
        """Run full discovery; failures are reported in the body, not as errors"""
        try:
            result = await manager.discover()
            return DiscoveryResponse(**result.to_dict())
        except Exception as e:
            logger.error(f"Error discovering service: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/service/endpoint", response_model=EndpointUpdateResponse)
    async def set_service_endpoint(request: EndpointRequest):
        """Set or clear (null endpoint) a custom endpoint"""
        try:
            return EndpointUpdateResponse(**await manager.set_custom_endpoint(request.endpoint))
        except Exception as e:
            logger.error(f"Error setting custom endpoint: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/service/test", response_model=ConnectionTestResponse)
    async def test_service_connection(request: Optional[EndpointRequest] = None):
        """Verify an endpoint (or the current one) and count its models"""
        try:
            result = await manager.test_connection(request.endpoint if request else None)
            return ConnectionTestResponse(**result.to_dict())
        except Exception as e:
            logger.error(f"Error testing connection: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/models", response_model=ModelsResponse)
    async def get_local_models():
        """Models exposed by the current endpoint"""
        try:
            return ModelsResponse(**await manager.get_local_models())
        except Exception as e:
            logger.error(f"Error getting models: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return router
