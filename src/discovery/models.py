"""
Discovery data structures and models
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .endpoint import normalize_endpoint

class DiscoveryState(Enum):
    """States visited by one discovery run"""
    CHECK_CACHE = "check_cache"
    LAUNCH = "launch"
    QUERY = "query"
    VERIFY = "verify"
    PERSIST = "persist"
    READY = "ready"
    FAILED = "failed"

@dataclass(frozen=True)
class DiscoveryResult:
    """Where the local service lives and whether it answered"""
    endpoint: Optional[str] = None
    port: Optional[int] = None
    is_running: bool = False
    raw: str = ""
    failure_reason: Optional[str] = None
    states: Tuple[DiscoveryState, ...] = ()

    @property
    def origin(self) -> Optional[str]:
        return normalize_endpoint(self.endpoint) if self.endpoint else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'endpoint': self.endpoint,
            'port': self.port,
            'isRunning': self.is_running,
            'failureReason': self.failure_reason,
            'states': [state.value for state in self.states]
        }

@dataclass(frozen=True)
class StartOutcome:
    """Result of one launch-and-poll cycle"""
    started: bool
    was_already_running: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'started': self.started,
            'wasAlreadyRunning': self.was_already_running,
            'message': self.message
        }

@dataclass
class CacheEntry:
    """Persisted endpoint record; timestamp is epoch milliseconds"""
    endpoint: str
    timestamp_ms: int

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        return now_ms - self.timestamp_ms < ttl_ms

    def to_dict(self) -> Dict[str, Any]:
        return {'endpoint': self.endpoint, 'timestamp': self.timestamp_ms}

    @classmethod
    def from_dict(cls, data: Any) -> 'CacheEntry':
        """Raises ValueError when the record does not have the expected shape"""
        if not isinstance(data, dict):
            raise ValueError("cache record is not an object")
        endpoint = data.get('endpoint')
        timestamp = data.get('timestamp')
        if not isinstance(endpoint, str) or not endpoint:
            raise ValueError("cache record has no endpoint")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ValueError("cache record has no numeric timestamp")
        return cls(endpoint=endpoint, timestamp_ms=int(timestamp))

@dataclass
class ModelRecord:
    """A model exposed by a live endpoint, decorated for display"""
    id: str
    alias: str
    display_name: str
    status: str = "running"
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> 'ModelRecord':
        model_id = str(raw['id'])
        extra = {k: v for k, v in raw.items() if k != 'id'}
        return cls(id=model_id, alias=model_id, display_name=model_id, extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        # Raw service fields first so the decorations always win
        return {
            **self.extra,
            'id': self.id,
            'alias': self.alias,
            'displayName': self.display_name,
            'status': self.status
        }

@dataclass
class InitStatus:
    """Outcome of the full start -> discover -> list models flow"""
    status: str  # "ready", "failed", "error"
    message: str
    endpoint: Optional[str] = None
    models: List[ModelRecord] = field(default_factory=list)

    @property
    def model_count(self) -> int:
        return len(self.models)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status,
            'message': self.message,
            'endpoint': self.endpoint,
            'models': [m.to_dict() for m in self.models],
            'modelCount': self.model_count
        }

@dataclass
class ConnectionTestResult:
    """Result of an explicit connection test against one endpoint"""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    endpoint: Optional[str] = None
    model_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'message': self.message,
            'error': self.error,
            'endpoint': self.endpoint,
            'modelCount': self.model_count
        }
