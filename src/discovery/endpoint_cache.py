"""
Disk-backed endpoint cache with a freshness window

One JSON record per installation: {"endpoint": str, "timestamp": epoch-millis}.
Every write overwrites it; concurrent writers are last-writer-wins.
"""

import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Union

from .models import CacheEntry

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "endpoint-cache.json"
DEFAULT_TTL_HOURS = 24

def default_cache_dir() -> Path:
    """Per-OS application data directory of the service manager"""
    home = Path.home()
    if sys.platform == 'win32':
        return Path(os.environ.get('APPDATA') or home) / 'Foundry'
    if sys.platform == 'darwin':
        return home / 'Library' / 'Application Support' / 'Foundry'
    return home / '.foundry'

def _now_ms() -> int:
    return int(time.time() * 1000)

class EndpointCache:
    """Reads and writes the cached endpoint record"""

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        file_name: str = CACHE_FILE_NAME,
        ttl_hours: float = DEFAULT_TTL_HOURS,
        clock: Optional[Callable[[], int]] = None
    ):
        self.directory = Path(directory).expanduser() if directory else default_cache_dir()
        self.path = self.directory / file_name
        self.ttl_ms = int(ttl_hours * 60 * 60 * 1000)
        self.clock = clock or _now_ms

    def read_entry(self) -> Optional[CacheEntry]:
        """Raw record regardless of age; None when missing or corrupt"""
        if not self.path.exists():
            return None

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return CacheEntry.from_dict(data)

        except (OSError, ValueError) as e:
            # Corrupt cache is a miss, never fatal
            logger.warning(f"Ignoring unreadable endpoint cache {self.path}: {e}")
            return None

    def read(self) -> Optional[str]:
        """Cached endpoint if the record exists and is younger than the TTL"""
        entry = self.read_entry()
        if entry is None:
            return None

        if not entry.is_fresh(self.clock(), self.ttl_ms):
            logger.info("Cached endpoint expired")
            return None

        logger.info(f"Found cached endpoint: {entry.endpoint}")
        return entry.endpoint

    def write(self, endpoint: str) -> bool:
        """Persist endpoint with the current timestamp; False on failure"""
        if not endpoint:
            return False

        entry = CacheEntry(endpoint=endpoint, timestamp_ms=self.clock())
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(entry.to_dict(), f, indent=2)

        except OSError as e:
            logger.warning(f"Error caching endpoint to {self.path}: {e}")
            return False

        logger.info(f"[OK] Cached endpoint: {endpoint}")
        return True
