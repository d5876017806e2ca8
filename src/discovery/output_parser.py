"""
Status output parser

Turns whatever the service manager's status command prints into a
DiscoveryResult. The output format is not stable across tool versions, so
parsing is a chain of independent matchers tried in priority order. Each
matcher returns a result or None for "no match" and never raises.
"""

import json
import logging
import re
from typing import Callable, List, Optional, Tuple

from .models import DiscoveryResult

logger = logging.getLogger(__name__)

LOOPBACK_HOST = "127.0.0.1"

# scheme://host:port with an optional path
_FULL_URL_RE = re.compile(r"https?://[^\s/]+:(\d+)(?:/[^\s]*)?", re.IGNORECASE)
# ":55329", ": 55329"
_PORT_SUFFIX_RE = re.compile(r":\s*(\d+)")
_ANY_URL_RE = re.compile(r"https?://[^\s]+", re.IGNORECASE)
# "Service running on port 51679", "port=51679"
_PORT_PHRASE_RE = re.compile(r"\bport\s*[=:]?\s*(\d+)\b", re.IGNORECASE)

# Sentence punctuation that is never part of a URL in log output
_URL_TRAILING_JUNK = '.,;)]}\'"'

Matcher = Callable[[str], Optional[DiscoveryResult]]

def _valid_port(value: int) -> bool:
    return 0 < value < 65536

def _loopback_endpoint(port: int, host: str = LOOPBACK_HOST) -> str:
    return f"http://{host}:{port}"

def _decode_json(text: str) -> Optional[dict]:
    try:
        decoded = json.loads(text)
    except (ValueError, TypeError):
        return None
    return decoded if isinstance(decoded, dict) else None

def _json_port(port) -> Optional[int]:
    if isinstance(port, bool):
        return None
    if isinstance(port, int):
        return port if _valid_port(port) else None
    if isinstance(port, float) and port.is_integer():
        return int(port) if _valid_port(int(port)) else None
    if isinstance(port, str) and port.strip().isdigit():
        value = int(port.strip())
        return value if _valid_port(value) else None
    return None

def match_json_port(text: str) -> Optional[DiscoveryResult]:
    """{"port": 55329, "status": "running"} -> loopback endpoint"""
    data = _decode_json(text)
    if data is None:
        return None
    port = _json_port(data.get('port'))
    if port is None:
        return None
    is_running = data.get('status') == 'running' or data.get('running') is True
    return DiscoveryResult(endpoint=_loopback_endpoint(port), port=port,
                           is_running=is_running, raw=text)

def match_json_url(text: str) -> Optional[DiscoveryResult]:
    """{"url": "http://..."} -> that URL, verbatim"""
    data = _decode_json(text)
    if data is None:
        return None
    url = data.get('url')
    if not isinstance(url, str) or not url.strip():
        return None
    return DiscoveryResult(endpoint=url.strip(), port=None, is_running=True, raw=text)

def match_full_url(text: str) -> Optional[DiscoveryResult]:
    """'... running on http://127.0.0.1:55329/openai/status ...'"""
    match = _FULL_URL_RE.search(text)
    if not match:
        return None
    port = int(match.group(1))
    url = match.group(0).rstrip(_URL_TRAILING_JUNK)
    return DiscoveryResult(endpoint=url, port=port if _valid_port(port) else None,
                           is_running=True, raw=text)

def match_port_suffix(text: str) -> Optional[DiscoveryResult]:
    """'listening :55329' -> loopback endpoint"""
    for match in _PORT_SUFFIX_RE.finditer(text):
        port = int(match.group(1))
        if _valid_port(port):
            return DiscoveryResult(endpoint=_loopback_endpoint(port), port=port,
                                   is_running=True, raw=text)
    return None

def match_any_url(text: str) -> Optional[DiscoveryResult]:
    """Any URL-looking token, even without a port"""
    match = _ANY_URL_RE.search(text)
    if not match:
        return None
    url = match.group(0).rstrip(_URL_TRAILING_JUNK)
    return DiscoveryResult(endpoint=url, port=None, is_running=True, raw=text)

def match_bare_port(text: str) -> Optional[DiscoveryResult]:
    """A bare port number, alone or as 'port 51679'"""
    stripped = text.strip()
    if stripped.isdigit():
        candidates = [stripped]
    else:
        candidates = _PORT_PHRASE_RE.findall(text)

    for candidate in candidates:
        port = int(candidate)
        if _valid_port(port):
            return DiscoveryResult(endpoint=_loopback_endpoint(port), port=port,
                                   is_running=True, raw=text)
    return None

# First match wins
MATCHERS: List[Tuple[str, Matcher]] = [
    ("json_port", match_json_port),
    ("json_url", match_json_url),
    ("full_url", match_full_url),
    ("port_suffix", match_port_suffix),
    ("any_url", match_any_url),
    ("bare_port", match_bare_port),
]

def parse_status_output(text: Optional[str]) -> DiscoveryResult:
    """Parse status command output; unparseable output means not running"""
    if not text or not text.strip():
        return DiscoveryResult(raw=text or "")

    for name, matcher in MATCHERS:
        try:
            result = matcher(text)
        except Exception as e:
            # A matcher bug must not take discovery down with it
            logger.warning(f"Status matcher {name} failed: {e}")
            continue
        if result is not None:
            logger.debug(f"Status output matched by {name}: {result.endpoint}")
            return result

    logger.warning("[WARN] Could not parse service status output")
    return DiscoveryResult(raw=text)
