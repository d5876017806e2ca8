"""
Endpoint URL helpers: origin normalization and probe URL construction
"""

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

DEFAULT_MODELS_PATH = "/v1/models"

def _format_host(host: str) -> str:
    # IPv6 literals need their brackets back
    return f"[{host}]" if ':' in host else host

def normalize_endpoint(endpoint: Optional[str], force_http: bool = True) -> Optional[str]:
    """
    Reduce an endpoint to its origin: scheme://host[:port], no path.

    The local service only speaks plaintext HTTP, so https is rewritten to
    http unless force_http is False. Inputs that do not parse as a URL go
    through a purely textual transform instead. Idempotent.
    """
    if not endpoint:
        return None

    text = endpoint.strip()
    try:
        return _origin(text, force_http)
    except ValueError as e:
        logger.debug(f"Falling back to textual endpoint normalization: {e}")
        return _normalize_text(text, force_http)

def _origin(text: str, force_http: bool) -> str:
    parts = urlsplit(text)
    if '://' not in text or not parts.scheme or not parts.hostname:
        raise ValueError(f"not an absolute URL: {text!r}")
    port = parts.port  # raises ValueError on a bad or out-of-range port
    scheme = 'http' if force_http else parts.scheme.lower()
    origin = f"{scheme}://{_format_host(parts.hostname)}"
    return f"{origin}:{port}" if port is not None else origin

def _normalize_text(text: str, force_http: bool) -> str:
    """Textual fallback for strings urlsplit cannot make sense of"""
    scheme = 'http'
    rest = text
    if '://' in text:
        given_scheme, rest = text.split('://', 1)
        if not force_http and given_scheme:
            scheme = given_scheme.lower()

    # Host ends at the first path, query or fragment delimiter
    host = re.split(r'[/?#]', rest, maxsplit=1)[0]
    host = host.rsplit('@', 1)[-1]
    candidate = f"{scheme}://{host}"

    # A prefixed bare host:port usually parses now; return it in parsed form
    try:
        return _origin(candidate, force_http)
    except ValueError:
        return candidate

def endpoint_port(endpoint: Optional[str]) -> Optional[int]:
    """Explicit port of an endpoint URL, or None"""
    if not endpoint:
        return None
    try:
        return urlsplit(endpoint.strip()).port
    except ValueError:
        return None

def build_probe_url(endpoint: str, default_path: str = DEFAULT_MODELS_PATH) -> str:
    """
    URL to probe for liveness: the endpoint's own path if it carries a
    non-root one, otherwise the models-listing path. Always plain HTTP;
    port defaults to 80. Raises ValueError for malformed endpoints.
    """
    parts = urlsplit(endpoint.strip())
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"malformed endpoint: {endpoint!r}")

    port = 80 if parts.port is None else parts.port
    path = parts.path if parts.path and parts.path != '/' else default_path
    return f"http://{_format_host(parts.hostname)}:{port}{path}"
