from __future__ import annotations

import ipaddress
from urllib.parse import urlsplit

ACROSS_API_BASE_URL = "https://app.across.to/api"
LIFI_API_BASE_URL = "https://li.quest/v1"

BRIDGE_SETTLEMENT_URLS: dict[str, str] = {
    "across": f"{ACROSS_API_BASE_URL}/deposit/status",
    "lifi": f"{LIFI_API_BASE_URL}/status",
}


def bridge_settlement_url(provider: str) -> str | None:
    return BRIDGE_SETTLEMENT_URLS.get(str(provider or "").strip().lower())


def _is_loopback_host(host: str) -> bool:
    host = host.strip().lower()
    if host == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def _normalized_path(path: str) -> str:
    path = path.strip()
    if path == "/":
        return ""
    return path.rstrip("/")


def is_allowed_bridge_settlement_url(provider: str, endpoint: str | None) -> bool:
    """Check that a settlement status endpoint points at the provider's API.

    An empty endpoint is accepted (no override). Loopback hosts are accepted
    over http(s) so tests can point at a local server. Anything else must be
    https on the canonical host, port and path.
    """
    endpoint = str(endpoint or "").strip()
    if not endpoint:
        return True
    try:
        parsed = urlsplit(endpoint)
        port = parsed.port
    except ValueError:
        return False
    host = parsed.hostname or ""
    if not host:
        return False

    scheme = parsed.scheme.lower()
    if _is_loopback_host(host):
        return scheme in ("", "http", "https")
    if scheme != "https":
        return False

    canonical = bridge_settlement_url(provider)
    if canonical is None:
        return False
    want = urlsplit(canonical)
    if host.lower() != (want.hostname or "").lower():
        return False
    if (port or 443) != (want.port or 443):
        return False
    return _normalized_path(parsed.path) == _normalized_path(want.path)
