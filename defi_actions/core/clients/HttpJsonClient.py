from __future__ import annotations

import time
from typing import Any

import httpx
from loguru import logger

from defi_actions.core.config import get_http_timeout
from defi_actions.core.constants.base import USER_AGENT
from defi_actions.core.errors import DefiActionError, ErrorCode


class HttpJsonClient:
    """Thin JSON-over-HTTP client shared by REST bridge providers.

    Status and transport failures are mapped onto the error taxonomy; nothing
    here retries.
    """

    def __init__(
        self,
        *,
        base_url: str,
        provider: str,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.provider = provider
        self._headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        self._headers.update(headers or {})
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(get_http_timeout())
        )

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> HttpJsonClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def get_json(
        self, path: str, params: dict[str, Any] | None = None
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        clean = {k: str(v) for k, v in (params or {}).items() if v is not None}
        started = time.perf_counter()
        try:
            resp = await self.client.get(url, params=clean, headers=self._headers)
        except httpx.HTTPError as exc:
            raise DefiActionError.wrap(
                ErrorCode.UNAVAILABLE, f"{self.provider} request failed", exc
            ) from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"{self.provider} GET {path} -> {resp.status_code} in {elapsed_ms:.0f}ms"
        )

        if resp.status_code == 429:
            logger.warning(f"{self.provider} rate limited on {path}")
            raise DefiActionError(
                ErrorCode.RATE_LIMITED, f"{self.provider} rate limited"
            )
        if resp.status_code in (401, 403):
            raise DefiActionError(
                ErrorCode.AUTH,
                f"{self.provider} rejected credentials ({resp.status_code})",
            )
        if resp.status_code >= 400:
            snippet = (resp.text or "").strip().replace("\n", " ")
            if len(snippet) > 200:
                snippet = snippet[:197] + "..."
            logger.warning(
                f"{self.provider} GET {path} failed: {resp.status_code} {snippet}"
            )
            raise DefiActionError(
                ErrorCode.UNAVAILABLE,
                f"{self.provider} request failed with status {resp.status_code}",
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise DefiActionError.wrap(
                ErrorCode.UNAVAILABLE, f"{self.provider} returned invalid JSON", exc
            ) from exc
