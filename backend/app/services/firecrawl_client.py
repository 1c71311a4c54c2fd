from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from backend.app.core.settings import settings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class FirecrawlError(Exception):
    """Base exception for Firecrawl errors."""


class FirecrawlRequestError(FirecrawlError):
    """Raised when the request never produced a usable response."""


class FirecrawlApiError(FirecrawlError):
    """Raised when Firecrawl reports a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FirecrawlRetryableError(FirecrawlApiError):
    """Raised when a retryable HTTP status persists past the last attempt."""


@dataclass
class FirecrawlResult:
    url: str
    markdown: Optional[str]
    status_code: Optional[int]
    metadata: Dict[str, Any]


class AsyncTransport(Protocol):
    async def post(
        self,
        path: str,
        json: Dict[str, Any],
        headers: Dict[str, str],
        timeout: float,
    ) -> httpx.Response: ...

    async def close(self) -> None: ...


class HttpxTransport:
    """httpx-based transport with connection pooling."""

    def __init__(self, base_url: str):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=None)

    async def post(
        self,
        path: str,
        json: Dict[str, Any],
        headers: Dict[str, str],
        timeout: float,
    ) -> httpx.Response:
        return await self._client.post(path, json=json, headers=headers, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()


def _build_scrape_payload(url: str, wait_ms: int) -> Dict[str, Any]:
    # The inventory table is rendered client-side; waitFor gives it time to load.
    return {
        "url": url,
        "formats": ["markdown"],
        "onlyMainContent": False,
        "waitFor": wait_ms,
        "removeBase64Images": True,
        "blockAds": True,
    }


class FirecrawlClient:
    """Thin async client for the Firecrawl scrape endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: int = 2,
        backoff_base: float = 0.5,
        wait_ms: Optional[int] = None,
        transport: Optional[AsyncTransport] = None,
    ):
        self.api_key = api_key or settings.firecrawl_api_key
        self.base_url = (base_url or settings.firecrawl_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.firecrawl_timeout
        self.max_attempts = max(1, max_attempts)
        self.backoff_base = backoff_base
        self.wait_ms = wait_ms if wait_ms is not None else settings.firecrawl_wait_ms
        self._transport = transport or HttpxTransport(self.base_url)
        self._owns_transport = transport is None
        self._headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.close()

    async def fetch(self, url: str) -> FirecrawlResult:
        body = await self._post("/v2/scrape", _build_scrape_payload(url, self.wait_ms))
        if not body.get("success"):
            raise FirecrawlApiError(body.get("error") or "Firecrawl scrape failed")
        data = body.get("data") or {}
        metadata = self._normalize_metadata(data.get("metadata"))
        status_code = metadata.get("statusCode")
        return FirecrawlResult(
            url=url,
            markdown=data.get("markdown"),
            status_code=status_code if isinstance(status_code, int) else None,
            metadata=metadata,
        )

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        attempts = 0
        last_error: Optional[FirecrawlError] = None
        while attempts < self.max_attempts:
            try:
                response = await self._transport.post(path, json=payload, headers=self._headers, timeout=self.timeout)
            except httpx.RequestError as exc:
                last_error = FirecrawlRequestError(f"Request failed: {exc}")
                logger.warning("Firecrawl request to %s failed (attempt %d): %s", path, attempts + 1, exc)
                await self._maybe_wait(attempts)
                attempts += 1
                continue

            if response.status_code in RETRYABLE_STATUS:
                last_error = FirecrawlRetryableError(
                    f"Firecrawl returned {response.status_code} for {path}",
                    status_code=response.status_code,
                )
                logger.warning("Firecrawl returned %d for %s (attempt %d)", response.status_code, path, attempts + 1)
                await self._maybe_wait(attempts)
                attempts += 1
                continue

            if response.is_error:
                raise FirecrawlApiError(
                    f"API returned error status: {response.status_code}, message: {response.text}",
                    status_code=response.status_code,
                )

            try:
                return response.json()
            except ValueError as exc:
                raise FirecrawlRequestError("Invalid JSON from Firecrawl") from exc

        if last_error:
            raise last_error
        raise FirecrawlRequestError("Firecrawl request failed")

    async def _maybe_wait(self, attempt: int) -> None:
        if attempt >= self.max_attempts - 1:
            return
        delay = self.backoff_base * (2 ** attempt)
        jitter = random.uniform(0, 0.3)
        await asyncio.sleep(delay + jitter)

    @staticmethod
    def _normalize_metadata(metadata: Any) -> Dict[str, Any]:
        if isinstance(metadata, dict):
            return {k: v for k, v in metadata.items() if v is not None}
        return {}
