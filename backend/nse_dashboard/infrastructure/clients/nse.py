from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
import time
from typing import Any
from urllib.parse import quote

import httpx

from nse_dashboard.domain.errors import MalformedPayloadError, UpstreamRejectedError, UpstreamUnavailableError
from nse_dashboard.domain.options.symbols import is_index_symbol
from nse_dashboard.infrastructure.clients.nse_session import NseSession, NseSessionCache
from nse_dashboard.infrastructure.clients.rate_limiter import FixedIntervalRateLimiter

logger = logging.getLogger(__name__)

_BODY_PREVIEW_CHARS = 500
_SEC_CH_UA = '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"'


class NseClient:
    """Browser-like client for the NSE website.

    NSE rejects bare API calls, so every data request is preceded by the
    cookie handshake a browser performs: the landing page, then the
    option-chain page, then the JSON API with the collected cookies.
    """

    def __init__(
        self,
        *,
        base_url: str = "https://www.nseindia.com",
        option_chain_path: str = "/option-chain",
        user_agent: str,
        timeout_seconds: float = 10.0,
        rate_limiter: FixedIntervalRateLimiter | None = None,
        session_cache: NseSessionCache | None = None,
        max_retries: int = 2,
        retry_backoff_seconds: float = 1.0,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not user_agent:
            raise ValueError("NSE user agent is not configured")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        self._base_url = base_url.rstrip("/")
        self._option_chain_url = f"{self._base_url}/{option_chain_path.lstrip('/')}"
        self._user_agent = user_agent
        self._rate_limiter = rate_limiter or FixedIntervalRateLimiter(interval_seconds=0)
        self._session_cache = session_cache or NseSessionCache(ttl_seconds=300, clock=clock)
        self._max_retries = max_retries
        self._retry_backoff_seconds = retry_backoff_seconds
        self._http = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self._clock = clock
        self._sleep = sleep

    async def aclose(self) -> None:
        await self._http.aclose()

    async def acquire_session(self) -> NseSession:
        landing_url = f"{self._base_url}/"
        try:
            landing = await self._get(landing_url, headers=self._page_headers())
        except httpx.HTTPError as exc:
            logger.warning("NSE landing page unreachable: %s", exc)
            raise UpstreamUnavailableError(detail=f"landing page unreachable: {exc}") from exc

        if not landing.is_success:
            logger.warning("NSE landing page returned HTTP %s", landing.status_code)
            raise UpstreamUnavailableError(
                status_code=landing.status_code,
                detail=f"landing page returned HTTP {landing.status_code}",
            )

        cookies = _collect_cookies(landing)
        try:
            chain_page = await self._get(
                self._option_chain_url,
                headers=self._page_headers(referer=landing_url, cookie=_format_cookies(cookies)),
            )
        except httpx.HTTPError as exc:
            logger.warning("NSE option-chain page unreachable, continuing with landing cookies: %s", exc)
        else:
            if not chain_page.is_success:
                logger.warning("NSE option-chain page returned HTTP %s", chain_page.status_code)
            cookies.update(_collect_cookies(chain_page))

        cookie = _format_cookies(cookies)
        if not cookie:
            logger.warning("NSE issued no session cookies; continuing without them")
        return NseSession(cookie=cookie, acquired_at=self._clock())

    async def fetch_snapshot(self, symbol: str) -> dict[str, Any]:
        normalized = symbol.strip().upper()
        if not normalized:
            raise ValueError("OPTIONS_INVALID_SYMBOL")

        endpoint = "option-chain-indices" if is_index_symbol(normalized) else "option-chain-equities"
        url = f"{self._base_url}/api/{endpoint}?symbol={quote(normalized, safe='')}"
        return await self._fetch_json(url, referer=self._option_chain_url)

    async def fetch_equity_index(self, index: str = "NIFTY 50") -> dict[str, Any]:
        normalized = index.strip().upper()
        if not normalized:
            raise ValueError("STOCKS_INVALID_INDEX")

        url = f"{self._base_url}/api/equity-stockIndices?index={quote(normalized, safe='')}"
        return await self._fetch_json(url, referer=self._base_url)

    async def _fetch_json(self, url: str, *, referer: str) -> dict[str, Any]:
        attempt = 0
        while True:
            session = await self._session_cache.get(self.acquire_session)
            try:
                return await self._get_api(url, referer=referer, cookie=session.cookie)
            except UpstreamRejectedError as exc:
                self._session_cache.invalidate(session)
                if attempt >= self._max_retries:
                    logger.error("NSE rejected %s after %d retries (HTTP %s)", url, attempt, exc.status_code)
                    raise
                backoff = self._retry_backoff_seconds * (2**attempt)
                attempt += 1
                logger.warning(
                    "NSE rejected %s (HTTP %s); refreshing session, retry in %.1fs (attempt %d)",
                    url,
                    exc.status_code,
                    backoff,
                    attempt,
                )
                await self._sleep(backoff)

    async def _get_api(self, url: str, *, referer: str, cookie: str) -> dict[str, Any]:
        try:
            response = await self._get(url, headers=self._api_headers(referer=referer, cookie=cookie))
        except httpx.HTTPError as exc:
            raise UpstreamRejectedError(detail=f"data API unreachable: {exc}") from exc

        if not response.is_success:
            raise UpstreamRejectedError(
                status_code=response.status_code,
                body=(response.text or "")[:_BODY_PREVIEW_CHARS] or None,
                detail=f"data API returned HTTP {response.status_code}",
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("NSE returned a non-JSON body for %s", url)
            raise MalformedPayloadError("data API returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise MalformedPayloadError("data API returned a non-object JSON body")
        return payload

    async def _get(self, url: str, *, headers: dict[str, str]) -> httpx.Response:
        await self._rate_limiter.acquire()
        try:
            return await self._http.get(url, headers=headers, follow_redirects=True)
        finally:
            # Cookies travel only through the explicit Cookie header.
            self._http.cookies.clear()

    def _page_headers(self, *, referer: str | None = None, cookie: str = "") -> dict[str, str]:
        headers = {
            "User-Agent": self._user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate, br",
            "Connection": "keep-alive",
            "sec-ch-ua": _SEC_CH_UA,
            "sec-ch-ua-mobile": "?0",
            "sec-ch-ua-platform": '"Windows"',
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "same-origin" if referer else "none",
            "Sec-Fetch-User": "?1",
            "Upgrade-Insecure-Requests": "1",
        }
        if referer:
            headers["Referer"] = referer
        if cookie:
            headers["Cookie"] = cookie
        return headers

    def _api_headers(self, *, referer: str, cookie: str) -> dict[str, str]:
        headers = {
            "User-Agent": self._user_agent,
            "Accept": "*/*",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate, br",
            "Connection": "keep-alive",
            "Referer": referer,
            "sec-ch-ua": _SEC_CH_UA,
            "sec-ch-ua-mobile": "?0",
            "sec-ch-ua-platform": '"Windows"',
            "Sec-Fetch-Dest": "empty",
            "Sec-Fetch-Mode": "cors",
            "Sec-Fetch-Site": "same-origin",
        }
        if cookie:
            headers["Cookie"] = cookie
        return headers


def _collect_cookies(response: httpx.Response) -> dict[str, str]:
    collected: dict[str, str] = {}
    for item in (*response.history, response):
        for raw in item.headers.get_list("set-cookie"):
            pair = raw.split(";", 1)[0].strip()
            name, sep, value = pair.partition("=")
            if not sep or not name.strip():
                continue
            collected[name.strip()] = value.strip()
    return collected


def _format_cookies(cookies: dict[str, str]) -> str:
    return "; ".join(f"{name}={value}" for name, value in cookies.items())
