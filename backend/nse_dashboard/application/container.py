from __future__ import annotations

from functools import lru_cache
import time

from nse_dashboard.application.options.service import OptionsApplicationService
from nse_dashboard.application.stocks.fallback import StaticEquityFallbackProvider
from nse_dashboard.application.stocks.service import StocksApplicationService
from nse_dashboard.core.config import settings
from nse_dashboard.infrastructure.clients.nse import NseClient
from nse_dashboard.infrastructure.clients.nse_session import NseSessionCache
from nse_dashboard.infrastructure.clients.rate_limiter import FixedIntervalRateLimiter


@lru_cache
def _nse_client() -> NseClient:
    return NseClient(
        base_url=settings.nse_base_url,
        option_chain_path=settings.nse_option_chain_path,
        user_agent=settings.nse_user_agent,
        timeout_seconds=settings.nse_request_timeout_seconds,
        rate_limiter=FixedIntervalRateLimiter(interval_seconds=settings.nse_min_request_interval_seconds),
        session_cache=NseSessionCache(ttl_seconds=settings.nse_session_ttl_seconds, clock=time.monotonic),
        max_retries=settings.nse_max_retries,
        retry_backoff_seconds=settings.nse_retry_backoff_seconds,
        clock=time.monotonic,
    )


@lru_cache
def _equity_fallback_provider() -> StaticEquityFallbackProvider:
    return StaticEquityFallbackProvider(shares_outstanding=settings.default_shares_outstanding)


def build_options_service() -> OptionsApplicationService:
    return OptionsApplicationService(
        nse_client=_nse_client(),
        deadline_seconds=settings.nse_fetch_deadline_seconds,
    )


def build_stocks_service() -> StocksApplicationService:
    return StocksApplicationService(
        nse_client=_nse_client(),
        fallback_provider=_equity_fallback_provider(),
        index_name=settings.nse_equity_index,
        shares_outstanding=settings.default_shares_outstanding,
        deadline_seconds=settings.nse_fetch_deadline_seconds,
        fallback_enabled=settings.stocks_fallback_enabled,
    )


async def shutdown_nse_client() -> None:
    if _nse_client.cache_info().currsize == 0:
        return
    client = _nse_client()
    await client.aclose()
    _nse_client.cache_clear()
