from __future__ import annotations

from dataclasses import dataclass
import logging

from nse_dashboard.application.stocks.fallback import StaticEquityFallbackProvider
from nse_dashboard.application.upstream import run_with_deadline
from nse_dashboard.domain.errors import NseDataError, UpstreamUnavailableError
from nse_dashboard.domain.stocks.normalizer import normalize_equity_list
from nse_dashboard.domain.stocks.ordering import sort_quotes
from nse_dashboard.domain.stocks.schemas import BENCHMARK_INDEX_SYMBOL, DEFAULT_SHARES_OUTSTANDING, EquityQuote
from nse_dashboard.infrastructure.clients.nse import NseClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EquityListResult:
    quotes: list[EquityQuote]
    data_source: str


class StocksApplicationService:
    def __init__(
        self,
        *,
        nse_client: NseClient | None = None,
        fallback_provider: StaticEquityFallbackProvider | None = None,
        index_name: str = BENCHMARK_INDEX_SYMBOL,
        shares_outstanding: int = DEFAULT_SHARES_OUTSTANDING,
        deadline_seconds: float = 20.0,
        fallback_enabled: bool = True,
    ) -> None:
        self._nse_client = nse_client
        self._fallback_provider = fallback_provider or StaticEquityFallbackProvider(
            shares_outstanding=shares_outstanding,
        )
        self._index_name = index_name
        self._shares_outstanding = shares_outstanding
        self._deadline_seconds = deadline_seconds
        self._fallback_enabled = fallback_enabled

    async def list_stocks(
        self,
        *,
        sort_field: str | None = None,
        descending: bool = True,
    ) -> EquityListResult:
        result = await self._fetch_or_fallback()
        if sort_field is not None:
            result.quotes = sort_quotes(result.quotes, field=sort_field, descending=descending)
        return result

    async def _fetch_or_fallback(self) -> EquityListResult:
        try:
            if self._nse_client is None:
                raise UpstreamUnavailableError(detail="NSE client is not configured")
            payload = await run_with_deadline(
                self._nse_client.fetch_equity_index(self._index_name),
                deadline_seconds=self._deadline_seconds,
            )
            quotes = normalize_equity_list(payload, shares_outstanding=self._shares_outstanding)
        except NseDataError as exc:
            if not self._fallback_enabled:
                raise
            logger.warning("Serving fallback stock list, NSE fetch failed: %s (%s)", exc, exc.detail)
            return EquityListResult(quotes=self._fallback_provider.load(), data_source="FALLBACK")

        return EquityListResult(quotes=quotes, data_source="NSE")
