from __future__ import annotations

import logging

from nse_dashboard.application.upstream import run_with_deadline
from nse_dashboard.domain.errors import NseDataError, UpstreamUnavailableError
from nse_dashboard.domain.options.analytics import build_chain_view, build_straddle_matrix
from nse_dashboard.domain.options.normalizer import normalize
from nse_dashboard.domain.options.schemas import OptionChainView, OptionSnapshot, StraddleMatrix
from nse_dashboard.domain.options.symbols import normalize_symbol
from nse_dashboard.infrastructure.clients.nse import NseClient

logger = logging.getLogger(__name__)

_ALLOWED_STRIKE_MULTIPLES = {100, 500}
_MAX_ATM_WINDOW = 100


class OptionsApplicationService:
    def __init__(
        self,
        *,
        nse_client: NseClient | None = None,
        deadline_seconds: float = 20.0,
    ) -> None:
        if deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be greater than 0")
        self._nse_client = nse_client
        self._deadline_seconds = deadline_seconds

    async def get_snapshot(self, *, symbol: str) -> OptionSnapshot:
        normalized = normalize_symbol(symbol)
        if self._nse_client is None:
            raise UpstreamUnavailableError(detail="NSE client is not configured")

        try:
            payload = await run_with_deadline(
                self._nse_client.fetch_snapshot(normalized),
                deadline_seconds=self._deadline_seconds,
            )
            snapshot = normalize(payload, symbol=normalized)
        except NseDataError as exc:
            logger.warning("Option chain fetch for %s failed: %s (%s)", normalized, exc, exc.detail)
            raise

        logger.info(
            "Fetched option chain for %s: %d records across %d expiries",
            normalized,
            len(snapshot.data),
            len(snapshot.expiry_dates),
        )
        return snapshot

    async def get_chain(self, *, symbol: str, expiry: str | None = None) -> OptionChainView:
        snapshot = await self.get_snapshot(symbol=symbol)
        return build_chain_view(snapshot, expiry=expiry)

    async def get_straddle_matrix(
        self,
        *,
        symbol: str,
        multiple: int | None = None,
        near_atm_strikes: int | None = None,
    ) -> StraddleMatrix:
        if multiple is not None and multiple not in _ALLOWED_STRIKE_MULTIPLES:
            raise ValueError("OPTIONS_INVALID_STRIKE_MULTIPLE")
        if near_atm_strikes is not None and not 0 <= near_atm_strikes <= _MAX_ATM_WINDOW:
            raise ValueError("OPTIONS_INVALID_ATM_WINDOW")

        snapshot = await self.get_snapshot(symbol=symbol)
        return build_straddle_matrix(snapshot, multiple=multiple, near_atm_strikes=near_atm_strikes)
