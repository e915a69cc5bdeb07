from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SHARES_OUTSTANDING = 1_000_000_000
BENCHMARK_INDEX_SYMBOL = "NIFTY 50"


@dataclass(slots=True, frozen=True)
class EquityQuote:
    symbol: str
    last_price: float
    p_change: float
    total_traded_volume: int
    market_cap: float
    name: str | None = None
    open: float | None = None
    day_high: float | None = None
    day_low: float | None = None
    previous_close: float | None = None
    change: float | None = None
    total_traded_value: float | None = None
    year_high: float | None = None
    year_low: float | None = None
    per_change_30d: float | None = None
    per_change_365d: float | None = None
    last_update_time: str | None = None
