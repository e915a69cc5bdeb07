from __future__ import annotations

from pydantic import Field

from nse_dashboard.api.dto.base import CamelOut


class EquityQuoteOut(CamelOut):
    symbol: str
    name: str | None = None
    last_price: float
    p_change: float
    total_traded_volume: int
    market_cap: float
    open: float | None = None
    day_high: float | None = None
    day_low: float | None = None
    previous_close: float | None = None
    change: float | None = None
    total_traded_value: float | None = None
    year_high: float | None = None
    year_low: float | None = None
    per_change_30d: float | None = Field(default=None, alias="perChange30d")
    per_change_365d: float | None = Field(default=None, alias="perChange365d")
    last_update_time: str | None = None
