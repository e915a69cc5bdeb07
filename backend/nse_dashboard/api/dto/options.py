from __future__ import annotations

from pydantic import Field

from nse_dashboard.api.dto.base import CamelOut


class OptionLegOut(CamelOut):
    last_price: float
    change: float
    open_interest: int
    total_traded_volume: int
    implied_volatility: float | None = None
    change_in_open_interest: int | None = Field(default=None, alias="changeinOpenInterest")


class OptionRecordOut(CamelOut):
    strike_price: float
    expiry_date: str
    call: OptionLegOut | None = Field(default=None, alias="CE")
    put: OptionLegOut | None = Field(default=None, alias="PE")


class OptionSnapshotOut(CamelOut):
    symbol: str
    data: list[OptionRecordOut]
    expiry_dates: list[str]
    underlying_value: float
    timestamp: str | None = None


class ChainLegOut(CamelOut):
    last_price: float
    change: float
    open_interest: int
    volume: int


class ChainRowOut(CamelOut):
    strike_price: float
    calls: ChainLegOut
    puts: ChainLegOut
    straddle_price: float
    is_atm: bool


class OptionChainOut(CamelOut):
    symbol: str
    expiry_date: str
    underlying_value: float
    atm_strike: float | None
    max_open_interest: int
    rows: list[ChainRowOut]


class StraddleCellOut(CamelOut):
    ltp: float
    change: float
    call_oi: int = Field(alias="callOI")
    put_oi: int = Field(alias="putOI")
    total_oi: int = Field(alias="totalOI")


class StraddleRowOut(CamelOut):
    strike_price: float
    is_atm: bool
    cells: dict[str, StraddleCellOut]


class StraddleMatrixOut(CamelOut):
    symbol: str
    expiry_dates: list[str]
    underlying_value: float
    atm_strike: float | None
    max_total_oi: int = Field(alias="maxTotalOI")
    rows: list[StraddleRowOut]
