from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class OptionLeg:
    last_price: float
    change: float
    open_interest: int
    total_traded_volume: int
    implied_volatility: float | None = None
    change_in_open_interest: int | None = None


@dataclass(slots=True, frozen=True)
class OptionRecord:
    strike_price: float
    expiry_date: str
    call: OptionLeg | None
    put: OptionLeg | None


@dataclass(slots=True, frozen=True)
class OptionSnapshot:
    symbol: str
    expiry_dates: tuple[str, ...]
    underlying_value: float
    data: tuple[OptionRecord, ...]
    timestamp: str | None = None


@dataclass(slots=True, frozen=True)
class ChainLegView:
    last_price: float
    change: float
    open_interest: int
    volume: int


@dataclass(slots=True, frozen=True)
class ChainRow:
    strike_price: float
    call: ChainLegView
    put: ChainLegView
    straddle_price: float
    is_atm: bool


@dataclass(slots=True, frozen=True)
class OptionChainView:
    symbol: str
    expiry_date: str
    underlying_value: float
    atm_strike: float | None
    max_open_interest: int
    rows: tuple[ChainRow, ...]


@dataclass(slots=True, frozen=True)
class StraddleCell:
    ltp: float
    change: float
    call_oi: int
    put_oi: int
    total_oi: int


@dataclass(slots=True, frozen=True)
class StraddleRow:
    strike_price: float
    is_atm: bool
    cells: dict[str, StraddleCell]


@dataclass(slots=True, frozen=True)
class StraddleMatrix:
    symbol: str
    expiry_dates: tuple[str, ...]
    underlying_value: float
    atm_strike: float | None
    max_total_oi: int
    rows: tuple[StraddleRow, ...]
