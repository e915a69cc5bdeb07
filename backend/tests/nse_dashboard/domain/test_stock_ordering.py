from __future__ import annotations

import pytest

from nse_dashboard.domain.stocks.ordering import sort_quotes
from nse_dashboard.domain.stocks.schemas import EquityQuote


def _quote(symbol: str, *, last_price: float, traded_value: float | None) -> EquityQuote:
    return EquityQuote(
        symbol=symbol,
        last_price=last_price,
        p_change=0.0,
        total_traded_volume=0,
        market_cap=last_price * 10,
        total_traded_value=traded_value,
    )


def test_sort_quotes_keeps_benchmark_row_first() -> None:
    quotes = [
        _quote("TCS", last_price=3500, traded_value=2.0),
        _quote("NIFTY 50", last_price=21500, traded_value=1.0),
        _quote("ITC", last_price=440, traded_value=9.0),
        _quote("SBIN", last_price=580, traded_value=None),
    ]

    by_value_desc = sort_quotes(quotes, field="totalTradedValue")
    by_price_asc = sort_quotes(quotes, field="lastPrice", descending=False)

    assert [quote.symbol for quote in by_value_desc] == ["NIFTY 50", "ITC", "TCS", "SBIN"]
    assert [quote.symbol for quote in by_price_asc] == ["NIFTY 50", "ITC", "SBIN", "TCS"]


def test_sort_quotes_rejects_unknown_field() -> None:
    with pytest.raises(ValueError, match="STOCKS_INVALID_SORT_FIELD"):
        sort_quotes([], field="symbol")
