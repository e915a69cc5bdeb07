from __future__ import annotations

from collections.abc import Iterable

from nse_dashboard.domain.stocks.schemas import BENCHMARK_INDEX_SYMBOL, EquityQuote

SORT_FIELDS: dict[str, str] = {
    "totalTradedValue": "total_traded_value",
    "totalTradedVolume": "total_traded_volume",
    "pChange": "p_change",
    "change": "change",
    "lastPrice": "last_price",
    "marketCap": "market_cap",
}


def sort_quotes(quotes: Iterable[EquityQuote], *, field: str, descending: bool = True) -> list[EquityQuote]:
    """Sort the stock table; the benchmark index row stays on top."""
    attribute = SORT_FIELDS.get(field)
    if attribute is None:
        raise ValueError("STOCKS_INVALID_SORT_FIELD")

    pinned: list[EquityQuote] = []
    rest: list[EquityQuote] = []
    for quote in quotes:
        (pinned if quote.symbol == BENCHMARK_INDEX_SYMBOL else rest).append(quote)

    rest.sort(key=lambda quote: getattr(quote, attribute) or 0.0, reverse=descending)
    return pinned + rest
