from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nse_dashboard.domain.errors import MalformedPayloadError
from nse_dashboard.domain.parsing import extract_str, to_float, to_optional_float
from nse_dashboard.domain.stocks.schemas import DEFAULT_SHARES_OUTSTANDING, EquityQuote


def normalize_equity_list(
    raw_payload: object,
    *,
    shares_outstanding: int = DEFAULT_SHARES_OUTSTANDING,
) -> list[EquityQuote]:
    """Map every stock entry to an ``EquityQuote``.

    A missing or zero ``marketCap`` is replaced by ``lastPrice * shares_outstanding``.
    Entries are never dropped.
    """
    return [to_equity_quote(item, shares_outstanding=shares_outstanding) for item in _require_entries(raw_payload)]


def to_equity_quote(raw: Mapping[str, Any], *, shares_outstanding: int = DEFAULT_SHARES_OUTSTANDING) -> EquityQuote:
    last_price = to_float(raw.get("lastPrice"))
    market_cap = to_float(raw.get("marketCap"))
    if not market_cap:
        market_cap = last_price * shares_outstanding

    return EquityQuote(
        symbol=extract_str(raw, "symbol"),
        last_price=last_price,
        p_change=to_float(raw.get("pChange")),
        total_traded_volume=int(to_float(raw.get("totalTradedVolume"))),
        market_cap=market_cap,
        name=extract_str(raw, "name") or _extract_meta_name(raw) or None,
        open=to_optional_float(raw.get("open")),
        day_high=to_optional_float(raw.get("dayHigh")),
        day_low=to_optional_float(raw.get("dayLow")),
        previous_close=to_optional_float(raw.get("previousClose")),
        change=to_optional_float(raw.get("change")),
        total_traded_value=to_optional_float(raw.get("totalTradedValue")),
        year_high=to_optional_float(raw.get("yearHigh")),
        year_low=to_optional_float(raw.get("yearLow")),
        per_change_30d=to_optional_float(raw.get("perChange30d")),
        per_change_365d=to_optional_float(raw.get("perChange365d")),
        last_update_time=extract_str(raw, "lastUpdateTime") or None,
    )


def _require_entries(raw_payload: object) -> list[Mapping[str, Any]]:
    if isinstance(raw_payload, list):
        entries = raw_payload
    elif isinstance(raw_payload, Mapping) and isinstance(raw_payload.get("data"), list):
        entries = raw_payload["data"]
    else:
        raise MalformedPayloadError("payload has no data list")

    if not all(isinstance(item, Mapping) for item in entries):
        raise MalformedPayloadError("data list contains non-object entries")
    return entries


def _extract_meta_name(raw: Mapping[str, Any]) -> str:
    meta = raw.get("meta")
    if isinstance(meta, Mapping):
        return extract_str(meta, "companyName")
    return ""

