from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from nse_dashboard.domain.errors import MalformedPayloadError
from nse_dashboard.domain.options.schemas import OptionLeg, OptionRecord, OptionSnapshot
from nse_dashboard.domain.parsing import extract_str, to_float

# NSE has served both "25-Jan-2024" and ISO dates across API versions.
_EXPIRY_FORMATS = ("%d-%b-%Y", "%Y-%m-%d", "%d-%m-%Y", "%d %b %Y")


def normalize(raw_payload: object, *, symbol: str = "") -> OptionSnapshot:
    """Turn a raw option-chain payload into an ``OptionSnapshot``.

    Only a missing ``records.data`` container is an error. Records without a
    strike or without both legs are dropped, and an empty ``data`` list yields
    an empty snapshot. Expiry dates come from every raw record, dropped ones
    included. One calendar date keeps the first spelling seen, and records
    are relabelled to it.
    """
    records = _require_records(raw_payload)

    expiry_dates = sort_expiry_dates(
        extract_str(raw, "expiryDate") for raw in records["data"] if isinstance(raw, Mapping)
    )
    labels = {expiry_key(expiry): expiry for expiry in expiry_dates}

    kept: list[OptionRecord] = []
    for raw in records["data"]:
        record = _to_option_record(raw)
        if record is None:
            continue
        label = labels.get(expiry_key(record.expiry_date), record.expiry_date)
        if label != record.expiry_date:
            record = replace(record, expiry_date=label)
        kept.append(record)

    return OptionSnapshot(
        symbol=symbol or _infer_symbol(records),
        expiry_dates=expiry_dates,
        underlying_value=_extract_underlying_value(raw_payload, records),
        data=tuple(kept),
        timestamp=extract_str(records, "timestamp") or None,
    )


def sort_expiry_dates(values: Iterable[str]) -> tuple[str, ...]:
    """Unique expiries by calendar date, ascending; unparseable strings go last."""
    first_seen: dict[date, str] = {}
    unparsed: set[str] = set()
    for value in values:
        if not value or not value.strip():
            continue
        expiry = parse_expiry_date(value)
        if expiry is None:
            unparsed.add(value)
        else:
            first_seen.setdefault(expiry, value)

    return tuple(first_seen[expiry] for expiry in sorted(first_seen)) + tuple(sorted(unparsed))


def expiry_key(value: str) -> date | str:
    """Comparison key: the calendar date, or the folded text when it does not parse."""
    parsed = parse_expiry_date(value)
    if parsed is not None:
        return parsed
    return value.strip().lower()


def parse_expiry_date(value: str) -> date | None:
    text = value.strip()
    for fmt in _EXPIRY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _require_records(raw_payload: object) -> Mapping[str, Any]:
    if not isinstance(raw_payload, Mapping):
        raise MalformedPayloadError("payload is not a JSON object")
    records = raw_payload.get("records")
    if not isinstance(records, Mapping):
        raise MalformedPayloadError("payload has no records container")
    if not isinstance(records.get("data"), list):
        raise MalformedPayloadError("records container has no data list")
    return records


def _to_option_record(raw: object) -> OptionRecord | None:
    if not isinstance(raw, Mapping):
        return None

    strike = to_float(raw.get("strikePrice"))
    if not strike:
        return None

    call = _to_leg(raw.get("CE"))
    put = _to_leg(raw.get("PE"))
    if call is None and put is None:
        return None

    return OptionRecord(
        strike_price=strike,
        expiry_date=extract_str(raw, "expiryDate"),
        call=call,
        put=put,
    )


def _to_leg(raw: object) -> OptionLeg | None:
    if not isinstance(raw, Mapping):
        return None

    iv = raw.get("impliedVolatility")
    change_in_oi = raw.get("changeinOpenInterest")
    return OptionLeg(
        last_price=to_float(raw.get("lastPrice")),
        change=to_float(raw.get("change")),
        open_interest=int(to_float(raw.get("openInterest"))),
        total_traded_volume=int(to_float(raw.get("totalTradedVolume"))),
        implied_volatility=to_float(iv) if iv is not None else None,
        change_in_open_interest=int(to_float(change_in_oi)) if change_in_oi is not None else None,
    )


def _extract_underlying_value(raw_payload: Mapping[str, Any], records: Mapping[str, Any]) -> float:
    for container in (records, raw_payload):
        value = container.get("underlyingValue")
        if value is None:
            continue
        return to_float(value)
    return 0.0


def _infer_symbol(records: Mapping[str, Any]) -> str:
    for raw in records["data"]:
        if not isinstance(raw, Mapping):
            continue
        for side in ("CE", "PE"):
            leg = raw.get(side)
            if isinstance(leg, Mapping):
                underlying = extract_str(leg, "underlying")
                if underlying:
                    return underlying.upper()
    return ""

