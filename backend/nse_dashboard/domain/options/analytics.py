from __future__ import annotations

from collections.abc import Iterable
from datetime import date
import math

from nse_dashboard.domain.options.normalizer import expiry_key
from nse_dashboard.domain.options.schemas import (
    ChainLegView,
    ChainRow,
    OptionChainView,
    OptionLeg,
    OptionRecord,
    OptionSnapshot,
    StraddleCell,
    StraddleMatrix,
    StraddleRow,
)

ATM_STRIKE_STEP = 50.0
_EMPTY_LEG = ChainLegView(last_price=0.0, change=0.0, open_interest=0, volume=0)


def find_atm_strike(strikes: Iterable[float], underlying_value: float) -> float | None:
    """Strike closest to spot; the lower strike wins a tie."""
    candidates = set(strikes)
    if not candidates:
        return None
    return min(candidates, key=lambda strike: (abs(strike - underlying_value), strike))


def straddle_price(call: ChainLegView, put: ChainLegView) -> float:
    return call.last_price + put.last_price


def build_chain_view(snapshot: OptionSnapshot, *, expiry: str | None = None) -> OptionChainView:
    selected_expiry = _resolve_expiry(snapshot, expiry)

    selected_key = expiry_key(selected_expiry)
    merged = _merge_by_strike(record for record in snapshot.data if expiry_key(record.expiry_date) == selected_key)
    liquid = {
        strike: legs
        for strike, legs in merged.items()
        if _is_liquid(legs[0]) or _is_liquid(legs[1])
    }
    atm_strike = find_atm_strike(liquid.keys(), snapshot.underlying_value)

    rows: list[ChainRow] = []
    for strike in sorted(liquid):
        call, put = liquid[strike]
        rows.append(
            ChainRow(
                strike_price=strike,
                call=call,
                put=put,
                straddle_price=straddle_price(call, put),
                is_atm=strike == atm_strike,
            )
        )

    max_oi = max((max(row.call.open_interest, row.put.open_interest) for row in rows), default=0)
    return OptionChainView(
        symbol=snapshot.symbol,
        expiry_date=selected_expiry,
        underlying_value=snapshot.underlying_value,
        atm_strike=atm_strike,
        max_open_interest=max_oi,
        rows=tuple(rows),
    )


def build_straddle_matrix(
    snapshot: OptionSnapshot,
    *,
    multiple: int | None = None,
    near_atm_strikes: int | None = None,
) -> StraddleMatrix:
    """Group every expiry by strike, optionally keeping only round or near-ATM strikes."""
    if multiple is not None and multiple <= 0:
        raise ValueError("OPTIONS_INVALID_STRIKE_MULTIPLE")
    if near_atm_strikes is not None and near_atm_strikes < 0:
        raise ValueError("OPTIONS_INVALID_ATM_WINDOW")

    records_by_expiry: dict[date | str, list[OptionRecord]] = {}
    for record in snapshot.data:
        records_by_expiry.setdefault(expiry_key(record.expiry_date), []).append(record)

    grouped: dict[float, dict[str, StraddleCell]] = {}
    for expiry in snapshot.expiry_dates:
        merged = _merge_by_strike(records_by_expiry.get(expiry_key(expiry), ()))
        for strike, (call, put) in merged.items():
            grouped.setdefault(strike, {})[expiry] = StraddleCell(
                ltp=straddle_price(call, put),
                change=call.change + put.change,
                call_oi=call.open_interest,
                put_oi=put.open_interest,
                total_oi=call.open_interest + put.open_interest,
            )

    atm_strike = find_atm_strike(grouped.keys(), snapshot.underlying_value)
    strikes = sorted(grouped)
    if multiple is not None:
        strikes = [strike for strike in strikes if math.isclose(strike % multiple, 0.0, abs_tol=1e-9)]
    if near_atm_strikes is not None and atm_strike is not None:
        strikes = [
            strike
            for strike in strikes
            if math.floor(abs(strike - atm_strike) / ATM_STRIKE_STEP) <= near_atm_strikes
        ]

    max_total_oi = max(
        (cell.total_oi for cells in grouped.values() for cell in cells.values()),
        default=0,
    )
    return StraddleMatrix(
        symbol=snapshot.symbol,
        expiry_dates=snapshot.expiry_dates,
        underlying_value=snapshot.underlying_value,
        atm_strike=atm_strike,
        max_total_oi=max_total_oi,
        rows=tuple(
            StraddleRow(strike_price=strike, is_atm=strike == atm_strike, cells=grouped[strike])
            for strike in strikes
        ),
    )


def _resolve_expiry(snapshot: OptionSnapshot, expiry: str | None) -> str:
    if expiry is None or not expiry.strip():
        if not snapshot.expiry_dates:
            raise ValueError("OPTIONS_EXPIRY_NOT_FOUND")
        return snapshot.expiry_dates[0]

    requested = expiry_key(expiry)
    for candidate in snapshot.expiry_dates:
        if expiry_key(candidate) == requested:
            return candidate
    raise ValueError("OPTIONS_EXPIRY_NOT_FOUND")


def _merge_by_strike(records: Iterable[OptionRecord]) -> dict[float, tuple[ChainLegView, ChainLegView]]:
    # NSE may split one strike into a CE-only and a PE-only record.
    calls: dict[float, OptionLeg] = {}
    puts: dict[float, OptionLeg] = {}
    strikes: list[float] = []
    for record in records:
        if record.strike_price not in calls and record.strike_price not in puts:
            strikes.append(record.strike_price)
        if record.call is not None:
            calls[record.strike_price] = record.call
        if record.put is not None:
            puts[record.strike_price] = record.put

    return {strike: (_to_leg_view(calls.get(strike)), _to_leg_view(puts.get(strike))) for strike in strikes}


def _to_leg_view(leg: OptionLeg | None) -> ChainLegView:
    if leg is None:
        return _EMPTY_LEG
    return ChainLegView(
        last_price=leg.last_price,
        change=leg.change,
        open_interest=leg.open_interest,
        volume=leg.total_traded_volume,
    )


def _is_liquid(leg: ChainLegView) -> bool:
    return leg.volume > 0 and leg.open_interest > 0
