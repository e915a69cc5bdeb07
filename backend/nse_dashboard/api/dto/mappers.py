from __future__ import annotations

from nse_dashboard.api.dto.options import (
    ChainLegOut,
    ChainRowOut,
    OptionChainOut,
    OptionLegOut,
    OptionRecordOut,
    OptionSnapshotOut,
    StraddleCellOut,
    StraddleMatrixOut,
    StraddleRowOut,
)
from nse_dashboard.api.dto.stocks import EquityQuoteOut
from nse_dashboard.domain.options.schemas import (
    ChainLegView,
    OptionChainView,
    OptionLeg,
    OptionRecord,
    OptionSnapshot,
    StraddleMatrix,
)
from nse_dashboard.domain.stocks.schemas import EquityQuote


def to_option_snapshot_out(snapshot: OptionSnapshot) -> OptionSnapshotOut:
    return OptionSnapshotOut(
        symbol=snapshot.symbol,
        data=[to_option_record_out(record) for record in snapshot.data],
        expiry_dates=list(snapshot.expiry_dates),
        underlying_value=snapshot.underlying_value,
        timestamp=snapshot.timestamp,
    )


def to_option_record_out(record: OptionRecord) -> OptionRecordOut:
    return OptionRecordOut(
        strike_price=record.strike_price,
        expiry_date=record.expiry_date,
        call=_to_option_leg_out(record.call),
        put=_to_option_leg_out(record.put),
    )


def _to_option_leg_out(leg: OptionLeg | None) -> OptionLegOut | None:
    if leg is None:
        return None
    return OptionLegOut(
        last_price=leg.last_price,
        change=leg.change,
        open_interest=leg.open_interest,
        total_traded_volume=leg.total_traded_volume,
        implied_volatility=leg.implied_volatility,
        change_in_open_interest=leg.change_in_open_interest,
    )


def to_option_chain_out(view: OptionChainView) -> OptionChainOut:
    return OptionChainOut(
        symbol=view.symbol,
        expiry_date=view.expiry_date,
        underlying_value=view.underlying_value,
        atm_strike=view.atm_strike,
        max_open_interest=view.max_open_interest,
        rows=[
            ChainRowOut(
                strike_price=row.strike_price,
                calls=_to_chain_leg_out(row.call),
                puts=_to_chain_leg_out(row.put),
                straddle_price=row.straddle_price,
                is_atm=row.is_atm,
            )
            for row in view.rows
        ],
    )


def _to_chain_leg_out(leg: ChainLegView) -> ChainLegOut:
    return ChainLegOut(
        last_price=leg.last_price,
        change=leg.change,
        open_interest=leg.open_interest,
        volume=leg.volume,
    )


def to_straddle_matrix_out(matrix: StraddleMatrix) -> StraddleMatrixOut:
    return StraddleMatrixOut(
        symbol=matrix.symbol,
        expiry_dates=list(matrix.expiry_dates),
        underlying_value=matrix.underlying_value,
        atm_strike=matrix.atm_strike,
        max_total_oi=matrix.max_total_oi,
        rows=[
            StraddleRowOut(
                strike_price=row.strike_price,
                is_atm=row.is_atm,
                cells={
                    expiry: StraddleCellOut(
                        ltp=cell.ltp,
                        change=cell.change,
                        call_oi=cell.call_oi,
                        put_oi=cell.put_oi,
                        total_oi=cell.total_oi,
                    )
                    for expiry, cell in row.cells.items()
                },
            )
            for row in matrix.rows
        ],
    )


def to_equity_quote_out(quote: EquityQuote) -> EquityQuoteOut:
    return EquityQuoteOut(
        symbol=quote.symbol,
        name=quote.name,
        last_price=quote.last_price,
        p_change=quote.p_change,
        total_traded_volume=quote.total_traded_volume,
        market_cap=quote.market_cap,
        open=quote.open,
        day_high=quote.day_high,
        day_low=quote.day_low,
        previous_close=quote.previous_close,
        change=quote.change,
        total_traded_value=quote.total_traded_value,
        year_high=quote.year_high,
        year_low=quote.year_low,
        per_change_30d=quote.per_change_30d,
        per_change_365d=quote.per_change_365d,
        last_update_time=quote.last_update_time,
    )
