from __future__ import annotations

import asyncio

import pytest

from nse_dashboard.application.options.service import OptionsApplicationService
from nse_dashboard.domain.errors import (
    MalformedPayloadError,
    UpstreamDeadlineExceededError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)


def _record(strike: float, expiry: str, *, call_ltp: float, put_ltp: float) -> dict:
    return {
        "strikePrice": strike,
        "expiryDate": expiry,
        "CE": {"lastPrice": call_ltp, "change": 1.0, "openInterest": 500, "totalTradedVolume": 40},
        "PE": {"lastPrice": put_ltp, "change": -2.0, "openInterest": 700, "totalTradedVolume": 60},
    }


class FakeNseClient:
    def __init__(self, payload: object = None, *, error: Exception | None = None, delay: float = 0.0) -> None:
        self.payload = payload if payload is not None else {
            "records": {
                "underlyingValue": 47110.0,
                "data": [
                    _record(47000, "31-Jan-2024", call_ltp=350, put_ltp=240),
                    _record(47100, "31-Jan-2024", call_ltp=300, put_ltp=290),
                    _record(47500, "31-Jan-2024", call_ltp=120, put_ltp=510),
                    _record(47100, "28-Feb-2024", call_ltp=900, put_ltp=800),
                ],
            }
        }
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    async def fetch_snapshot(self, symbol: str) -> object:
        self.calls.append(symbol)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload


def test_get_snapshot_normalizes_symbol_and_payload() -> None:
    client = FakeNseClient()
    service = OptionsApplicationService(nse_client=client)

    snapshot = asyncio.run(service.get_snapshot(symbol=" bank nifty "))

    assert client.calls == ["BANKNIFTY"]
    assert snapshot.symbol == "BANKNIFTY"
    assert snapshot.expiry_dates == ("31-Jan-2024", "28-Feb-2024")
    assert len(snapshot.data) == 4


def test_get_snapshot_rejects_invalid_symbol_before_fetching() -> None:
    client = FakeNseClient()
    service = OptionsApplicationService(nse_client=client)

    with pytest.raises(ValueError, match="OPTIONS_INVALID_SYMBOL"):
        asyncio.run(service.get_snapshot(symbol="NIFTY;1"))
    assert client.calls == []


@pytest.mark.parametrize(
    "error",
    [
        UpstreamUnavailableError(status_code=503),
        UpstreamRejectedError(status_code=401, body="denied"),
    ],
)
def test_get_snapshot_propagates_upstream_errors(error: Exception) -> None:
    service = OptionsApplicationService(nse_client=FakeNseClient(error=error))

    with pytest.raises(type(error)):
        asyncio.run(service.get_snapshot(symbol="NIFTY"))


def test_get_snapshot_raises_malformed_payload_for_unexpected_shape() -> None:
    service = OptionsApplicationService(nse_client=FakeNseClient({"filtered": {}}))

    with pytest.raises(MalformedPayloadError):
        asyncio.run(service.get_snapshot(symbol="NIFTY"))


def test_get_snapshot_enforces_deadline() -> None:
    service = OptionsApplicationService(nse_client=FakeNseClient(delay=1.0), deadline_seconds=0.01)

    with pytest.raises(UpstreamDeadlineExceededError) as exc_info:
        asyncio.run(service.get_snapshot(symbol="NIFTY"))

    assert isinstance(exc_info.value, UpstreamUnavailableError)
    assert str(exc_info.value) == "NSE_UPSTREAM_DEADLINE_EXCEEDED"


def test_get_snapshot_without_client_reports_unavailable() -> None:
    service = OptionsApplicationService()

    with pytest.raises(UpstreamUnavailableError):
        asyncio.run(service.get_snapshot(symbol="NIFTY"))


def test_get_chain_defaults_to_nearest_expiry() -> None:
    service = OptionsApplicationService(nse_client=FakeNseClient())

    view = asyncio.run(service.get_chain(symbol="BANKNIFTY"))

    assert view.expiry_date == "31-Jan-2024"
    assert view.atm_strike == 47100
    assert [row.straddle_price for row in view.rows] == [590, 590, 630]


def test_get_straddle_matrix_validates_filters_before_fetching() -> None:
    client = FakeNseClient()
    service = OptionsApplicationService(nse_client=client)

    with pytest.raises(ValueError, match="OPTIONS_INVALID_STRIKE_MULTIPLE"):
        asyncio.run(service.get_straddle_matrix(symbol="BANKNIFTY", multiple=250))
    with pytest.raises(ValueError, match="OPTIONS_INVALID_ATM_WINDOW"):
        asyncio.run(service.get_straddle_matrix(symbol="BANKNIFTY", near_atm_strikes=101))
    assert client.calls == []

    matrix = asyncio.run(service.get_straddle_matrix(symbol="BANKNIFTY", multiple=500))
    assert [row.strike_price for row in matrix.rows] == [47000, 47500]
    assert matrix.rows[0].cells["31-Jan-2024"].total_oi == 1200
