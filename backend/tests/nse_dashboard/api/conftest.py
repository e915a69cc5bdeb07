from __future__ import annotations

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from nse_dashboard.api.deps import get_options_service, get_stocks_service
from nse_dashboard.api.errors import install_api_error_handlers
from nse_dashboard.api.router import api_router
from nse_dashboard.application.options.service import OptionsApplicationService
from nse_dashboard.application.stocks.service import StocksApplicationService
from nse_dashboard.domain.errors import UpstreamRejectedError


def _leg(last_price: float, *, oi: int, volume: int) -> dict:
    return {
        "lastPrice": last_price,
        "change": 1.25,
        "openInterest": oi,
        "totalTradedVolume": volume,
        "impliedVolatility": 13.2,
        "changeinOpenInterest": 150,
    }


OPTION_CHAIN_PAYLOAD = {
    "records": {
        "underlyingValue": 18040.5,
        "timestamp": "25-Jan-2024 15:30:00",
        "data": [
            {"strikePrice": 17900, "expiryDate": "25-Jan-2024", "CE": _leg(180, oi=900, volume=40)},
            {"strikePrice": 18000, "expiryDate": "25-Jan-2024", "CE": _leg(120, oi=500, volume=80), "PE": _leg(80, oi=700, volume=90)},
            {"strikePrice": 18500, "expiryDate": "25-Jan-2024", "CE": _leg(5, oi=0, volume=0)},
            {"strikePrice": 18000, "expiryDate": "01-Feb-2024", "PE": _leg(140, oi=300, volume=20)},
            {"strikePrice": 18100, "expiryDate": "01-Feb-2024"},
        ],
    }
}

EQUITY_PAYLOAD = {
    "data": [
        {"symbol": "NIFTY 50", "lastPrice": 21500.5, "pChange": 0.4, "totalTradedVolume": 1000, "totalTradedValue": 1.0},
        {"symbol": "ITC", "lastPrice": 440, "pChange": 0.9, "totalTradedVolume": 2500, "totalTradedValue": 3.0},
        {"symbol": "TCS", "lastPrice": 3500, "pChange": -1.2, "totalTradedVolume": 900, "totalTradedValue": 7.0},
    ]
}


class FakeNseClient:
    def __init__(self) -> None:
        self.error: Exception | None = None
        self.snapshot_calls: list[str] = []

    async def fetch_snapshot(self, symbol: str) -> dict:
        self.snapshot_calls.append(symbol)
        if self.error is not None:
            raise self.error
        return OPTION_CHAIN_PAYLOAD

    async def fetch_equity_index(self, index: str = "NIFTY 50") -> dict:
        if self.error is not None:
            raise self.error
        return EQUITY_PAYLOAD


@pytest.fixture
def nse_client() -> FakeNseClient:
    return FakeNseClient()


@pytest.fixture
def rejecting_nse_client(nse_client: FakeNseClient) -> FakeNseClient:
    nse_client.error = UpstreamRejectedError(
        status_code=401,
        body='{"message": "Unauthorized"}',
        detail="data API returned HTTP 401",
    )
    return nse_client


@pytest.fixture
def api_client(nse_client: FakeNseClient) -> Generator[TestClient, None, None]:
    app = FastAPI()
    install_api_error_handlers(app)
    app.include_router(api_router, prefix="/api")
    app.dependency_overrides[get_options_service] = lambda: OptionsApplicationService(nse_client=nse_client)
    app.dependency_overrides[get_stocks_service] = lambda: StocksApplicationService(nse_client=nse_client)
    with TestClient(app) as client:
        yield client
