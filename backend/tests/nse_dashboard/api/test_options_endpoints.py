from __future__ import annotations


def test_options_snapshot_returns_camel_case_contract(api_client, nse_client) -> None:
    response = api_client.get("/api/options", params={"symbol": "nifty 50"})

    assert response.status_code == 200
    body = response.json()
    assert nse_client.snapshot_calls == ["NIFTY"]
    assert body["symbol"] == "NIFTY"
    assert body["underlyingValue"] == 18040.5
    assert body["expiryDates"] == ["25-Jan-2024", "01-Feb-2024"]
    assert body["timestamp"] == "25-Jan-2024 15:30:00"
    assert len(body["data"]) == 4
    first = body["data"][1]
    assert first["strikePrice"] == 18000
    assert first["expiryDate"] == "25-Jan-2024"
    assert first["CE"]["lastPrice"] == 120
    assert first["CE"]["openInterest"] == 500
    assert first["CE"]["totalTradedVolume"] == 80
    assert first["CE"]["changeinOpenInterest"] == 150
    assert first["PE"]["impliedVolatility"] == 13.2
    assert body["data"][0]["PE"] is None


def test_options_snapshot_defaults_to_nifty(api_client, nse_client) -> None:
    response = api_client.get("/api/options")

    assert response.status_code == 200
    assert nse_client.snapshot_calls == ["NIFTY"]


def test_options_snapshot_rejects_invalid_symbol(api_client, nse_client) -> None:
    response = api_client.get("/api/options", params={"symbol": "NIFTY<script>"})

    assert response.status_code == 400
    assert response.json()["code"] == "OPTIONS_INVALID_SYMBOL"
    assert nse_client.snapshot_calls == []


def test_options_snapshot_reports_upstream_rejection(api_client, rejecting_nse_client) -> None:
    response = api_client.get("/api/options", params={"symbol": "BANKNIFTY"})

    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "Failed to fetch options data"
    assert body["code"] == "NSE_UPSTREAM_REJECTED"
    assert body["details"]["status"] == 401
    assert body["details"]["body"] == '{"message": "Unauthorized"}'


def test_options_chain_returns_liquid_rows_for_selected_expiry(api_client) -> None:
    response = api_client.get("/api/options/chain", params={"symbol": "NIFTY"})

    assert response.status_code == 200
    body = response.json()
    assert body["expiryDate"] == "25-Jan-2024"
    assert body["atmStrike"] == 18000
    assert body["maxOpenInterest"] == 900
    assert [row["strikePrice"] for row in body["rows"]] == [17900, 18000]
    atm_row = body["rows"][1]
    assert atm_row["isAtm"] is True
    assert atm_row["straddlePrice"] == 200
    assert atm_row["calls"]["volume"] == 80
    assert body["rows"][0]["puts"] == {"lastPrice": 0.0, "change": 0.0, "openInterest": 0, "volume": 0}


def test_options_chain_unknown_expiry_is_not_found(api_client) -> None:
    response = api_client.get("/api/options/chain", params={"symbol": "NIFTY", "expiry": "2030-01-01"})

    assert response.status_code == 404
    assert response.json()["code"] == "OPTIONS_EXPIRY_NOT_FOUND"


def test_options_straddles_groups_strikes_across_expiries(api_client) -> None:
    response = api_client.get("/api/options/straddles", params={"symbol": "NIFTY", "multiple": 100})

    assert response.status_code == 200
    body = response.json()
    assert body["expiryDates"] == ["25-Jan-2024", "01-Feb-2024"]
    assert body["maxTotalOI"] == 1200
    assert [row["strikePrice"] for row in body["rows"]] == [17900, 18000, 18500]
    cells = body["rows"][1]["cells"]
    assert cells["25-Jan-2024"] == {"ltp": 200, "change": 2.5, "callOI": 500, "putOI": 700, "totalOI": 1200}
    assert cells["01-Feb-2024"]["callOI"] == 0


def test_options_straddles_validates_filters(api_client) -> None:
    bad_multiple = api_client.get("/api/options/straddles", params={"multiple": 250})
    bad_window = api_client.get("/api/options/straddles", params={"near_atm": 500})

    assert bad_multiple.status_code == 400
    assert bad_multiple.json()["code"] == "OPTIONS_INVALID_STRIKE_MULTIPLE"
    assert bad_window.status_code == 400
    assert bad_window.json()["code"] == "OPTIONS_INVALID_ATM_WINDOW"
