from __future__ import annotations

import pytest

from nse_dashboard.core.config import Settings


def test_settings_defaults_point_at_nse() -> None:
    settings = Settings(nse_base_url="https://www.nseindia.com/", log_level=" debug ")

    assert settings.nse_base_url == "https://www.nseindia.com"
    assert settings.log_level == "DEBUG"
    assert settings.default_shares_outstanding == 1_000_000_000


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"nse_fetch_deadline_seconds": 0}, "NSE_FETCH_DEADLINE_SECONDS"),
        ({"nse_session_ttl_seconds": -5}, "NSE_SESSION_TTL_SECONDS"),
        ({"nse_min_request_interval_seconds": -0.1}, "NSE_MIN_REQUEST_INTERVAL_SECONDS"),
        ({"nse_max_retries": -1}, "NSE_MAX_RETRIES"),
    ],
)
def test_settings_rejects_invalid_upstream_timing(overrides: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        Settings(**overrides)


def test_settings_reads_user_agent_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("USER_AGENT", "custom-agent/2.0")

    assert Settings().nse_user_agent == "custom-agent/2.0"
