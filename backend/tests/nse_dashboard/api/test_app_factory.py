from __future__ import annotations

import logging

from fastapi.testclient import TestClient

from nse_dashboard.core.config import settings
from nse_dashboard.main import create_app


def test_create_app_mounts_api_and_applies_log_level() -> None:
    with TestClient(create_app()) as client:
        response = client.get("/api/health", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert logging.getLogger("nse_dashboard").level == logging.getLevelName(settings.log_level)
