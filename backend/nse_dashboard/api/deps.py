from __future__ import annotations

from nse_dashboard.application.container import build_options_service, build_stocks_service
from nse_dashboard.application.options.service import OptionsApplicationService
from nse_dashboard.application.stocks.service import StocksApplicationService


def get_options_service() -> OptionsApplicationService:
    return build_options_service()


def get_stocks_service() -> StocksApplicationService:
    return build_stocks_service()
