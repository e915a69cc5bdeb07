from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from nse_dashboard.api.deps import get_stocks_service
from nse_dashboard.api.dto.mappers import to_equity_quote_out
from nse_dashboard.api.dto.stocks import EquityQuoteOut
from nse_dashboard.api.errors import raise_api_error
from nse_dashboard.application.stocks.service import StocksApplicationService
from nse_dashboard.domain.stocks.ordering import SORT_FIELDS

router = APIRouter()
_SORT_ORDERS = {"asc", "desc"}


@router.get("", response_model=list[EquityQuoteOut])
async def list_stocks(
    response: Response,
    sort: str | None = None,
    order: str = "desc",
    service: StocksApplicationService = Depends(get_stocks_service),
) -> list[EquityQuoteOut]:
    if sort is not None and sort not in SORT_FIELDS:
        raise_api_error(
            status_code=400,
            code="STOCKS_INVALID_SORT_FIELD",
            message=f"sort must be one of: {', '.join(SORT_FIELDS)}",
        )
    normalized_order = order.strip().lower()
    if normalized_order not in _SORT_ORDERS:
        raise_api_error(
            status_code=400,
            code="STOCKS_INVALID_SORT_ORDER",
            message="order must be asc or desc",
        )

    # Upstream errors only escape here when the fallback is disabled.
    result = await service.list_stocks(sort_field=sort, descending=normalized_order == "desc")

    response.headers["X-Data-Source"] = result.data_source
    return [to_equity_quote_out(quote) for quote in result.quotes]
