from __future__ import annotations

from fastapi import APIRouter, Depends

from nse_dashboard.api.deps import get_options_service
from nse_dashboard.api.dto.mappers import to_option_chain_out, to_option_snapshot_out, to_straddle_matrix_out
from nse_dashboard.api.dto.options import OptionChainOut, OptionSnapshotOut, StraddleMatrixOut
from nse_dashboard.api.errors import raise_api_error, raise_upstream_error
from nse_dashboard.application.options.service import OptionsApplicationService
from nse_dashboard.domain.errors import NseDataError

router = APIRouter()

_FETCH_FAILED_MESSAGE = "Failed to fetch options data"
_MESSAGES = {
    "OPTIONS_INVALID_SYMBOL": "symbol is required and must match ^[A-Z0-9&.-]{1,20}$",
    "OPTIONS_INVALID_STRIKE_MULTIPLE": "multiple must be 100 or 500",
    "OPTIONS_INVALID_ATM_WINDOW": "near_atm must be between 0 and 100",
    "OPTIONS_EXPIRY_NOT_FOUND": "expiry not found in option chain",
}


@router.get("", response_model=OptionSnapshotOut)
async def get_option_snapshot(
    symbol: str = "NIFTY",
    service: OptionsApplicationService = Depends(get_options_service),
) -> OptionSnapshotOut:
    try:
        snapshot = await service.get_snapshot(symbol=symbol)
        return to_option_snapshot_out(snapshot)
    except ValueError as exc:
        _raise_options_service_error(exc)


@router.get("/chain", response_model=OptionChainOut)
async def get_option_chain(
    symbol: str = "NIFTY",
    expiry: str | None = None,
    service: OptionsApplicationService = Depends(get_options_service),
) -> OptionChainOut:
    try:
        view = await service.get_chain(symbol=symbol, expiry=expiry)
        return to_option_chain_out(view)
    except ValueError as exc:
        _raise_options_service_error(exc)


@router.get("/straddles", response_model=StraddleMatrixOut)
async def get_straddle_matrix(
    symbol: str = "NIFTY",
    multiple: int | None = None,
    near_atm: int | None = None,
    service: OptionsApplicationService = Depends(get_options_service),
) -> StraddleMatrixOut:
    try:
        matrix = await service.get_straddle_matrix(
            symbol=symbol,
            multiple=multiple,
            near_atm_strikes=near_atm,
        )
        return to_straddle_matrix_out(matrix)
    except ValueError as exc:
        _raise_options_service_error(exc)


def _raise_options_service_error(exc: ValueError) -> None:
    if isinstance(exc, NseDataError):
        raise_upstream_error(exc, message=_FETCH_FAILED_MESSAGE)

    detail = str(exc)
    if detail == "OPTIONS_EXPIRY_NOT_FOUND":
        raise_api_error(status_code=404, code=detail, message=_MESSAGES[detail])
    raise_api_error(
        status_code=400,
        code=detail if detail.startswith("OPTIONS_") else "OPTIONS_INVALID_REQUEST",
        message=_MESSAGES.get(detail, detail),
    )

