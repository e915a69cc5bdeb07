from fastapi import APIRouter

from nse_dashboard.api.endpoints.health import router as health_router
from nse_dashboard.api.endpoints.options import router as options_router
from nse_dashboard.api.endpoints.stocks import router as stocks_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(options_router, prefix="/options", tags=["options"])
api_router.include_router(stocks_router, prefix="/stocks", tags=["stocks"])
