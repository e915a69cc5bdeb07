from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware

from nse_dashboard.api.errors import install_api_error_handlers
from nse_dashboard.api.router import api_router
from nse_dashboard.application.container import shutdown_nse_client
from nse_dashboard.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logging.getLogger("nse_dashboard").setLevel(settings.log_level)
    logger.info("Starting NSE dashboard backend (env=%s, upstream=%s)", settings.app_env, settings.nse_base_url)
    yield
    await shutdown_nse_client()


def create_app() -> FastAPI:
    application = FastAPI(title="NSE Chain Dashboard API", version="0.1.0", lifespan=lifespan)
    install_api_error_handlers(application)

    application.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Data-Source"],
    )

    application.include_router(api_router, prefix="/api")

    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run("nse_dashboard.main:app", host="0.0.0.0", port=8000, reload=True)
