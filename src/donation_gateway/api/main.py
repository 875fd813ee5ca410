import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum
from starlette.concurrency import run_in_threadpool

from donation_gateway.api import routers
from donation_gateway.core.config import Settings, get_settings
from donation_gateway.core.dependencies import build_smtp_transport
from donation_gateway.core.exceptions import DonationGatewayError, MailError
from donation_gateway.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def donation_gateway_error_handler(request: Request, exc: DonationGatewayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    field = ".".join(str(part) for part in errors[0]["loc"]) if errors else "body"
    logger.warning(f"Rejected request body on {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"error": f"Invalid request field: {field}"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.SMTP_VERIFY_ON_STARTUP:
        try:
            await run_in_threadpool(build_smtp_transport(settings).verify)
            logger.info("SMTP server ready")
        except MailError as e:
            # Not fatal: sends fail and get logged individually later
            logger.error(f"SMTP error: {e.message}")
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Donation Gateway",
        root_path=settings.ROOT_PATH,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DonationGatewayError, donation_gateway_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Donation Gateway API"}

    app.include_router(routers.router)
    return app


configure_logging(get_settings().LOG_LEVEL)

app = create_app()

handler = Mangum(app)


def run() -> None:
    settings = get_settings()
    logger.info(f"Server running at http://localhost:{settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
