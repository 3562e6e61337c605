"""
Stellar XLM Blink — FastAPI Application

Serves a Blink (interactive action link) for native XLM payments: action
metadata, unsigned transaction construction, signed transaction relay to
Horizon, and the icon/preview assets.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, settings
from domain.errors import DomainError
from domain.responses import domain_error_response, error_response, internal_error_response
from middleware.blink_headers import BlinkHeadersMiddleware
from routes import accounts, actions, health

# ── Logging ─────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

AVAILABLE_ROUTES = [
    "/health",
    "/actions/transfer",
    "/actions/transfer/submit",
    "/actions/transfer/icon",
    "/actions/transfer/preview",
    "/accounts/{account_id}",
]


# ── Lifespan ────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings: Settings = app.state.settings
    app_settings.validate_settings()

    network = app.state.network
    logger.info("Stellar XLM Blinks backend started")
    logger.info(f"Stellar network: {network.name} ({network.horizon_url})")
    logger.info(f"Environment: {app_settings.environment}")
    logger.info(f"CORS origin: {app_settings.cors_origin}")

    yield  # app runs here

    logger.info("Shutting down")


# ── Exception Handlers ──────────────────────────────────────────────

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Render HTTP errors as `{error, message}`.

    DomainError carries its own code and details; unknown routes list the
    routes that do exist.
    """
    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=domain_error_response(exc))

    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content=error_response(
                "NotFound",
                f"The route {request.url.path} does not exist",
                available_routes=AVAILABLE_ROUTES,
            ),
        )

    detail = exc.detail
    message = detail if isinstance(detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response("HTTPError", message),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema violations are client input errors (400), not 422."""
    errors = exc.errors()
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in errors]
    fields = [f for f in fields if f]
    message = "Invalid request body"
    if fields:
        message = f"Invalid request fields: {', '.join(fields)}"
    return JSONResponse(status_code=400, content=error_response("InvalidInput", message))


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all for unhandled exceptions.

    Never returns raw exception details to clients; the traceback is logged.
    """
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=internal_error_response())


# ── App Factory ─────────────────────────────────────────────────────

def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the app for one network; the network is fixed for its lifetime."""
    app_settings = app_settings or settings
    network = app_settings.network

    app = FastAPI(
        title="Stellar XLM Blinks API",
        description="Blink actions for native XLM transfers on Stellar",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.network = network

    app.add_middleware(
        BlinkHeadersMiddleware,
        network=network,
        allow_origin=app_settings.cors_origin,
    )

    app.include_router(health.router)
    app.include_router(actions.router)
    app.include_router(accounts.router)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


app = create_app()


# ── Entrypoint ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
