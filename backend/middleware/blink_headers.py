"""
CORS + Blink protocol headers middleware.

Blink clients discover the target ledger and Actions protocol version from
`x-blockchain-ids` and `x-action-version`, so both headers (and the CORS
headers) go on every response: successes, error bodies, preflights and
unexpected 500s alike. OPTIONS on any path is answered here with 200.

Also logs one line per request with status and elapsed time.
"""
import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from config import NetworkConfig
from domain.constants import ACTION_VERSION_HEADER, BLINK_VERSION, BLOCKCHAIN_IDS_HEADER
from domain.responses import internal_error_response

logger = logging.getLogger(__name__)


def blink_headers(network: NetworkConfig, allow_origin: str = "*") -> dict[str, str]:
    """Headers attached to every response for the given network."""
    protocol_headers = f"{BLOCKCHAIN_IDS_HEADER}, {ACTION_VERSION_HEADER}"
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": f"Content-Type, {protocol_headers}",
        "Access-Control-Expose-Headers": protocol_headers,
        BLOCKCHAIN_IDS_HEADER: network.blockchain_id,
        ACTION_VERSION_HEADER: BLINK_VERSION,
    }


class BlinkHeadersMiddleware(BaseHTTPMiddleware):
    """Stamps CORS/Blink headers on every response and answers preflights."""

    def __init__(self, app: ASGIApp, network: NetworkConfig, allow_origin: str = "*"):
        super().__init__(app)
        self.headers = blink_headers(network, allow_origin)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.time()

        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(f"Unhandled exception on {request.url.path}: {e}", exc_info=True)
                response = JSONResponse(status_code=500, content=internal_error_response())

        response.headers.update(self.headers)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({process_time:.3f}s)"
        )
        return response
