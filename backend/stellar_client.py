"""
Stellar Horizon gateway.

The rest of the service only sees the narrow LedgerGateway interface
(load an account, submit a signed envelope); HorizonGateway implements it
on top of stellar-sdk's async server. Each call opens its own Horizon
session, so no connection state outlives a request.
"""
import logging
import struct
from typing import Any, Protocol

from stellar_sdk import Account
from stellar_sdk.client.aiohttp_client import AiohttpClient
from stellar_sdk.exceptions import (
    BadRequestError,
    BaseHorizonError,
    ConnectionError as StellarConnectionError,
    NotFoundError,
)
from stellar_sdk.server_async import ServerAsync

from config import NetworkConfig
from domain.errors import (
    AccountNotFoundError,
    GatewayUnavailableError,
    InvalidInputError,
    SubmissionRejectedError,
)

logger = logging.getLogger(__name__)


class LedgerGateway(Protocol):
    """What the transaction services need from the ledger."""

    async def load_account(self, account_id: str) -> Account:
        ...

    async def submit_signed_transaction(self, signed_xdr: str) -> dict[str, Any]:
        ...


def describe_result_codes(result_codes: dict) -> str:
    """
    Turn Horizon result codes into a user-facing message.

    Falls back to listing the raw codes when none is recognised.
    """
    tx_code = result_codes.get("transaction") or ""
    op_codes = result_codes.get("operations") or []
    codes = [tx_code, *op_codes]

    if "op_underfunded" in codes or "tx_insufficient_balance" in codes:
        return "Insufficient XLM balance for this transfer"
    elif "op_no_destination" in codes:
        return "Destination account does not exist; send at least 1 XLM to create it"
    elif "op_low_reserve" in codes:
        return "Transfer would leave an account below the minimum reserve"
    elif "tx_bad_seq" in codes:
        return "Sequence number mismatch; rebuild the transaction and sign again"
    elif "tx_too_late" in codes:
        return "Transaction expired before submission; rebuild and sign again"
    elif "tx_insufficient_fee" in codes:
        return "Transaction fee too low for current network load"
    elif "tx_bad_auth" in codes:
        return "Invalid or missing transaction signature"
    elif "tx_malformed" in codes:
        return "Malformed transaction envelope"
    else:
        raw = ", ".join(c for c in codes if c) or "unknown error"
        return f"Transaction failed: {raw}"


class HorizonGateway:
    """LedgerGateway backed by a Horizon REST server."""

    def __init__(self, network: NetworkConfig):
        self.network = network

    def _server(self) -> ServerAsync:
        return ServerAsync(horizon_url=self.network.horizon_url, client=AiohttpClient())

    async def load_account(self, account_id: str) -> Account:
        """
        Load the account's current state (sequence number, balances).

        Raises:
            AccountNotFoundError: Horizon answered 404
            GatewayUnavailableError: any other transport or Horizon error
        """
        try:
            async with self._server() as server:
                return await server.load_account(account_id)
        except NotFoundError:
            raise AccountNotFoundError(account_id)
        except BaseHorizonError as e:
            logger.error(f"Horizon error loading {account_id}: {e.status} {e.title}")
            raise GatewayUnavailableError(
                f"Failed to load account from Horizon: {e.title or e.status}"
            )
        except StellarConnectionError as e:
            logger.error(f"Horizon unreachable at {self.network.horizon_url}: {e}")
            raise GatewayUnavailableError()

    async def submit_signed_transaction(self, signed_xdr: str) -> dict[str, Any]:
        """
        Forward a signed envelope to Horizon's /transactions endpoint.

        Raises:
            SubmissionRejectedError: Horizon answered 400; carries extras.result_codes
            GatewayUnavailableError: transport failure or any other Horizon error
            InvalidInputError: the envelope does not decode as transaction XDR
        """
        try:
            async with self._server() as server:
                return await server.submit_transaction(signed_xdr, skip_memo_required_check=True)
        except BadRequestError as e:
            extras = e.extras or {}
            result_codes = extras.get("result_codes") or {}
            logger.warning(f"Horizon rejected transaction: {result_codes or e.title}")
            message = describe_result_codes(result_codes) if result_codes else (e.detail or e.title or "Transaction rejected")
            raise SubmissionRejectedError(
                message,
                result_codes=result_codes,
                result_xdr=extras.get("result_xdr"),
            )
        except BaseHorizonError as e:
            logger.error(f"Horizon error submitting transaction: {e.status} {e.title}")
            raise GatewayUnavailableError(
                f"Horizon failed to accept the transaction: {e.title or e.status}"
            )
        except StellarConnectionError as e:
            logger.error(f"Horizon unreachable at {self.network.horizon_url}: {e}")
            raise GatewayUnavailableError()
        except (ValueError, EOFError, struct.error) as e:
            # stellar-sdk decodes the envelope before posting it
            logger.warning(f"Undecodable signed transaction: {type(e).__name__}: {e}")
            raise InvalidInputError(
                "Invalid signed transaction: not a decodable transaction envelope",
                field="signedTransaction",
            )
