"""
Transaction service — builds unsigned XLM payments and relays signed ones.

TransactionBuilder turns (source, destination, amount, memo) into an
unsigned envelope the client signs in its own wallet. TransactionSubmitter
forwards the signed envelope to Horizon exactly once and normalizes the
result. Both hold only the immutable network config and a gateway.
"""
import logging
from dataclasses import dataclass

from stellar_sdk import Asset, TransactionBuilder as StellarTransactionBuilder
from stellar_sdk.xdr import TransactionResult

from config import NetworkConfig
from domain.constants import BASE_FEE, TRANSACTION_TIMEOUT_SECONDS
from domain.errors import MissingInputError
from stellar_client import LedgerGateway
from utils.amounts import to_stroops, to_xlm
from utils.validators import validate_memo, validate_stellar_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnsignedTransaction:
    """An unsigned envelope plus the facts the HTTP layer reports back."""
    xdr: str
    network_passphrase: str
    source: str
    destination: str
    amount: str
    amount_stroops: int
    fee: int
    sequence: int
    memo: str | None


@dataclass(frozen=True)
class SubmissionResult:
    hash: str
    ledger: int | None
    successful: bool
    result_code: str | None


def decode_result_code(result_xdr: str | None) -> str | None:
    """Name of the transaction result code in a result XDR (e.g. 'txSUCCESS')."""
    if not result_xdr:
        return None
    try:
        result = TransactionResult.from_xdr(result_xdr)
    except Exception as e:
        logger.warning(f"Could not decode result_xdr from Horizon: {e}")
        return None
    return result.result.code.name


class TransactionBuilder:
    """Builds single-payment native XLM transactions for external signing."""

    def __init__(self, network: NetworkConfig, gateway: LedgerGateway):
        self.network = network
        self.gateway = gateway

    async def build(
        self,
        source_account: str,
        destination_account: str,
        amount: str,
        memo: str | None = None,
    ) -> UnsignedTransaction:
        """
        Build an unsigned payment of `amount` XLM from source to destination.

        All validation happens before Horizon is contacted.

        Raises:
            InvalidAddressError: source or destination fails validation (details.field says which)
            InvalidAmountError: amount not convertible to a positive stroop count
            InvalidInputError: memo longer than 28 bytes
            AccountNotFoundError: source account does not exist
            GatewayUnavailableError: Horizon unreachable
        """
        validate_stellar_address(source_account, "source")
        validate_stellar_address(destination_account, "destination")
        stroops = to_stroops(amount)
        memo_text = validate_memo(memo)
        amount_xlm = to_xlm(stroops)

        account = await self.gateway.load_account(source_account)

        builder = StellarTransactionBuilder(
            source_account=account,
            network_passphrase=self.network.passphrase,
            base_fee=BASE_FEE,
        )
        builder.append_payment_op(
            destination=destination_account,
            asset=Asset.native(),
            amount=amount_xlm,
        )
        if memo_text:
            builder.add_text_memo(memo_text)
        builder.set_timeout(TRANSACTION_TIMEOUT_SECONDS)
        envelope = builder.build()

        logger.info(
            f"Built transfer of {amount_xlm} XLM ({stroops} stroops) "
            f"{source_account[:8]}... -> {destination_account[:8]}... "
            f"seq={envelope.transaction.sequence} on {self.network.name}"
        )
        return UnsignedTransaction(
            xdr=envelope.to_xdr(),
            network_passphrase=self.network.passphrase,
            source=source_account,
            destination=destination_account,
            amount=amount_xlm,
            amount_stroops=stroops,
            fee=envelope.transaction.fee,
            sequence=envelope.transaction.sequence,
            memo=memo_text,
        )


class TransactionSubmitter:
    """Relays client-signed envelopes to the ledger; no retries."""

    def __init__(self, network: NetworkConfig, gateway: LedgerGateway):
        self.network = network
        self.gateway = gateway

    async def submit(self, signed_xdr: str | None) -> SubmissionResult:
        """
        Submit a signed transaction XDR.

        Raises:
            MissingInputError: empty or absent envelope
            SubmissionRejectedError: ledger rejected it (result codes attached)
            GatewayUnavailableError: Horizon unreachable
        """
        if not signed_xdr or not signed_xdr.strip():
            raise MissingInputError(
                "Missing signed transaction: signed transaction XDR is required",
                field="signedTransaction",
            )

        logger.info(f"Submitting signed transaction ({len(signed_xdr)} chars) to {self.network.name}")
        response = await self.gateway.submit_signed_transaction(signed_xdr.strip())

        result = SubmissionResult(
            hash=response.get("hash"),
            ledger=response.get("ledger"),
            successful=bool(response.get("successful", False)),
            result_code=decode_result_code(response.get("result_xdr")),
        )
        logger.info(f"Transaction submitted: {result.hash} (ledger {result.ledger})")
        return result
