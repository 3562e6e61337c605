"""
XLM transfer Blink endpoints: metadata, build, submit, icon and preview.
"""
from datetime import datetime, timezone
import logging
from pathlib import Path
from string import Template
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import FileResponse, HTMLResponse

from config import NetworkConfig
from deps import get_network, get_transaction_builder, get_transaction_submitter
from domain.constants import (
    ACCOUNT_ID_PATTERN,
    CUSTOM_AMOUNT_MAX,
    CUSTOM_AMOUNT_MIN,
    PRESET_AMOUNTS,
)
from domain.enums import StellarNetwork
from domain.errors import MissingInputError
from domain.responses import ErrorResponse
from models import (
    ActionGetResponse,
    ActionLinks,
    ActionParameter,
    LinkedAction,
    SubmitMetadata,
    SubmitTransactionRequest,
    SubmitTransactionResponse,
    TransferMetadata,
    TransferRequest,
    TransferResponse,
)
from services.transaction_service import TransactionBuilder, TransactionSubmitter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/actions/transfer", tags=["actions"])

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
ICON_PATH = STATIC_DIR / "icon.svg"
PREVIEW_TEMPLATE = Template((STATIC_DIR / "preview.html").read_text(encoding="utf-8"))

# Stellar Wallets Kit network names
_WALLET_NETWORKS = {
    StellarNetwork.TESTNET.value: "TESTNET",
    StellarNetwork.MAINNET.value: "PUBLIC",
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def _recipient_parameter() -> ActionParameter:
    return ActionParameter(
        name="recipient",
        label="Recipient Stellar Address",
        type="text",
        required=True,
        pattern=ACCOUNT_ID_PATTERN,
    )


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@router.get("", response_model=ActionGetResponse, response_model_exclude_none=True)
async def get_transfer_action(request: Request):
    """Blink metadata: preset 1/5/10 XLM actions plus a custom amount action."""
    base = request.url.path
    actions = [
        LinkedAction(
            label=f"{amount} XLM",
            href=f"{base}?amount={amount}&recipient={{recipient}}",
            parameters=[_recipient_parameter()],
        )
        for amount in PRESET_AMOUNTS
    ]
    actions.append(
        LinkedAction(
            label="Custom Amount",
            href=f"{base}?amount={{amount}}&recipient={{recipient}}&memo={{memo}}",
            parameters=[
                ActionParameter(
                    name="amount",
                    label="Amount in XLM",
                    type="number",
                    required=True,
                    min=CUSTOM_AMOUNT_MIN,
                    max=CUSTOM_AMOUNT_MAX,
                ),
                _recipient_parameter(),
                ActionParameter(name="memo", label="Memo (Optional)", type="text", required=False),
            ],
        )
    )

    return ActionGetResponse(
        icon=str(request.url_for("get_transfer_icon")),
        label="Send XLM",
        title="Transfer XLM on Stellar",
        description=(
            "Send XLM instantly to any Stellar address. Choose from preset amounts "
            "or enter a custom amount."
        ),
        links=ActionLinks(actions=actions),
    )


@router.post("", response_model=TransferResponse, responses=_ERROR_RESPONSES)
async def create_transfer_transaction(
    transfer: Optional[TransferRequest] = None,
    query_amount: Optional[str] = Query(None, alias="amount"),
    query_recipient: Optional[str] = Query(None, alias="recipient"),
    query_memo: Optional[str] = Query(None, alias="memo"),
    network: NetworkConfig = Depends(get_network),
    builder: TransactionBuilder = Depends(get_transaction_builder),
):
    """
    Build an unsigned XLM payment for the client's wallet to sign.

    `amount`, `recipient` and `memo` may come from the JSON body or, as the
    action hrefs encode them, from the query string; the body wins.
    """
    transfer = transfer or TransferRequest()
    amount = transfer.amount if not _is_missing(transfer.amount) else query_amount
    recipient = transfer.recipient if not _is_missing(transfer.recipient) else query_recipient
    memo = transfer.memo if not _is_missing(transfer.memo) else query_memo
    account = transfer.account

    if _is_missing(amount) or _is_missing(recipient) or _is_missing(account):
        raise MissingInputError("Missing required fields: amount, recipient, and account are required")

    tx = await builder.build(account, recipient, str(amount), memo)
    logger.info(f"Transfer request: {tx.amount} XLM -> {tx.destination[:8]}... from {tx.source[:8]}...")

    return TransferResponse(
        message=f"Transfer {tx.amount} XLM to {recipient}",
        transaction=tx.xdr,
        network_passphrase=tx.network_passphrase,
        metadata=TransferMetadata(
            amount=tx.amount,
            amount_smallest_unit=tx.amount_stroops,
            recipient=tx.destination,
            source=tx.source,
            fee=str(tx.fee),
            network=network.name,
            memo=tx.memo,
        ),
    )


@router.post("/submit", response_model=SubmitTransactionResponse, responses=_ERROR_RESPONSES)
async def submit_transfer_transaction(
    body: Optional[SubmitTransactionRequest] = None,
    network: NetworkConfig = Depends(get_network),
    submitter: TransactionSubmitter = Depends(get_transaction_submitter),
):
    """Relay a wallet-signed transaction to Horizon (once, no retries)."""
    result = await submitter.submit(body.signed_transaction if body else None)

    return SubmitTransactionResponse(
        success=result.successful,
        hash=result.hash,
        status="SUCCESS" if result.successful else "FAILED",
        metadata=SubmitMetadata(
            network=network.name,
            timestamp=datetime.now(timezone.utc).isoformat(),
            ledger=result.ledger,
            result_code=result.result_code,
        ),
    )


@router.get("/icon")
async def get_transfer_icon():
    return FileResponse(ICON_PATH, media_type="image/svg+xml")


@router.get("/preview", response_class=HTMLResponse)
async def get_transfer_preview(request: Request, network: NetworkConfig = Depends(get_network)):
    """HTML page with social-preview meta tags and an embedded wallet flow."""
    html = PREVIEW_TEMPLATE.substitute(
        blink_url=str(request.url_for("get_transfer_action")),
        icon_url=str(request.url_for("get_transfer_icon")),
        transfer_path=router.prefix,
        submit_path=f"{router.prefix}/submit",
        network_name=network.name,
        network_passphrase=network.passphrase,
        wallet_network=_WALLET_NETWORKS.get(network.name, "TESTNET"),
    )
    return HTMLResponse(content=html)
