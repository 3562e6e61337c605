"""
Account lookup endpoint.
"""
import logging

from fastapi import APIRouter, Depends

from deps import get_ledger_gateway
from domain.responses import ErrorResponse
from models import AccountInfoResponse
from stellar_client import LedgerGateway
from utils.validators import validated_account

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get(
    "/{account_id}",
    response_model=AccountInfoResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def get_account_info(
    account_id: str = Depends(validated_account),
    gateway: LedgerGateway = Depends(get_ledger_gateway),
):
    """Current sequence number, balances, thresholds and signers of an account."""
    account = await gateway.load_account(account_id)
    raw = account.raw_data or {}
    return AccountInfoResponse(
        account_id=raw.get("id", account_id),
        sequence=str(raw.get("sequence", account.sequence)),
        balances=raw.get("balances", []),
        thresholds=raw.get("thresholds", {}),
        signers=raw.get("signers", []),
    )
