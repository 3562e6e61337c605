"""
Pydantic models for request/response validation.
"""
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BlinkBase(BaseModel):
    """Shared base; allows construction by Python name or camelCase alias."""
    model_config = ConfigDict(populate_by_name=True)


# ── Action Descriptor (GET /actions/transfer) ──────────────────────

class ActionParameter(BlinkBase):
    name: str
    label: str
    type: str = "text"
    required: bool = True
    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None


class LinkedAction(BlinkBase):
    type: str = "transaction"
    label: str
    href: str
    parameters: List[ActionParameter] = Field(default_factory=list)


class ActionLinks(BlinkBase):
    actions: List[LinkedAction]


class ActionGetResponse(BlinkBase):
    """Blink metadata rendered by Blink-aware clients."""
    type: str = "action"
    icon: str
    label: str
    title: str
    description: str
    links: ActionLinks


# ── Transfer (POST /actions/transfer) ──────────────────────────────

class TransferRequest(BlinkBase):
    """
    Request to build an unsigned XLM transfer.

    Every field is optional at the schema level so missing fields surface
    as a MissingInput error rather than a schema error.
    """
    amount: Optional[Union[str, int, float]] = Field(default=None, description="Amount in XLM")
    recipient: Optional[str] = Field(default=None, description="Destination account ID")
    account: Optional[str] = Field(default=None, description="Source account ID (the signer)")
    memo: Optional[str] = Field(default=None, description="Optional text memo (max 28 bytes)")


class TransferMetadata(BlinkBase):
    amount: str
    amount_smallest_unit: int = Field(..., alias="amountSmallestUnit")
    recipient: str
    source: str
    fee: str
    network: str
    memo: Optional[str] = None


class TransferResponse(BlinkBase):
    type: str = "transaction"
    message: str
    transaction: str = Field(..., description="Base64 XDR of the unsigned transaction envelope")
    network_passphrase: str = Field(..., alias="networkPassphrase")
    metadata: TransferMetadata


# ── Submission (POST /actions/transfer/submit) ─────────────────────

class SubmitTransactionRequest(BlinkBase):
    signed_transaction: Optional[str] = Field(
        default=None,
        alias="signedTransaction",
        description="Base64 XDR of the signed transaction envelope",
    )


class SubmitMetadata(BlinkBase):
    network: str
    timestamp: str
    ledger: Optional[int] = None
    result_code: Optional[str] = Field(default=None, alias="resultCode")


class SubmitTransactionResponse(BlinkBase):
    success: bool
    message: str = "Transaction submitted successfully"
    hash: str
    status: str
    metadata: SubmitMetadata


# ── Accounts / Health ──────────────────────────────────────────────

class AccountInfoResponse(BlinkBase):
    account_id: str = Field(..., alias="accountId")
    sequence: str
    balances: List[dict[str, Any]] = Field(default_factory=list)
    thresholds: dict[str, Any] = Field(default_factory=dict)
    signers: List[dict[str, Any]] = Field(default_factory=list)


class HealthResponse(BlinkBase):
    status: str
    service: str
    timestamp: str
    network: str
