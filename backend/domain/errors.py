"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to the `{error, message, details}` body by the
exception handlers in main.py. `code` is the wire value of `error`.
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    code = "DomainError"

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}


class InvalidInputError(DomainError):
    """Malformed request field (400)."""
    code = "InvalidInput"

    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        details = dict(details or {})
        if field:
            details.setdefault("field", field)
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class MissingInputError(InvalidInputError):
    """Required field absent or empty (400)."""
    code = "MissingInput"


class InvalidAddressError(DomainError):
    """Account ID fails structural or checksum validation (400)."""
    code = "InvalidAddress"

    def __init__(self, field: str, address: object = None):
        self.field = field
        message = f"Invalid {field} account address"
        if isinstance(address, str) and address:
            message = f"{message}: {address[:12]}..."
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details={"field": field})


class InvalidAmountError(DomainError):
    """Amount is not a positive, representable XLM value (400)."""
    code = "InvalidAmount"

    def __init__(self, message: str = "Amount must be a positive number", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class AccountNotFoundError(DomainError):
    """Account does not exist on the ledger (404)."""
    code = "AccountNotFound"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(
            "The source account does not exist on the Stellar network",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"account": account_id},
        )


class GatewayUnavailableError(DomainError):
    """Horizon unreachable or answered with an unexpected error (502)."""
    code = "GatewayUnavailable"

    def __init__(self, message: str = "Stellar Horizon is unavailable", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY, details=details)


class SubmissionRejectedError(DomainError):
    """Horizon rejected a signed transaction (500); result codes kept verbatim."""
    code = "SubmissionRejected"

    def __init__(self, message: str, result_codes: dict | None = None, result_xdr: str | None = None):
        self.result_codes = result_codes or {}
        self.result_xdr = result_xdr
        details = {"result_codes": self.result_codes}
        if result_xdr:
            details["result_xdr"] = result_xdr
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)
