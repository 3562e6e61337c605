"""
Domain constants used across services/routers.
"""

# Native asset units: 1 XLM = 10,000,000 stroops
STROOPS_PER_XLM = 10_000_000
MAX_STROOPS = 2**63 - 1  # amounts are signed 64-bit on the ledger

# Flat per-operation fee in stroops; every transfer has exactly one operation
BASE_FEE = 100

# Seconds until a built transaction can no longer be included in a ledger
TRANSACTION_TIMEOUT_SECONDS = 300

MEMO_TEXT_MAX_BYTES = 28

# Account IDs: 'G' followed by 55 base32 characters
ACCOUNT_ID_LENGTH = 56
ACCOUNT_ID_PREFIX = "G"
ACCOUNT_ID_PATTERN = "^G[A-Z0-9]{55}$"

# Blink protocol
BLINK_VERSION = "2.4"
BLOCKCHAIN_IDS_HEADER = "x-blockchain-ids"
ACTION_VERSION_HEADER = "x-action-version"

PRESET_AMOUNTS = ("1", "5", "10")
CUSTOM_AMOUNT_MIN = 0.0000001
CUSTOM_AMOUNT_MAX = 1_000_000

SERVICE_NAME = "Stellar XLM Blinks Backend"
