"""
Pytest configuration and shared fixtures.

Provides FastAPI test clients for both networks and an in-memory fake of the
ledger gateway, so no test talks to Horizon.
"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from stellar_sdk import Account, Keypair

from config import NETWORKS, Settings
from deps import get_ledger_gateway
from domain.enums import StellarNetwork
from domain.errors import AccountNotFoundError
from main import create_app


class FakeLedgerGateway:
    """
    In-memory LedgerGateway.

    Accounts are registered with a sequence number; submissions are recorded
    and answered with `submit_response`, or `submit_error` is raised.
    """

    def __init__(self):
        self.accounts: dict[str, int] = {}
        self.loaded: list[str] = []
        self.submitted: list[str] = []
        self.submit_response: dict = {
            "hash": "a" * 64,
            "ledger": 123456,
            "successful": True,
            "result_xdr": "AAAAAAAAAGQAAAAAAAAAAQAAAAAAAAABAAAAAAAAAAA=",
        }
        self.load_error: Exception | None = None
        self.submit_error: Exception | None = None

    def add_account(self, account_id: str, sequence: int = 1000) -> None:
        self.accounts[account_id] = sequence

    async def load_account(self, account_id: str) -> Account:
        self.loaded.append(account_id)
        if self.load_error is not None:
            raise self.load_error
        if account_id not in self.accounts:
            raise AccountNotFoundError(account_id)
        sequence = self.accounts[account_id]
        raw_data = {
            "id": account_id,
            "sequence": str(sequence),
            "balances": [{"asset_type": "native", "balance": "100.0000000"}],
            "thresholds": {"low_threshold": 0, "med_threshold": 0, "high_threshold": 0},
            "signers": [{"key": account_id, "weight": 1, "type": "ed25519_public_key"}],
        }
        return Account(account_id, sequence, raw_data=raw_data)

    async def submit_signed_transaction(self, signed_xdr: str) -> dict:
        self.submitted.append(signed_xdr)
        if self.submit_error is not None:
            raise self.submit_error
        return self.submit_response


# ── Address Fixtures ─────────────────────────────────────────────────


@pytest.fixture
def source_keypair() -> Keypair:
    return Keypair.random()


@pytest.fixture
def source_address(source_keypair: Keypair) -> str:
    return source_keypair.public_key


@pytest.fixture
def destination_address() -> str:
    return Keypair.random().public_key


@pytest.fixture
def bad_checksum_address() -> str:
    """Right shape (G + 55 base32 chars) but fails the strkey checksum."""
    return "G" + "A" * 55


# ── Network / Gateway Fixtures ───────────────────────────────────────


@pytest.fixture
def testnet():
    return NETWORKS[StellarNetwork.TESTNET]


@pytest.fixture
def mainnet():
    return NETWORKS[StellarNetwork.MAINNET]


@pytest.fixture
def fake_gateway(source_address: str) -> FakeLedgerGateway:
    gateway = FakeLedgerGateway()
    gateway.add_account(source_address, sequence=1000)
    return gateway


# ── App Fixtures ─────────────────────────────────────────────────────


def _client_for(network: StellarNetwork, gateway: FakeLedgerGateway, **overrides) -> TestClient:
    app = create_app(Settings(stellar_network=network, _env_file=None, **overrides))
    app.dependency_overrides[get_ledger_gateway] = lambda: gateway
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def test_client(fake_gateway: FakeLedgerGateway) -> Generator[TestClient, None, None]:
    """Testnet app with the fake gateway wired in."""
    with _client_for(StellarNetwork.TESTNET, fake_gateway) as client:
        yield client


@pytest.fixture
def mainnet_client(fake_gateway: FakeLedgerGateway) -> Generator[TestClient, None, None]:
    """Mainnet app with a restricted CORS origin."""
    with _client_for(StellarNetwork.MAINNET, fake_gateway, cors_origin="https://example.com") as client:
        yield client
