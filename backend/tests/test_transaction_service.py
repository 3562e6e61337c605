"""
Tests for transaction service: building unsigned payments and relaying signed ones.

Tests: TransactionBuilder.build, TransactionSubmitter.submit, decode_result_code
"""
import time

import pytest
from stellar_sdk import Keypair, Network, TextMemo, TransactionEnvelope
from stellar_sdk.memo import NoneMemo
from stellar_sdk.operation import Operation, Payment

from domain.errors import (
    AccountNotFoundError,
    GatewayUnavailableError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidInputError,
    MissingInputError,
    SubmissionRejectedError,
)
from services.transaction_service import (
    TransactionBuilder,
    TransactionSubmitter,
    decode_result_code,
)


def _parse(xdr: str, passphrase: str) -> TransactionEnvelope:
    return TransactionEnvelope.from_xdr(xdr, network_passphrase=passphrase)


class TestTransactionBuilder:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_builds_single_native_payment(self, testnet, fake_gateway, source_address, destination_address):
        builder = TransactionBuilder(testnet, fake_gateway)
        tx = await builder.build(source_address, destination_address, "1.5")

        envelope = _parse(tx.xdr, testnet.passphrase)
        operations = envelope.transaction.operations
        assert len(operations) == 1
        payment = operations[0]
        assert isinstance(payment, Payment)
        assert payment.destination.account_id == destination_address
        assert payment.asset.is_native()
        assert Operation.to_xdr_amount(payment.amount) == 15_000_000
        assert tx.amount_stroops == 15_000_000
        assert tx.amount == "1.5"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sequence_follows_loaded_account(self, testnet, fake_gateway, source_address, destination_address):
        fake_gateway.add_account(source_address, sequence=41)
        tx = await TransactionBuilder(testnet, fake_gateway).build(source_address, destination_address, "1")

        envelope = _parse(tx.xdr, testnet.passphrase)
        assert envelope.transaction.sequence == 42
        assert tx.sequence == 42
        assert envelope.transaction.source.account_id == source_address
        assert fake_gateway.loaded == [source_address]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fee_and_timeout_set(self, testnet, fake_gateway, source_address, destination_address):
        before = int(time.time())
        tx = await TransactionBuilder(testnet, fake_gateway).build(source_address, destination_address, "1")
        after = int(time.time())

        envelope = _parse(tx.xdr, testnet.passphrase)
        assert envelope.transaction.fee == 100
        assert tx.fee == 100
        bounds = envelope.transaction.preconditions.time_bounds
        assert before + 300 <= bounds.max_time <= after + 300

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_envelope_is_unsigned(self, testnet, fake_gateway, source_address, destination_address):
        tx = await TransactionBuilder(testnet, fake_gateway).build(source_address, destination_address, "1")
        assert _parse(tx.xdr, testnet.passphrase).signatures == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_text_memo_attached(self, testnet, fake_gateway, source_address, destination_address):
        tx = await TransactionBuilder(testnet, fake_gateway).build(
            source_address, destination_address, "1", memo="thanks for lunch"
        )
        memo = _parse(tx.xdr, testnet.passphrase).transaction.memo
        assert isinstance(memo, TextMemo)
        assert memo.memo_text == b"thanks for lunch"
        assert tx.memo == "thanks for lunch"

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("memo", [None, ""])
    async def test_no_memo_when_absent_or_empty(self, memo, testnet, fake_gateway, source_address, destination_address):
        tx = await TransactionBuilder(testnet, fake_gateway).build(
            source_address, destination_address, "1", memo=memo
        )
        assert isinstance(_parse(tx.xdr, testnet.passphrase).transaction.memo, NoneMemo)
        assert tx.memo is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_signable_for_configured_network(self, mainnet, fake_gateway, source_keypair, destination_address):
        """The envelope hash is bound to the network passphrase it was built for."""
        tx = await TransactionBuilder(mainnet, fake_gateway).build(
            source_keypair.public_key, destination_address, "1"
        )
        assert tx.network_passphrase == Network.PUBLIC_NETWORK_PASSPHRASE

        envelope = _parse(tx.xdr, Network.PUBLIC_NETWORK_PASSPHRASE)
        envelope.sign(source_keypair)
        source_keypair.verify(envelope.hash(), envelope.signatures[0].signature)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_source_reports_source(self, testnet, fake_gateway, bad_checksum_address, destination_address):
        with pytest.raises(InvalidAddressError) as exc_info:
            await TransactionBuilder(testnet, fake_gateway).build(bad_checksum_address, destination_address, "1")
        assert exc_info.value.field == "source"
        assert fake_gateway.loaded == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_destination_reports_destination(self, testnet, fake_gateway, source_address, bad_checksum_address):
        with pytest.raises(InvalidAddressError) as exc_info:
            await TransactionBuilder(testnet, fake_gateway).build(source_address, bad_checksum_address, "1")
        assert exc_info.value.field == "destination"
        assert exc_info.value.details == {"field": "destination"}
        assert fake_gateway.loaded == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-1", "abc", "0.00000001"])
    async def test_invalid_amount_fails_before_network(self, amount, testnet, fake_gateway, source_address, destination_address):
        with pytest.raises(InvalidAmountError):
            await TransactionBuilder(testnet, fake_gateway).build(source_address, destination_address, amount)
        assert fake_gateway.loaded == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_oversized_memo_fails_before_network(self, testnet, fake_gateway, source_address, destination_address):
        with pytest.raises(InvalidInputError):
            await TransactionBuilder(testnet, fake_gateway).build(
                source_address, destination_address, "1", memo="m" * 29
            )
        assert fake_gateway.loaded == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_source_account(self, testnet, fake_gateway, destination_address):
        stranger = Keypair.random().public_key
        with pytest.raises(AccountNotFoundError) as exc_info:
            await TransactionBuilder(testnet, fake_gateway).build(stranger, destination_address, "1")
        assert exc_info.value.status_code == 404

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_gateway_outage_propagates(self, testnet, fake_gateway, source_address, destination_address):
        fake_gateway.load_error = GatewayUnavailableError()
        with pytest.raises(GatewayUnavailableError):
            await TransactionBuilder(testnet, fake_gateway).build(source_address, destination_address, "1")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_each_build_reads_fresh_state(self, testnet, fake_gateway, source_address, destination_address):
        """No client-side sequencing: two builds against the same state share a sequence number."""
        builder = TransactionBuilder(testnet, fake_gateway)
        first = await builder.build(source_address, destination_address, "1")
        second = await builder.build(source_address, destination_address, "2")
        assert first.sequence == second.sequence == 1001
        assert fake_gateway.loaded == [source_address, source_address]


class TestTransactionSubmitter:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_result(self, testnet, fake_gateway):
        result = await TransactionSubmitter(testnet, fake_gateway).submit("AAAAsigned")
        assert result.hash == "a" * 64
        assert result.ledger == 123456
        assert result.successful is True
        assert result.result_code == "txSUCCESS"
        assert fake_gateway.submitted == ["AAAAsigned"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("signed", [None, "", "   "])
    async def test_missing_input(self, signed, testnet, fake_gateway):
        with pytest.raises(MissingInputError) as exc_info:
            await TransactionSubmitter(testnet, fake_gateway).submit(signed)
        assert exc_info.value.code == "MissingInput"
        assert exc_info.value.message.startswith("Missing signed transaction")
        assert fake_gateway.submitted == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rejection_keeps_result_codes(self, testnet, fake_gateway):
        codes = {"transaction": "tx_failed", "operations": ["op_underfunded"]}
        fake_gateway.submit_error = SubmissionRejectedError("Insufficient XLM balance", result_codes=codes)
        with pytest.raises(SubmissionRejectedError) as exc_info:
            await TransactionSubmitter(testnet, fake_gateway).submit("AAAAsigned")
        assert exc_info.value.result_codes == codes
        assert exc_info.value.details["result_codes"] == codes

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_submits_exactly_once(self, testnet, fake_gateway):
        fake_gateway.submit_error = GatewayUnavailableError()
        with pytest.raises(GatewayUnavailableError):
            await TransactionSubmitter(testnet, fake_gateway).submit("AAAAsigned")
        assert len(fake_gateway.submitted) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_result_xdr(self, testnet, fake_gateway):
        fake_gateway.submit_response = {"hash": "b" * 64, "ledger": 7, "successful": True}
        result = await TransactionSubmitter(testnet, fake_gateway).submit("AAAAsigned")
        assert result.result_code is None
        assert result.ledger == 7


class TestDecodeResultCode:

    @pytest.mark.unit
    def test_success(self):
        assert decode_result_code("AAAAAAAAAGQAAAAAAAAAAQAAAAAAAAABAAAAAAAAAAA=") == "txSUCCESS"

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, ""])
    def test_absent(self, value):
        assert decode_result_code(value) is None

    @pytest.mark.unit
    def test_garbage_is_none(self):
        assert decode_result_code("not-xdr") is None
