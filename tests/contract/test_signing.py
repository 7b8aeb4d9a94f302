"""
Tests for envelope signing, submission and result polling.
"""

from unittest.mock import AsyncMock, patch

import pytest

from soroban_client.contract.assembled_call import AssembledCall, build
from soroban_client.contract.sent_transaction import SentTransaction, Watcher
from soroban_client.contract.serialization import from_json
from soroban_client.rpc.api import GetTransactionStatus, SendTransactionStatus
from soroban_client.runtime.errors import (
    NeedsMoreSignaturesError,
    NoSignatureNeededError,
    NoSignerError,
    NotSignedError,
    NotYetBuiltError,
    SendFailedError,
    SendResultOnlyError,
    TransactionStillPendingError,
)
from soroban_client.tx.types import ScVal

from helpers import NETWORK, mk_address_auth_entry, mk_request, mk_transaction_data, raw_simulation_success


@pytest.fixture
def write_call_simulation():
    return raw_simulation_success(transaction_data=mk_transaction_data(read_write=1), retval=ScVal.u32(7))


class RecordingWatcher(Watcher):
    def __init__(self):
        self.submitted = []
        self.progress = []

    def on_submitted(self, response):
        self.submitted.append(response)

    def on_progress(self, response):
        self.progress.append(response)


class TestSign:
    """Test sign."""

    @pytest.mark.asyncio
    async def test_requires_built(self, submitter, fake_server):
        """Test an unbuilt call cannot be signed."""
        with pytest.raises(NotYetBuiltError):
            await AssembledCall(mk_request(submitter), fake_server).sign()

    @pytest.mark.asyncio
    async def test_read_call_needs_force(self, submitter, fake_server):
        """Test read calls are only signed with force."""
        call = await build(mk_request(submitter), server=fake_server)

        with pytest.raises(NoSignatureNeededError):
            await call.sign()
        await call.sign(force=True)

        assert call.signed is not None

    @pytest.mark.asyncio
    async def test_signature_valid(self, submitter, fake_server, write_call_simulation):
        """Test the envelope carries the submitter's signature over the transaction hash."""
        fake_server.default_simulation = write_call_simulation
        call = await build(mk_request(submitter), server=fake_server)

        await call.sign()

        assert len(call.signed.signatures) == 1
        decorated = call.signed.signatures[0]
        assert decorated.hint == submitter.signature_hint().hex()
        assert submitter.verify(call.signed.hash(NETWORK), bytes.fromhex(decorated.signature))

    @pytest.mark.asyncio
    async def test_rebuilt_before_signing(self, submitter, fake_server, write_call_simulation):
        """Test signing keeps sequence and fee and applies the simulated resources."""
        fake_server.default_simulation = write_call_simulation
        call = await build(mk_request(submitter), server=fake_server)
        assembled = call.built

        with patch("soroban_client.tx.builder.time.time", return_value=1_000_000):
            await call.sign()

        assert call.signed.sequence == assembled.sequence
        assert call.signed.fee == assembled.fee
        assert call.signed.soroban_data == call.simulation_data.transaction_data
        assert call.signed.time_bounds.max_time == 1_000_000 + 300

    @pytest.mark.asyncio
    async def test_needs_more_signatures(self, submitter, cosigner, fake_server):
        """Test pending cosigner entries block envelope signing."""
        fake_server.default_simulation = raw_simulation_success(auth=[mk_address_auth_entry(cosigner.public_key)])
        call = await build(mk_request(submitter), server=fake_server)

        with pytest.raises(NeedsMoreSignaturesError) as exc_info:
            await call.sign()
        assert exc_info.value.addresses == [cosigner.public_key]
        assert call.signed is None

    @pytest.mark.asyncio
    async def test_no_signer(self, submitter, fake_server, write_call_simulation):
        """Test a write call without a transaction signer fails."""
        fake_server.default_simulation = write_call_simulation
        call = await build(mk_request(submitter, sign_transaction=None), server=fake_server)

        with pytest.raises(NoSignerError):
            await call.sign()

    @pytest.mark.asyncio
    async def test_signer_override(self, submitter, fake_server, write_call_simulation):
        """Test a signer passed to sign wins and may be synchronous."""
        fake_server.default_simulation = write_call_simulation
        call = await build(mk_request(submitter, sign_transaction=None), server=fake_server)
        seen = []

        def sign_transaction(envelope_wire, network_passphrase=None):
            seen.append(network_passphrase)
            return envelope_wire

        await call.sign(sign_transaction=sign_transaction)

        assert seen == [NETWORK]
        assert call.signed.signatures == []


class TestSend:
    """Test send and sign_and_send."""

    @pytest.mark.asyncio
    async def test_requires_signed(self, submitter, fake_server, write_call_simulation):
        """Test sending an unsigned call fails."""
        fake_server.default_simulation = write_call_simulation
        call = await build(mk_request(submitter), server=fake_server)

        with pytest.raises(NotSignedError):
            await call.send()
        assert fake_server.sent == []

    @pytest.mark.asyncio
    async def test_sign_and_send(self, submitter, fake_server, write_call_simulation):
        """Test the signed envelope is sent and the result decoded."""
        fake_server.default_simulation = write_call_simulation
        fake_server.return_value = ScVal.u32(42)
        call = await build(mk_request(submitter, parse_result_xdr=lambda v: v.value), server=fake_server)

        sent = await call.sign_and_send()

        assert isinstance(sent, SentTransaction)
        assert fake_server.sent == [call.signed]
        assert fake_server.polled == [call.signed.hash_hex(NETWORK)]
        assert sent.get_transaction_response.status is GetTransactionStatus.SUCCESS
        assert sent.result == 42

    @pytest.mark.asyncio
    async def test_sign_and_send_keeps_existing_signature(self, submitter, fake_server, write_call_simulation):
        """Test an already signed call is sent without signing again."""
        fake_server.default_simulation = write_call_simulation
        call = await build(mk_request(submitter), server=fake_server)
        await call.sign()
        signed = call.signed

        await call.sign_and_send()

        assert call.signed is signed

    @pytest.mark.asyncio
    async def test_watcher_notified(self, submitter, fake_server, write_call_simulation):
        """Test the watcher sees submission and every poll."""
        fake_server.default_simulation = write_call_simulation
        call = await build(mk_request(submitter), server=fake_server)
        watcher = RecordingWatcher()

        await call.sign_and_send(watcher=watcher)

        assert len(watcher.submitted) == 1
        assert [r.status for r in watcher.progress] == [GetTransactionStatus.SUCCESS]

    @pytest.mark.asyncio
    async def test_send_rejected(self, submitter, fake_server, write_call_simulation):
        """Test a non-pending admission status raises SendFailedError."""
        fake_server.default_simulation = write_call_simulation
        fake_server.send_status = SendTransactionStatus.ERROR
        call = await build(mk_request(submitter), server=fake_server)

        with pytest.raises(SendFailedError) as exc_info:
            await call.sign_and_send()
        assert exc_info.value.response.status is SendTransactionStatus.ERROR
        assert fake_server.polled == []

    @pytest.mark.asyncio
    async def test_polls_until_final(self, submitter, fake_server, write_call_simulation):
        """Test NOT_FOUND statuses are polled past with backoff."""
        fake_server.default_simulation = write_call_simulation
        fake_server.transaction_statuses = [GetTransactionStatus.NOT_FOUND, GetTransactionStatus.NOT_FOUND]
        call = await build(mk_request(submitter), server=fake_server)

        with patch("soroban_client.contract.utils.asyncio.sleep", new=AsyncMock()) as sleep:
            sent = await call.sign_and_send()

        assert [r.status for r in sent.get_transaction_response_all] == [
            GetTransactionStatus.NOT_FOUND,
            GetTransactionStatus.NOT_FOUND,
            GetTransactionStatus.SUCCESS,
        ]
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_still_pending(self, submitter, fake_server, write_call_simulation):
        """Test no final status within the timeout raises TransactionStillPendingError."""
        fake_server.default_simulation = write_call_simulation
        fake_server.transaction_statuses = [GetTransactionStatus.NOT_FOUND]
        call = await build(mk_request(submitter, timeout_in_seconds=0), server=fake_server)

        with pytest.raises(TransactionStillPendingError):
            await call.sign_and_send()

    @pytest.mark.asyncio
    async def test_failed_transaction_result(self, submitter, fake_server, write_call_simulation):
        """Test reading the result of a failed transaction raises SendFailedError."""
        fake_server.default_simulation = write_call_simulation
        fake_server.transaction_statuses = [GetTransactionStatus.FAILED]
        call = await build(mk_request(submitter), server=fake_server)

        sent = await call.sign_and_send()

        with pytest.raises(SendFailedError):
            _ = sent.result

    @pytest.mark.asyncio
    async def test_result_before_polling(self, submitter, fake_server, write_call_simulation):
        """Test a transaction that was never sent has no result yet."""
        fake_server.default_simulation = write_call_simulation
        call = await build(mk_request(submitter), server=fake_server)

        with pytest.raises(SendResultOnlyError):
            _ = SentTransaction(call).result


class TestTwoPartyFlow:
    """Test the hand-off between a submitter and a cosigner."""

    @pytest.mark.asyncio
    async def test_cosigned_call(self, submitter, cosigner, fake_server):
        """Test A builds, B signs its entry remotely, A signs and submits."""
        fake_server.default_simulation = raw_simulation_success(
            auth=[mk_address_auth_entry(cosigner.public_key)],
            transaction_data=mk_transaction_data(read_write=1),
        )
        fake_server.return_value = ScVal.boolean(True)

        call_a = await build(mk_request(submitter), server=fake_server)
        assert call_a.needs_non_invoker_signing_by() == [cosigner.public_key]
        with pytest.raises(NeedsMoreSignaturesError):
            await call_a.sign()

        call_b = from_json(mk_request(cosigner), call_a.to_json(), server=fake_server)
        await call_b.sign_auth_entries()
        assert call_b.needs_non_invoker_signing_by() == []

        call_a = from_json(mk_request(submitter), call_b.to_json(), server=fake_server)
        assert call_a.needs_non_invoker_signing_by() == []
        assert call_a.needs_non_invoker_signing_by(include_already_signed=True) == [cosigner.public_key]

        sent = await call_a.sign_and_send()

        assert sent.result == ScVal.boolean(True)
        submitted = fake_server.sent[0]
        entry = submitted.operations[0].auth[0]
        assert not entry.credentials.address.signature.is_void
        assert submitted.sequence == 101
