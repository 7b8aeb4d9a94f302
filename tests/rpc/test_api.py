"""
Tests for RPC response models and simulation classification.
"""

import pytest

from soroban_client.rpc.api import (
    GetTransactionResponse,
    GetTransactionStatus,
    SimulateTransactionErrorResponse,
    SimulateTransactionRestoreResponse,
    SimulateTransactionSuccessResponse,
    is_simulation_error,
    is_simulation_restore,
    is_simulation_success,
    parse_raw_simulation,
)
from soroban_client.runtime.errors import UnmarshalError
from soroban_client.tx.types import ScVal

from helpers import (
    mk_address_auth_entry,
    mk_keypair,
    mk_transaction_data,
    raw_simulation_error,
    raw_simulation_restore,
    raw_simulation_success,
)


class TestParseRawSimulation:
    """Test classification of raw simulation results."""

    def test_success(self):
        """Test a success result decodes auth, return value and resources."""
        entry = mk_address_auth_entry(mk_keypair(2).public_key)
        raw = raw_simulation_success(auth=[entry], retval=ScVal.u32(5), min_resource_fee=321)

        sim = parse_raw_simulation(raw)

        assert isinstance(sim, SimulateTransactionSuccessResponse)
        assert sim.result.auth == [entry]
        assert sim.result.retval == ScVal.u32(5)
        assert sim.min_resource_fee == 321
        assert sim.transaction_data == mk_transaction_data(resource_fee=321)
        assert sim.latest_ledger == 1_000

    def test_error(self):
        """Test an error result keeps the diagnostic."""
        sim = parse_raw_simulation(raw_simulation_error("HostError: Error(Contract, #3)"))
        assert isinstance(sim, SimulateTransactionErrorResponse)
        assert "Error(Contract, #3)" in sim.error

    def test_restore(self):
        """Test a restore preamble makes the result restore-shaped."""
        sim = parse_raw_simulation(raw_simulation_restore(restore_fee=999))
        assert isinstance(sim, SimulateTransactionRestoreResponse)
        assert sim.restore_preamble.min_resource_fee == 999
        assert len(sim.restore_preamble.transaction_data.resources.footprint.read_write) == 2

    def test_missing_results(self):
        """Test a success without results has no host function result."""
        raw = raw_simulation_success()
        del raw["results"]
        assert parse_raw_simulation(raw).result is None

    def test_bad_wire_data(self):
        """Test undecodable resource data raises UnmarshalError."""
        raw = raw_simulation_success()
        raw["transactionData"] = "not base64!"
        with pytest.raises(UnmarshalError):
            parse_raw_simulation(raw)

    @pytest.mark.parametrize("raw, expected", [
        (raw_simulation_error(), (True, False, False)),
        (raw_simulation_restore(), (False, True, False)),
        (raw_simulation_success(), (False, False, True)),
    ])
    def test_classifiers_exclusive(self, raw, expected):
        """Test exactly one classifier matches each shape."""
        sim = parse_raw_simulation(raw)
        assert (is_simulation_error(sim), is_simulation_restore(sim), is_simulation_success(sim)) == expected


class TestGetTransactionResponse:
    """Test getTransaction decoding."""

    def test_return_value_decoded(self):
        """Test a wire return value is decoded into an ScVal."""
        response = GetTransactionResponse.from_raw({
            "status": "SUCCESS",
            "latestLedger": 10,
            "ledger": 9,
            "returnValue": ScVal.string("hi").to_wire(),
        })
        assert response.status is GetTransactionStatus.SUCCESS
        assert response.return_value == ScVal.string("hi")

    def test_not_found(self):
        """Test a pending transaction has no return value."""
        response = GetTransactionResponse.from_raw({"status": "NOT_FOUND", "latestLedger": 10})
        assert response.status is GetTransactionStatus.NOT_FOUND
        assert response.return_value is None
