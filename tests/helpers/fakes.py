"""
In-memory stand-ins for the Soroban RPC server.

``FakeServer`` implements the five coroutine methods the contract client
uses and records every request, so tests never open a socket.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from soroban_client.rpc.api import (
    GetLatestLedgerResponse,
    GetTransactionResponse,
    GetTransactionStatus,
    SendTransactionResponse,
    SendTransactionStatus,
    SimulateTransactionResponse,
    parse_raw_simulation,
)
from soroban_client.runtime.errors import AccountNotFoundError
from soroban_client.tx.builder import Account
from soroban_client.tx.types import ScVal, Transaction

from .factories import NETWORK, raw_simulation_success


class FakeServer:
    """
    Scripted Soroban RPC server.

    Simulations are served from ``simulations`` in order; once it is empty
    ``default_simulation`` is used. Sent transactions bump the source
    account's sequence the way the ledger does.
    """

    def __init__(self, accounts: Optional[Dict[str, int]] = None,
                 simulations: Optional[List[Dict[str, Any]]] = None,
                 default_simulation: Optional[Dict[str, Any]] = None,
                 latest_ledger: int = 1_000):
        self.accounts: Dict[str, int] = dict(accounts or {})
        self.simulations: List[Dict[str, Any]] = list(simulations or [])
        self.default_simulation = default_simulation or raw_simulation_success()
        self.latest_ledger = latest_ledger

        self.send_status = SendTransactionStatus.PENDING
        self.transaction_statuses: List[GetTransactionStatus] = []
        self.return_value: Optional[ScVal] = ScVal.void()

        self.simulated: List[Transaction] = []
        self.sent: List[Transaction] = []
        self.polled: List[str] = []
        self.calls: List[str] = []

    async def get_account(self, address: str) -> Account:
        self.calls.append("getAccount")
        if address not in self.accounts:
            raise AccountNotFoundError(f"Account not found: {address}")
        return Account(address, self.accounts[address])

    async def get_latest_ledger(self) -> GetLatestLedgerResponse:
        self.calls.append("getLatestLedger")
        return GetLatestLedgerResponse(id="ledger", sequence=self.latest_ledger, protocol_version=21)

    async def simulate_transaction(self, tx: Transaction) -> SimulateTransactionResponse:
        self.calls.append("simulateTransaction")
        self.simulated.append(tx)
        raw = self.simulations.pop(0) if self.simulations else self.default_simulation
        return parse_raw_simulation(raw)

    async def send_transaction(self, tx: Transaction) -> SendTransactionResponse:
        self.calls.append("sendTransaction")
        self.sent.append(tx)
        if self.send_status is SendTransactionStatus.PENDING:
            self.accounts[tx.source_account] = tx.sequence
        return SendTransactionResponse(
            status=self.send_status,
            hash=tx.hash_hex(NETWORK),
            latest_ledger=self.latest_ledger,
        )

    async def get_transaction(self, tx_hash: str) -> GetTransactionResponse:
        self.calls.append("getTransaction")
        self.polled.append(tx_hash)
        status = self.transaction_statuses.pop(0) if self.transaction_statuses else GetTransactionStatus.SUCCESS
        return GetTransactionResponse(
            status=status,
            latest_ledger=self.latest_ledger,
            ledger=self.latest_ledger if status is not GetTransactionStatus.NOT_FOUND else None,
            return_value=self.return_value if status is GetTransactionStatus.SUCCESS else None,
        )
