"""
Transaction builder for contract invocations.

Provides the mutable draft that becomes a finalized Transaction, and the
source account whose sequence number every build consumes.
"""

from __future__ import annotations
import logging
import time
from typing import List, Optional, Sequence

from ..runtime.errors import TransactionBuilderError
from .types import (
    InvokeContractArgs,
    InvokeHostFunctionOperation,
    Operation,
    RestoreFootprintOperation,
    ScVal,
    SorobanTransactionData,
    TimeBounds,
    Transaction,
)

logger = logging.getLogger(__name__)

BASE_FEE = 100
TIMEOUT_INFINITE = 0


class Account:
    """
    Source account of a transaction.

    Holds the current sequence number; each build increments it, matching
    the ledger's replay protection.
    """

    def __init__(self, account_id: str, sequence: int):
        """
        Initialize account.

        Args:
            account_id: Account strkey (``G...``)
            sequence: Current sequence number on ledger
        """
        self.account_id = account_id
        self.sequence = int(sequence)

    def increment_sequence_number(self) -> None:
        self.sequence += 1

    def __repr__(self) -> str:
        return f"Account(account_id='{self.account_id}', sequence={self.sequence})"


def invoke_contract_operation(contract_id: str, method: str,
                              args: Optional[Sequence[ScVal]] = None) -> InvokeHostFunctionOperation:
    """Operation calling ``method`` on ``contract_id``."""
    return InvokeHostFunctionOperation(
        function=InvokeContractArgs(
            contract_address=contract_id,
            function_name=method,
            args=list(args or []),
        )
    )


def restore_footprint_operation() -> RestoreFootprintOperation:
    """Operation restoring every entry in the read-write footprint."""
    return RestoreFootprintOperation()


class TransactionBuilder:
    """
    Draft of a transaction before finalization.

    ``fee`` is the per-operation base fee; the built transaction carries
    ``fee * len(operations)`` plus the resource fee of any attached
    resource data.
    """

    def __init__(self, source: Account, fee: int = BASE_FEE):
        """
        Initialize transaction builder.

        Args:
            source: Source account; its sequence is bumped on build
            fee: Per-operation fee ceiling in stroops
        """
        self.source = source
        self.fee = int(fee)
        self.operations: List[Operation] = []
        self.memo: Optional[str] = None
        self.soroban_data: Optional[SorobanTransactionData] = None
        self.timeout: Optional[int] = None

    def add_operation(self, operation: Operation) -> TransactionBuilder:
        self.operations.append(operation)
        return self

    def add_memo(self, memo: str) -> TransactionBuilder:
        self.memo = memo
        return self

    def set_soroban_data(self, soroban_data: SorobanTransactionData) -> TransactionBuilder:
        self.soroban_data = soroban_data.model_copy(deep=True)
        return self

    def set_timeout(self, timeout: int) -> TransactionBuilder:
        """
        Set the validity window from build time.

        Args:
            timeout: Seconds until the ledger rejects the transaction;
                ``TIMEOUT_INFINITE`` for no upper bound
        """
        if timeout < 0:
            raise TransactionBuilderError("timeout cannot be negative")
        self.timeout = timeout
        return self

    def build(self) -> Transaction:
        """
        Finalize the draft.

        Returns:
            Transaction with the next sequence number and time bounds

        Raises:
            TransactionBuilderError: If there are no operations or no timeout
        """
        if not self.operations:
            raise TransactionBuilderError("Transaction must contain at least one operation")
        if self.timeout is None:
            raise TransactionBuilderError(
                "TimeBounds has to be set or you must call set_timeout(TIMEOUT_INFINITE)."
            )

        max_time = 0 if self.timeout == TIMEOUT_INFINITE else int(time.time()) + self.timeout

        fee = self.fee * len(self.operations)
        if self.soroban_data is not None:
            fee += self.soroban_data.resource_fee

        self.source.increment_sequence_number()
        tx = Transaction(
            source_account=self.source.account_id,
            fee=fee,
            sequence=self.source.sequence,
            time_bounds=TimeBounds(min_time=0, max_time=max_time),
            memo=self.memo,
            operations=[op.model_copy(deep=True) for op in self.operations],
            soroban_data=self.soroban_data,
        )
        logger.debug(f"Built transaction for {tx.source_account} at sequence {tx.sequence}")
        return tx

    @classmethod
    def clone_from(cls, tx: Transaction, fee: Optional[int] = None,
                   soroban_data: Optional[SorobanTransactionData] = None) -> TransactionBuilder:
        """
        Draft that rebuilds ``tx`` at the same sequence number.

        Time bounds and signatures are dropped; the caller sets a new timeout.

        Args:
            tx: Transaction to clone
            fee: Total fee of ``tx`` (defaults to ``tx.fee``); the resource
                fee of ``tx``'s own resource data is taken out of it
            soroban_data: Resource data replacing the transaction's own;
                its resource fee is added back on build
        """
        total_fee = tx.fee if fee is None else fee
        if tx.soroban_data is not None:
            total_fee -= tx.soroban_data.resource_fee
        builder = cls(Account(tx.source_account, tx.sequence - 1),
                      fee=max(total_fee, 0) // max(len(tx.operations), 1))
        for op in tx.operations:
            builder.add_operation(op.model_copy(deep=True))
        if tx.memo is not None:
            builder.add_memo(tx.memo)
        data = soroban_data if soroban_data is not None else tx.soroban_data
        if data is not None:
            builder.set_soroban_data(data)
        return builder


__all__ = [
    "BASE_FEE",
    "TIMEOUT_INFINITE",
    "Account",
    "TransactionBuilder",
    "invoke_contract_operation",
    "restore_footprint_operation",
]
