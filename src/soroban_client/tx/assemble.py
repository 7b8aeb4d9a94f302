"""
Fold a simulation into a transaction.

Applies the resource fee, the resource data and the required authorization
entries reported by a successful simulation to the simulated transaction.
"""

from __future__ import annotations
import logging
from typing import Any

from .types import InvokeHostFunctionOperation, RestoreFootprintOperation, Transaction

logger = logging.getLogger(__name__)


def is_soroban_transaction(tx: Transaction) -> bool:
    """True when ``tx`` carries exactly one contract operation."""
    if len(tx.operations) != 1:
        return False
    return isinstance(tx.operations[0], (InvokeHostFunctionOperation, RestoreFootprintOperation))


def assemble_transaction(tx: Transaction, simulation: Any) -> Transaction:
    """
    Build a resource-annotated copy of ``tx`` from a successful simulation.

    A transaction's fee includes the resource fee of the resource data it
    carries. The classic part of ``tx.fee`` is kept and the simulated
    minimum resource fee replaces any resource fee from an earlier
    assembly, so assembling the same transaction again does not grow the
    fee. Invoke operations with no authorization entries of their own
    receive the simulated ones.

    Args:
        tx: Simulated transaction
        simulation: Success-shaped simulation response

    Returns:
        New transaction; ``tx`` is left unchanged

    Raises:
        ValueError: If ``tx`` is not a contract transaction or the
            simulation is not success-shaped
    """
    # Imported here to keep tx independent of rpc at import time
    from ..rpc.api import is_simulation_success

    if not is_soroban_transaction(tx):
        raise ValueError("unsupported transaction: must contain exactly one contract operation")
    if not is_simulation_success(simulation):
        raise ValueError("simulation is not a plain success; cannot assemble")

    operations = [op.model_copy(deep=True) for op in tx.operations]
    op = operations[0]
    if isinstance(op, InvokeHostFunctionOperation) and not op.auth and simulation.result is not None:
        op.auth = [entry.model_copy(deep=True) for entry in simulation.result.auth]

    classic_fee = tx.fee
    if tx.soroban_data is not None:
        classic_fee -= tx.soroban_data.resource_fee

    assembled = tx.model_copy(update={
        "fee": classic_fee + simulation.min_resource_fee,
        "operations": operations,
        "soroban_data": simulation.transaction_data.model_copy(deep=True),
        "signatures": [],
    })
    logger.debug(f"Assembled transaction at sequence {tx.sequence}: fee {tx.fee} -> {assembled.fee}")
    return assembled


__all__ = ["assemble_transaction", "is_soroban_transaction"]
