"""
Submission tracking.

``SentTransaction`` submits a signed call and polls until the transaction
reaches a final status or the call's timeout passes.
"""

from __future__ import annotations
import json
import logging
from typing import TYPE_CHECKING, Any, List, Optional

from ..rpc.api import (
    GetTransactionResponse,
    GetTransactionStatus,
    SendTransactionResponse,
    SendTransactionStatus,
)
from ..runtime.errors import SendFailedError, SendResultOnlyError, TransactionStillPendingError
from .utils import with_exponential_backoff

if TYPE_CHECKING:
    from .assembled_call import AssembledCall

logger = logging.getLogger(__name__)


class Watcher:
    """Receives submission progress; override the hooks you need."""

    def on_submitted(self, response: SendTransactionResponse) -> None:
        pass

    def on_progress(self, response: GetTransactionResponse) -> None:
        pass


class SentTransaction:
    """
    A submitted contract call.

    Attributes:
        call: The signed call that was sent
        send_transaction_response: Admission response
        get_transaction_response_all: Every status poll, oldest first
        get_transaction_response: Latest status poll
    """

    def __init__(self, call: AssembledCall):
        self.call = call
        self.send_transaction_response: Optional[SendTransactionResponse] = None
        self.get_transaction_response_all: List[GetTransactionResponse] = []
        self.get_transaction_response: Optional[GetTransactionResponse] = None

    @classmethod
    async def init(cls, call: AssembledCall, watcher: Optional[Watcher] = None) -> SentTransaction:
        """Create and send in one step."""
        return await cls(call).send(watcher)

    async def send(self, watcher: Optional[Watcher] = None) -> SentTransaction:
        """
        Submit the call's signed envelope and wait for a final status.

        Raises:
            SendFailedError: If the RPC does not accept the transaction
            TransactionStillPendingError: If no final status arrives in time
        """
        server = self.call.server
        response = await server.send_transaction(self.call.signed)
        self.send_transaction_response = response

        if response.status is not SendTransactionStatus.PENDING:
            raise SendFailedError(
                f"Sending the transaction to the network failed!\n{response.model_dump_json(by_alias=True)}",
                response=response,
            )
        logger.info(f"Sent transaction {response.hash}")
        if watcher is not None:
            watcher.on_submitted(response)

        async def poll(_previous: Any) -> GetTransactionResponse:
            status = await server.get_transaction(response.hash)
            if watcher is not None:
                watcher.on_progress(status)
            return status

        timeout = self.call.request.timeout_in_seconds
        self.get_transaction_response_all = await with_exponential_backoff(
            poll,
            lambda r: r.status is GetTransactionStatus.NOT_FOUND,
            timeout,
        )
        self.get_transaction_response = self.get_transaction_response_all[-1]

        if self.get_transaction_response.status is GetTransactionStatus.NOT_FOUND:
            raise TransactionStillPendingError(
                f"Waited {timeout} seconds for transaction to complete, but it did not. "
                f"Returning anyway. Check the transaction status manually. "
                f"Sent transaction: {response.model_dump_json(by_alias=True)}\n"
                f"All attempts to get the result: "
                f"{json.dumps([r.status.value for r in self.get_transaction_response_all])}"
            )
        logger.info(f"Transaction {response.hash} finished with status {self.get_transaction_response.status.value}")
        return self

    @property
    def result(self) -> Any:
        """
        Decoded return value of the submitted call.

        Raises:
            SendFailedError: If the transaction failed
            SendResultOnlyError: If no final status was observed
        """
        final = self.get_transaction_response
        if final is not None:
            if final.return_value is not None:
                return self.call.parse_result(final.return_value)
            raise SendFailedError("Transaction failed! Cannot parse result.", response=final)

        if self.send_transaction_response is not None and self.send_transaction_response.error_result:
            raise SendFailedError(
                "Transaction simulation looked correct, but attempting to send the transaction failed. "
                f"Decoded `error_result`: {self.send_transaction_response.error_result}",
                response=self.send_transaction_response,
            )
        raise SendResultOnlyError(
            "Transaction was sent to the network, but not yet awaited. No result to show. "
            "Await transaction completion with `get_transaction(send_transaction_response.hash)`"
        )

    def to_dict(self) -> dict:
        return {
            "sendTransactionResponse": (self.send_transaction_response.model_dump(mode="json", by_alias=True)
                                        if self.send_transaction_response else None),
            "getTransactionResponse": (self.get_transaction_response.model_dump(mode="json", by_alias=True)
                                       if self.get_transaction_response else None),
        }


__all__ = ["SentTransaction", "Watcher"]
