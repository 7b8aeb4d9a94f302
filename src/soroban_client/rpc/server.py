"""
Soroban RPC client.

Async JSON-RPC 2.0 client for the five RPC methods the contract lifecycle
needs: account lookup, latest ledger, simulate, send and transaction
status.

Transactions, ledger keys and return values travel in this package's
own wire encoding (base64 over canonical JSON, see ``runtime.codec``),
not Stellar XDR. The endpoint must speak that encoding; a stock Stellar
RPC node will reject the envelopes.
"""

from __future__ import annotations
import asyncio
import json
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import aiohttp

from ..runtime.errors import RpcError, error_from_response
from ..tx.builder import Account
from ..tx.types import Transaction
from .api import (
    GetLatestLedgerResponse,
    GetTransactionResponse,
    SendTransactionResponse,
    SimulateTransactionResponse,
    parse_raw_simulation,
)

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    """Configuration for the Soroban RPC client."""

    endpoint: str
    timeout: float = 30.0
    allow_http: bool = False
    headers: Dict[str, str] = field(default_factory=dict)
    user_agent: str = "soroban-contract-client/0.1.0"
    debug: bool = False


class Server:
    """
    Soroban RPC server client.

    Example:
        ```python
        async with Server("https://rpc.example.com") as server:
            ledger = await server.get_latest_ledger()
            account = await server.get_account(public_key)
        ```
    """

    def __init__(self, config: Union[str, ServerConfig], session: Optional[aiohttp.ClientSession] = None,
                 **kwargs: Any):
        """
        Initialize the RPC client.

        Args:
            config: Either an endpoint URL or a ServerConfig; with a URL,
                keyword arguments populate the remaining ServerConfig fields
            session: Optional aiohttp session to reuse; one is created
                lazily otherwise

        Raises:
            ValueError: If the endpoint is plain HTTP and ``allow_http`` is off
        """
        if isinstance(config, str):
            self.config = ServerConfig(endpoint=config, **kwargs)
        else:
            self.config = config

        if self.config.debug:
            logger.setLevel(logging.DEBUG)

        if self.config.endpoint.startswith("http://") and not self.config.allow_http:
            raise ValueError("Cannot connect to insecure Soroban RPC server if `allow_http` is not set")

        self._session = session
        self._owns_session = session is None

    @property
    def endpoint(self) -> str:
        """Get the RPC endpoint."""
        return self.config.endpoint

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"Content-Type": "application/json", "User-Agent": self.config.user_agent}
            headers.update(self.config.headers)
            self._session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> Server:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Low-level RPC
    # =========================================================================

    async def _call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a JSON-RPC 2.0 call.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            Result from the RPC call

        Raises:
            RpcError: If the transport fails or the server returns an error
        """
        request_data: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "id": random.randint(1, 1_000_000),
        }
        if params is not None:
            request_data["params"] = params

        logger.debug(f"Request: {method} -> {json.dumps(request_data)}")

        session = await self._get_session()
        try:
            async with session.post(self.config.endpoint, json=request_data) as response:
                if response.status != 200:
                    raise RpcError(f"HTTP {response.status}: {response.reason}", rpc_code=response.status)
                response_data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RpcError(f"HTTP request failed: {e}", cause=e)
        except json.JSONDecodeError as e:
            raise RpcError(f"Invalid JSON response: {e}", cause=e)

        logger.debug(f"Response: {method} <- {json.dumps(response_data)}")

        error = error_from_response(response_data)
        if error is not None:
            raise error
        return response_data.get("result")

    # =========================================================================
    # Methods
    # =========================================================================

    async def get_account(self, address: str) -> Account:
        """
        Fetch an account's current sequence number.

        Args:
            address: Account strkey

        Returns:
            Account ready to be used as a transaction source

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        result = await self._call("getAccount", {"address": address})
        return Account(result.get("id", address), int(result["sequence"]))

    async def get_latest_ledger(self) -> GetLatestLedgerResponse:
        result = await self._call("getLatestLedger")
        return GetLatestLedgerResponse.model_validate(result)

    async def simulate_transaction(self, tx: Transaction) -> SimulateTransactionResponse:
        """
        Dry-run a transaction against current ledger state.

        Returns:
            Error, restore-required or success response
        """
        result = await self._call("simulateTransaction", {"transaction": tx.to_envelope_wire()})
        simulation = parse_raw_simulation(result)
        logger.debug(f"Simulation classified as {type(simulation).__name__}")
        return simulation

    async def send_transaction(self, tx: Transaction) -> SendTransactionResponse:
        result = await self._call("sendTransaction", {"transaction": tx.to_envelope_wire()})
        return SendTransactionResponse.model_validate(result)

    async def get_transaction(self, tx_hash: str) -> GetTransactionResponse:
        result = await self._call("getTransaction", {"hash": tx_hash})
        return GetTransactionResponse.from_raw(result)


__all__ = ["Server", "ServerConfig"]
