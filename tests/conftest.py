"""
Shared fixtures.

Keypairs are deterministic; the RPC server is the in-memory FakeServer.
"""

import pytest

from helpers import FakeServer, mk_keypair


@pytest.fixture
def submitter():
    """Party A: signs and submits the transaction envelope."""
    return mk_keypair(1)


@pytest.fixture
def cosigner():
    """Party B: only signs authorization entries."""
    return mk_keypair(2)


@pytest.fixture
def fake_server(submitter, cosigner):
    """Fake RPC server that knows both parties' accounts."""
    return FakeServer(accounts={submitter.public_key: 100, cosigner.public_key: 200})
