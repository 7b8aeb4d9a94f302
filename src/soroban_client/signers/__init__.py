"""Keypairs and signing callbacks"""

from .keypair import Keypair
from .basic_node_signer import BasicNodeSigner

__all__ = ["Keypair", "BasicNodeSigner"]
