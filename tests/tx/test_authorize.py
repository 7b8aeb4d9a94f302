"""
Tests for the default authorization entry strategy.
"""

import pytest

from soroban_client.runtime.errors import InvalidSignatureError
from soroban_client.runtime.network import network_id
from soroban_client.tx.authorize import authorize_entry, build_authorization_preimage
from soroban_client.tx.types import ScValType

from helpers import NETWORK, mk_address_auth_entry, mk_keypair, mk_source_auth_entry


class TestBuildPreimage:
    """Test authorization preimages."""

    def test_preimage_fields(self):
        """Test the preimage binds network, nonce, expiration and invocation."""
        entry = mk_address_auth_entry(mk_keypair(2).public_key, nonce=77)
        preimage = build_authorization_preimage(entry, 1_234, NETWORK)

        assert preimage.network_id == network_id(NETWORK).hex()
        assert preimage.nonce == 77
        assert preimage.signature_expiration_ledger == 1_234
        assert preimage.invocation == entry.root_invocation
        assert len(preimage.payload()) == 32

    def test_payload_depends_on_expiration(self):
        """Test a different expiration gives a different payload."""
        entry = mk_address_auth_entry(mk_keypair(2).public_key)
        first = build_authorization_preimage(entry, 100, NETWORK).payload()
        second = build_authorization_preimage(entry, 101, NETWORK).payload()
        assert first != second

    def test_source_entry_has_no_preimage(self):
        """Test source-account entries cannot be signed separately."""
        with pytest.raises(ValueError):
            build_authorization_preimage(mk_source_auth_entry(), 100, NETWORK)


class TestAuthorizeEntry:
    """Test authorize_entry."""

    @pytest.mark.asyncio
    async def test_signs_address_entry(self):
        """Test the signature is verified and stored with the public key."""
        keypair = mk_keypair(2)
        entry = mk_address_auth_entry(keypair.public_key)

        signed = await authorize_entry(entry, lambda p: keypair.sign(p.payload()), 500, NETWORK)

        credentials = signed.credentials.address
        assert credentials.signature_expiration_ledger == 500
        assert credentials.signature.type is ScValType.VEC
        fields = {item.key.value: item.val.to_bytes() for item in credentials.signature.vec[0].map}
        assert fields["public_key"] == keypair.raw_public_key
        assert keypair.verify(
            build_authorization_preimage(entry, 500, NETWORK).payload(),
            fields["signature"],
        )

    @pytest.mark.asyncio
    async def test_input_not_mutated(self):
        """Test the original entry keeps its empty signature."""
        keypair = mk_keypair(2)
        entry = mk_address_auth_entry(keypair.public_key)

        await authorize_entry(entry, lambda p: keypair.sign(p.payload()), 500, NETWORK)

        assert entry.credentials.address.signature.is_void
        assert entry.credentials.address.signature_expiration_ledger == 0

    @pytest.mark.asyncio
    async def test_async_signer(self):
        """Test coroutine signers are awaited."""
        keypair = mk_keypair(2)

        async def signer(preimage):
            return keypair.sign(preimage.payload())

        signed = await authorize_entry(mk_address_auth_entry(keypair.public_key), signer, 9, NETWORK)
        assert not signed.credentials.address.signature.is_void

    @pytest.mark.asyncio
    async def test_wrong_key_rejected(self):
        """Test a signature from another key fails verification."""
        entry = mk_address_auth_entry(mk_keypair(2).public_key)
        impostor = mk_keypair(3)

        with pytest.raises(InvalidSignatureError):
            await authorize_entry(entry, lambda p: impostor.sign(p.payload()), 500, NETWORK)

    @pytest.mark.asyncio
    async def test_source_entry_unchanged(self):
        """Test source-account entries are returned as-is without signing."""
        entry = mk_source_auth_entry()

        def signer(preimage):
            raise AssertionError("signer must not be called")

        assert await authorize_entry(entry, signer, 500, NETWORK) is entry
