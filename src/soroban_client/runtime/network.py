"""Network passphrases and network identifiers."""

from .codec import hash_sha256


class Networks:
    """Well-known network passphrases."""
    PUBLIC = "Public Global Stellar Network ; September 2015"
    TESTNET = "Test SDF Network ; September 2015"
    FUTURENET = "Test SDF Future Network ; October 2022"
    STANDALONE = "Standalone Network ; February 2017"


def network_id(network_passphrase: str) -> bytes:
    """32-byte network identifier that domain-separates every signature."""
    return hash_sha256(network_passphrase.encode("utf-8"))


__all__ = ["Networks", "network_id"]
