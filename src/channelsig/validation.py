"""Input decoding and length checks for private keys, addresses and amounts.

The private key is only length-checked here. Whether the scalar lies in
[1, n-1] is left to the signer, which raises SigningFailure.
"""

from __future__ import annotations
from typing import Union

from web3 import Web3

from channelsig.constants import ETH_ADDRESS_SIZE, PRIVATE_KEY_SIZE
from channelsig.errors import (
    InvalidAddressLength,
    InvalidAmount,
    InvalidKeyLength,
    MalformedHex,
)

HexInput = Union[str, bytes, bytearray]


def strip_hex_prefix(value: str) -> str:
    """Remove a single leading 0x/0X marker, if present."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def decode_hex(value: HexInput, what: str = "value") -> bytes:
    """Decode hex text (prefix optional) to bytes. Raw bytes pass through."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise MalformedHex(f"{what} must be hex text or bytes, got {type(value).__name__}")
    text = strip_hex_prefix(value.strip())
    if any(c.isspace() for c in text):
        raise MalformedHex(f"{what} contains whitespace")
    if len(text) % 2:
        raise MalformedHex(f"{what} has an odd number of hex digits ({len(text)})")
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise MalformedHex(f"{what} is not valid hex: {e}") from e


def parse_private_key(value: HexInput) -> bytes:
    """Decode a private key and require exactly 32 bytes."""
    key = decode_hex(value, "private key")
    if len(key) != PRIVATE_KEY_SIZE:
        raise InvalidKeyLength(
            f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(key)}"
        )
    return key


def parse_address(value: HexInput) -> bytes:
    """Decode a contract address and require exactly 20 bytes.

    Checksum casing is not enforced; the packed encoding only sees raw bytes.
    """
    addr = decode_hex(value, "address")
    if len(addr) != ETH_ADDRESS_SIZE:
        raise InvalidAddressLength(
            f"Address must be {ETH_ADDRESS_SIZE} bytes, got {len(addr)}"
        )
    return addr


def parse_amount(value: int) -> int:
    """Require a nonnegative int. Size is checked by the encoder."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"Amount must be an integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidAmount(f"Amount must be >= 0, got {value}")
    return value


def bytes_to_address(addr_bytes: bytes) -> str:
    """Convert 20 raw bytes to a checksummed hex address."""
    return Web3.to_checksum_address("0x" + addr_bytes.hex())
