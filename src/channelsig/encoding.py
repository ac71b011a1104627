"""Packed encoding of (address, uint256) as produced by Solidity's abi.encodePacked."""

from __future__ import annotations

from channelsig.constants import ETH_ADDRESS_SIZE, UINT256_MAX, UINT256_SIZE
from channelsig.errors import AmountOverflow, InvalidAddressLength


def encode_uint256(amount: int, strict: bool = False) -> bytes:
    """Encode amount as a 32-byte big-endian word.

    Only the low 256 bits are written: an amount of 2**256 encodes as 32
    zero bytes. With strict=True such amounts raise AmountOverflow instead.
    """
    if strict and amount > UINT256_MAX:
        raise AmountOverflow(
            f"Amount {amount} does not fit in uint256 ({amount.bit_length()} bits)"
        )

    out = bytearray(UINT256_SIZE)
    x = amount
    for i in range(UINT256_SIZE):
        out[UINT256_SIZE - 1 - i] = x & 0xFF
        x >>= 8
    return bytes(out)


def pack_address_uint256(address: bytes, amount: int, strict: bool = False) -> bytes:
    """abi.encodePacked(address, uint256): 20 address bytes then 32 amount bytes."""
    if len(address) != ETH_ADDRESS_SIZE:
        raise InvalidAddressLength(
            f"Address must be {ETH_ADDRESS_SIZE} bytes, got {len(address)}"
        )
    return bytes(address) + encode_uint256(amount, strict=strict)
