"""Sign off-chain payment claims for an on-chain channel contract.

The contract rebuilds the signed digest as

    keccak256("\\x19Ethereum Signed Message:\\n32" ++ keccak256(abi.encodePacked(address(this), amount)))

and recovers the signer with ecrecover, so every byte here has to match that
layout exactly. The pipeline is strictly sequential and pure:

    validate -> encode -> digest -> sign -> format

Nothing is cached between calls and nothing is logged.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from channelsig.constants import (
    ETH_SIGNED_MESSAGE_PREFIX,
    HASH_SIZE,
    V_OFFSET,
)
from channelsig.crypto import (
    EthKeysSigner,
    Hasher256,
    Keccak256Hasher,
    RawSignature,
    RecoverableSigner,
)
from channelsig.encoding import pack_address_uint256
from channelsig.errors import ChannelSigError, SigningFailure
from channelsig.validation import (
    HexInput,
    parse_address,
    parse_amount,
    parse_private_key,
)


@dataclass(frozen=True)
class PaymentSignature:
    """Signed payment claim, hex fields prefixed with 0x."""

    message_hash: str
    signature_bytes: str
    r: str
    s: str
    v: int

    def to_dict(self) -> dict:
        """Field names as the contract tooling expects them."""
        return {
            "messageHash": self.message_hash,
            "signatureBytes": self.signature_bytes,
            "r": self.r,
            "s": self.s,
            "v": self.v,
        }


def to_eth_signed_message_hash(inner_hash: bytes, hasher: Hasher256) -> bytes:
    """Wrap a 32-byte digest in the EIP-191 personal-message prefix and re-hash."""
    if len(inner_hash) != HASH_SIZE:
        raise ValueError(f"Inner hash must be {HASH_SIZE} bytes, got {len(inner_hash)}")
    return hasher.digest(ETH_SIGNED_MESSAGE_PREFIX + inner_hash)


def build_message_hash(address: bytes, amount: int, hasher: Hasher256,
                       strict: bool = False) -> tuple[bytes, bytes, bytes]:
    """Return (packed payload, inner hash, message hash) for a claim."""
    packed = pack_address_uint256(address, amount, strict=strict)
    inner = hasher.digest(packed)
    return packed, inner, to_eth_signed_message_hash(inner, hasher)


def format_signature(message_hash: bytes, raw: RawSignature) -> PaymentSignature:
    """Package a raw signature as r, s, v and the 65-byte r||s||v blob."""
    if len(raw.r) != 32 or len(raw.s) != 32:
        raise SigningFailure(
            f"Signer returned r/s of {len(raw.r)}/{len(raw.s)} bytes, expected 32/32"
        )
    if raw.recovery_id not in (0, 1):
        raise SigningFailure(f"Signer returned recovery id {raw.recovery_id}, expected 0 or 1")

    v = V_OFFSET + raw.recovery_id
    sig65 = raw.compact + bytes([v])

    return PaymentSignature(
        message_hash="0x" + message_hash.hex(),
        signature_bytes="0x" + sig65.hex(),
        r="0x" + raw.r.hex(),
        s="0x" + raw.s.hex(),
        v=v,
    )


def sign_payment(private_key: HexInput, channel_address: HexInput, amount: int,
                 *, hasher: Optional[Hasher256] = None,
                 signer: Optional[RecoverableSigner] = None,
                 strict_amount: bool = False) -> PaymentSignature:
    """Sign a claim for `amount` against the channel at `channel_address`.

    private_key and channel_address may be hex text (0x optional) or raw
    bytes. Amounts above 2**256 - 1 are truncated to their low 256 bits
    unless strict_amount is set, in which case AmountOverflow is raised.

    Raises InvalidKeyLength, InvalidAddressLength, MalformedHex,
    InvalidAmount or SigningFailure. No partial result is ever returned.
    """
    hasher = hasher if hasher is not None else Keccak256Hasher()
    signer = signer if signer is not None else EthKeysSigner()

    key = parse_private_key(private_key)
    address = parse_address(channel_address)
    amount = parse_amount(amount)

    _, _, message_hash = build_message_hash(address, amount, hasher, strict=strict_amount)

    try:
        raw = signer.sign(message_hash, key)
    except ChannelSigError:
        raise
    except Exception as e:
        raise SigningFailure(f"Signer failed: {e}") from e

    return format_signature(message_hash, raw)
