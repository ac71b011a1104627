"""Hash and secp256k1 signing primitives used by the payment-claim pipeline.

The pipeline only depends on the two small protocols below. The default
implementations wrap web3's keccak-256 and eth-keys' recoverable ECDSA
(RFC 6979 nonces, low-s normalized), but any hardware-backed signer with
the same shape can be injected instead.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol

from eth_account import Account
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from web3 import Web3

from channelsig.constants import ETH_SIGNATURE_SIZE, HASH_SIZE, SECP256K1_N, V_OFFSET
from channelsig.errors import SigningFailure


@dataclass(frozen=True)
class RawSignature:
    """Signer output: 32-byte r and s plus the recovery id (0 or 1)."""

    r: bytes
    s: bytes
    recovery_id: int

    @property
    def compact(self) -> bytes:
        """64-byte r || s."""
        return self.r + self.s


class Hasher256(Protocol):
    def digest(self, data: bytes) -> bytes:
        ...


class RecoverableSigner(Protocol):
    def sign(self, digest: bytes, key: bytes) -> RawSignature:
        ...


class Keccak256Hasher:
    """Keccak-256 (Ethereum's pre-standard SHA-3) via web3."""

    def digest(self, data: bytes) -> bytes:
        return bytes(Web3.keccak(data))


class EthKeysSigner:
    """Recoverable secp256k1 ECDSA backed by eth-keys.

    eth-keys uses coincurve when it is installed and its pure-Python backend
    otherwise; both produce identical deterministic low-s signatures.
    """

    def sign(self, digest: bytes, key: bytes) -> RawSignature:
        if len(digest) != HASH_SIZE:
            raise SigningFailure(f"Digest must be {HASH_SIZE} bytes, got {len(digest)}")
        if not 0 < int.from_bytes(key, "big") < SECP256K1_N:
            raise SigningFailure("Private key is outside the secp256k1 scalar range [1, n-1]")
        try:
            private_key = keys.PrivateKey(key)
        except ValidationError as e:
            raise SigningFailure(f"Private key is not a valid secp256k1 scalar: {e}") from e

        sig = private_key.sign_msg_hash(digest)
        return RawSignature(
            r=sig.r.to_bytes(32, "big"),
            s=sig.s.to_bytes(32, "big"),
            recovery_id=sig.v,
        )


def keccak256(data: bytes) -> bytes:
    """Keccak-256 of data with the default hasher."""
    return Keccak256Hasher().digest(data)


def address_from_key(key: bytes) -> str:
    """Checksummed address controlled by a 32-byte private key."""
    try:
        return Account.from_key(key).address
    except (ValidationError, ValueError) as e:
        raise SigningFailure(f"Private key is not a valid secp256k1 scalar: {e}") from e


def recover_signer(message_hash: bytes, signature: bytes) -> str:
    """Recover the checksummed signer address from a digest and 65-byte r||s||v.

    Accepts v as 27/28 or as a bare recovery id 0/1.
    """
    if len(message_hash) != HASH_SIZE:
        raise ValueError(f"Message hash must be {HASH_SIZE} bytes, got {len(message_hash)}")
    if len(signature) != ETH_SIGNATURE_SIZE:
        raise ValueError(
            f"Signature must be {ETH_SIGNATURE_SIZE} bytes, got {len(signature)}"
        )

    v = signature[64]
    if v >= V_OFFSET:
        v -= V_OFFSET
    r = int.from_bytes(signature[0:32], "big")
    s = int.from_bytes(signature[32:64], "big")
    try:
        sig = keys.Signature(vrs=(v, r, s))
        public_key = sig.recover_public_key_from_msg_hash(message_hash)
    except (BadSignature, ValidationError) as e:
        raise ValueError(f"Cannot recover signer: {e}") from e
    return public_key.to_checksum_address()
