"""Shared constants for channel payment-claim signing."""

# Sizes
PRIVATE_KEY_SIZE = 32
ETH_ADDRESS_SIZE = 20
UINT256_SIZE = 32
PACKED_PAYLOAD_SIZE = ETH_ADDRESS_SIZE + UINT256_SIZE  # 52 bytes
HASH_SIZE = 32
ETH_SIGNATURE_SIZE = 65  # r(32) + s(32) + v(1)

UINT256_MAX = 2**256 - 1

# EIP-191 personal-message prefix for a 32-byte digest. The "32" suffix is
# fixed: the signed payload is always a keccak-256 digest.
ETH_SIGNED_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n32"

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# v = recovery id + 27
V_OFFSET = 27

WEI_PER_ETH = 1_000_000_000_000_000_000  # 10^18

# Configuration
DEFAULT_PRIVATE_KEY_ENV = "PRIVATE_KEY"
DEFAULT_LOG_LEVEL = "INFO"
