"""Exceptions raised while validating inputs and signing payment claims."""


class ChannelSigError(Exception):
    """Base class for all channelsig errors."""


class InvalidKeyLength(ChannelSigError, ValueError):
    """Decoded private key is not exactly 32 bytes."""


class InvalidAddressLength(ChannelSigError, ValueError):
    """Decoded contract address is not exactly 20 bytes."""


class MalformedHex(ChannelSigError, ValueError):
    """Hex text could not be decoded (odd length or non-hex characters)."""


class InvalidAmount(ChannelSigError, ValueError):
    """Amount is not a nonnegative integer."""


class AmountOverflow(InvalidAmount):
    """Amount needs more than 256 bits and strict mode is on."""


class SigningFailure(ChannelSigError):
    """The signer rejected the key or the primitive failed."""


class MissingPrivateKey(ChannelSigError):
    """No private key was given and the configured env var is unset."""
