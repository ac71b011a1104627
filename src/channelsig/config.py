"""YAML configuration loading for channelsig."""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import yaml

from channelsig.constants import DEFAULT_LOG_LEVEL, DEFAULT_PRIVATE_KEY_ENV
from channelsig.errors import MissingPrivateKey

logger = logging.getLogger(__name__)


@dataclass
class SignerConfig:
    private_key_env: str = DEFAULT_PRIVATE_KEY_ENV
    strict_amount: bool = False  # reject amounts above 2^256-1 instead of truncating


@dataclass
class ChannelConfig:
    address: Optional[str] = None


@dataclass
class ChannelSigConfig:
    signer: SignerConfig = field(default_factory=SignerConfig)
    channel: ChannelConfig = field(default_factory=ChannelConfig)
    log_level: str = DEFAULT_LOG_LEVEL


def load_config(path: Path) -> ChannelSigConfig:
    """Load configuration from a YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = ChannelSigConfig()

    if "signer" in raw:
        s = raw["signer"] or {}
        strict_amount = s.get("strict_amount", False)
        if not isinstance(strict_amount, bool):
            raise ValueError(
                f"signer.strict_amount must be true or false, got {strict_amount!r}"
            )
        config.signer = SignerConfig(
            private_key_env=s.get("private_key_env", DEFAULT_PRIVATE_KEY_ENV),
            strict_amount=strict_amount,
        )

    if "channel" in raw:
        c = raw["channel"] or {}
        config.channel = ChannelConfig(address=c.get("address"))

    config.log_level = raw.get("log_level", DEFAULT_LOG_LEVEL)
    logger.debug("Loaded config from %s", path)
    return config


def resolve_private_key(config: SignerConfig, explicit: Optional[str] = None,
                        environ: Optional[Mapping[str, str]] = None) -> str:
    """Pick the signing key: an explicit value wins over the environment.

    The key is returned as given; decoding and length checks happen in
    the signing pipeline.
    """
    if explicit:
        logger.debug("Using private key passed on the command line")
        return explicit

    env = os.environ if environ is None else environ
    value = env.get(config.private_key_env, "").strip()
    if not value:
        raise MissingPrivateKey(
            f"No private key given and ${config.private_key_env} is not set"
        )
    logger.debug("Using private key from $%s", config.private_key_env)
    return value
