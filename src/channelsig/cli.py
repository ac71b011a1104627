"""Click CLI for channelsig."""

import json as json_mod
import logging
import sys
from decimal import Decimal, Inexact, InvalidOperation, localcontext
from pathlib import Path
from typing import Optional

import click

from channelsig.config import ChannelSigConfig, load_config, resolve_private_key
from channelsig.constants import UINT256_MAX, WEI_PER_ETH
from channelsig.crypto import Keccak256Hasher, address_from_key, recover_signer
from channelsig.errors import ChannelSigError
from channelsig.signing import build_message_hash, sign_payment
from channelsig.validation import (
    bytes_to_address,
    decode_hex,
    parse_address,
    parse_amount,
    parse_private_key,
)

logger = logging.getLogger(__name__)


class _JsonFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record):
        return json_mod.dumps({
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(level: str, json_log: bool = False) -> None:
    if json_log:
        handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            handlers=[handler],
        )
    else:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def to_wei(amount: str, ether: bool = False) -> int:
    """Parse an amount given on the command line.

    Plain amounts are integers in wei, decimal or 0x-prefixed hex. With
    ether=True the text is a decimal ether value and must resolve to a
    whole number of wei.
    """
    text = amount.strip().replace("_", "")
    if ether:
        try:
            with localcontext() as ctx:
                ctx.prec = 100
                ctx.traps[Inexact] = True
                wei = Decimal(text) * Decimal(WEI_PER_ETH)
        except InvalidOperation:
            raise click.BadParameter(f"'{amount}' is not a decimal ether amount")
        except Inexact:
            raise click.BadParameter(f"'{amount}' ETH has too many digits to convert exactly")
        if not wei.is_finite() or wei != wei.to_integral_value():
            raise click.BadParameter(f"'{amount}' ETH is not a whole number of wei")
        return int(wei)

    try:
        return int(text, 16) if text[:2].lower() == "0x" else int(text, 10)
    except ValueError:
        raise click.BadParameter(f"'{amount}' is not an integer amount")


def resolve_channel(config: ChannelSigConfig, channel: Optional[str]) -> str:
    if channel:
        return channel
    if config.channel.address:
        return config.channel.address
    raise click.UsageError("No channel address. Pass --channel or set channel.address in config.")


def _fail(err: Exception) -> None:
    click.echo(f"Error: {err}", err=True)
    sys.exit(1)


@click.group()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True),
              default=None, help="Path to config YAML file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--json-log", is_flag=True, help="Output logs in structured JSON format")
@click.pass_context
def cli(ctx, config_path, verbose, json_log):
    """channelsig: sign off-chain payment claims for channel contracts."""
    ctx.ensure_object(dict)

    if config_path:
        config = load_config(Path(config_path))
    else:
        config = ChannelSigConfig()

    if verbose:
        config.log_level = "DEBUG"

    setup_logging(config.log_level, json_log=json_log)
    ctx.obj["config"] = config


# --- Signing ---

@cli.command("sign")
@click.option("--channel", "-C", default=None,
              help="Channel contract address (0x...); defaults to channel.address from config")
@click.option("--amount", "-a", required=True,
              help="Cumulative claim amount in wei (decimal or 0x hex)")
@click.option("--ether", is_flag=True, help="Read --amount as a decimal ETH value")
@click.option("--private-key", default=None,
              help="Hex private key (default: read from the configured env var)")
@click.option("--strict-amount", is_flag=True,
              help="Reject amounts above 2^256-1 instead of truncating them")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--check", is_flag=True, help="Recover the signer from the result and print it")
@click.pass_context
def sign(ctx, channel, amount, ether, private_key, strict_amount, as_json, check):
    """Sign abi.encodePacked(channel, amount) as an Ethereum signed message."""
    config = ctx.obj["config"]
    channel = resolve_channel(config, channel)
    amount_wei = to_wei(amount, ether=ether)
    strict = strict_amount or config.signer.strict_amount

    if not strict and amount_wei > UINT256_MAX:
        logger.warning(
            "Amount %d does not fit in uint256; only its low 256 bits are signed",
            amount_wei,
        )

    try:
        key = resolve_private_key(config.signer, explicit=private_key)
        result = sign_payment(key, channel, amount_wei, strict_amount=strict)
        signer = None
        if check:
            signer = recover_signer(decode_hex(result.message_hash),
                                    decode_hex(result.signature_bytes))
            expected = address_from_key(parse_private_key(key))
            if signer != expected:
                raise ChannelSigError(
                    f"Recovered signer {signer} does not match key address {expected}"
                )
    except ChannelSigError as e:
        _fail(e)
        return

    logger.debug("Signed claim of %d wei for %s", amount_wei, channel)

    if as_json:
        data = result.to_dict()
        if signer:
            data["signer"] = signer
        click.echo(json_mod.dumps(data, indent=2))
        return

    click.echo(f"Message hash: {result.message_hash}")
    click.echo(f"Signature:    {result.signature_bytes}")
    click.echo(f"r:            {result.r}")
    click.echo(f"s:            {result.s}")
    click.echo(f"v:            {result.v}")
    if signer:
        click.echo(f"Signer:       {signer}")


@cli.command("digest")
@click.option("--channel", "-C", default=None,
              help="Channel contract address (0x...); defaults to channel.address from config")
@click.option("--amount", "-a", required=True,
              help="Cumulative claim amount in wei (decimal or 0x hex)")
@click.option("--ether", is_flag=True, help="Read --amount as a decimal ETH value")
@click.option("--strict-amount", is_flag=True,
              help="Reject amounts above 2^256-1 instead of truncating them")
@click.pass_context
def digest(ctx, channel, amount, ether, strict_amount):
    """Show the packed payload and hashes for a claim without signing it."""
    config = ctx.obj["config"]
    channel = resolve_channel(config, channel)
    amount_wei = to_wei(amount, ether=ether)
    strict = strict_amount or config.signer.strict_amount

    try:
        address = parse_address(channel)
        packed, inner, message_hash = build_message_hash(
            address, parse_amount(amount_wei), Keccak256Hasher(), strict=strict,
        )
    except ChannelSigError as e:
        _fail(e)
        return

    click.echo(f"Channel:      {bytes_to_address(address)}")
    click.echo(f"Amount:       {amount_wei} wei")
    click.echo(f"Packed:       0x{packed.hex()}")
    click.echo(f"Inner hash:   0x{inner.hex()}")
    click.echo(f"Message hash: 0x{message_hash.hex()}")


@cli.command("address")
@click.option("--private-key", default=None,
              help="Hex private key (default: read from the configured env var)")
@click.pass_context
def address(ctx, private_key):
    """Print the address that signs with the configured key."""
    config = ctx.obj["config"]
    try:
        key = parse_private_key(resolve_private_key(config.signer, explicit=private_key))
        click.echo(address_from_key(key))
    except ChannelSigError as e:
        _fail(e)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
