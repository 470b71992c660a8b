import logging

import click
from rich.markup import escape

from nethermind.fourbyte.cli.utils import (
    DEFAULT_OVERLAY_PATH,
    cli_logger_config,
    group_options,
    load_cli_database,
    overlay_path_option,
    verbose_option,
)
from nethermind.fourbyte.database import write_overlay
from nethermind.fourbyte.decoding.signature import parse_signature
from nethermind.fourbyte.decoding.utils import normalize_selector
from nethermind.fourbyte.exceptions import DecodingError, InvalidSignature

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("fourbyte").getChild("cli")


@click.command("lookup")
@group_options(overlay_path_option, verbose_option)
@click.argument("selector")
def lookup_selector(overlay_path: str | None, verbose: bool, selector: str):
    """Prints the signature for a 4 byte SELECTOR"""
    console = cli_logger_config(root_logger, verbose)

    try:
        key = normalize_selector(selector)
        database = load_cli_database(overlay_path)
    except (ValueError, DecodingError) as e:
        console.print(f"[red]{escape(str(e))}")
        raise SystemExit(1) from e

    signature = database.lookup(key)
    if signature is None:
        console.print(f"[red]Signature for selector 0x{key} not found")
        raise SystemExit(1)

    click.echo(signature)


@click.command("selector")
@click.argument("signature")
def signature_selector(signature: str):
    """Prints the canonical form & 4 byte selector of SIGNATURE"""
    try:
        descriptor = parse_signature(signature)
    except InvalidSignature as e:
        click.echo(str(e), err=True)
        raise SystemExit(1) from e

    click.echo(f"0x{descriptor.selector.hex()}  {descriptor.signature}")


@click.command("add")
@group_options(overlay_path_option, verbose_option)
@click.argument("signatures", nargs=-1, required=True)
def add_signatures(overlay_path: str | None, verbose: bool, signatures: tuple[str, ...]):
    """Validates SIGNATURES and saves them to the overlay signature file"""
    console = cli_logger_config(root_logger, verbose)
    target = overlay_path or DEFAULT_OVERLAY_PATH

    try:
        descriptors = [parse_signature(signature) for signature in signatures]
        database = load_cli_database(overlay_path)
        write_overlay(target, descriptors)
    except DecodingError as e:
        console.print(f"[red]{escape(str(e))}")
        raise SystemExit(1) from e

    for descriptor in descriptors:
        builtin = database.builtin.get(descriptor.selector.hex())
        if builtin is not None and builtin != descriptor.signature:
            console.print(
                f"[yellow]Selector 0x{descriptor.selector.hex()} is already defined by built-in signature "
                f"{escape(builtin)}. "
                "Built-in signatures take precedence over the overlay"
            )

    console.print(f"[green]Added {len(signatures)} signatures to {target}")
