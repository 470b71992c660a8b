import json
import logging

import click
from rich.markup import escape

from nethermind.fourbyte.cli.utils import (
    cli_logger_config,
    decoded_call_table,
    group_options,
    json_option,
    load_cli_database,
    overlay_path_option,
    verbose_option,
)
from nethermind.fourbyte.decoding import CallDataInterpreter, verify_signature
from nethermind.fourbyte.decoding.utils import hex_to_calldata
from nethermind.fourbyte.exceptions import DataStuffingError, DecodingError, NoCallData
from nethermind.fourbyte.types.decoding import DecodedCall

# pylint: disable=too-many-arguments

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("fourbyte").getChild("cli")


def _echo_decoded(console, decoded: DecodedCall, as_json: bool):
    if as_json:
        click.echo(json.dumps(decoded.to_dict(), indent=2))
        return

    console.print(str(decoded), markup=False, highlight=False)
    if decoded.arguments:
        console.print(decoded_call_table(decoded))


def _decode_or_exit(console, decode_fn, calldata_hex: str) -> DecodedCall | None:
    try:
        calldata = hex_to_calldata(calldata_hex)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}")
        raise SystemExit(1) from e

    try:
        return decode_fn(calldata)
    except NoCallData:
        console.print("Transaction doesn't contain data.  Plain value transfer")
        return None
    except DataStuffingError as e:
        console.print(f"[bold red]WARNING: Supplied data is stuffed with extra data for {escape(e.signature)}")
        console.print(f"Want {e.expected}", highlight=False)
        if e.actual is None:
            console.print("Have more bytes than were supplied, dynamic data is reused", highlight=False)
        else:
            console.print(f"Have {e.actual}", highlight=False)
        raise SystemExit(1) from e
    except DecodingError as e:
        console.print(f"[red]{escape(str(e))}")
        raise SystemExit(1) from e


@click.command("decode")
@group_options(overlay_path_option, json_option, verbose_option)
@click.argument("calldata")
def decode_calldata(overlay_path: str | None, as_json: bool, verbose: bool, calldata: str):
    """
    Decodes CALLDATA by resolving its 4 byte selector in the signature database.  CALLDATA is a hex string, with
    or without 0x prefix.
    """
    console = cli_logger_config(root_logger, verbose)

    try:
        database = load_cli_database(overlay_path)
    except DecodingError as e:
        console.print(f"[red]{escape(str(e))}")
        raise SystemExit(1) from e

    interpreter = CallDataInterpreter(database)
    decoded = _decode_or_exit(console, interpreter.parse_calldata, calldata)
    if decoded is not None:
        _echo_decoded(console, decoded, as_json)


@click.command("verify")
@group_options(json_option, verbose_option)
@click.argument("signature")
@click.argument("calldata")
def verify_calldata(as_json: bool, verbose: bool, signature: str, calldata: str):
    """Checks that CALLDATA is a faithful encoding of a call to SIGNATURE, ie 'transfer(address,uint256)'"""
    console = cli_logger_config(root_logger, verbose)

    decoded = _decode_or_exit(console, lambda data: verify_signature(signature, data), calldata)
    if decoded is not None:
        _echo_decoded(console, decoded, as_json)
