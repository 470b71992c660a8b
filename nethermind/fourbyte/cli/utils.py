import logging
import os
from logging import Logger

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from nethermind.fourbyte.database import SignatureDatabase
from nethermind.fourbyte.types.decoding import DecodedCall

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("fourbyte").getChild("cli")

DEFAULT_OVERLAY_PATH = "~/.fourbyte/4byte-custom.json"


def cli_logger_config(instrument_logger: Logger, verbose: bool = False) -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


def load_cli_database(overlay_path: str | None) -> SignatureDatabase:
    """Loads the packaged signature database with the overlay at overlay_path"""
    return SignatureDatabase.load(overlay_path or DEFAULT_OVERLAY_PATH)


def decoded_call_table(decoded: DecodedCall) -> Table:
    """Renders decoded arguments as a rich table"""
    table = Table(title=f"{escape(decoded.signature)}  [dim](0x{decoded.selector.hex()})")
    table.add_column("#", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Value", style="green", overflow="fold")

    for index, argument in enumerate(decoded.arguments):
        table.add_row(str(index), str(argument.type), Text(str(argument.value)))

    return table


# -------------------------------------------------------
#    CLI Configurations
# -------------------------------------------------------
overlay_path_option = click.option(
    "--overlay-path",
    "-o",
    "overlay_path",
    default=os.environ.get("FOURBYTE_OVERLAY_PATH"),
    help="Path to overlay signature file.  If not provided, will use the FOURBYTE_OVERLAY_PATH environment "
    f"variable, falling back to {DEFAULT_OVERLAY_PATH}",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)
json_option = click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the decoded call as JSON",
)
