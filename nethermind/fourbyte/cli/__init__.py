import click

from nethermind.fourbyte.cli.decode import decode_calldata, verify_calldata
from nethermind.fourbyte.cli.signatures import (
    add_signatures,
    lookup_selector,
    signature_selector,
)


@click.group()
def fourbyte_cli():
    """Command Line Interface for resolving & verifying EVM call data"""


fourbyte_cli.add_command(decode_calldata, name="decode")
fourbyte_cli.add_command(verify_calldata, name="verify")
fourbyte_cli.add_command(lookup_selector, name="lookup")
fourbyte_cli.add_command(signature_selector, name="selector")
fourbyte_cli.add_command(add_signatures, name="add")
