import json
import random

import pytest
from eth_utils import to_checksum_address

from nethermind.fourbyte import CallDataInterpreter, SignatureDatabase
from nethermind.fourbyte.decoding.utils import signature_to_selector

TRANSFER_CALLDATA = bytes.fromhex(
    "a9059cbb"
    "0000000000000000000000009a1989946ae4249aac19ac7a038d24aab03c3d8c"
    "000000000000000000000000000000000000000000002c5b68601cc92ad60000"
)


@pytest.fixture(name="random_address")
def fixture_random_address():
    def _generate_random_address():
        return to_checksum_address(random.randbytes(20).hex())

    return _generate_random_address


@pytest.fixture(name="transfer_calldata")
def fixture_transfer_calldata() -> bytes:
    # from https://etherscan.io/tx/0x363f979b58c82614db71229c2a57ed760e7bc454ee29c2f8fd1df99028667ea5
    return TRANSFER_CALLDATA


@pytest.fixture(name="signature_table")
def fixture_signature_table():
    def _signature_table(*signatures: str) -> dict[str, str]:
        return {signature_to_selector(sig).hex(): sig for sig in signatures}

    return _signature_table


@pytest.fixture(name="interpreter_for")
def fixture_interpreter_for(signature_table):
    """Builds an interpreter over a built-in table containing only the given signatures"""

    def _interpreter_for(*signatures: str) -> CallDataInterpreter:
        blob = json.dumps(signature_table(*signatures))
        return CallDataInterpreter(SignatureDatabase.build(blob))

    return _interpreter_for


@pytest.fixture(name="interpreter", scope="session")
def fixture_interpreter() -> CallDataInterpreter:
    return CallDataInterpreter(SignatureDatabase.load())
