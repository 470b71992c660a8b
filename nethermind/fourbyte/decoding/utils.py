import logging

from eth_utils import decode_hex, is_hex, remove_0x_prefix
from eth_utils.abi import function_signature_to_4byte_selector

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("fourbyte").getChild("decoding")

WORD_SIZE = 32
SELECTOR_SIZE = 4


def signature_to_name(function_sig: str) -> str:
    """
    Removes types from function signature

    >>> from nethermind.fourbyte.decoding.utils import signature_to_name
    >>> signature_to_name("transferFrom(address,address,uint256)")
    'transferFrom'
    >>> signature_to_name("totalSupply")
    'totalSupply'
    """
    index = function_sig.find("(")
    if index != -1:
        return function_sig[:index]
    return function_sig


def signature_to_selector(function_sig: str) -> bytes:
    """
    Returns the 4 byte selector for a canonical function signature

    >>> from nethermind.fourbyte.decoding.utils import signature_to_selector
    >>> signature_to_selector("transfer(address,uint256)").hex()
    'a9059cbb'
    """
    return bytes(function_signature_to_4byte_selector(function_sig))


def split_words(data: bytes) -> list[bytes]:
    """Splits ABI data into a list of 32 byte words.  The final word is short if data is not word aligned"""
    return [data[i : i + WORD_SIZE] for i in range(0, len(data), WORD_SIZE)]


def normalize_selector(selector: bytes | str) -> str:
    """
    Converts a selector to the 8 character lowercase hex key used by the signature database.  Accepts raw bytes,
    or hex strings with or without 0x prefix.  Only the first 4 bytes of longer inputs are used.

    >>> from nethermind.fourbyte.decoding.utils import normalize_selector
    >>> normalize_selector("0xA9059CBB")
    'a9059cbb'
    >>> normalize_selector(bytes.fromhex("a9059cbb00"))
    'a9059cbb'
    """
    if isinstance(selector, str):
        stripped = remove_0x_prefix(selector)  # type: ignore[arg-type]
        if len(stripped) < 2 * SELECTOR_SIZE or not is_hex(stripped):
            raise ValueError(f"Expected 4 byte hex selector, got {selector!r}")
        return stripped[: 2 * SELECTOR_SIZE].lower()

    if len(selector) < SELECTOR_SIZE:
        raise ValueError(f"Expected 4 byte selector, got {len(selector)} bytes")
    return selector[:SELECTOR_SIZE].hex()


def hex_to_calldata(hex_data: str) -> bytes:
    """
    Converts a 0x prefixed or bare hex string into call data bytes.  Surrounding whitespace is ignored.

    :param hex_data: hexstring of call data
    :return: call data bytes
    """
    stripped = remove_0x_prefix(hex_data.strip())  # type: ignore[arg-type]
    if len(stripped) % 2 != 0 or (stripped and not is_hex(stripped)):
        raise ValueError(f"Call data is not valid hex: {hex_data!r}")
    return decode_hex(stripped)
