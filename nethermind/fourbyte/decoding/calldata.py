import logging

from nethermind.fourbyte.exceptions import (
    ArgumentDecodeError,
    CodecError,
    DataStuffingError,
    InvalidSignature,
    MalformedCallData,
    NoCallData,
    OversizedEncoding,
    SelectorMismatch,
    UnknownSelector,
)
from nethermind.fourbyte.types.decoding import DecodedArgument, DecodedCall

from . import codec
from .base import SignatureSource
from .signature import FunctionDescriptor, parse_signature
from .utils import SELECTOR_SIZE, WORD_SIZE, split_words

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("fourbyte").getChild("decoding")


def _split_calldata(calldata: bytes) -> tuple[bytes, bytes]:
    """Validates the shape of call data, and splits it into the 4 byte selector & the argument body"""
    if len(calldata) == 0:
        raise NoCallData("Transaction doesn't contain data")

    if len(calldata) < SELECTOR_SIZE:
        raise MalformedCallData(
            f"Transaction data is not valid ABI: missing the 4 byte call prefix (got {len(calldata)} bytes)",
            length=len(calldata),
        )

    selector, body = calldata[:SELECTOR_SIZE], calldata[SELECTOR_SIZE:]
    if len(body) % WORD_SIZE != 0:
        raise MalformedCallData(
            f"Transaction data is not valid ABI: argument length should be a multiple of {WORD_SIZE} "
            f"(was {len(body)})",
            length=len(calldata),
            selector=selector.hex(),
        )
    return selector, body


def _parse_resolved_signature(signature: str, selector: bytes) -> FunctionDescriptor:
    try:
        descriptor = parse_signature(signature)
    except InvalidSignature as e:
        raise InvalidSignature(signature, e.reason, selector.hex()) from e

    if descriptor.selector != selector:
        raise SelectorMismatch(signature, selector.hex(), descriptor.selector.hex())

    return descriptor


def _first_mismatched_word(body: bytes, encoded: bytes) -> int:
    for index, (supplied, canonical) in enumerate(zip(split_words(body), split_words(encoded))):
        if supplied != canonical:
            return index * WORD_SIZE
    return min(len(body), len(encoded))


def decode_with_descriptor(descriptor: FunctionDescriptor, selector: bytes, body: bytes) -> DecodedCall:
    """
    Decodes the argument body under a function descriptor, then verifies the decoding by re-encoding the decoded
    values and comparing them byte for byte against the original body.

    :param descriptor: Parsed function signature
    :param selector: 4 byte selector of the call data
    :param body: Argument bytes following the selector
    :raises ArgumentDecodeError: if the codec cannot decode or re-encode the body
    :raises DataStuffingError: if the re-encoded values differ from the supplied body
    """
    signature = descriptor.signature
    try:
        values = codec.decode(descriptor.types, body)
    except OversizedEncoding as e:
        logger.warning(
            f"Call data for {signature} with selector 0x{selector.hex()} reuses dynamic data at byte {e.offset}"
        )
        raise DataStuffingError(
            signature, expected=body.hex(), actual=None, selector=selector.hex(), offset=e.offset
        ) from e
    except CodecError as e:
        logger.debug(f"Error Decoding {signature} for input 0x{body.hex()}: {e}")
        raise ArgumentDecodeError(signature, e, selector.hex()) from e

    # Decoding alone does not detect data stuffed into padding or between dynamic payloads.  The decoded
    # values must re-encode to exactly the bytes that were supplied.
    try:
        encoded = codec.encode(descriptor.types, values)
    except CodecError as e:
        raise ArgumentDecodeError(signature, e, selector.hex()) from e

    if encoded != body:
        offset = _first_mismatched_word(body, encoded)
        logger.warning(
            f"Call data for {signature} with selector 0x{selector.hex()} contains stuffed data at byte {offset}"
        )
        raise DataStuffingError(
            signature, expected=body.hex(), actual=encoded.hex(), selector=selector.hex(), offset=offset
        )

    return DecodedCall(
        selector=selector,
        name=descriptor.name,
        signature=signature,
        arguments=tuple(
            DecodedArgument(type=typ, value=value) for typ, value in zip(descriptor.types, values, strict=True)
        ),
    )


def verify_signature(signature: str, calldata: bytes) -> DecodedCall:
    """
    Checks whether call data matches a caller supplied function signature, without consulting a signature database.

    :param signature: Function signature text, ie ``transfer(address,uint256)``
    :param calldata: Full call data including the 4 byte selector
    :raises NoCallData: if calldata is empty
    :raises CallDataError: subclass describing the failure
    """
    selector, body = _split_calldata(calldata)
    descriptor = _parse_resolved_signature(signature, selector)
    return decode_with_descriptor(descriptor, selector, body)


class CallDataInterpreter:
    """
    Resolves call data to a human readable function call.

    Splits the 4 byte selector from the argument body, resolves the selector to a signature through the signature
    database, decodes the arguments, and verifies that the decoded values re-encode to the original bytes.
    Holds no mutable state, so a single interpreter can be shared between threads.

    >>> from nethermind.fourbyte import CallDataInterpreter, SignatureDatabase
    >>> interpreter = CallDataInterpreter(SignatureDatabase.load())
    >>> decoded = interpreter.parse_calldata(bytes.fromhex(
    ...     "a9059cbb0000000000000000000000009a1989946ae4249aac19ac7a038d24aab03c3d8c"
    ...     "000000000000000000000000000000000000000000002c5b68601cc92ad60000"
    ... ))
    >>> decoded.signature
    'transfer(address,uint256)'
    >>> decoded.values[1]
    209470300000000000000000

    """

    database: SignatureSource
    """ Source of selector to signature mappings """

    def __init__(self, database: SignatureSource):
        self.database = database

    def parse_calldata(self, calldata: bytes) -> DecodedCall:
        """
        Decodes & verifies call data.

        :param calldata: Full call data including the 4 byte selector
        :return: DecodedCall
        :raises NoCallData: if calldata is empty, indicating a plain value transfer
        :raises MalformedCallData: if calldata is shorter than 4 bytes, or the argument body is not word aligned
        :raises UnknownSelector: if the selector is not present in the signature database
        :raises InvalidSignature: if the database entry for the selector cannot be parsed, or hashes to a
            different selector
        :raises ArgumentDecodeError: if the arguments cannot be decoded under the resolved signature
        :raises DataStuffingError: if the decoded arguments do not re-encode to the original bytes
        """
        selector, body = _split_calldata(calldata)

        signature = self.database.lookup(selector)
        if signature is None:
            logger.debug(f"Selector 0x{selector.hex()} not found in signature database")
            raise UnknownSelector(selector.hex())

        descriptor = _parse_resolved_signature(signature, selector)
        return decode_with_descriptor(descriptor, selector, body)
