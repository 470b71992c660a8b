"""
Contract ABI codec for the elementary & array types supported by the signature decoder.

Data is laid out in 32 byte big-endian words.  Static types are stored in place in the head of the enclosing
block, while dynamic types (``bytes``, ``string``, ``T[]``, and fixed arrays of dynamic elements) store a one word
offset in the head, pointing to a tail relative to the start of the enclosing block.

Decoding is lenient about padding.  Addresses, booleans, narrow integers, and fixed bytes are read from the
significant part of their word only, so a payload with dirty padding decodes successfully.  Re-encoding the decoded
values with :func:`encode` always produces canonical data, and comparing the two byte strings exposes any bytes that
did not contribute to the decoded values.

While decoding, the size of the canonical encoding of the values read so far is tracked.  Once it exceeds the size
of the supplied data, decoding stops with :class:`OversizedEncoding`, since aliased offsets can otherwise expand a
small payload into an arbitrarily large set of values.
"""
import logging
from typing import Sequence

from eth_abi import encode as eth_abi_encode
from eth_abi.exceptions import EncodingError

from nethermind.fourbyte.exceptions import CodecError, OversizedEncoding
from nethermind.fourbyte.types.abi import (
    AddressType,
    AddressValue,
    ArrayValue,
    BoolType,
    BoolValue,
    BytesType,
    BytesValue,
    DecodedValue,
    DynamicArrayType,
    FixedArrayType,
    FixedBytesType,
    FixedBytesValue,
    IntegerValue,
    IntType,
    ParamType,
    StringType,
    StringValue,
    UintType,
)

from .utils import WORD_SIZE

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("fourbyte").getChild("codec")

ZERO_WORD = bytes(WORD_SIZE)


def static_size(types: Sequence[ParamType]) -> int:
    """Returns the number of bytes the head of a block of ``types`` occupies"""
    return sum(typ.head_words for typ in types) * WORD_SIZE


def _padded_size(length: int) -> int:
    return -(-length // WORD_SIZE) * WORD_SIZE


# ---------------------------------------------------------------------
#    Decoding
# ---------------------------------------------------------------------


class _EncodingBudget:
    """Running size of the canonical encoding of the values decoded so far, capped at ``limit`` bytes"""

    def __init__(self, limit: int):
        self.limit = limit
        self.used = 0

    def charge(self, size: int, offset: int):
        self.used += size
        if self.used > self.limit:
            raise OversizedEncoding(
                f"Decoded values re-encode to more than the {self.limit} bytes supplied (at byte {offset})",
                limit=self.limit,
                offset=offset,
            )


def decode(types: Sequence[ParamType], body: bytes) -> list[DecodedValue]:
    """
    Decodes an argument block into a list of values, one for each type.

    :param types: Ordered parameter types of the function
    :param body: ABI encoded argument bytes, excluding the 4 byte selector
    :return: Decoded values in parameter order
    :raises CodecError: if the body is not word aligned, is empty while arguments are expected, does not match
        the exact size of an all-static parameter list, or if a dynamic offset or length reaches past the body
    :raises OversizedEncoding: if the canonical encoding of the decoded values would be larger than the body
    """
    if len(body) % WORD_SIZE != 0:
        raise CodecError(f"Data length {len(body)} is not a multiple of {WORD_SIZE} bytes")

    if len(body) == 0:
        if types:
            raise CodecError(f"Attempting to decode empty data while {len(types)} arguments are expected")
        return []

    if not any(typ.is_dynamic for typ in types):
        expected = static_size(types)
        if len(body) != expected:
            raise CodecError(
                f"Static arguments ({','.join(str(t) for t in types)}) occupy {expected} bytes, "
                f"but {len(body)} bytes were supplied"
            )

    return _decode_block(types, body, 0, _EncodingBudget(len(body)))


def _read_word(data: bytes, offset: int) -> bytes:
    if offset + WORD_SIZE > len(data):
        raise CodecError(
            f"Insufficient data: attempting to read word at offset {offset} of {len(data)} byte block", offset
        )
    return data[offset : offset + WORD_SIZE]


def _read_uint(data: bytes, offset: int) -> int:
    return int.from_bytes(_read_word(data, offset), "big")


def _resolve_offset(data: bytes, base: int, head_offset: int) -> int:
    pointer = _read_uint(data, head_offset)
    if pointer >= len(data) - base:
        raise CodecError(
            f"Dynamic offset {pointer} at byte {head_offset} points outside of the {len(data)} byte block",
            head_offset,
        )
    return base + pointer


def _read_length(data: bytes, offset: int, item_size: int = 1) -> int:
    length = _read_uint(data, offset)
    remaining = len(data) - offset - WORD_SIZE
    if length * item_size > remaining:
        raise CodecError(
            f"Declared length {length} at byte {offset} exceeds the {remaining} remaining bytes",
            offset,
        )
    return length


def _decode_block(
    types: Sequence[ParamType], data: bytes, base: int, budget: _EncodingBudget
) -> list[DecodedValue]:
    values: list[DecodedValue] = []
    head_offset = base
    for typ in types:
        if typ.is_dynamic:
            budget.charge(WORD_SIZE, head_offset)
            values.append(_decode_value(typ, data, _resolve_offset(data, base, head_offset), budget))
        else:
            values.append(_decode_value(typ, data, head_offset, budget))
        head_offset += typ.head_words * WORD_SIZE

    return values


def _decode_value(typ: ParamType, data: bytes, offset: int, budget: _EncodingBudget) -> DecodedValue:
    # pylint: disable=too-many-return-statements
    match typ:
        case AddressType() | BoolType() | UintType() | IntType() | FixedBytesType():
            budget.charge(WORD_SIZE, offset)
            return _decode_elementary(typ, _read_word(data, offset))

        case BytesType():
            return BytesValue(_read_dynamic_bytes(data, offset, budget))

        case StringType():
            raw_string = _read_dynamic_bytes(data, offset, budget)
            try:
                return StringValue(raw_string.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise CodecError(f"String at byte {offset} is not valid UTF-8: {e}", offset) from e

        case FixedArrayType(element=element, length=length):
            head_size = length * element.head_words * WORD_SIZE
            if head_size > len(data) - offset:
                raise CodecError(
                    f"{typ} at byte {offset} needs {head_size} bytes, but only {len(data) - offset} remain", offset
                )
            return ArrayValue(tuple(_decode_block([element] * length, data, offset, budget)))

        case DynamicArrayType(element=element):
            length = _read_length(data, offset, element.head_words * WORD_SIZE)
            budget.charge(WORD_SIZE, offset)
            return ArrayValue(tuple(_decode_block([element] * length, data, offset + WORD_SIZE, budget)))

        case _:
            raise CodecError(f"Unsupported ABI type: {typ!r}", offset)


def _decode_elementary(typ: ParamType, raw: bytes) -> DecodedValue:
    match typ:
        case AddressType():
            return AddressValue(raw[12:])

        case BoolType():
            return BoolValue(raw != ZERO_WORD)

        case UintType(bits=bits):
            return IntegerValue(int.from_bytes(raw, "big") & ((1 << bits) - 1))

        case IntType(bits=bits):
            number = int.from_bytes(raw, "big") & ((1 << bits) - 1)
            if number >> (bits - 1):
                number -= 1 << bits
            return IntegerValue(number)

        case FixedBytesType(size=size):
            return FixedBytesValue(raw[:size])

        case _:
            raise CodecError(f"{typ} is not an elementary static type")


def _read_dynamic_bytes(data: bytes, offset: int, budget: _EncodingBudget) -> bytes:
    length = _read_length(data, offset)
    budget.charge(WORD_SIZE + _padded_size(length), offset)
    start = offset + WORD_SIZE
    return data[start : start + length]


# ---------------------------------------------------------------------
#    Encoding
# ---------------------------------------------------------------------


def encode(types: Sequence[ParamType], values: Sequence[DecodedValue]) -> bytes:
    """
    Encodes values into a canonical ABI argument block.  Exact inverse of :func:`decode` for canonically
    encoded data.

    :param types: Ordered parameter types
    :param values: One value per parameter type
    :return: Encoded argument bytes, excluding any selector
    :raises CodecError: if a value's variant does not match its type, an array has the wrong number of
        elements, or an integer is out of range for its bit width
    """
    if len(types) != len(values):
        raise CodecError(f"Expected {len(types)} values for types {[str(t) for t in types]}, got {len(values)}")

    for typ, value in zip(types, values, strict=True):
        _check_shape(typ, value)

    try:
        return eth_abi_encode([str(typ) for typ in types], [value.to_python() for value in values])
    except EncodingError as e:
        raise CodecError(f"Failed to encode values for ({','.join(str(t) for t in types)}): {e}") from e


def _check_shape(typ: ParamType, value: DecodedValue):
    match typ, value:
        case AddressType(), AddressValue(value=address):
            if len(address) != 20:
                raise CodecError(f"Address must be 20 bytes, got {len(address)}")

        case FixedBytesType(size=size), FixedBytesValue(value=raw):
            if len(raw) != size:
                raise CodecError(f"Value of {len(raw)} bytes does not fit {typ}")

        case FixedArrayType(element=element, length=length), ArrayValue(items=items):
            if len(items) != length:
                raise CodecError(f"Expected {length} elements for {typ}, got {len(items)}")
            for item in items:
                _check_shape(element, item)

        case DynamicArrayType(element=element), ArrayValue(items=items):
            for item in items:
                _check_shape(element, item)

        case (
            (BoolType(), BoolValue())
            | (UintType(), IntegerValue())
            | (IntType(), IntegerValue())
            | (BytesType(), BytesValue())
            | (StringType(), StringValue())
        ):
            pass

        case _:
            raise CodecError(f"Value {value!r} does not match ABI type {typ}")
