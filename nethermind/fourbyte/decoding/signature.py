import logging
import re
from dataclasses import dataclass

from nethermind.fourbyte.exceptions import InvalidSignature
from nethermind.fourbyte.types.abi import (
    AddressType,
    BoolType,
    BytesType,
    DynamicArrayType,
    FixedArrayType,
    FixedBytesType,
    IntType,
    ParamType,
    StringType,
    UintType,
)

from .utils import signature_to_selector

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("fourbyte").getChild("signature")

# Uppercase letters are not valid in ABI types, but the general shape of the signature is still accepted here.
# The type resolver rejects them afterwards.
SIGNATURE_REGEX = re.compile(r"^([^)]+)\(([A-Za-z0-9,\[\]]*)\)$")
TYPE_TOKEN_REGEX = re.compile(r"^([A-Za-z0-9]+)((?:\[[0-9]*\])*)$")
ARRAY_SUFFIX_REGEX = re.compile(r"\[([0-9]*)\]")
SIZED_TYPE_REGEX = re.compile(r"^(uint|int|bytes)([0-9]+)$")


@dataclass(frozen=True)
class FunctionDescriptor:
    """Function name & ordered parameter types parsed from a textual signature"""

    name: str
    types: tuple[ParamType, ...]

    @property
    def signature(self) -> str:
        """Canonical signature string, ie ``transfer(address,uint256)``"""
        return f"{self.name}({','.join(str(typ) for typ in self.types)})"

    @property
    def selector(self) -> bytes:
        """4 byte selector of the canonical signature"""
        return signature_to_selector(self.signature)

    def __str__(self) -> str:
        return self.signature


def _parse_size(digits: str, type_str: str) -> int:
    # Rejects leading zeros, ie uint0256
    if digits != str(int(digits)):
        raise ValueError(f"non-canonical size in type {type_str!r}")
    return int(digits)


def resolve_elementary_type(type_str: str) -> ParamType:
    """
    Resolves an elementary (non-array) ABI type name.

    >>> from nethermind.fourbyte.decoding.signature import resolve_elementary_type
    >>> resolve_elementary_type("uint256")
    UintType(bits=256)
    >>> resolve_elementary_type("bytes4")
    FixedBytesType(size=4)

    :raises ValueError: if the type is unknown or its width is out of bounds
    """
    match type_str:
        case "address":
            return AddressType()
        case "bool":
            return BoolType()
        case "string":
            return StringType()
        case "bytes":
            return BytesType()

    sized = SIZED_TYPE_REGEX.match(type_str)
    if sized is None:
        raise ValueError(f"unsupported type {type_str!r}")

    base, width = sized.group(1), _parse_size(sized.group(2), type_str)
    if base == "bytes":
        if not 1 <= width <= 32:
            raise ValueError(f"fixed bytes width of {type_str!r} must be between 1 and 32")
        return FixedBytesType(width)

    if width % 8 != 0 or not 8 <= width <= 256:
        raise ValueError(f"integer width of {type_str!r} must be a multiple of 8 between 8 and 256")
    return UintType(width) if base == "uint" else IntType(width)


def resolve_type(type_str: str) -> ParamType:
    """
    Resolves an ABI type token, including any number of array suffixes.  Suffixes apply left to right, so
    ``uint256[2][]`` is a dynamic array of ``uint256[2]``.

    :raises ValueError: if the token is malformed or references an unknown type
    """
    token = TYPE_TOKEN_REGEX.match(type_str)
    if token is None:
        raise ValueError(f"malformed type {type_str!r}")

    resolved = resolve_elementary_type(token.group(1))
    for array_size in ARRAY_SUFFIX_REGEX.findall(token.group(2)):
        if array_size == "":
            resolved = DynamicArrayType(resolved)
            continue

        length = _parse_size(array_size, type_str)
        if length == 0:
            raise ValueError(f"fixed array length of {type_str!r} must be positive")
        resolved = FixedArrayType(resolved, length)

    return resolved


def parse_signature(signature: str) -> FunctionDescriptor:
    """
    Parses a textual function signature of the form ``name(type,type,...)`` into a FunctionDescriptor.

    >>> from nethermind.fourbyte.decoding.signature import parse_signature
    >>> parse_signature("transfer(address,uint256)").types
    (AddressType(), UintType(bits=256))

    The whole string must match.  Any text after the closing parenthesis, such as a trailing ``returns (...)``
    clause, is rejected rather than ignored, so a database entry always hashes exactly the text that is decoded.

    :param signature: signature text, without whitespace
    :return: FunctionDescriptor
    :raises InvalidSignature: if the signature shape does not match, a type token is empty or malformed, or
        a type does not resolve to a supported ABI type
    """
    groups = SIGNATURE_REGEX.match(signature)
    if groups is None:
        raise InvalidSignature(signature, "expected the form name(type,type,...)")

    name, args = groups.group(1), groups.group(2)

    types: list[ParamType] = []
    if args:
        for index, arg in enumerate(args.split(",")):
            if not arg:
                raise InvalidSignature(signature, f"empty type at argument {index}")
            try:
                types.append(resolve_type(arg))
            except ValueError as e:
                raise InvalidSignature(signature, f"argument {index}: {e}") from e

    descriptor = FunctionDescriptor(name=name, types=tuple(types))
    logger.debug(f"Parsed signature {signature} into {descriptor.signature}")
    return descriptor
