from dataclasses import dataclass

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

# ---------------------------------------------------------------------
#    ABI Parameter Types
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class AddressType:
    """20 byte address, stored in the low 20 bytes of a word"""

    is_dynamic = False

    def __str__(self) -> str:
        return "address"

    @property
    def head_words(self) -> int:
        return 1


@dataclass(frozen=True)
class BoolType:
    """Boolean, stored as a word containing 0 or 1"""

    is_dynamic = False

    def __str__(self) -> str:
        return "bool"

    @property
    def head_words(self) -> int:
        return 1


@dataclass(frozen=True)
class UintType:
    """Unsigned integer of ``bits`` width (8 to 256, multiple of 8)"""

    bits: int
    is_dynamic = False

    def __str__(self) -> str:
        return f"uint{self.bits}"

    @property
    def head_words(self) -> int:
        return 1

    @property
    def max_value(self) -> int:
        return 2**self.bits - 1


@dataclass(frozen=True)
class IntType:
    """Two's complement signed integer of ``bits`` width (8 to 256, multiple of 8)"""

    bits: int
    is_dynamic = False

    def __str__(self) -> str:
        return f"int{self.bits}"

    @property
    def head_words(self) -> int:
        return 1

    @property
    def min_value(self) -> int:
        return -(2 ** (self.bits - 1))

    @property
    def max_value(self) -> int:
        return 2 ** (self.bits - 1) - 1


@dataclass(frozen=True)
class FixedBytesType:
    """bytes1 to bytes32, left aligned in a word"""

    size: int
    is_dynamic = False

    def __str__(self) -> str:
        return f"bytes{self.size}"

    @property
    def head_words(self) -> int:
        return 1


@dataclass(frozen=True)
class BytesType:
    """Dynamic length byte array"""

    is_dynamic = True

    def __str__(self) -> str:
        return "bytes"

    @property
    def head_words(self) -> int:
        return 1


@dataclass(frozen=True)
class StringType:
    """Dynamic length UTF-8 string"""

    is_dynamic = True

    def __str__(self) -> str:
        return "string"

    @property
    def head_words(self) -> int:
        return 1


@dataclass(frozen=True)
class FixedArrayType:
    """
    Array of ``length`` elements.  Static when the element type is static, in which case the elements
    are laid out in place.  Otherwise, the array is addressed through an offset like any dynamic type.
    """

    element: "ParamType"
    length: int

    def __str__(self) -> str:
        return f"{self.element}[{self.length}]"

    @property
    def is_dynamic(self) -> bool:
        return self.element.is_dynamic

    @property
    def head_words(self) -> int:
        if self.is_dynamic:
            return 1
        return self.length * self.element.head_words


@dataclass(frozen=True)
class DynamicArrayType:
    """Length prefixed array of elements"""

    element: "ParamType"
    is_dynamic = True

    def __str__(self) -> str:
        return f"{self.element}[]"

    @property
    def head_words(self) -> int:
        return 1


ParamType = (
    AddressType
    | BoolType
    | UintType
    | IntType
    | FixedBytesType
    | BytesType
    | StringType
    | FixedArrayType
    | DynamicArrayType
)


# ---------------------------------------------------------------------
#    Decoded Values
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class AddressValue:
    """Decoded address.  Stores the raw 20 bytes"""

    value: bytes

    @property
    def checksum(self) -> ChecksumAddress:
        return to_checksum_address(self.value)

    def to_python(self) -> ChecksumAddress:
        return self.checksum

    def __str__(self) -> str:
        return self.checksum


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def to_python(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class IntegerValue:
    """Decoded uintN or intN.  Python ints are arbitrary precision, so a single variant covers both"""

    value: int

    def to_python(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FixedBytesValue:
    value: bytes

    def to_python(self) -> bytes:
        return self.value

    def __str__(self) -> str:
        return "0x" + self.value.hex()


@dataclass(frozen=True)
class BytesValue:
    value: bytes

    def to_python(self) -> bytes:
        return self.value

    def __str__(self) -> str:
        return "0x" + self.value.hex()


@dataclass(frozen=True)
class StringValue:
    value: str

    def to_python(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArrayValue:
    """Decoded fixed or dynamic array"""

    items: tuple["DecodedValue", ...]

    def to_python(self) -> list:
        return [item.to_python() for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self.items) + "]"


DecodedValue = (
    AddressValue | BoolValue | IntegerValue | FixedBytesValue | BytesValue | StringValue | ArrayValue
)
