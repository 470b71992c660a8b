from .abi import (
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
from .decoding import DecodedArgument, DecodedCall
