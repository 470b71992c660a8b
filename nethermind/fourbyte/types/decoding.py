from dataclasses import dataclass
from typing import Any

from .abi import DecodedValue, ParamType


@dataclass(frozen=True)
class DecodedArgument:
    """Single decoded argument, paired with its declared ABI type"""

    type: ParamType
    value: DecodedValue

    def __str__(self) -> str:
        return f"{self.type}: {self.value}"


@dataclass(frozen=True)
class DecodedCall:
    """
    Result of successfully decoding & verifying call data.  Only produced once the payload has been resolved,
    decoded, and re-encoded to the exact original bytes.
    """

    selector: bytes
    name: str
    signature: str

    arguments: tuple[DecodedArgument, ...]

    @property
    def values(self) -> list[Any]:
        """Decoded argument values converted to plain python types"""
        return [arg.value.to_python() for arg in self.arguments]

    def to_dict(self) -> dict[str, Any]:
        """Returns a JSON-serializable representation.  Byte values are hex encoded"""

        def _jsonify(value: Any) -> Any:
            if isinstance(value, bytes):
                return "0x" + value.hex()
            if isinstance(value, list):
                return [_jsonify(v) for v in value]
            return value

        return {
            "selector": "0x" + self.selector.hex(),
            "name": self.name,
            "signature": self.signature,
            "arguments": [
                {"type": str(arg.type), "value": _jsonify(arg.value.to_python())} for arg in self.arguments
            ],
        }

    def __str__(self) -> str:
        return f"{self.name}({','.join(str(arg) for arg in self.arguments)})"
