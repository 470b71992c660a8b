from .calldata import CallDataInterpreter, decode_with_descriptor, verify_signature
from .codec import decode, encode
from .signature import FunctionDescriptor, parse_signature
