from .database import SignatureDatabase, write_overlay
from .decoding import CallDataInterpreter, FunctionDescriptor, parse_signature, verify_signature
from .types import DecodedArgument, DecodedCall
