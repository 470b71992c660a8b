class DecodingError(Exception):
    """

    Raised when issues occur with call data decoding, signature parsing, or signature database loading

    """


class CodecError(DecodingError):
    """
    Raised by the ABI codec when binary data cannot be decoded under a list of types, or when a value
    does not match the shape of its declared type during encoding.
    """

    offset: int | None
    """ Byte offset into the encoded block where the failure occurred, if known """

    def __init__(self, message: str, offset: int | None = None):
        super().__init__(message)
        self.offset = offset


class OversizedEncoding(CodecError):
    """
    Raised while decoding when the canonical encoding of the values decoded so far exceeds the size of the
    supplied data.  Only payloads with aliased or overlapping dynamic offsets can reach this state.
    """

    limit: int
    """ Size in bytes of the supplied data """

    def __init__(self, message: str, limit: int, offset: int | None = None):
        super().__init__(message, offset)
        self.limit = limit


class DatabaseLoadError(DecodingError):
    """
    Raised while constructing a SignatureDatabase when either the built-in corpus or the overlay file
    does not contain a JSON object mapping 4 byte hex selectors to signature strings.  Fatal at start-up.
    """

    source: str

    def __init__(self, message: str, source: str):
        super().__init__(f"Failed to load {source} signatures: {message}")
        self.source = source


class CallDataError(DecodingError):
    """Base class for failures of the call data interpreter"""

    selector: str | None
    """ Hex selector of the call data (without 0x), if the payload was long enough to contain one """

    def __init__(self, message: str, selector: str | None = None):
        super().__init__(message)
        self.selector = selector


class MalformedCallData(CallDataError):
    """
    Raised when call data is structurally invalid.  Either the payload is too short to contain a
    4 byte selector, or the argument body is not a multiple of 32 bytes.
    """

    length: int

    def __init__(self, message: str, length: int, selector: str | None = None):
        super().__init__(message, selector)
        self.length = length


class UnknownSelector(CallDataError):
    """Raised when a selector is not present in the built-in or overlay signature tables"""

    def __init__(self, selector: str):
        super().__init__(f"Transaction contains data, but the signature 0x{selector} could not be found", selector)


class InvalidSignature(CallDataError):
    """
    Raised when signature text cannot be parsed into a function descriptor.  When raised by the
    interpreter, this indicates a corrupt or unsupported signature database entry rather than bad call data.
    """

    signature: str
    reason: str

    def __init__(self, signature: str, reason: str, selector: str | None = None):
        super().__init__(f"Invalid signature {signature!r}: {reason}", selector)
        self.signature = signature
        self.reason = reason


class SelectorMismatch(InvalidSignature):
    """Raised when a signature does not hash to the selector it was resolved from"""

    expected_selector: str

    def __init__(self, signature: str, selector: str, expected_selector: str):
        super().__init__(
            signature,
            f"signature hashes to 0x{expected_selector}, but was resolved from selector 0x{selector}",
            selector,
        )
        self.expected_selector = expected_selector


class ArgumentDecodeError(CallDataError):
    """Raised when the argument body cannot be decoded under the types of the resolved signature"""

    signature: str
    codec_error: CodecError

    def __init__(self, signature: str, codec_error: CodecError, selector: str | None = None):
        super().__init__(f"Signature {signature} matches, but arguments mismatch: {codec_error}", selector)
        self.signature = signature
        self.codec_error = codec_error


class DataStuffingError(CallDataError):
    """
    Raised when call data decodes under a signature, but re-encoding the decoded values does not reproduce
    the original argument bytes.  The payload carries extra or non-canonical bytes that are not visible
    through the decoded values.

    * Non-zero padding around addresses, small integers, and fixed bytes
    * Boolean words other than 0 or 1
    * Trailing data or gaps after dynamic payloads
    * Non-canonical offsets to dynamic data

    """

    signature: str
    expected: str
    """ Hex of the argument bytes as supplied """
    actual: str | None
    """ Hex of the re-encoded decoded values.  None when decoding stopped because the re-encoding would be larger
    than the supplied data """
    offset: int | None
    """ Byte offset into the argument body of the first word that differs """

    def __init__(
        self,
        signature: str,
        expected: str,
        actual: str | None,
        selector: str | None = None,
        offset: int | None = None,
    ):
        have = actual if actual is not None else "<larger than the supplied data>"
        super().__init__(
            f"Supplied data is stuffed with extra data for method {signature}.\nWant {expected}\nHave {have}",
            selector,
        )
        self.signature = signature
        self.expected = expected
        self.actual = actual
        self.offset = offset


class NoCallData(Exception):
    """
    Raised when a transaction payload is empty.  This is a plain value transfer rather than a decoding
    failure, so it does not derive from DecodingError.
    """
