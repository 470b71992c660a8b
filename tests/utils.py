def uint_max(bits: int) -> int:
    return 2**bits - 1


def word(value: int) -> bytes:
    """Encodes a non-negative integer as a 32 byte big-endian word"""
    return value.to_bytes(32, "big")


def hex_words(*words: str) -> bytes:
    """Joins hex strings, each left padded to a full 32 byte word"""
    return b"".join(bytes.fromhex(w.rjust(64, "0")) for w in words)
