from typing import Protocol


class SignatureSource(Protocol):
    """Abstract Protocol for selector to signature lookups.  Implemented by SignatureDatabase"""

    def lookup(self, selector: bytes | str) -> str | None:
        """Return signature text for a 4 byte selector, or None if the selector is unknown"""
        raise NotImplementedError()
