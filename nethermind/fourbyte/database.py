import json
import logging
import os
import re
import tempfile
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from nethermind.fourbyte.decoding.signature import FunctionDescriptor, parse_signature
from nethermind.fourbyte.decoding.utils import normalize_selector
from nethermind.fourbyte.exceptions import DatabaseLoadError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("fourbyte").getChild("database")

BUILTIN_ASSET = "4byte.json"
SELECTOR_KEY_REGEX = re.compile(r"[0-9a-fA-F]{8}")


def load_signature_table(blob: bytes | str, source: str) -> dict[str, str]:
    """
    Parses a JSON signature table.  The table must be a single JSON object mapping 8 character hex selectors to
    signature strings, ie ``{"a9059cbb": "transfer(address,uint256)"}``.  Selector keys are lowercased.

    :param blob: Raw JSON text
    :param source: Name of the table used in error messages
    :raises DatabaseLoadError: if the JSON is malformed or does not follow the table format
    """
    try:
        table = json.loads(blob)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DatabaseLoadError(f"invalid JSON: {e}", source) from e

    if not isinstance(table, dict):
        raise DatabaseLoadError(f"expected a JSON object at the top level, got {type(table).__name__}", source)

    parsed: dict[str, str] = {}
    for selector, signature in table.items():
        if not SELECTOR_KEY_REGEX.fullmatch(selector):
            raise DatabaseLoadError(f"key {selector!r} is not an 8 character hex selector", source)
        if not isinstance(signature, str):
            raise DatabaseLoadError(f"signature for selector {selector} must be a string", source)
        parsed[selector.lower()] = signature

    return parsed


class SignatureDatabase:
    """
    Read-only mapping from 4 byte function selectors to signature text.

    Combines a built-in table, loaded from the signature corpus packaged with the library, with an optional
    overlay table loaded from a user supplied file.  Both tables are frozen at construction, so a single instance
    can be shared by any number of concurrent readers.

    .. note::
        Built-in entries take precedence over overlay entries for the same selector.  The overlay can only
        add selectors missing from the built-in corpus, it cannot override them.

    """

    builtin: Mapping[str, str]
    """ Built-in signature table """

    overlay: Mapping[str, str]
    """ Overlay signature table.  Empty if no overlay file exists """

    overlay_path: Path | None
    """ Path the overlay was loaded from """

    def __init__(
        self,
        builtin: Mapping[str, str],
        overlay: Mapping[str, str] | None = None,
        overlay_path: Path | None = None,
    ):
        self.builtin = MappingProxyType(dict(builtin))
        self.overlay = MappingProxyType(dict(overlay or {}))
        self.overlay_path = overlay_path

        shadowed = set(self.builtin).intersection(self.overlay)
        for selector in sorted(shadowed):
            if self.builtin[selector] != self.overlay[selector]:
                logger.warning(
                    f"Overlay signature {self.overlay[selector]} for selector 0x{selector} is shadowed by "
                    f"built-in signature {self.builtin[selector]}"
                )

    @classmethod
    def build(cls, builtin: bytes | str, overlay_path: str | os.PathLike | None = None) -> "SignatureDatabase":
        """
        Builds a database from the raw JSON of the built-in table, and an optional overlay file.  A missing overlay
        file is not an error, and results in an empty overlay.

        :param builtin: JSON blob of the built-in signature table
        :param overlay_path: Path to an overlay JSON file
        :raises DatabaseLoadError: if either source contains malformed JSON
        """
        builtin_table = load_signature_table(builtin, "built-in")

        overlay_table: dict[str, str] = {}
        path = Path(overlay_path).expanduser() if overlay_path else None
        if path is not None and path.exists():
            try:
                overlay_blob = path.read_bytes()
            except OSError as e:
                raise DatabaseLoadError(f"could not read {path}: {e}", "overlay") from e
            overlay_table = load_signature_table(overlay_blob, "overlay")
        elif path is not None:
            logger.debug(f"Overlay file {path} does not exist.  Using empty overlay")

        logger.info(
            f"Loaded signature database with {len(builtin_table)} built-in and {len(overlay_table)} overlay signatures"
        )
        return cls(builtin_table, overlay_table, path)

    @classmethod
    def load(cls, overlay_path: str | os.PathLike | None = None) -> "SignatureDatabase":
        """Builds a database from the signature corpus packaged with the library"""
        blob = resources.files("nethermind.fourbyte").joinpath("data").joinpath(BUILTIN_ASSET).read_bytes()
        return cls.build(blob, overlay_path)

    def lookup(self, selector: bytes | str) -> str | None:
        """
        Returns the signature text for a selector, or None if the selector is in neither table.  Built-in entries
        are returned in preference to overlay entries.

        :param selector: 4 byte selector as bytes, or hex string with or without 0x prefix
        """
        key = normalize_selector(selector)
        signature = self.builtin.get(key)
        if signature is not None:
            return signature
        return self.overlay.get(key)

    def selectors(self) -> list[str]:
        """Returns all selectors present in either table, sorted"""
        return sorted(set(self.builtin).union(self.overlay))

    def __contains__(self, selector: object) -> bool:
        if not isinstance(selector, (bytes, str)):
            return False
        try:
            return self.lookup(selector) is not None
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(set(self.builtin).union(self.overlay))

    def __repr__(self) -> str:
        return f"SignatureDatabase(builtin={len(self.builtin)}, overlay={len(self.overlay)}, path={self.overlay_path})"


def write_overlay(path: str | os.PathLike, signatures: Iterable[str | FunctionDescriptor]) -> dict[str, str]:
    """
    Validates signatures and persists them to an overlay file, creating it if necessary.  Entries already in the
    file are kept, and entries with the same selector are replaced.  Databases that were already built do not
    observe the new entries.

    :param path: Overlay file path
    :param signatures: Signature strings, or already parsed descriptors, to add
    :return: Full overlay table that was written
    :raises InvalidSignature: if any signature fails to parse.  Nothing is written in that case
    :raises DatabaseLoadError: if the existing overlay file is malformed
    """
    overlay_path = Path(path).expanduser()

    additions: dict[str, str] = {}
    for signature in signatures:
        descriptor = parse_signature(signature) if isinstance(signature, str) else signature
        additions[descriptor.selector.hex()] = descriptor.signature

    table = load_signature_table(overlay_path.read_bytes(), "overlay") if overlay_path.exists() else {}
    for selector, signature in additions.items():
        if table.get(selector, signature) != signature:
            logger.info(f"Replacing overlay signature {table[selector]} for 0x{selector} with {signature}")
        table[selector] = signature

    overlay_path.parent.mkdir(parents=True, exist_ok=True)
    _replace_file(overlay_path, json.dumps(dict(sorted(table.items())), indent=2) + "\n")
    logger.info(f"Wrote {len(additions)} signatures to overlay {overlay_path}")
    return table


def _replace_file(path: Path, contents: str):
    """Writes contents to a temporary file beside path, then atomically moves it into place"""
    temp_file = tempfile.NamedTemporaryFile(  # pylint: disable=consider-using-with
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    )
    try:
        with temp_file:
            temp_file.write(contents)
        os.replace(temp_file.name, path)
    except OSError:
        os.unlink(temp_file.name)
        raise
