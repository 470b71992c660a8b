import json

import pytest

from nethermind.fourbyte.database import SignatureDatabase, load_signature_table, write_overlay
from nethermind.fourbyte.decoding.signature import parse_signature
from nethermind.fourbyte.exceptions import DatabaseLoadError, InvalidSignature

BUILTIN_JSON = json.dumps(
    {
        "a9059cbb": "transfer(address,uint256)",
        "095ea7b3": "approve(address,uint256)",
    }
)


def test_lookup_selector_formats():
    database = SignatureDatabase.build(BUILTIN_JSON)

    assert database.lookup(bytes.fromhex("a9059cbb")) == "transfer(address,uint256)"
    assert database.lookup("a9059cbb") == "transfer(address,uint256)"
    assert database.lookup("0xA9059CBB") == "transfer(address,uint256)"
    assert database.lookup(bytes.fromhex("095ea7b3" + "00" * 32)) == "approve(address,uint256)"
    assert database.lookup("deadbeef") is None

    with pytest.raises(ValueError):
        database.lookup(b"\xa9\x05")


def test_builtin_takes_precedence_over_overlay(tmp_path):
    overlay_path = tmp_path / "4byte-custom.json"
    overlay_path.write_text(
        json.dumps(
            {
                "a9059cbb": "overriddenTransfer(address,uint256)",
                "12345678": "customFunction(uint256)",
            }
        )
    )

    database = SignatureDatabase.build(BUILTIN_JSON, overlay_path)

    assert database.lookup("a9059cbb") == "transfer(address,uint256)"
    assert database.lookup("12345678") == "customFunction(uint256)"
    assert database.overlay["a9059cbb"] == "overriddenTransfer(address,uint256)"
    assert database.overlay_path == overlay_path


def test_missing_overlay_is_empty(tmp_path):
    database = SignatureDatabase.build(BUILTIN_JSON, tmp_path / "does-not-exist.json")

    assert len(database.overlay) == 0
    assert len(database) == 2
    assert not (tmp_path / "does-not-exist.json").exists()


def test_malformed_builtin():
    for blob in ["{", "[]", '["a9059cbb"]', '{"a9059cbb": {"name": "transfer"}}', '{"a9059cb": "transfer()"}']:
        with pytest.raises(DatabaseLoadError) as exc_info:
            SignatureDatabase.build(blob)
        assert exc_info.value.source == "built-in"


def test_malformed_overlay(tmp_path):
    overlay_path = tmp_path / "4byte-custom.json"
    overlay_path.write_text('{"a9059cbb": "transfer(address,uint256)",}')

    with pytest.raises(DatabaseLoadError) as exc_info:
        SignatureDatabase.build(BUILTIN_JSON, overlay_path)

    assert exc_info.value.source == "overlay"


def test_signature_table_keys_normalized():
    assert load_signature_table('{"A9059CBB": "transfer(address,uint256)"}', "test") == {
        "a9059cbb": "transfer(address,uint256)"
    }


def test_database_is_read_only():
    database = SignatureDatabase.build(BUILTIN_JSON)

    with pytest.raises(TypeError):
        database.builtin["deadbeef"] = "foo()"  # type: ignore[index]

    with pytest.raises(TypeError):
        database.overlay["deadbeef"] = "foo()"  # type: ignore[index]


def test_database_introspection(tmp_path):
    overlay_path = tmp_path / "4byte-custom.json"
    overlay_path.write_text(json.dumps({"a9059cbb": "transfer(address,uint256)", "12345678": "foo()"}))

    database = SignatureDatabase.build(BUILTIN_JSON, overlay_path)

    assert len(database) == 3
    assert database.selectors() == ["095ea7b3", "12345678", "a9059cbb"]
    assert "12345678" in database
    assert bytes.fromhex("095ea7b3") in database
    assert "deadbeef" not in database
    assert "not hex" not in database
    assert 12345678 not in database


def test_packaged_corpus():
    database = SignatureDatabase.load()

    assert database.lookup("a9059cbb") == "transfer(address,uint256)"
    assert len(database.overlay) == 0

    # Every packaged entry must parse, and hash to its own selector
    for selector, signature in database.builtin.items():
        descriptor = parse_signature(signature)
        assert descriptor.signature == signature
        assert descriptor.selector.hex() == selector, signature


def test_write_overlay(tmp_path):
    overlay_path = tmp_path / "nested" / "4byte-custom.json"

    written = write_overlay(overlay_path, ["foo(uint256[3])"])
    assert overlay_path.exists()
    assert list(written.values()) == ["foo(uint256[3])"]

    database = SignatureDatabase.build(BUILTIN_JSON, overlay_path)
    selector = next(iter(written))
    assert database.lookup(selector) == "foo(uint256[3])"

    write_overlay(overlay_path, ["bar(address,bool)"])
    stored = json.loads(overlay_path.read_text())
    assert sorted(stored.values()) == ["bar(address,bool)", "foo(uint256[3])"]
    assert list(stored) == sorted(stored)

    # Databases are not mutated by later saves
    assert len(database.overlay) == 1


def test_write_overlay_rejects_invalid_signatures(tmp_path):
    overlay_path = tmp_path / "4byte-custom.json"

    with pytest.raises(InvalidSignature):
        write_overlay(overlay_path, ["foo(uint256)", "bar(uint7)"])

    assert not overlay_path.exists()


def test_write_overlay_accepts_parsed_descriptors(tmp_path):
    overlay_path = tmp_path / "4byte-custom.json"
    descriptor = parse_signature("foo(uint256[3])")

    written = write_overlay(overlay_path, [descriptor, "bar(address,bool)"])

    assert written[descriptor.selector.hex()] == "foo(uint256[3])"
    assert sorted(written.values()) == ["bar(address,bool)", "foo(uint256[3])"]


def test_interrupted_overlay_write_keeps_previous_file(tmp_path, monkeypatch):
    overlay_path = tmp_path / "4byte-custom.json"
    write_overlay(overlay_path, ["foo(uint256[3])"])
    previous = overlay_path.read_text()

    def _failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("nethermind.fourbyte.database.os.replace", _failing_replace)

    with pytest.raises(OSError):
        write_overlay(overlay_path, ["bar(address,bool)"])

    assert overlay_path.read_text() == previous
    assert [path.name for path in tmp_path.iterdir()] == ["4byte-custom.json"]
