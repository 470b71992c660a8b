import json

from click.testing import CliRunner
from eth_utils import to_checksum_address as tca

from nethermind.fourbyte.cli import fourbyte_cli

TRANSFER_HEX = (
    "0xa9059cbb"
    "0000000000000000000000009a1989946ae4249aac19ac7a038d24aab03c3d8c"
    "000000000000000000000000000000000000000000002c5b68601cc92ad60000"
)


def test_decode_json_output(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        fourbyte_cli, ["decode", "--overlay-path", str(tmp_path / "overlay.json"), "--json", TRANSFER_HEX]
    )

    assert result.exit_code == 0, result.output
    decoded = json.loads(result.output)
    assert decoded["signature"] == "transfer(address,uint256)"
    assert decoded["arguments"][0]["value"] == tca("0x9a1989946ae4249aac19ac7a038d24aab03c3d8c")
    assert decoded["arguments"][1]["value"] == 209470300000000000000000


def test_decode_console_output(tmp_path):
    runner = CliRunner()
    result = runner.invoke(fourbyte_cli, ["decode", "-o", str(tmp_path / "overlay.json"), TRANSFER_HEX[2:]])

    assert result.exit_code == 0, result.output
    assert "transfer" in result.output
    assert "uint256" in result.output


def test_decode_plain_value_transfer(tmp_path):
    runner = CliRunner()
    result = runner.invoke(fourbyte_cli, ["decode", "-o", str(tmp_path / "overlay.json"), "0x"])

    assert result.exit_code == 0
    assert "Plain value transfer" in result.output


def test_decode_failures(tmp_path):
    runner = CliRunner()
    overlay = str(tmp_path / "overlay.json")

    stuffed = TRANSFER_HEX[:10] + "01" + TRANSFER_HEX[12:]
    result = runner.invoke(fourbyte_cli, ["decode", "-o", overlay, stuffed])
    assert result.exit_code == 1
    assert "stuffed" in result.output

    result = runner.invoke(fourbyte_cli, ["decode", "-o", overlay, "0xdeadbeef"])
    assert result.exit_code == 1
    assert "deadbeef" in result.output

    result = runner.invoke(fourbyte_cli, ["decode", "-o", overlay, "0xnothex"])
    assert result.exit_code == 1


def test_lookup_and_selector(tmp_path):
    runner = CliRunner()
    overlay = str(tmp_path / "overlay.json")

    result = runner.invoke(fourbyte_cli, ["lookup", "-o", overlay, "0xa9059cbb"])
    assert result.exit_code == 0
    assert result.output.strip() == "transfer(address,uint256)"

    result = runner.invoke(fourbyte_cli, ["lookup", "-o", overlay, "deadbeef"])
    assert result.exit_code == 1

    result = runner.invoke(fourbyte_cli, ["selector", "transfer(address,uint256)"])
    assert result.exit_code == 0
    assert result.output.strip() == "0xa9059cbb  transfer(address,uint256)"

    result = runner.invoke(fourbyte_cli, ["selector", "transfer(address,uint7)"])
    assert result.exit_code == 1


def test_add_signature_to_overlay(tmp_path):
    runner = CliRunner()
    overlay_path = tmp_path / "overlay.json"

    result = runner.invoke(fourbyte_cli, ["add", "-o", str(overlay_path), "foo(uint256[3])"])
    assert result.exit_code == 0, result.output
    assert list(json.loads(overlay_path.read_text()).values()) == ["foo(uint256[3])"]

    selector = next(iter(json.loads(overlay_path.read_text())))
    result = runner.invoke(fourbyte_cli, ["lookup", "-o", str(overlay_path), selector])
    assert result.exit_code == 0
    assert result.output.strip() == "foo(uint256[3])"

    calldata = "0x" + selector + "".join(f"{value:064x}" for value in [1, 2, 3])
    result = runner.invoke(fourbyte_cli, ["decode", "-o", str(overlay_path), "--json", calldata])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["arguments"][0]["value"] == [1, 2, 3]

    result = runner.invoke(fourbyte_cli, ["add", "-o", str(overlay_path), "bad(uint7)"])
    assert result.exit_code == 1


def test_verify_command():
    runner = CliRunner()

    result = runner.invoke(fourbyte_cli, ["verify", "--json", "transfer(address,uint256)", TRANSFER_HEX])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["name"] == "transfer"

    result = runner.invoke(fourbyte_cli, ["verify", "approve(address,uint256)", TRANSFER_HEX])
    assert result.exit_code == 1


def test_add_multiple_signatures(tmp_path):
    runner = CliRunner()
    overlay_path = tmp_path / "overlay.json"

    result = runner.invoke(
        fourbyte_cli, ["add", "-o", str(overlay_path), "foo(uint256[3])", "transfer(address,uint256)"]
    )
    assert result.exit_code == 0, result.output
    assert "Added 2 signatures" in result.output
    assert "already defined" not in result.output
    assert sorted(json.loads(overlay_path.read_text()).values()) == ["foo(uint256[3])", "transfer(address,uint256)"]

    # Nothing is written when any signature is invalid
    result = runner.invoke(fourbyte_cli, ["add", "-o", str(tmp_path / "other.json"), "foo()", "bad(uint7)"])
    assert result.exit_code == 1
    assert not (tmp_path / "other.json").exists()


def test_decode_aliased_offsets(tmp_path):
    body = "".join(f"{value:064x}" for value in [32, 3, 96, 96, 96, 1]) + "ab" + "00" * 31
    runner = CliRunner()

    result = runner.invoke(fourbyte_cli, ["decode", "-o", str(tmp_path / "overlay.json"), "0xac9650d8" + body])

    assert result.exit_code == 1
    assert "stuffed" in result.output
