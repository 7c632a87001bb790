"""Unit tests for the subtleshield command line."""

import pytest
from unittest.mock import patch

from subtleshield.frontend.cli.app import _build_arg_parser, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SECRET", "ITERATIONS", "ENCODING", "FORMAT", "ALGORITHM"):
        monkeypatch.delenv(f"SUBTLESHIELD_{name}", raising=False)
    monkeypatch.setenv("SUBTLESHIELD_ITERATIONS", "10")


def _last_line(out: str) -> str:
    return out.strip().splitlines()[-1]


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        _build_arg_parser().parse_args([])


def test_text_roundtrip(capsys):
    assert main(["--secret", "cli secret", "encrypt-text", "hello cli"]) == 0
    encoded = _last_line(capsys.readouterr().out)

    assert main(["--secret", "cli secret", "decrypt-text", encoded]) == 0
    assert _last_line(capsys.readouterr().out) == "hello cli"


def test_secret_from_environment(capsys, monkeypatch):
    monkeypatch.setenv("SUBTLESHIELD_SECRET", "env secret")
    assert main(["--encoding", "base64", "encrypt-text", "from env"]) == 0
    encoded = _last_line(capsys.readouterr().out)
    assert main(["--encoding", "base64", "decrypt-text", encoded]) == 0
    assert _last_line(capsys.readouterr().out) == "from env"


def test_secret_prompt(capsys):
    with patch("subtleshield.frontend.cli.app.getpass.getpass", return_value="prompted") as prompt:
        assert main(["encrypt-text", "x"]) == 0
    prompt.assert_called_once()
    encoded = _last_line(capsys.readouterr().out)
    assert main(["--secret", "prompted", "decrypt-text", encoded]) == 0


def test_file_roundtrip(tmp_path, capsys):
    src = tmp_path / "notes.txt"
    enc = tmp_path / "notes.enc"
    src.write_bytes(b"cli file content")

    assert main(["--secret", "pw", "--algorithm", "AES-CBC", "encrypt-file", str(src), "-o", str(enc)]) == 0
    assert main(["--secret", "pw", "--algorithm", "AES-CBC", "decrypt-file", str(enc)]) == 0
    assert enc.read_bytes() == b"cli file content"
    assert "Decrypted" in capsys.readouterr().out


def test_wrong_secret_exit_code(capsys):
    assert main(["--secret", "right", "encrypt-text", "x"]) == 0
    encoded = _last_line(capsys.readouterr().out)
    assert main(["--secret", "wrong", "decrypt-text", encoded]) == 1
    assert "decrypt_text failed" in capsys.readouterr().err


def test_bad_environment_value(capsys, monkeypatch):
    monkeypatch.setenv("SUBTLESHIELD_ITERATIONS", "lots")
    assert main(["--secret", "pw", "encrypt-text", "x"]) == 1
    assert "SUBTLESHIELD_ITERATIONS" in capsys.readouterr().err
