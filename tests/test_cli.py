import json

import pytest

from mandopop.cli import main


def run(capsys, *argv):
    code = 0
    try:
        main(list(argv))
    except SystemExit as e:
        code = e.code
    out, err = capsys.readouterr()
    return code, out, err


def test_default_output(capsys, index_json):
    code, out, _ = run(capsys, "cats", "--index", str(index_json), "--no-cache")
    assert code == 0
    assert out.strip() == "猫\tmāo\tcat; CL:隻|只[zhi1]"


def test_detail_output(capsys, index_json):
    code, out, _ = run(capsys, "-d", "Banks", "-i", str(index_json), "--no-cache")
    assert code == 0
    assert out.startswith("Banks → bank")
    assert "银行【yín háng】" in out
    assert "  1. bank" in out


def test_json_output(capsys, index_json):
    code, out, _ = run(capsys, "--json", "ice cream", "-i", str(index_json), "--no-cache")
    data = json.loads(out)
    assert code == 0
    assert data["status"] == "found"
    assert data["entries"][0]["s"] == "冰淇淋"


def test_max(capsys, index_json):
    _, out, _ = run(capsys, "bank", "-m", "1", "-i", str(index_json), "--no-cache")
    assert out.strip().splitlines() == ["银行\tyín háng\tbank; CL:家[jia1],個|个[ge4]"]


def test_no_match(capsys, index_json):
    code, out, _ = run(capsys, "xyzzy", "-i", str(index_json), "--no-cache")
    assert code == 1
    assert "No translation found for 'xyzzy'" in out


def test_prefix(capsys, index_json):
    code, out, _ = run(capsys, "--prefix", "ice", "-i", str(index_json), "--no-cache")
    assert code == 0
    assert sorted(out.split()) == ["cream", "ice", "ice"]


def test_missing_index(capsys, tmp_path):
    code, _, err = run(capsys, "cat", "-i", str(tmp_path / "missing.json"), "--no-cache")
    assert code == 2
    assert err.startswith("Error:")


def test_stdin(capsys, index_json, monkeypatch):
    import io
    monkeypatch.setattr("sys.stdin", io.StringIO("running\n"))
    code, out, _ = run(capsys, "-i", str(index_json), "--no-cache")
    assert code == 0
    assert out.startswith("跑")


def test_empty_input_prints_help(capsys, monkeypatch):
    import io
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    code, out, _ = run(capsys)
    assert code == 1
    assert "usage:" in out


def test_version(capsys):
    code, out, _ = run(capsys, "--version")
    assert code == 0
    assert out.startswith("mandopop ")
