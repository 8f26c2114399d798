import argparse
import io

import pytest

from rcli.errors import IoError
from rcli.utils import (
    FileSource,
    StdinSource,
    get_reader,
    read_all,
    read_file,
    verify_input_file,
    verify_path,
    write_file,
)


def test_get_reader_dash_is_stdin():
    assert isinstance(get_reader("-"), StdinSource)


def test_get_reader_path_is_file(tmp_path):
    p = tmp_path / "in.txt"
    p.write_bytes(b"abc")
    reader = get_reader(p)
    assert isinstance(reader, FileSource)
    assert reader.read() == b"abc"


def test_read_all_from_stdin(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"piped\x00bytes")))
    assert read_all("-") == b"piped\x00bytes"


def test_stdin_source_with_stream():
    assert StdinSource(io.BytesIO(b"xyz")).read() == b"xyz"


def test_read_file_missing(tmp_path):
    with pytest.raises(IoError, match="failed to read"):
        read_file(tmp_path / "nope.key")


def test_read_file_directory(tmp_path):
    with pytest.raises(IoError):
        read_file(tmp_path)


def test_write_file_roundtrip(tmp_path):
    p = tmp_path / "key.bin"
    write_file(p, b"\x00\x01")
    assert read_file(p) == b"\x00\x01"


def test_write_file_missing_dir(tmp_path):
    with pytest.raises(IoError, match="failed to write"):
        write_file(tmp_path / "missing" / "key.bin", b"x")


def test_verify_input_file(tmp_path):
    p = tmp_path / "exists.txt"
    p.write_text("x")
    assert verify_input_file("-") == "-"
    assert verify_input_file(str(p)) == str(p)
    with pytest.raises(argparse.ArgumentTypeError, match="File not found: not-exist"):
        verify_input_file("not-exist")


def test_verify_path(tmp_path):
    assert verify_path(str(tmp_path)) == tmp_path
    with pytest.raises(argparse.ArgumentTypeError):
        verify_path(str(tmp_path / "missing"))
