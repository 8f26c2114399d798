import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Union

from .errors import IoError

logger = logging.getLogger(__name__)

STDIN = "-"


# ---------- Byte sources ----------
class ByteSource:
    """Something that can be read to completion exactly once."""

    name = "?"

    def read(self) -> bytes:
        raise NotImplementedError


class FileSource(ByteSource):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.name = str(self.path)

    def read(self) -> bytes:
        return read_file(self.path)


class StdinSource(ByteSource):
    name = "<stdin>"

    def __init__(self, stream=None):
        self._stream = stream

    def read(self) -> bytes:
        stream = self._stream if self._stream is not None else sys.stdin.buffer
        try:
            data = stream.read()
        except OSError as e:
            raise IoError(f"failed to read stdin: {e}") from e
        logger.debug("read %d bytes from stdin", len(data))
        return data


def get_reader(path: Union[str, Path]) -> ByteSource:
    if str(path) == STDIN:
        return StdinSource()
    return FileSource(path)


def read_all(path: Union[str, Path]) -> bytes:
    return get_reader(path).read()


def read_file(path: Union[str, Path]) -> bytes:
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise IoError(f"failed to read {path}: {e.strerror or e}") from e
    logger.debug("read %d bytes from %s", len(data), path)
    return data


def write_file(path: Union[str, Path], data: bytes) -> None:
    try:
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        raise IoError(f"failed to write {path}: {e.strerror or e}") from e
    logger.debug("wrote %d bytes to %s", len(data), path)


# ---------- argparse value checkers ----------
def verify_input_file(filename: str) -> str:
    if filename == STDIN or os.path.exists(filename):
        return filename
    raise argparse.ArgumentTypeError(f"File not found: {filename}")


def verify_path(path: str) -> Path:
    p = Path(path)
    if p.is_dir():
        return p
    raise argparse.ArgumentTypeError(f"Path does not exist or is not a directory: {path}")
