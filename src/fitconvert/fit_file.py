"""
FIT File I/O Module

This module reads the raw bytes of a FIT activity file and writes the rendered
export. Both ends accept a filesystem path or a designator for the standard
streams ("stdin" for the source, "stdout" for the destination).

Sources are consumed in fixed-size chunks. Destinations are always truncated
before the single write, never appended to.
"""

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from fitconvert.config import STDIN_TAG, STDOUT_TAG, defaults
from fitconvert.errors import DestinationError, SourceError

logger = logging.getLogger(__name__)


def iter_chunks(stream: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    """
    Yield successive chunks from a binary stream until it is exhausted.

    Args:
        stream: Readable binary stream
        chunk_size: Maximum number of bytes per chunk

    Yields:
        bytes: Next non-empty chunk
    """
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        yield chunk


def read_source(
    source: Union[str, Path],
    chunk_size: Optional[int] = None,
) -> bytes:
    """
    Read the whole FIT source into memory.

    Args:
        source: Path to the .fit file, or "stdin"
        chunk_size: Read size; defaults to the configured chunk size

    Returns:
        bytes: File contents

    Raises:
        SourceError: If the source cannot be opened or read
    """
    if chunk_size is None:
        chunk_size = defaults.CHUNK_SIZE

    buffer = bytearray()
    try:
        if str(source) == STDIN_TAG:
            logger.info("reading from standard input")
            for chunk in iter_chunks(sys.stdin.buffer, chunk_size):
                buffer.extend(chunk)
        else:
            path = Path(source)
            logger.info("opening file: %s, size: %d bytes", path, path.stat().st_size)
            with open(path, "rb") as f:
                for chunk in iter_chunks(f, chunk_size):
                    buffer.extend(chunk)
    except OSError as exc:
        raise SourceError(f"cannot read {source}: {exc}") from exc

    return bytes(buffer)


def write_destination(destination: Union[str, Path], text: str) -> int:
    """
    Write the rendered export, replacing any previous contents.

    Args:
        destination: Output file path, or "stdout"
        text: Fully rendered document

    Returns:
        int: Number of bytes written

    Raises:
        DestinationError: If the destination cannot be written
    """
    data = text.encode("utf-8")

    if str(destination) == STDOUT_TAG:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return len(data)

    path = Path(destination)
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise DestinationError(f"cannot write {path}: {exc}") from exc

    return len(data)
