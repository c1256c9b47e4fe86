"""
Input Splitter
Divides an input source into word-aligned text chunks, one per map task
"""

import io
import os
import math
import codecs
import logging
from typing import BinaryIO, List, Union

from wordfold.errors import SourceReadError

logger = logging.getLogger(__name__)

# Chunk boundaries are only placed on these characters
ASCII_WHITESPACE = " \t\n\r\f"

Source = Union[str, bytes, os.PathLike, BinaryIO]


def split(source: Source, folds: int) -> List[str]:
    """
    Split a source into at most folds + 1 chunks without severing any word

    Args:
        source: Path to the input file, or a binary stream opened for reading.
            Streams must be seekable (or backed by a regular file) because
            the block size is derived from the remaining byte count; pipes
            and sys.stdin.buffer are rejected with SourceReadError.
        folds: Target number of chunks (at least 1)

    Returns:
        List of chunks in source order. Concatenating them reproduces the
        decoded input, except that whitespace directly after a chunk
        boundary may be dropped.

    Raises:
        ValueError: If folds is less than 1
        SourceReadError: If the source cannot be opened, measured or read
    """
    if folds < 1:
        raise ValueError(f"folds must be at least 1, got {folds}")

    try:
        if isinstance(source, (str, bytes, os.PathLike)):
            with open(source, 'rb') as f:
                return _split_stream(f, folds)
        return _split_stream(source, folds)
    except OSError as e:
        raise SourceReadError(describe_source(source), e) from e


def source_size(source: Source) -> int:
    """
    Number of bytes split() would read from source

    Streams must be seekable or backed by a regular file.

    Raises:
        SourceReadError: If the source cannot be measured
    """
    try:
        if isinstance(source, (str, bytes, os.PathLike)):
            return os.path.getsize(source)
        return _remaining_bytes(source)
    except OSError as e:
        raise SourceReadError(describe_source(source), e) from e


def describe_source(source: Source) -> str:
    """Human readable name for a path or stream."""
    if isinstance(source, (str, bytes, os.PathLike)):
        return os.fsdecode(source)
    return str(getattr(source, 'name', repr(source)))


def _split_stream(stream: BinaryIO, folds: int) -> List[str]:
    remaining = _remaining_bytes(stream)
    if remaining <= 0:
        logger.info("Input source is empty, nothing to split")
        return []

    chunk_size = math.ceil(remaining / folds)
    decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')

    chunks: List[str] = []
    leftover = ''

    block = stream.read(chunk_size)
    while block:
        # Look one block ahead: only a zero-byte read marks the real end,
        # the source may have grown since it was measured
        next_block = stream.read(chunk_size)
        at_end = not next_block

        text = leftover + decoder.decode(block, final=at_end)
        leftover = ''

        if at_end:
            # Nothing follows, the trailing word is complete
            if text:
                chunks.append(text)
            break

        idx = _last_whitespace(text)
        if idx < 0:
            # One long word so far, keep extending it
            leftover = text
        elif idx < len(text) - 1:
            chunks.append(text[:idx + 1])
            leftover = text[idx + 1:].lstrip(ASCII_WHITESPACE)
        else:
            chunks.append(text)

        block = next_block

    logger.info(f"Split input into {len(chunks)} chunks (block size {chunk_size} bytes, folds {folds})")
    return chunks


def _remaining_bytes(stream: BinaryIO) -> int:
    """Number of bytes between the current position and the end of the stream."""
    position = stream.tell()
    try:
        size = os.fstat(stream.fileno()).st_size
    except (AttributeError, io.UnsupportedOperation):
        size = stream.seek(0, io.SEEK_END)
        stream.seek(position)
    return size - position


def _last_whitespace(text: str) -> int:
    """Index of the last ASCII whitespace character in text, or -1."""
    return max(text.rfind(ch) for ch in ASCII_WHITESPACE)
