"""
Speculative chunk search over a ByteStream.

RIFF readers must ignore chunks they do not recognize, so an expected chunk
may sit behind any number of unknown siblings. match_chunk and match_list
scan forward, discarding non-matching chunks, and rewind to where they
started when nothing matches.

Usage:
    from chunk_matcher import match_chunk, read_chunk_size

    if match_chunk(stream, b"fmt ", len(stream)):
        size = read_chunk_size(stream)
"""
import logging

from byte_stream import ByteStream, read_u32_le

log = logging.getLogger(__name__)

CHUNK_ID_SIZE = 4
CHUNK_SIZE_SIZE = 4
LIST_TYPE_SIZE = 4

LIST_ID = b"LIST"


def padded(size: int) -> int:
    """Round a chunk payload size up to the even length it occupies."""
    return size + (size & 1)


def read_chunk_size(stream: ByteStream) -> int:
    """Read a 4-byte little-endian chunk size."""
    return read_u32_le(stream)


def skip_payload(stream: ByteStream, size: int) -> int:
    """
    Step over a payload of ``size`` bytes and its pad byte.

    The pad byte of an odd-sized chunk may be missing when the chunk ends
    the buffer; the payload itself must be present.

    Returns:
        Number of bytes skipped.

    Raises:
        OutOfBoundsError: If the payload runs past the end of the buffer.
    """
    stream.skip(size)
    if size & 1 and not stream.eof():
        stream.skip(1)
        return size + 1
    return size


def skip_chunk(stream: ByteStream) -> int:
    """
    Skip an opaque chunk whose tag was already consumed.

    Reads the size field and discards the padded payload.

    Returns:
        Number of payload bytes skipped, including the pad byte.
    """
    return skip_payload(stream, read_chunk_size(stream))


def try_read(stream: ByteStream, expected: bytes) -> bool:
    """Consume ``expected`` if it is next in the stream; otherwise leave the offset alone."""
    if stream.peek(len(expected)) == expected:
        stream.read(len(expected))
        return True
    return False


def _check_region(stream: ByteStream, tag: bytes, region_end: int) -> None:
    if region_end > len(stream):
        raise ValueError(
            f"region_end {region_end} is beyond the buffer length {len(stream)}"
        )
    if len(tag) != CHUNK_ID_SIZE:
        raise ValueError(f"Chunk id must be {CHUNK_ID_SIZE} bytes, got {tag!r}")


def _rewind(stream: ByteStream, offset: int) -> None:
    # An unmoved cursor may sit at the end of the buffer, where seek is invalid.
    if stream.offset != offset:
        stream.seek(offset)


def match_chunk(stream: ByteStream, chunk_id: bytes, region_end: int) -> bool:
    """
    Find the next chunk tagged ``chunk_id`` before ``region_end``.

    Chunks with other tags are skipped (padded to even length). On success
    the stream is positioned right after the matched tag, at its size field.
    On failure the stream is restored to where the search started.

    Args:
        stream: Stream positioned at a chunk tag.
        chunk_id: 4-byte chunk tag to look for.
        region_end: Offset where the enclosing chunk ends.

    Returns:
        True if the chunk was found.

    Raises:
        ValueError: If ``chunk_id`` is not 4 bytes or ``region_end`` lies
            beyond the buffer.
        OutOfBoundsError: If a skipped chunk runs past the buffer.
    """
    _check_region(stream, chunk_id, region_end)

    start_offset = stream.offset
    while stream.offset < region_end and not stream.eof():
        tag = stream.read(CHUNK_ID_SIZE)
        if tag == chunk_id:
            return True
        skipped = skip_chunk(stream)
        log.debug(f"Skipped chunk {tag!r} ({skipped} bytes) looking for {chunk_id!r}")

    _rewind(stream, start_offset)
    return False


def match_list(stream: ByteStream, list_type: bytes, region_end: int) -> bool:
    """
    Find the next LIST chunk whose sub-type is ``list_type``.

    On success the stream is positioned at the matched LIST's size field, so
    the caller reads the size and sub-type itself. LIST chunks of other
    sub-types and non-LIST chunks are skipped. On failure the stream is
    restored to where the search started.
    """
    _check_region(stream, list_type, region_end)

    start_offset = stream.offset
    while match_chunk(stream, LIST_ID, region_end):
        size_offset = stream.offset
        list_size = read_chunk_size(stream)
        found_type = stream.read(LIST_TYPE_SIZE)
        if found_type == list_type:
            stream.seek(size_offset)
            return True
        log.debug(f"Skipped LIST {found_type!r} looking for {list_type!r}")
        if list_size >= LIST_TYPE_SIZE:
            skip_payload(stream, list_size - LIST_TYPE_SIZE)

    _rewind(stream, start_offset)
    return False
