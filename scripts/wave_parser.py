"""
RIFF/WAVE decoder.

Decodes a complete in-memory .wav file into a WaveFile. Parsing follows the
RIFF chunk grammar loosely in the style of a recursive descent parser: one
method per chunk kind, with chunk_matcher doing the "find the next chunk of
this type, skipping anything unknown" work.

Supported:
- Linear PCM only, 8-bit unsigned or 16-bit signed samples
- Mono and stereo
- Audio in a flat 'data' chunk or in a LIST 'wavl' of 'data'/'slnt' chunks
- Unknown chunks anywhere before the chunk being looked for

Usage:
    from wave_parser import parse_wave

    with open("clip.wav", "rb") as f:
        wave_file = parse_wave(f.read())

    print(f"Sample rate: {wave_file.sample_rate}")
    print(f"Frames: {wave_file.num_frames}")
"""
import logging

from byte_stream import ByteStream, read_i16_le, read_u16_le, read_u32_le
from chunk_matcher import (
    CHUNK_ID_SIZE,
    CHUNK_SIZE_SIZE,
    LIST_TYPE_SIZE,
    match_chunk,
    match_list,
    padded,
    read_chunk_size,
    skip_chunk,
    skip_payload,
    try_read,
)
from wave_errors import (
    InvalidRiffSizeError,
    MissingDataChunkError,
    MissingRequiredChunkError,
    NotAWaveFileError,
    OutOfBoundsError,
    UnexpectedChunkError,
    UnsupportedBitDepthError,
    UnsupportedChannelCountError,
    UnsupportedFormatError,
)
from wave_file import Sample, Sample8, Sample16, WaveFile, WaveFormat

log = logging.getLogger(__name__)

# PCM fmt chunk body: wFormatTag .. wBitsPerSample
FMT_PCM_SIZE = 16

MAX_BITS_PER_SAMPLE = 16
SUPPORTED_CHANNEL_COUNTS = (1, 2)

# Sub-chunks an 'adtl' list must carry, in order
ADTL_REQUIRED_CHUNKS = (b"labl", b"note", b"ltxt", b"file")

UNKNOWN_WAVL_POLICIES = ("skip", "fail")


class WaveFileParser:
    """
    Single-use decoder for one WAV byte buffer.

    Args:
        data: Complete .wav file contents.
        strict: Validate the RIFF size field and require the pad byte after
            an odd-length data chunk at the end of the file.
        unknown_wavl_chunks: What to do with a chunk other than 'data' or
            'slnt' inside a 'wavl' list: "skip" it or "fail".
    """

    def __init__(self, data: bytes, strict: bool = False, unknown_wavl_chunks: str = "skip"):
        if unknown_wavl_chunks not in UNKNOWN_WAVL_POLICIES:
            raise ValueError(
                f"Invalid unknown_wavl_chunks '{unknown_wavl_chunks}'. "
                f"Valid values: {', '.join(UNKNOWN_WAVL_POLICIES)}"
            )
        self.stream = ByteStream(data)
        self.strict = strict
        self.unknown_wavl_chunks = unknown_wavl_chunks

    def parse(self) -> WaveFile:
        """
        Decode the buffer.

        Returns:
            Fully populated WaveFile.

        Raises:
            WaveParseError: Subclass naming the first structural problem found.
        """
        wave_file = WaveFile()

        if not try_read(self.stream, b"RIFF"):
            raise NotAWaveFileError("Invalid WAV: missing RIFF header")

        riff_size = read_chunk_size(self.stream)
        self._check_riff_size(riff_size)

        if not try_read(self.stream, b"WAVE"):
            raise NotAWaveFileError("Invalid WAV: RIFF form type is not WAVE")

        self._read_wave_form(wave_file)
        return wave_file

    def _check_riff_size(self, riff_size: int) -> None:
        actual = len(self.stream) - CHUNK_ID_SIZE - CHUNK_SIZE_SIZE
        if riff_size == actual:
            return
        log.debug(f"RIFF size field {riff_size} differs from actual payload {actual}")
        # A writer may pad the whole form to even length
        if self.strict and padded(riff_size) != actual:
            raise InvalidRiffSizeError(
                f"RIFF size {riff_size} does not match file payload of {actual} bytes"
            )

    def _read_wave_form(self, wave_file: WaveFile) -> None:
        end_riff_chunk = len(self.stream)

        # required fmt chunk
        if not match_chunk(self.stream, b"fmt ", end_riff_chunk):
            raise MissingRequiredChunkError("Invalid WAV: could not find fmt chunk")
        self._read_fmt_chunk(wave_file)

        # optional chunks, not decoded
        for chunk_id in (b"fact", b"cue ", b"plst"):
            if match_chunk(self.stream, chunk_id, end_riff_chunk):
                skipped = skip_chunk(self.stream)
                log.debug(f"Skipped {chunk_id!r} chunk ({skipped} bytes)")

        if match_list(self.stream, b"adtl", end_riff_chunk):
            self._read_adtl_list()

        # Wave data is either a LIST 'wavl' or a 'data' chunk
        if match_list(self.stream, b"wavl", end_riff_chunk):
            self._read_wavl_list(wave_file)
        elif match_chunk(self.stream, b"data", end_riff_chunk):
            self._read_data_chunk(wave_file)
        else:
            raise MissingDataChunkError("Invalid WAV: could not find 'data' chunk or 'wavl' list")

    def _read_fmt_chunk(self, wave_file: WaveFile) -> None:
        size = read_chunk_size(self.stream)
        if size < FMT_PCM_SIZE:
            raise UnsupportedFormatError(f"fmt chunk too short: {size} bytes")

        format_tag = read_u16_le(self.stream)
        channels = read_u16_le(self.stream)
        sample_rate = read_u32_le(self.stream)
        byte_rate = read_u32_le(self.stream)
        block_align = read_u16_le(self.stream)
        bits_per_sample = read_u16_le(self.stream)

        # cbSize and any format extension
        skip_payload(self.stream, size - FMT_PCM_SIZE)

        try:
            wave_file.wave_format = WaveFormat(format_tag)
        except ValueError:
            raise UnsupportedFormatError(
                f"Unsupported audio format: {format_tag:#06x} (only PCM=1 supported)"
            ) from None

        wave_file.channels = [[] for _ in range(channels)]
        wave_file.sample_rate = sample_rate
        wave_file.byte_rate = byte_rate
        wave_file.block_align = block_align
        wave_file.bits_per_sample = bits_per_sample

        log.debug(
            f"fmt: {channels} channel(s), {sample_rate} Hz, {bits_per_sample} bits, "
            f"block align {block_align}"
        )

    def _read_adtl_list(self) -> None:
        list_size = read_chunk_size(self.stream)
        list_start = self.stream.offset
        list_end = min(list_start + padded(list_size), len(self.stream))
        self.stream.skip(LIST_TYPE_SIZE)

        for chunk_id in ADTL_REQUIRED_CHUNKS:
            if not match_chunk(self.stream, chunk_id, list_end):
                raise MissingRequiredChunkError(
                    f"Invalid WAV: could not find {chunk_id.decode('ascii')} chunk in adtl list"
                )
            skip_chunk(self.stream)

        # Anything after the required chunks belongs to the list too
        if self.stream.offset < list_end:
            self.stream.skip(list_end - self.stream.offset)

    def _read_wavl_list(self, wave_file: WaveFile) -> None:
        list_size = read_chunk_size(self.stream)
        end_list_chunk = self.stream.offset + list_size

        # match_list already checked the list type
        self.stream.skip(LIST_TYPE_SIZE)

        while self.stream.offset < end_list_chunk and not self.stream.eof():
            if try_read(self.stream, b"data"):
                self._read_data_chunk(wave_file)
            elif try_read(self.stream, b"slnt"):
                skip_chunk(self.stream)
            else:
                chunk_id = self.stream.read(CHUNK_ID_SIZE)
                if self.unknown_wavl_chunks == "fail":
                    raise UnexpectedChunkError(f"Unexpected chunk {chunk_id!r} in wavl list")
                skipped = skip_chunk(self.stream)
                log.debug(f"Skipped unknown chunk {chunk_id!r} in wavl list ({skipped} bytes)")

    def _read_data_chunk(self, wave_file: WaveFile) -> None:
        size = read_chunk_size(self.stream)
        end_data = self.stream.offset + size

        num_channels = len(wave_file.channels)
        if num_channels not in SUPPORTED_CHANNEL_COUNTS:
            raise UnsupportedChannelCountError(
                f"Unsupported number of channels: {num_channels} (only mono and stereo supported)"
            )
        bits = wave_file.bits_per_sample
        if bits > MAX_BITS_PER_SAMPLE:
            raise UnsupportedBitDepthError(f"Unsupported bits per sample: {bits}")

        while self.stream.offset < end_data:
            # Frames are interleaved: channel 0 first
            for channel in wave_file.channels:
                channel.append(self._read_sample(bits))

        # Chunks start on even offsets
        if self.stream.offset % 2 != 0:
            if not self.stream.eof():
                self.stream.skip(1)
            elif self.strict:
                raise OutOfBoundsError(
                    f"Missing pad byte after odd-length data chunk at offset {self.stream.offset}"
                )
            else:
                log.debug("Odd-length data chunk ends the file without a pad byte")

    def _read_sample(self, bit_depth: int) -> Sample:
        if bit_depth <= 8:
            return Sample8(self.stream.read(1)[0])
        if bit_depth <= 16:
            return Sample16(read_i16_le(self.stream))
        raise UnsupportedBitDepthError(f"Unsupported bits per sample: {bit_depth}")


def parse_wave(data: bytes, strict: bool = False, unknown_wavl_chunks: str = "skip") -> WaveFile:
    """
    Decode a complete .wav file held in memory.

    Args:
        data: Raw file bytes.
        strict: See WaveFileParser.
        unknown_wavl_chunks: "skip" or "fail"; see WaveFileParser.

    Returns:
        Decoded WaveFile.

    Raises:
        WaveParseError: On any structural or format violation.
    """
    return WaveFileParser(data, strict=strict, unknown_wavl_chunks=unknown_wavl_chunks).parse()
