"""
Exceptions raised while decoding RIFF/WAVE data.

Every decode failure is a WaveParseError subclass carrying a short ``kind``
name, so callers can catch the whole family or a single failure:

    from wave_errors import WaveParseError, UnsupportedFormatError

    try:
        wave_file = parse_wave(data)
    except UnsupportedFormatError:
        ...
    except WaveParseError as e:
        print(f"Error: {e.kind}: {e}")
"""


class WaveParseError(Exception):
    """Raised when WAV parsing fails due to invalid or unsupported data."""

    kind = "WaveParseError"


class NotAWaveFileError(WaveParseError):
    """Missing RIFF or WAVE marker."""

    kind = "NotAWaveFile"


class MissingRequiredChunkError(WaveParseError):
    """A required chunk (fmt, or an adtl member) was not found in its region."""

    kind = "MissingRequiredChunk"


class MissingDataChunkError(WaveParseError):
    """Neither a data chunk nor a wavl list was found."""

    kind = "MissingDataChunk"


class UnsupportedFormatError(WaveParseError):
    """Format tag is not linear PCM."""

    kind = "UnsupportedFormat"


class UnsupportedChannelCountError(WaveParseError):
    """Channel count is neither 1 nor 2."""

    kind = "UnsupportedChannelCount"


class UnsupportedBitDepthError(WaveParseError):
    """Bits per sample exceeds 16."""

    kind = "UnsupportedBitDepth"


class OutOfBoundsError(WaveParseError, IndexError):
    """A read, peek or seek would cross the end of the buffer."""

    kind = "OutOfBounds"


class InvalidRiffSizeError(WaveParseError):
    """Declared RIFF size disagrees with the buffer length (strict mode)."""

    kind = "InvalidRiffSize"


class UnexpectedChunkError(WaveParseError):
    """Unknown sub-chunk inside a wavl list when skipping is disabled."""

    kind = "UnexpectedChunk"
