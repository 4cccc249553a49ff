"""
Decoded WAV data model.

WaveFile holds per-channel sample lists plus the format metadata read from
the fmt chunk. Samples are tagged by width (Sample8 / Sample16) so callers
can tell unsigned 8-bit data from signed 16-bit data without consulting the
header.

Usage:
    wave_file = parse_wave(data)
    left = wave_file.channel_values(0)
    audio = wave_file.to_float32()  # shape (frames, channels)
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, Union

import numpy as np


class WaveFormat(IntEnum):
    """Supported wFormatTag values."""
    PCM = 0x0001


@dataclass(frozen=True)
class Sample8:
    """Unsigned 8-bit PCM sample (silence at 128)."""
    value: int
    bit_depth: ClassVar[int] = 8


@dataclass(frozen=True)
class Sample16:
    """Signed 16-bit PCM sample."""
    value: int
    bit_depth: ClassVar[int] = 16


Sample = Union[Sample8, Sample16]


@dataclass
class WaveFile:
    """Decoded WAV audio and format metadata."""
    channels: list[list[Sample]] = field(default_factory=list)
    wave_format: WaveFormat = WaveFormat.PCM
    sample_rate: int = 0
    byte_rate: int = 0
    block_align: int = 0
    bits_per_sample: int = 0

    @property
    def num_channels(self) -> int:
        return len(self.channels)

    @property
    def num_frames(self) -> int:
        """Samples per channel (all channels have equal length)."""
        if not self.channels:
            return 0
        return len(self.channels[0])

    @property
    def duration_seconds(self) -> float:
        if self.sample_rate == 0:
            return 0.0
        return self.num_frames / self.sample_rate

    def channel_values(self, index: int) -> list[int]:
        """Plain integer values of one channel."""
        return [sample.value for sample in self.channels[index]]

    def to_array(self) -> np.ndarray:
        """
        Samples as an integer array of shape (frames, channels).

        dtype is uint8 for 8-bit data and int16 for 16-bit data.
        """
        dtype = np.uint8 if self.bits_per_sample <= 8 else np.int16
        audio = np.zeros((self.num_frames, self.num_channels), dtype=dtype)
        for index in range(self.num_channels):
            audio[:, index] = self.channel_values(index)
        return audio

    def to_float32(self) -> np.ndarray:
        """Samples normalized to float32, shape (frames, channels)."""
        audio = self.to_array()
        if audio.dtype == np.uint8:
            # 8-bit unsigned PCM -> float32
            return (audio.astype(np.float32) - 128) / 127.0
        # 16-bit signed PCM -> float32
        return audio.astype(np.float32) / 32767.0
