#!/usr/bin/env python3
"""
Wave Info - Decode a WAV file and report its format and samples.

Reads the file, decodes it with wave_parser and prints a summary: format,
channel layout, rates, duration and the first few samples of each channel.
Decoder options default to the values in wave_config and can be overridden
per run.

Usage:
    python wave_info.py clip.wav
    python wave_info.py clip.wav --json --preview 16
    python wave_info.py clip.wav --stats --strict
    python wave_info.py clip.wav --trace
"""
import argparse
import json
import sys
from pathlib import Path

import numpy as np

from wave_config import MAX_PREVIEW_SAMPLES, OUTPUT_FORMATS, UNKNOWN_WAVL_CHOICES
from wave_config import get_decoder_config, get_output_config
from wave_errors import WaveParseError
from wave_file import WaveFile
from wave_logging import disable_chunk_trace, enable_chunk_trace, setup_logging
from wave_parser import parse_wave


def read_wave_bytes(path: str) -> bytes:
    """
    Read the raw bytes of a WAV file.

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    input_path = Path(path)
    if not input_path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")
    return input_path.read_bytes()


def channel_stats(wave_file: WaveFile) -> list[dict]:
    """Per-channel peak and RMS of the normalized signal."""
    audio = wave_file.to_float32()
    stats = []
    for index in range(wave_file.num_channels):
        channel = audio[:, index]
        if channel.size == 0:
            stats.append({"peak": 0.0, "rms": 0.0})
            continue
        stats.append({
            "peak": round(float(np.max(np.abs(channel))), 6),
            "rms": round(float(np.sqrt(np.mean(np.square(channel)))), 6),
        })
    return stats


def describe_wave(wave_file: WaveFile, preview_samples: int = 8, include_stats: bool = False) -> dict:
    """Build a JSON-serializable summary of a decoded file."""
    summary = {
        "format": wave_file.wave_format.name,
        "channels": wave_file.num_channels,
        "sample_rate": wave_file.sample_rate,
        "byte_rate": wave_file.byte_rate,
        "block_align": wave_file.block_align,
        "bits_per_sample": wave_file.bits_per_sample,
        "frames": wave_file.num_frames,
        "duration_sec": round(wave_file.duration_seconds, 4),
        "preview": [
            wave_file.channel_values(index)[:preview_samples]
            for index in range(wave_file.num_channels)
        ],
    }
    if include_stats:
        summary["stats"] = channel_stats(wave_file)
    return summary


def format_summary(summary: dict) -> str:
    """Render a describe_wave() summary as text."""
    lines = [
        f"Format:          {summary['format']}",
        f"Channels:        {summary['channels']}",
        f"Sample rate:     {summary['sample_rate']} Hz",
        f"Byte rate:       {summary['byte_rate']} B/s",
        f"Block align:     {summary['block_align']}",
        f"Bits per sample: {summary['bits_per_sample']}",
        f"Frames:          {summary['frames']}",
        f"Duration:        {summary['duration_sec']}s",
    ]
    for index, values in enumerate(summary["preview"]):
        lines.append(f"Channel {index}:       {values}")
    for index, stats in enumerate(summary.get("stats", [])):
        lines.append(f"Channel {index} peak/rms: {stats['peak']:.4f} / {stats['rms']:.4f}")
    return "\n".join(lines)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments (uses sys.argv if None).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Decode a PCM WAV file and print its format and samples.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python wave_info.py clip.wav
    python wave_info.py clip.wav --json --preview 16
        """,
    )

    parser.add_argument("input_file", help="Path to input WAV file")
    parser.add_argument(
        "--json",
        action="store_const",
        const="json",
        dest="output_format",
        default=None,
        help="Print the summary as JSON",
    )
    parser.add_argument(
        "--preview",
        type=int,
        default=None,
        help="Leading samples to print per channel (default: from config)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Include per-channel peak and RMS",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Validate the RIFF size field and trailing pad byte",
    )
    parser.add_argument(
        "--unknown-wavl",
        dest="unknown_wavl",
        choices=UNKNOWN_WAVL_CHOICES,
        default=None,
        help="Handling of unknown chunks inside a wavl list (default: from config)",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print each chunk the decoder matches or skips to stderr",
    )

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for wave_info script.

    Args:
        args: Command-line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parsed = parse_args(args)
    log = setup_logging(__name__)

    decoder = get_decoder_config()
    output = get_output_config()

    strict = parsed.strict if parsed.strict is not None else decoder["strict"]
    unknown_wavl = parsed.unknown_wavl or decoder["unknown_wavl_chunks"]
    output_format = parsed.output_format or output["format"]
    preview = parsed.preview if parsed.preview is not None else output["preview_samples"]

    if output_format not in OUTPUT_FORMATS:
        print(f"Error: invalid output format in config: {output_format}", file=sys.stderr)
        return 1
    if preview < 0 or preview > MAX_PREVIEW_SAMPLES:
        print(f"Error: --preview must be between 0 and {MAX_PREVIEW_SAMPLES}", file=sys.stderr)
        return 1

    try:
        data = read_wave_bytes(parsed.input_file)
        log.info(f"Decoding {parsed.input_file} ({len(data)} bytes, strict={strict})")

        trace_handler = enable_chunk_trace() if parsed.trace else None
        try:
            wave_file = parse_wave(data, strict=strict, unknown_wavl_chunks=unknown_wavl)
        finally:
            if trace_handler is not None:
                disable_chunk_trace(trace_handler)
        summary = describe_wave(wave_file, preview_samples=preview, include_stats=parsed.stats)

        log.info(
            f"Decoded {summary['channels']} channel(s), {summary['frames']} frames "
            f"at {summary['sample_rate']} Hz"
        )

        if output_format == "json":
            print(json.dumps(summary, indent=2))
        else:
            print(format_summary(summary))
        return 0

    except FileNotFoundError as e:
        log.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except WaveParseError as e:
        log.error(f"{parsed.input_file}: {e.kind}: {e}")
        print(f"Error: {e.kind}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        log.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
