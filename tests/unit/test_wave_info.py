"""
Unit tests for wave_info.py script.

Run with: uv run pytest tests/unit/test_wave_info.py -v
"""
import json
import os
import struct
import sys

import pytest

# Add scripts to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", "scripts"))


def build_wav(channels=1, bits=8, payload=b"\x01\x02\x03\x04", riff_size=None, format_tag=1):
    block_align = channels * ((bits + 7) // 8)
    fmt = b"fmt " + struct.pack("<IHHIIHH", 16, format_tag, channels, 8000, 8000 * block_align, block_align, bits)
    data = b"data" + struct.pack("<I", len(payload)) + payload
    if len(payload) % 2:
        data += b"\x00"
    body = b"WAVE" + fmt + data
    size = len(body) if riff_size is None else riff_size
    return b"RIFF" + struct.pack("<I", size) + body


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Keep config and logs inside tmp_path."""
    import wave_logging

    monkeypatch.setenv("WAVE_CONFIG_PATH", str(tmp_path / "config.json"))
    monkeypatch.setenv("WAVE_LOG_FILE", str(tmp_path / "wave.log"))
    monkeypatch.setattr(wave_logging, "_logging_configured", False)
    return tmp_path


@pytest.fixture
def wav_path(isolated_env):
    path = isolated_env / "clip.wav"
    path.write_bytes(build_wav())
    return path


class TestReadWaveBytes:
    """Tests for input file handling."""

    def test_nonexistent_file_raises_error(self):
        """Should raise FileNotFoundError for nonexistent input."""
        from wave_info import read_wave_bytes

        with pytest.raises(FileNotFoundError, match="not found"):
            read_wave_bytes("/nonexistent/path/clip.wav")

    def test_returns_file_bytes(self, wav_path):
        from wave_info import read_wave_bytes

        assert read_wave_bytes(str(wav_path)) == wav_path.read_bytes()


class TestDescribeWave:
    """Tests for summary building."""

    def test_summary_fields(self):
        from wave_info import describe_wave
        from wave_parser import parse_wave

        summary = describe_wave(parse_wave(build_wav(channels=2)), preview_samples=1)

        assert summary["format"] == "PCM"
        assert summary["channels"] == 2
        assert summary["sample_rate"] == 8000
        assert summary["byte_rate"] == 16000
        assert summary["block_align"] == 2
        assert summary["frames"] == 2
        assert summary["preview"] == [[1], [2]]
        assert "stats" not in summary

    def test_summary_is_json_serializable(self):
        from wave_info import describe_wave
        from wave_parser import parse_wave

        summary = describe_wave(parse_wave(build_wav()), include_stats=True)
        assert json.loads(json.dumps(summary)) == summary

    def test_stats_peak_and_rms(self):
        """Full-scale square wave has peak and RMS of 1.0."""
        from wave_info import channel_stats
        from wave_parser import parse_wave

        payload = struct.pack("<4h", 32767, -32767, 32767, -32767)
        stats = channel_stats(parse_wave(build_wav(bits=16, payload=payload)))

        assert stats[0]["peak"] == pytest.approx(1.0)
        assert stats[0]["rms"] == pytest.approx(1.0)

    def test_stats_empty_channel(self):
        from wave_info import channel_stats
        from wave_parser import parse_wave

        stats = channel_stats(parse_wave(build_wav(payload=b"")))
        assert stats == [{"peak": 0.0, "rms": 0.0}]

    def test_format_summary_text(self):
        from wave_info import describe_wave, format_summary
        from wave_parser import parse_wave

        text = format_summary(describe_wave(parse_wave(build_wav())))
        assert "Sample rate:     8000 Hz" in text
        assert "Channel 0:       [1, 2, 3, 4]" in text


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults_defer_to_config(self):
        from wave_info import parse_args

        args = parse_args(["clip.wav"])
        assert args.input_file == "clip.wav"
        assert args.output_format is None
        assert args.preview is None
        assert args.strict is None
        assert args.unknown_wavl is None
        assert args.stats is False
        assert args.trace is False

    def test_flags(self):
        from wave_info import parse_args

        args = parse_args(["clip.wav", "--json", "--preview", "3", "--strict", "--unknown-wavl", "fail"])
        assert args.output_format == "json"
        assert args.preview == 3
        assert args.strict is True
        assert args.unknown_wavl == "fail"

    def test_trace_flag(self):
        from wave_info import parse_args

        assert parse_args(["clip.wav", "--trace"]).trace is True

    def test_invalid_unknown_wavl_choice(self):
        from wave_info import parse_args

        with pytest.raises(SystemExit):
            parse_args(["clip.wav", "--unknown-wavl", "ignore"])


class TestMain:
    """Tests for the main entry point."""

    def test_text_output(self, wav_path, capsys):
        from wave_info import main

        assert main([str(wav_path)]) == 0
        out = capsys.readouterr().out
        assert "Channels:        1" in out
        assert "[1, 2, 3, 4]" in out

    def test_json_output(self, wav_path, capsys):
        from wave_info import main

        assert main([str(wav_path), "--json", "--preview", "2"]) == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["preview"] == [[1, 2]]
        assert summary["frames"] == 4

    def test_json_from_config(self, wav_path, capsys):
        from wave_config import set_output_format
        from wave_info import main

        set_output_format("json")
        assert main([str(wav_path)]) == 0
        assert json.loads(capsys.readouterr().out)["channels"] == 1

    def test_missing_file(self, isolated_env, capsys):
        from wave_info import main

        assert main([str(isolated_env / "missing.wav")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_decode_error_reports_kind(self, isolated_env, capsys):
        from wave_info import main

        path = isolated_env / "adpcm.wav"
        path.write_bytes(build_wav(format_tag=2))

        assert main([str(path)]) == 1
        assert "Error: UnsupportedFormat:" in capsys.readouterr().err

    def test_strict_flag(self, isolated_env, capsys):
        from wave_info import main

        path = isolated_env / "bad_size.wav"
        path.write_bytes(build_wav(riff_size=1234))

        assert main([str(path)]) == 0
        capsys.readouterr()
        assert main([str(path), "--strict"]) == 1
        assert "InvalidRiffSize" in capsys.readouterr().err

    def test_strict_from_config(self, isolated_env, capsys):
        from wave_config import set_decoder_setting
        from wave_info import main

        path = isolated_env / "bad_size.wav"
        path.write_bytes(build_wav(riff_size=1234))
        set_decoder_setting("strict", True)

        assert main([str(path)]) == 1

    def test_preview_out_of_range(self, wav_path, capsys):
        from wave_info import main

        assert main([str(wav_path), "--preview", "5000"]) == 1
        assert "--preview" in capsys.readouterr().err

    def test_logs_decode(self, wav_path, isolated_env):
        import logging
        from wave_info import main

        assert main([str(wav_path)]) == 0
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "Decoded 1 channel(s)" in (isolated_env / "wave.log").read_text()

    def test_trace_prints_chunk_walk(self, wav_path, capsys):
        """--trace shows the chunks the decoder matched and skipped."""
        from wave_info import main

        assert main([str(wav_path), "--trace"]) == 0
        err = capsys.readouterr().err
        assert "trace wave_parser: fmt: 1 channel(s), 8000 Hz" in err
        assert "trace chunk_matcher: Skipped chunk b'data'" in err

    def test_no_trace_by_default(self, wav_path, capsys):
        from wave_info import main

        assert main([str(wav_path)]) == 0
        assert "trace" not in capsys.readouterr().err

    def test_scenario_file_without_final_pad_byte(self, isolated_env, capsys):
        """An odd data chunk that ends the file decodes unless --strict."""
        from wave_info import main

        path = isolated_env / "nopad.wav"
        path.write_bytes(build_wav(payload=b"\x01\x02\x03", riff_size=39)[:-1])

        assert main([str(path), "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["preview"] == [[1, 2, 3]]
        assert main([str(path), "--strict"]) == 1
        assert "Error: OutOfBounds: Missing pad byte" in capsys.readouterr().err
