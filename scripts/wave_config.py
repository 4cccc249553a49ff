"""
Decoder configuration module.

Manages persistent settings for the wave-info command.
Config is stored at ${PROJECT_ROOT}/.config/config.json

Structure:
    {
        "decoder": {"strict": false, "unknown_wavl_chunks": "skip"},
        "output": {"format": "text", "preview_samples": 8}
    }

Command-line flags override these values for a single run.

Can be overridden with WAVE_CONFIG_PATH environment variable for testing.
"""
import copy
import json
import os
import sys
from pathlib import Path

# Project-local config directory
_PROJECT_ROOT = Path(__file__).parent.parent
_CONFIG_DIR = _PROJECT_ROOT / ".config"

DEFAULT_DECODER = {
    "strict": False,
    "unknown_wavl_chunks": "skip",
}

UNKNOWN_WAVL_CHOICES = ("skip", "fail")
OUTPUT_FORMATS = ("text", "json")

DEFAULT_PREVIEW_SAMPLES = 8
MAX_PREVIEW_SAMPLES = 1024

DEFAULT_OUTPUT = {
    "format": "text",
    "preview_samples": DEFAULT_PREVIEW_SAMPLES,
}

DEFAULT_CONFIG = {
    "decoder": DEFAULT_DECODER.copy(),
    "output": DEFAULT_OUTPUT.copy(),
}


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return _CONFIG_DIR


def get_config_path() -> Path:
    """Get the configuration file path. Override with WAVE_CONFIG_PATH env var."""
    env_path = os.environ.get("WAVE_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return _CONFIG_DIR / "config.json"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base, returning new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _defaults() -> dict:
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config() -> dict:
    """Load configuration from file, returning defaults if not found or invalid."""
    config_path = get_config_path()
    if not config_path.exists():
        return _defaults()

    try:
        with open(config_path) as f:
            file_config = json.load(f)
        if not isinstance(file_config, dict):
            return _defaults()
        return _deep_merge(DEFAULT_CONFIG, file_config)
    except (json.JSONDecodeError, IOError):
        return _defaults()


def save_config(config: dict) -> None:
    """Save configuration to file, creating directory if needed."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)


def get_decoder_config() -> dict:
    """Get decoder options. Re-reads from disk on each call."""
    config = load_config()
    return {**DEFAULT_DECODER, **config.get("decoder", {})}


def set_decoder_setting(key: str, value: bool | str) -> None:
    """Set a single decoder option."""
    if key not in DEFAULT_DECODER:
        valid_keys = ", ".join(DEFAULT_DECODER.keys())
        raise ValueError(f"Invalid decoder key '{key}'. Valid keys: {valid_keys}")
    if key == "strict" and not isinstance(value, bool):
        raise ValueError(f"Decoder setting 'strict' must be a bool, got {value!r}")
    if key == "unknown_wavl_chunks" and value not in UNKNOWN_WAVL_CHOICES:
        raise ValueError(
            f"Invalid unknown_wavl_chunks '{value}'. Valid: {', '.join(UNKNOWN_WAVL_CHOICES)}"
        )

    config = load_config()
    if "decoder" not in config:
        config["decoder"] = DEFAULT_DECODER.copy()
    config["decoder"][key] = value
    save_config(config)


def get_output_config() -> dict:
    """Get output settings. Re-reads from disk on each call."""
    config = load_config()
    return {**DEFAULT_OUTPUT, **config.get("output", {})}


def set_output_format(fmt: str) -> None:
    """Set the default output format ("text" or "json")."""
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Invalid output format '{fmt}'. Valid: {', '.join(OUTPUT_FORMATS)}")

    config = load_config()
    config.setdefault("output", DEFAULT_OUTPUT.copy())["format"] = fmt
    save_config(config)


def set_preview_samples(count: int) -> None:
    """Set how many leading samples per channel wave-info prints."""
    if count < 0 or count > MAX_PREVIEW_SAMPLES:
        raise ValueError(
            f"Invalid preview sample count {count}. "
            f"Must be between 0 and {MAX_PREVIEW_SAMPLES}"
        )

    config = load_config()
    config.setdefault("output", DEFAULT_OUTPUT.copy())["preview_samples"] = count
    save_config(config)


def reset_to_defaults() -> None:
    """Reset all settings to factory defaults."""
    save_config(_defaults())


def cmd_status() -> None:
    """Show current configuration."""
    decoder = get_decoder_config()
    output = get_output_config()

    print("Wave Decoder Configuration")
    print("=" * 40)
    print(f"Config file: {get_config_path()}")
    print()
    print("Decoder:")
    print(f"  Strict: {decoder['strict']}")
    print(f"  Unknown wavl chunks: {decoder['unknown_wavl_chunks']}")
    print()
    print("Output:")
    print(f"  Format: {output['format']}")
    print(f"  Preview samples: {output['preview_samples']}")


def main() -> None:
    """CLI entry point."""
    if len(sys.argv) < 2:
        cmd_status()
        return

    command = sys.argv[1].lower()

    if command == "status":
        cmd_status()
    elif command == "reset":
        reset_to_defaults()
        cmd_status()
    else:
        print(f"Unknown command: {command}", file=sys.stderr)
        print("Usage: wave_config.py [status|reset]", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
