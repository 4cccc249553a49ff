"""
Logging for the wave tools.

Command-line entry points log to logs/riffwave.log. The decoder modules
(chunk_matcher, wave_parser) only emit DEBUG records describing chunks they
match and skip; enable_chunk_trace() turns those on and echoes them to
stderr, which is what `wave-info --trace` uses to show how a file was walked.

Usage:
    from wave_logging import enable_chunk_trace, setup_logging

    log = setup_logging(__name__)
    handler = enable_chunk_trace()
    ...
    disable_chunk_trace(handler)

Environment variables:
    WAVE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
    WAVE_LOG_FILE: Log file path. Default: <project>/logs/riffwave.log
"""
import logging
import os
import sys
from pathlib import Path
from typing import TextIO

_PROJECT_ROOT = Path(__file__).parent.parent
LOG_DIR = _PROJECT_ROOT / "logs"
LOG_FILE = LOG_DIR / "riffwave.log"

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
TRACE_FORMAT = "trace %(name)s: %(message)s"

# Loggers that report chunk-level decoding steps
DECODER_LOGGERS = ("chunk_matcher", "wave_parser")

_logging_configured = False


def get_log_file() -> Path:
    """Get the log file path. Override with WAVE_LOG_FILE env var."""
    env_path = os.environ.get("WAVE_LOG_FILE")
    if env_path:
        return Path(env_path)
    return LOG_FILE


def get_log_level() -> int:
    """Level named by WAVE_LOG_LEVEL, INFO when unset or unknown."""
    level_name = os.environ.get("WAVE_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(name: str) -> logging.Logger:
    """
    Send log records to the log file and return the logger called ``name``.

    Only the first call configures the root logger.
    """
    global _logging_configured

    if not _logging_configured:
        log_file = get_log_file()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=get_log_level(),
            format=LOG_FORMAT,
            handlers=[logging.FileHandler(log_file)],
            force=True,
        )
        _logging_configured = True

    return logging.getLogger(name)


def enable_chunk_trace(stream: TextIO | None = None) -> logging.Handler:
    """
    Turn on DEBUG output from the decoder loggers.

    Records go to ``stream`` (stderr by default) and still propagate to the
    log file when one is configured.

    Returns:
        The handler attached, for disable_chunk_trace().
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(TRACE_FORMAT))
    for name in DECODER_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        logger.addHandler(handler)
    return handler


def disable_chunk_trace(handler: logging.Handler) -> None:
    """Detach a trace handler and return the decoder loggers to the root level."""
    for name in DECODER_LOGGERS:
        logger = logging.getLogger(name)
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
    handler.close()
