"""Session logging for the simulator and its components.

Logging is configured once at startup from ``config/logging.yaml`` (or
built-in defaults). Every launch starts a fresh session log; the previous
sessions are kept as numbered backups.

Platform-specific log locations:
    - macOS: ~/Library/Logs/AeroTrack/aerotrack.log
    - Linux: ~/.aerotrack/logs/aerotrack.log
    - Windows: %AppData%/AeroTrack/Logs/aerotrack.log

Components may be tuned individually under the ``components:`` key of the
logging configuration:

    components:
      flight_loop:
        level: DEBUG
        dedicated_file: true
      cursor_input:
        enabled: false

Typical usage example:
    from aerotrack.core.logging_system import get_logger

    logger = get_logger("flight_loop")
    logger.debug("AoA %.1f deg, stall %.2f", aoa, stall)
"""

import logging
import logging.handlers
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

DEFAULT_LOG_FILENAME = "aerotrack.log"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_KEEP_COUNT = 5

_logging_config: dict[str, Any] = {}
_loggers_cache: dict[str, logging.Logger] = {}
_initialized = False


class LoggingError(Exception):
    """Raised when the logging system cannot be configured."""


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds to timestamps with a dot separator."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = time.strftime(datefmt or DEFAULT_DATE_FORMAT, self.converter(record.created))
        return f"{stamp}.{int(record.msecs):03d}"


def get_platform_log_dir() -> Path:
    """Get the platform-appropriate log directory.

    Returns:
        ``~/Library/Logs/AeroTrack`` on macOS, ``%APPDATA%/AeroTrack/Logs`` on
        Windows and ``~/.aerotrack/logs`` elsewhere.
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "AeroTrack"
    if system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "AeroTrack" / "Logs"
    return Path.home() / ".aerotrack" / "logs"


def rotate_logs(
    log_dir: Path, log_filename: str = DEFAULT_LOG_FILENAME, keep_count: int = DEFAULT_KEEP_COUNT
) -> None:
    """Shift the previous session logs before a new session starts.

    ``aerotrack.log`` becomes ``aerotrack.log.1``, ``.1`` becomes ``.2`` and so
    on; the log numbered ``keep_count`` is deleted. Nothing happens when there
    is no current log.

    Args:
        log_dir: Directory holding the logs.
        log_filename: Base log filename.
        keep_count: Number of previous sessions to keep.
    """
    current = log_dir / log_filename
    if not current.exists():
        return

    oldest = log_dir / f"{log_filename}.{keep_count}"
    if oldest.exists():
        oldest.unlink()

    for index in range(keep_count - 1, 0, -1):
        backup = log_dir / f"{log_filename}.{index}"
        if backup.exists():
            backup.rename(log_dir / f"{log_filename}.{index + 1}")

    current.rename(log_dir / f"{log_filename}.1")


def initialize_logging(
    config_path: str | Path | None = None, use_platform_dir: bool = True
) -> None:
    """Configure root logging for a new session.

    Call once at startup, before the first log line. Rotates the previous
    session logs, then installs a console handler and a session file handler.

    Args:
        config_path: Logging YAML file. If None, built-in defaults are used.
        use_platform_dir: Write logs to the platform log directory instead of
            the ``log_dir`` named in the configuration.

    Raises:
        LoggingError: If the configuration cannot be read or the log
            directory cannot be prepared.
    """
    global _logging_config, _initialized

    config = _read_config(Path(config_path)) if config_path else _default_config()
    if use_platform_dir:
        config["log_dir"] = str(get_platform_log_dir())

    session = config.setdefault("session_log", {})
    log_dir = Path(config.get("log_dir", "logs"))
    log_filename = session.get("filename", DEFAULT_LOG_FILENAME)

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        rotate_logs(log_dir, log_filename, session.get("keep_count", DEFAULT_KEEP_COUNT))
    except OSError as e:
        raise LoggingError(f"Cannot prepare log directory {log_dir}: {e}") from e

    _logging_config = config
    _loggers_cache.clear()
    _install_root_handlers(log_dir / log_filename)
    _initialized = True

    # Modules using logging.getLogger(__name__) pick up their settings too
    for name in config.get("components") or {}:
        get_logger(name)


def _read_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise LoggingError(f"Logging config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise LoggingError(f"Failed to load logging config: {e}") from e
    if not isinstance(data, dict):
        raise LoggingError(f"Logging config root must be a mapping: {path}")
    return data


def _default_config() -> dict[str, Any]:
    return {
        "level": "INFO",
        "format": DEFAULT_FORMAT,
        "date_format": DEFAULT_DATE_FORMAT,
        "log_dir": "logs",
        "session_log": {
            "enabled": True,
            "filename": DEFAULT_LOG_FILENAME,
            "keep_count": DEFAULT_KEEP_COUNT,
        },
        "console": {"enabled": True, "level": "INFO"},
        "components": {},
    }


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise LoggingError(f"Unknown log level: {name}")
    return level


def _formatter() -> logging.Formatter:
    return MillisecondFormatter(
        _logging_config.get("format", DEFAULT_FORMAT),
        _logging_config.get("date_format", DEFAULT_DATE_FORMAT),
    )


def _install_root_handlers(session_file: Path) -> None:
    root = logging.getLogger()
    # Handlers filter; the root passes everything through
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = _logging_config.get("console", {})
    if console.get("enabled", True):
        stream = logging.StreamHandler()
        stream.setLevel(_level(console.get("level", _logging_config.get("level", "INFO"))))
        stream.setFormatter(_formatter())
        root.addHandler(stream)

    if _logging_config.get("session_log", {}).get("enabled", True):
        # Rotation happened at startup, so the session file is always fresh
        file_handler = logging.FileHandler(session_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_formatter())
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get the logger for a component.

    Loggers are cached. Settings under ``components.<name>`` in the logging
    configuration may set a ``level``, disable the logger with
    ``enabled: false``, or add a ``dedicated_file`` written next to the
    session log. Logging is initialized with defaults on first use.

    Args:
        name: Component name, e.g. ``"flight_loop"``.

    Returns:
        Configured logger.

    Note:
        Use lazy ``%`` formatting in log calls rather than f-strings.
    """
    if not _initialized:
        initialize_logging()

    cached = _loggers_cache.get(name)
    if cached is not None:
        return cached

    logger = logging.getLogger(name)
    settings = _logging_config.get("components", {}).get(name, {})

    if not settings.get("enabled", True):
        logger.disabled = True
    else:
        if "level" in settings:
            logger.setLevel(_level(settings["level"]))
        if settings.get("dedicated_file", False):
            log_dir = Path(_logging_config.get("log_dir", "logs"))
            handler = logging.handlers.RotatingFileHandler(
                log_dir / f"{name}.log",
                maxBytes=settings.get("max_bytes", 10 * 1024 * 1024),
                backupCount=settings.get("backup_count", DEFAULT_KEEP_COUNT),
                encoding="utf-8",
            )
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(_formatter())
            logger.addHandler(handler)

    _loggers_cache[name] = logger
    return logger


def is_initialized() -> bool:
    return _initialized


def shutdown_logging() -> None:
    """Flush and close all handlers. Call at application exit."""
    global _initialized

    logging.shutdown()
    _loggers_cache.clear()
    _initialized = False
