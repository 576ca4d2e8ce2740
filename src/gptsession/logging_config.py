# src/gptsession/logging_config.py
"""
Logging setup for programs built on gptsession.

Library modules only create module loggers. A program (the ``gptsession``
CLI, the examples) calls :func:`configure_logging` once at startup.

In quiet mode (``console_enabled: false``, the default) the console shows
only records logged through :func:`log_display`; everything else goes to
the optional log file. ``file_mode: per_run`` writes one timestamped file
per invocation, ``file_mode: single`` appends to a rotating file.

Settings are taken from the ``config`` argument, or else from the
``logging`` section of the nearest ``.openai.yaml``.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from .config.loader import find_config_file, load_config_file
from .exceptions import ConfigError

DEFAULT_LOGGING_CONFIG: dict[str, Any] = {
    "console_enabled": False,
    "console_level": "WARNING",
    "console_format": "%(levelname)s - %(message)s",
    "display_min_level": "INFO",
    "file_enabled": False,
    "file_level": "DEBUG",
    "file_directory": "~/.local/share/gptsession/logs",
    "file_mode": "per_run",
    "file_format": "%(asctime)s [%(levelname)-8s] %(name)s - %(message)s",
    "rotation_max_bytes": 5 * 1024 * 1024,
    "rotation_backup_count": 3,
    "components": {
        "gptsession": "INFO",
        "httpx": "WARNING",
        "httpcore": "WARNING",
    },
}


def _level(value: str | int, default: int) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else default


class DisplayFilter(logging.Filter):
    """Console gate: in quiet mode only ``display`` records at or above ``display_min_level`` pass."""

    def __init__(self, console_globally_enabled: bool = False, display_min_level: int = logging.INFO) -> None:
        super().__init__()
        self.console_globally_enabled = console_globally_enabled
        self.display_min_level = display_min_level

    def filter(self, record: logging.LogRecord) -> bool:
        if self.console_globally_enabled:
            return True
        return bool(getattr(record, "display", False)) and record.levelno >= self.display_min_level


class UnifiedLoggingManager:
    """
    Process-wide owner of the root logger's handlers.

    The first ``configure()`` call installs the handlers; later calls are
    no-ops unless ``force_reconfigure`` is set.
    """

    _instance: Optional["UnifiedLoggingManager"] = None
    _configured: bool = False
    _log_file_path: Path | None = None
    _console_handler: logging.Handler | None = None
    _file_handler: logging.Handler | None = None
    _display_filter: DisplayFilter | None = None

    def __new__(cls) -> "UnifiedLoggingManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "UnifiedLoggingManager":
        return cls()

    def configure(
        self,
        app_name: str = "gptsession",
        config: dict[str, Any] | None = None,
        config_file_path: str | Path | None = None,
        force_reconfigure: bool = False,
    ) -> Path | None:
        """
        Installs the console handler and, when enabled, the file handler.

        Returns:
            The log file path, or None when file logging is off.
        """
        if UnifiedLoggingManager._configured and not force_reconfigure:
            return UnifiedLoggingManager._log_file_path

        settings = self._settings(config, config_file_path)

        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.DEBUG)

        verbose = bool(settings.get("console_enabled"))
        console = self._console_handler_for(settings["console_level"])
        if not verbose:
            console.setLevel(logging.DEBUG)
        self._display_filter = DisplayFilter(verbose, _level(settings["display_min_level"], logging.INFO))
        console.addFilter(self._display_filter)
        root.addHandler(console)
        self._console_handler = console

        self._file_handler, log_file_path = None, None
        if settings.get("file_enabled"):
            self._file_handler, log_file_path = self._file_handler_for(settings, app_name)
            if self._file_handler is not None:
                root.addHandler(self._file_handler)

        for component, level in (settings.get("components") or {}).items():
            logging.getLogger(component).setLevel(_level(level, logging.INFO))

        UnifiedLoggingManager._configured = True
        UnifiedLoggingManager._log_file_path = log_file_path
        if log_file_path:
            logging.getLogger(__name__).debug(f"Writing log file {log_file_path}")
        return log_file_path

    @staticmethod
    def _settings(config: dict[str, Any] | None, config_file_path: str | Path | None) -> dict[str, Any]:
        if config is not None:
            return {**DEFAULT_LOGGING_CONFIG, **config}

        path = Path(config_file_path) if config_file_path else find_config_file()
        if path is None:
            return dict(DEFAULT_LOGGING_CONFIG)
        try:
            section = load_config_file(path).get("logging") or {}
        except ConfigError as e:
            sys.stderr.write(f"Warning: Ignoring logging settings: {e}\n")
            return dict(DEFAULT_LOGGING_CONFIG)
        if not isinstance(section, dict):
            sys.stderr.write(f"Warning: Ignoring logging settings: 'logging' in {path} is not a mapping\n")
            return dict(DEFAULT_LOGGING_CONFIG)
        return {**DEFAULT_LOGGING_CONFIG, **section}

    @staticmethod
    def _console_handler_for(level: str | int) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_level(level, logging.WARNING))
        handler.setFormatter(logging.Formatter(DEFAULT_LOGGING_CONFIG["console_format"]))
        return handler

    @staticmethod
    def _file_handler_for(settings: dict[str, Any], app_name: str) -> tuple[logging.Handler | None, Path | None]:
        log_dir = Path(os.path.expanduser(settings["file_directory"]))
        single = settings.get("file_mode") == "single"
        if single:
            log_file_path = log_dir / f"{app_name}.log"
        else:
            log_file_path = log_dir / f"{app_name}_{datetime.now():%Y%m%d_%H%M%S}.log"

        handler: logging.Handler
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            if single:
                handler = RotatingFileHandler(log_file_path, maxBytes=settings["rotation_max_bytes"],
                                              backupCount=settings["rotation_backup_count"], encoding="utf-8")
            else:
                handler = logging.FileHandler(log_file_path, encoding="utf-8")
        except OSError as e:
            sys.stderr.write(f"Warning: File logging disabled, cannot open {log_file_path}: {e}\n")
            return None, None

        handler.setLevel(_level(settings["file_level"], logging.DEBUG))
        handler.setFormatter(logging.Formatter(settings["file_format"]))
        return handler, log_file_path

    def enable_console(self, level: str | int = "WARNING") -> None:
        """Switches the console to verbose mode: every record at ``level`` or above is shown."""
        root = logging.getLogger()
        if self._console_handler is not None:
            root.removeHandler(self._console_handler)
        self._console_handler = self._console_handler_for(level)
        self._display_filter = DisplayFilter(console_globally_enabled=True)
        self._console_handler.addFilter(self._display_filter)
        root.addHandler(self._console_handler)


def configure_logging(
    app_name: str = "gptsession",
    config: dict[str, Any] | None = None,
    config_file_path: str | Path | None = None,
    force_reconfigure: bool = False,
) -> Path | None:
    """Configures logging once per process; see :meth:`UnifiedLoggingManager.configure`."""
    return UnifiedLoggingManager.get_instance().configure(app_name, config, config_file_path, force_reconfigure)


def log_display(logger: logging.Logger, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
    """Logs ``msg`` so that it also reaches the console in quiet mode."""
    kwargs["extra"] = {**(kwargs.get("extra") or {}), "display": True}
    logger.log(level, msg, *args, **kwargs)


def enable_console_logging(level: str | int = "WARNING") -> None:
    UnifiedLoggingManager.get_instance().enable_console(level)
