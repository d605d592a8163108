"""Structured logging for digitization sessions.

Provides consistent logging with:
- Timestamps
- State transitions of the session workflow
- Structured key=value data
- Optional file output for later analysis
"""

import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any


class SessionLogger:
    """Structured logger for the digitization workflow."""

    def __init__(self, name: str = "digitizer", verbose: bool = False, log_dir: str | Path | None = None):
        """Initialize the session logger.

        Args:
            name: Logger name. Module loggers under this name share its handlers.
            verbose: If True, show DEBUG level logs.
            log_dir: Directory for log files. If None, no file logging.
        """
        self.logger = logging.getLogger(name)
        self.verbose = verbose
        self._log_dir = Path(log_dir) if log_dir else None
        self._log_file: Path | None = None
        self._run_start: float = 0

        if not self.logger.handlers:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(ConsoleFormatter())
            console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
            self.logger.addHandler(console_handler)

        self.logger.setLevel(logging.DEBUG)

    def set_verbose(self, verbose: bool):
        """Update verbose setting."""
        self.verbose = verbose
        for handler in self.logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    def _ts(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _elapsed(self) -> str:
        if self._run_start:
            return f"{time.time() - self._run_start:.1f}s"
        return ""

    def start_run(self, label: str):
        """Mark the start of an extraction run and set up file logging."""
        self._run_start = time.time()

        if self._log_dir and self._log_file is None:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self._log_file = self._log_dir / f"digitize_{timestamp}.log"

            file_handler = logging.FileHandler(self._log_file, encoding="utf-8")
            file_handler.setFormatter(FileFormatter())
            file_handler.setLevel(logging.DEBUG)
            self.logger.addHandler(file_handler)

        self.logger.info(f"[{self._ts()}] Starting extraction: {label}")

    def transition(self, old: str, new: str, message: str | None = None):
        """Log a workflow state change (DEBUG level)."""
        line = f"[{self._ts()}] state {old} -> {new}"
        if message:
            line += f" ({message})"
        self.logger.debug(line)

    def debug(self, message: str, **data):
        """Log debug message (only in verbose mode)."""
        if data:
            message = f"{message} | {_format_data(data)}"
        self.logger.debug(f"[{self._ts()}] {message}")

    def info(self, message: str, **data):
        """Log info message."""
        if data:
            message = f"{message} | {_format_data(data)}"
        self.logger.info(f"  {message}")

    def warning(self, message: str, **data):
        """Log warning message."""
        if data:
            message = f"{message} | {_format_data(data)}"
        self.logger.warning(f"[{self._ts()}] WARN: {message}")

    def error(self, message: str, exc: Exception | None = None, **data):
        """Log error message."""
        if data:
            message = f"{message} | {_format_data(data)}"
        if exc:
            message = f"{message} | {type(exc).__name__}: {exc}"
        self.logger.error(f"[{self._ts()}] ERROR: {message}")

    def milestone(self, message: str, **data):
        """Log a high-level event (always visible)."""
        if data:
            message = f"{message} | {_format_data(data)}"
        self.logger.info(f"  -> {message}")

    def run_result(self, success: bool, **metrics):
        """Log the end of an extraction run with key metrics."""
        status = "Done" if success else "Failed"
        parts = []
        if metrics:
            parts.append(", ".join(f"{k}={v}" for k, v in metrics.items()))
        elapsed = self._elapsed()
        if elapsed:
            parts.append(f"[{elapsed}]")
        self.logger.info(f"  {status}: {' | '.join(parts)}" if parts else f"  {status}")
        self._run_start = 0

    @property
    def log_file(self) -> Path | None:
        return self._log_file


class ConsoleFormatter(logging.Formatter):
    """Console formatter - concise."""

    def format(self, record: logging.LogRecord) -> str:
        # The message already includes timestamp from our methods
        return record.getMessage()


class FileFormatter(logging.Formatter):
    """File formatter - includes full details for analysis."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname[:4]
        return f"{ts} [{level}] {record.name}: {record.getMessage()}"


def _format_data(data: dict[str, Any]) -> str:
    """Format structured data for logging."""
    parts = []
    for k, v in data.items():
        if isinstance(v, str) and len(v) > 50:
            v = v[:47] + "..."
        elif isinstance(v, list) and len(v) > 5:
            v = f"[{len(v)} items]"
        parts.append(f"{k}={v}")
    return ", ".join(parts)


# Global logger instance
_logger: SessionLogger | None = None


def get_logger(verbose: bool = False, log_dir: str | Path | None = None) -> SessionLogger:
    """Get or create the global session logger.

    Args:
        verbose: If True, show DEBUG level logs in console.
        log_dir: Directory for log files. Applied if not already set.
    """
    global _logger
    if _logger is None:
        _logger = SessionLogger(verbose=verbose, log_dir=log_dir)
    else:
        if verbose and not _logger.verbose:
            _logger.set_verbose(True)
        if log_dir and not _logger._log_dir:
            _logger._log_dir = Path(log_dir)
    return _logger


def reset_logger():
    """Reset the global logger (for testing)."""
    global _logger
    if _logger:
        for handler in _logger.logger.handlers[:]:
            if isinstance(handler, logging.FileHandler):
                handler.close()
                _logger.logger.removeHandler(handler)
    _logger = None
