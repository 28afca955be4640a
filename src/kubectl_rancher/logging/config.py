"""structlog setup for kubectl-rancher.

Every command logs to two places:

* stderr, at WARNING by default (INFO with ``--verbose``, DEBUG with
  ``--debug``). stdout is reserved for command output such as ``list -o json``.
* a rotating JSON file under ``$XDG_STATE_HOME/kubectl-rancher`` that always
  records DEBUG and above.

Credentials passed as log fields are masked before any renderer sees them.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import MutableMapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog


def _state_dir() -> Path:
    base = os.environ.get("XDG_STATE_HOME")
    root = Path(base) if base else Path.home() / ".local" / "state"
    return root / "kubectl-rancher"


LOG_DIR = _state_dir()
LOG_FILE = LOG_DIR / "kubectl-rancher.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
RETENTION_DAYS = 30

SECRET_FIELDS = frozenset({"password", "token", "authorization"})
REDACTED = "***"


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential fields in an event."""
    for key in SECRET_FIELDS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    redact_secrets,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def console_level(verbose: bool = False, debug: bool = False) -> int:
    """Map the CLI verbosity flags to a stdlib level for the stderr handler."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _formatter(renderer: structlog.types.Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_PRE_CHAIN)


def _cleanup_old_logs() -> None:
    """Delete rotated log files not modified within RETENTION_DAYS."""
    if not LOG_DIR.exists():
        return
    max_age = RETENTION_DAYS * 24 * 60 * 60
    now = time.time()
    for path in LOG_DIR.glob(f"{LOG_FILE.name}*"):
        try:
            if now - path.stat().st_mtime > max_age:
                path.unlink()
        except OSError:
            continue


def _setup_file_logging() -> None:
    """Attach the rotating JSON file handler to the root logger."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    _cleanup_old_logs()

    handler = RotatingFileHandler(LOG_FILE, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    logging.getLogger().addHandler(handler)


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
) -> None:
    """Route structlog through stdlib logging to stderr and the log file.

    Args:
        verbose: Show INFO messages on stderr.
        debug: Show DEBUG messages on stderr, with locals in tracebacks.
        json_output: Render stderr logs as JSON lines instead of console text.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        # The file handler records DEBUG regardless of the console level.
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
        )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(console_level(verbose=verbose, debug=debug))
    stderr_handler.setFormatter(_formatter(renderer))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(stderr_handler)

    _setup_file_logging()


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Return a structlog logger, optionally bound to ``initial_context``."""
    logger: structlog.BoundLogger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
