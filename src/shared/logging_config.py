"""Logging for the rankings and forum domains.

One environment name drives both halves of the setup: the stdlib level and the
structlog renderer. It is read from ``ENV``, ``ENVIRONMENT`` or ``PROTEAN_ENV``
(first one set wins) and defaults to ``development``. ``LOG_LEVEL`` overrides
the level only; ``LOG_DIR`` adds a rotating ``rpgboard.log`` file.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

_ENV_VARIABLES = ("ENV", "ENVIRONMENT", "PROTEAN_ENV")

# environment -> (level, render as JSON)
_PROFILES = {
    "production": ("INFO", True),
    "staging": ("INFO", True),
    "development": ("DEBUG", False),
    "test": ("WARNING", False),
}
_UNKNOWN_PROFILE = ("INFO", False)

_QUIET_LOGGERS = ("protean", "asyncio")


def resolve_environment() -> str:
    for variable in _ENV_VARIABLES:
        value = os.getenv(variable)
        if value:
            return value.strip().lower()
    return "development"


def get_log_level(env: str | None = None) -> str:
    env = env or resolve_environment()
    return os.getenv("LOG_LEVEL") or _PROFILES.get(env, _UNKNOWN_PROFILE)[0]


def select_renderer(env: str | None = None):
    """JSON lines where logs are shipped somewhere, Rich console output otherwise."""
    env = env or resolve_environment()
    if _PROFILES.get(env, _UNKNOWN_PROFILE)[1]:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def _log_file_handler(log_dir: str) -> logging.Handler:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=directory / "rpgboard.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )


def _install_handlers(level: str) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if os.getenv("LOG_DIR"):
        handlers.append(_log_file_handler(os.environ["LOG_DIR"]))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []
    for handler in handlers:
        handler.setLevel(level)
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _processors(env: str) -> list:
    callsite = structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.FILENAME,
            structlog.processors.CallsiteParameter.LINENO,
            structlog.processors.CallsiteParameter.FUNC_NAME,
        ]
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        callsite,
        select_renderer(env),
    ]


def configure_logging() -> None:
    """Set up stdlib handlers and structlog for the current environment."""
    env = resolve_environment()
    _install_handlers(get_log_level(env))
    structlog.configure(
        processors=_processors(env),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
