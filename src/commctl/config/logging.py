"""structlog configuration for commctl.

All output goes to stderr so stdout stays reserved for command results.
Two renderers:
- console (default): key=value lines, colored on a TTY
- JSON (``--log-json``): one JSON object per line

Stdlib loggers (``logging.getLogger(__name__)`` in every module) and
structlog loggers share the same processor chain through
:class:`structlog.stdlib.ProcessorFormatter`.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers that are too chatty below WARNING.
_QUIET_LOGGERS = ("alembic", "sqlalchemy", "pluggy")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    market: str | None = None,
) -> None:
    """Configure structlog processors and route every record to stderr.

    Args:
        verbose: Lower the ``commctl`` logger to DEBUG (WARNING otherwise).
        log_json: Render JSON lines instead of console lines.
        market: Market name bound to every record via context vars.
    """
    shared = _shared_processors()

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("commctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    if market:
        structlog.contextvars.bind_contextvars(market=market)
