"""structlog setup for a lead sync run.

Log events go to stderr, so stdout carries only the messages the
``authorize`` command prints. Cron mails stderr to the job owner.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from .config import LeadSyncConfig

# Google client libraries that are chatty at INFO
_QUIET_LOGGERS = (
    "googleapiclient.discovery",
    "googleapiclient.discovery_cache",
    "google_auth_oauthlib.flow",
)


def setup_logging(
    config: LeadSyncConfig | None = None,
    *,
    json: bool | None = None,
    level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through one handler.

    ``config.log_json`` and ``config.log_level`` are used unless *json*
    or *level* is passed explicitly. JSON lines carry exceptions as
    structured tracebacks; console output renders them inline.
    """
    if json is None:
        json = config.log_json if config is not None else True
    if level is None:
        level = config.log_level if config is not None else "INFO"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json:
        render_chain: list[structlog.types.Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        render_chain = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *render_chain,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
