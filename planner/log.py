"""
Structured Logging

Every write to the document store and every store failure is logged
as a structured event. The view layer only ever shows the raw error
message; the log keeps the context (collection, document id, operation).

structlog is configured once at import time with INFO level, so any
module can just call get_logger(__name__). The app calls
configure_logging() with its settings before it touches the store:
debug mode lowers the level to DEBUG and every event is tagged with
the app environment.
"""

import logging
from typing import Optional

import structlog


def add_environment(environment: str):
    """Processor that tags every event with the app environment."""
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("environment", environment)
        return event_dict
    return processor


def configure_logging(debug: bool = False, environment: Optional[str] = None) -> None:
    """
    (Re)configure stdlib logging and structlog.

    Args:
        debug: Log DEBUG events too (PLANNER_DEBUG_MODE)
        environment: Added to every event when given (PLANNER_APP_ENVIRONMENT)
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", level=level)
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]
    if environment:
        processors.append(add_environment(environment))
    processors += [
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to a module name."""
    return structlog.get_logger(name)
