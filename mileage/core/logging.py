import logging

import structlog


def setup_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Route structlog through stdlib logging; ``fmt="json"`` emits one JSON object per event."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if fmt == "json":
        # console renderer prints tracebacks itself
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))
