import logging
import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog for application-wide logging.

    Standard logging is initialised at ``level`` and structlog renders
    ISO-timestamped JSON events through the stdlib logger factory.
    """
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
