"""
Luigi's Box Client - Structured Logging Module

Loggers are structlog wrappers around stdlib loggers in the ``luigis_box``
namespace. The package installs only a NullHandler, so events reach whatever
handlers the host application configured and nothing is printed otherwise.

Patterns Applied:
- Library-local processor chain via structlog.wrap_logger()
- Opt-in configure_logging() attaching one handler to the package logger

Anti-Patterns Avoided:
- logging.basicConfig() or structlog.configure() from library code
- Handler added per configure_logging() call - PREVENTED via _handler
"""

import logging
from typing import Any

import structlog
from structlog.typing import EventDict

LOGGER_NAME = "luigis_box"
CLIENT_NAME = "luigis-box-client"

# Handler installed by configure_logging(), None until then
_handler: logging.Handler | None = None


def add_client_info(
    logger: logging.Logger,  # noqa: ARG001 - Required by structlog interface
    method_name: str,  # noqa: ARG001 - Required by structlog interface
    event_dict: EventDict,
) -> EventDict:
    """Tag every event with the client name."""
    event_dict["client"] = CLIENT_NAME
    return event_dict


PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    add_client_info,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> Any:
    """Get a structured logger for a module of this package.

    Args:
        name: Logger name (typically module name)

    Returns:
        structlog BoundLogger backed by logging.getLogger(name)
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
) -> logging.Handler:
    """Render client events to stderr.

    For applications that do not route the ``luigis_box`` logger themselves.
    Only the package logger is touched; the root logger and the global
    structlog configuration stay as the application left them. Only the
    first call takes effect.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Whether to use JSON renderer (True for production)

    Returns:
        The installed handler
    """
    global _handler

    if _handler is not None:
        return _handler

    renderer: Any
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    package_logger.propagate = False

    _handler = handler
    return handler


def reset_logging() -> None:
    """Undo configure_logging() for testing."""
    global _handler

    package_logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
        _handler = None
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
