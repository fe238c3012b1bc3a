"""
Structured logging configuration for the credit evaluation services.

All logs are JSON-formatted with these standard fields:
- timestamp: ISO 8601 timestamp
- event: The log event name (first positional argument)
- request_id: UUID for tracing requests end-to-end across services
- cpf: Client CPF (when available), always masked
- duration_ms: Operation duration in milliseconds
- outcome: Result of the operation

CPFs are never written raw. Any event field named "cpf" goes through
mask_cpf before rendering, whether it came from a log call or from the
request context.
"""
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Optional

import structlog

from credito.config import settings

CPF_LENGTH = 11
CPF_MASK = "***"
_MASKED_PREFIX_LENGTH = 3

# Context variables for request-scoped data
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
cpf_ctx: ContextVar[str] = ContextVar("cpf", default="")


def mask_cpf(cpf: str) -> str:
    """
    Hide the first three digits of a CPF.

    Only 11-character values are masked; anything else is returned
    unmodified. Masking an already-masked value is a no-op.
    """
    if cpf is None or len(cpf) != CPF_LENGTH:
        return cpf
    return CPF_MASK + cpf[_MASKED_PREFIX_LENGTH:]


def add_context_vars(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor that adds context variables to log entries."""
    request_id = request_id_ctx.get()
    cpf = cpf_ctx.get()

    if request_id:
        event_dict["request_id"] = request_id
    if cpf and "cpf" not in event_dict:
        event_dict["cpf"] = cpf

    return event_dict


def mask_cpf_fields(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor that masks every cpf field before rendering."""
    cpf = event_dict.get("cpf")
    if isinstance(cpf, str):
        event_dict["cpf"] = mask_cpf(cpf)
    return event_dict


def configure_logging() -> None:
    """Configure structlog with JSON output and context processors."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=settings.log_level.upper(),
    )

    # These log full URLs, and lookups carry the CPF in the query string.
    # Requests are logged by the service middleware instead, path only.
    for name in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            add_context_vars,
            mask_cpf_fields,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def set_request_context(request_id: str, cpf: Optional[str] = None) -> None:
    """Set the request context for logging."""
    request_id_ctx.set(request_id)
    if cpf:
        cpf_ctx.set(cpf)


def clear_request_context() -> None:
    """Clear the request context after request completion."""
    request_id_ctx.set("")
    cpf_ctx.set("")


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


class TimedOperation:
    """Context manager for timing operations and logging duration."""

    def __init__(
        self,
        event: str,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        **extra_fields: Any,
    ):
        self.event = event
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self) -> "TimedOperation":
        self.start_time = time.perf_counter()
        self.logger.info(f"{self.event}_started", **self.extra_fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(
                f"{self.event}_failed",
                duration_ms=round(self.duration_ms, 2),
                error=str(exc_val),
                **self.extra_fields,
            )
        else:
            self.logger.info(
                f"{self.event}_completed",
                duration_ms=round(self.duration_ms, 2),
                **self.extra_fields,
            )


def log_audit(
    logger: structlog.stdlib.BoundLogger,
    event: str,
    cliente_id: int,
    cpf: str,
) -> None:
    """Emit one audit entry for a client write, with the CPF masked."""
    logger.info(
        event,
        cliente_id=cliente_id,
        cpf=mask_cpf(cpf),
        audit=True,
    )
