import logging
from contextvars import ContextVar
from typing import Optional
from uuid import uuid4

_correlation_id: ContextVar[Optional[str]] = ContextVar("bunamo_correlation_id", default=None)


def current_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def get_correlation_id() -> str:
    """Current request id, minting one for work that started outside a request (CLI, tests)."""
    correlation_id = _correlation_id.get()
    if correlation_id is None:
        correlation_id = uuid4().hex
        _correlation_id.set(correlation_id)
    return correlation_id


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamps the active request id onto records that don't carry one in ``extra``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "correlation_id", None) is None:
            record.correlation_id = current_correlation_id()
        return True
