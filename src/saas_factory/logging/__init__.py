from .config import get_logger, setup_logging
from .correlation import (
    CORRELATION_HEADER,
    clear_context,
    get_correlation_id,
    new_correlation_id,
    set_correlation_id,
)

__all__ = [
    "CORRELATION_HEADER",
    "clear_context",
    "get_correlation_id",
    "get_logger",
    "new_correlation_id",
    "set_correlation_id",
    "setup_logging",
]
