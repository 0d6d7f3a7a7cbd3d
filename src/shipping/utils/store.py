"""Store access helpers: one bounded retry for transient read failures."""

from collections.abc import Callable
from typing import TypeVar

import structlog

from shipping.errors import StoreUnavailable

logger = structlog.get_logger(__name__)

T = TypeVar("T")

TRANSIENT_STORE_ERRORS = (StoreUnavailable, ConnectionError, TimeoutError)


def with_store_retry(operation: Callable[[], T], description: str = "store read") -> T:
    """Run ``operation``, retrying exactly once on a transient store error.

    A second failure propagates to the caller. Only reads go through here:
    writes are conditional on the aggregate version and are not replayed.
    """
    try:
        return operation()
    except TRANSIENT_STORE_ERRORS as exc:
        logger.warning(
            "Transient store failure, retrying once",
            operation=description,
            error=str(exc),
        )
        return operation()
