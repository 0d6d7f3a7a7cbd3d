"""Tracking code issuance.

Format: ``TRK`` followed by a zero-padded 6-digit number, e.g. ``TRK004217``.

The number space holds only 10^6 codes, so every draw is checked against the
repository before it is accepted. Collisions are resolved by drawing again in
a bounded loop; there is no waiting or locking. The ``tracking_code`` field is
also declared unique on the Shipment aggregate, so the store rejects a
duplicate that slips in between the check and the insert.
"""

import random
import re
from collections.abc import Callable

import structlog

from shipping import settings
from shipping.errors import IssuanceExhausted

logger = structlog.get_logger(__name__)

TRACKING_CODE_PREFIX = "TRK"
TRACKING_CODE_SPACE = 1_000_000

_TRACKING_CODE_PATTERN = re.compile(r"^TRK\d{6}$")


def generate_tracking_code(rng: random.Random | None = None) -> str:
    """Draw a candidate code. Uniqueness is not checked here."""
    rng = rng or random
    return f"{TRACKING_CODE_PREFIX}{rng.randrange(TRACKING_CODE_SPACE):06d}"


def is_valid_tracking_code(code: str | None) -> bool:
    if not code or not isinstance(code, str):
        return False
    return bool(_TRACKING_CODE_PATTERN.match(code))


def issue_tracking_code(
    is_taken: Callable[[str], bool],
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> str:
    """Issue a tracking code no existing shipment uses.

    Args:
        is_taken: returns True when a shipment already holds the code.
        rng: random source, injectable for tests.
        max_attempts: retry budget (defaults to ``TRACKING_CODE_MAX_ATTEMPTS``).

    Raises:
        IssuanceExhausted: every candidate in the budget collided.
    """
    if max_attempts is None:
        max_attempts = settings.TRACKING_CODE_MAX_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        code = generate_tracking_code(rng)
        if not is_taken(code):
            if attempt > 1:
                logger.info("Tracking code issued after collisions", attempts=attempt)
            return code

    logger.error("Tracking code issuance exhausted", attempts=max_attempts)
    raise IssuanceExhausted(f"Could not issue a unique tracking code after {max_attempts} attempts")
