"""Claim code generation for sales."""
import logging
import secrets
from typing import Callable, Optional

from flask import current_app, has_app_context

from pantrypal.exceptions import ClaimCodeExhaustedError
from pantrypal.models import Sale

logger = logging.getLogger(__name__)

CLAIM_CODE_MIN = 100000
CLAIM_CODE_MAX = 999999
DEFAULT_MAX_ATTEMPTS = 20

_system_random = secrets.SystemRandom()


def random_claim_code() -> str:
    """Uniform 6-digit numeric code, "100000" to "999999"."""
    return str(_system_random.randint(CLAIM_CODE_MIN, CLAIM_CODE_MAX))


def _configured_max_attempts() -> int:
    if has_app_context():
        return current_app.config.get('CLAIM_CODE_MAX_ATTEMPTS', DEFAULT_MAX_ATTEMPTS)
    return DEFAULT_MAX_ATTEMPTS


def claim_code_exists(session, code: str) -> bool:
    """True when any sale, claimed or not, already uses ``code``."""
    return session.query(Sale.id).filter(Sale.claim_code == code).first() is not None


def generate_claim_code(session, max_attempts: Optional[int] = None,
                        rng: Optional[Callable[[], str]] = None) -> str:
    """
    Produce a claim code no existing sale uses.

    Collisions are redrawn. With 900,000 codes a long collision streak means
    the store is broken, so the attempts are bounded.

    Raises:
        ClaimCodeExhaustedError: every attempt collided
    """
    max_attempts = max_attempts or _configured_max_attempts()
    rng = rng or random_claim_code

    for attempt in range(1, max_attempts + 1):
        code = rng()
        if not claim_code_exists(session, code):
            return code
        logger.warning(f"Claim code collision on attempt {attempt}/{max_attempts}")

    logger.error(f"Claim code generation exhausted after {max_attempts} attempts")
    raise ClaimCodeExhaustedError(max_attempts)
