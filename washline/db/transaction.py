"""Washline — Transaction helper: run a check-then-write unit with retry on serialization failures."""
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from washline.config import get_settings
from washline.core.errors import TransactionFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}


def is_retryable(exc: DBAPIError) -> bool:
    """True when the driver reports a transient transaction abort."""
    for err in (exc.orig, getattr(exc.orig, "__cause__", None)):
        if err is None:
            continue
        code = getattr(err, "sqlstate", None) or getattr(err, "pgcode", None)
        if code in RETRYABLE_SQLSTATES:
            return True
    return False


async def run_in_transaction(
    db: AsyncSession,
    operation: Callable[[AsyncSession], Awaitable[T]],
    attempts: int | None = None,
) -> T:
    """
    Run ``operation(db)`` and commit. On a retryable abort the whole unit is
    rolled back and re-run, so conservation checks are always re-read against
    committed state. Any other failure rolls back and propagates unchanged.
    """
    attempts = attempts or get_settings().TRANSACTION_RETRY_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            result = await operation(db)
            await db.commit()
            return result
        except DBAPIError as exc:
            await db.rollback()
            if not is_retryable(exc):
                raise
            if attempt >= attempts:
                logger.error("Transaction aborted %s times, giving up: %s", attempts, exc.orig)
                raise TransactionFailure() from exc
            logger.warning("Transaction aborted (attempt %s/%s), retrying: %s", attempt, attempts, exc.orig)
        except Exception:
            await db.rollback()
            raise
    raise TransactionFailure()
