"""Database Readiness Wait: warm-up, then bounded fixed-interval polling.

Invariants:
    - Exactly max_attempts polled probes when the database never answers
    - poll_interval sleep between consecutive attempts, none after the last
    - Budget exhausted: one extra diagnostic probe with output surfaced, then
      DatabaseUnavailableError (fatal, never retried further)
    - No backoff, no jitter

Design Decisions:
    - sleep injected: tests drive the loop without real delays
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from containerboot.config import Settings
from containerboot.core.errors import DatabaseError, DatabaseUnavailableError, ErrorContext

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DIAGNOSTIC_CHECKLIST = (
    "Database service is running on the hosting platform",
    "DATABASE_URL environment variable is correctly set",
    "Database is accessible from this container",
)


class HealthProbe(Protocol):
    async def ping(self, quiet: bool = True) -> None: ...

    async def health_check(self) -> bool: ...

    async def close(self) -> None: ...


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed warm-up, interval and attempt budget."""
    warmup_seconds: float = 5.0
    poll_interval_seconds: float = 2.0
    max_attempts: int = 30

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            warmup_seconds=settings.warmup_seconds,
            poll_interval_seconds=settings.poll_interval_seconds,
            max_attempts=settings.max_attempts,
        )

    @property
    def budget_seconds(self) -> float:
        return self.max_attempts * self.poll_interval_seconds


async def wait_for_database(
    probe: HealthProbe, policy: RetryPolicy, sleep: Sleep = asyncio.sleep,
) -> int:
    """Block until the probe succeeds; return the 1-based attempt that did."""
    if policy.warmup_seconds > 0:
        logger.info(
            f"Waiting {policy.warmup_seconds:g} seconds before attempting database connection...",
        )
        await sleep(policy.warmup_seconds)

    logger.info("Checking database connection...")
    for attempt in range(1, policy.max_attempts + 1):
        if await probe.health_check():
            logger.info(
                "Database is ready!",
                extra={"attempt": attempt, "max_attempts": policy.max_attempts},
            )
            return attempt
        logger.info(
            f"Waiting for database... (attempt {attempt}/{policy.max_attempts})",
            extra={"attempt": attempt, "max_attempts": policy.max_attempts},
        )
        if attempt < policy.max_attempts:
            await sleep(policy.poll_interval_seconds)

    await _report_unavailable(probe, policy)
    raise DatabaseUnavailableError(
        policy.max_attempts, policy.budget_seconds,
        ErrorContext(attempt=policy.max_attempts),
    )


async def _report_unavailable(probe: HealthProbe, policy: RetryPolicy) -> None:
    logger.error(
        f"Database connection timeout after {policy.max_attempts} attempts "
        f"({policy.budget_seconds:g} seconds)",
        extra={"error_code": "DATABASE_UNAVAILABLE"},
    )
    logger.error("Please check:")
    for i, item in enumerate(DIAGNOSTIC_CHECKLIST, start=1):
        logger.error(f"  {i}. {item}")

    logger.error("Attempting connection to see the error:")
    try:
        await probe.ping(quiet=False)
    except DatabaseError as e:
        logger.error(e.message, extra=e.to_log_extra())
    else:
        logger.warning("Diagnostic connection succeeded after the attempt budget ran out")
