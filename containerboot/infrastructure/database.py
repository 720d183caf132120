"""Database Health Probes: one round-trip query to confirm the database accepts connections.

Invariants:
    - ping() raises DatabaseError on any failure; health_check() returns bool and
      never raises, so a bad DSN still goes through the whole retry budget
    - Every SQLAlchemy exception is mapped to DatabaseError (core/errors.py)
    - A missing DATABASE_URL fails every probe, it never aborts startup by itself
    - Error messages and logs only ever contain the redacted URL

Design Decisions:
    - NullPool: each probe opens a fresh connection, no stale pooled sockets
      between attempts
    - Symfony DSNs (postgresql://...?serverVersion=16&charset=utf8) are rewritten
      for asyncpg: driver added, sslmode renamed to ssl, Doctrine-only query
      parameters dropped
    - ConsoleProbe kept as opt-in: it goes through the application's own
      Doctrine config, at the cost of a PHP boot per attempt
"""

import logging

from sqlalchemy import pool, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import (
    DBAPIError, InvalidRequestError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from containerboot.core.errors import DatabaseError
from containerboot.core.redact import redact_dsn
from containerboot.infrastructure.commands import CommandRunner

logger = logging.getLogger(__name__)

_POSTGRES_SCHEMES = ("postgres", "postgresql", "pgsql")
_DOCTRINE_ONLY_PARAMS = ("serverVersion", "charset")
# libpq query parameter -> asyncpg connect() keyword
_LIBPQ_TO_ASYNCPG = {"sslmode": "ssl"}


def normalize_database_url(database_url: str) -> URL:
    """Rewrite a Symfony/Doctrine DSN into an async SQLAlchemy URL."""
    url = make_url(database_url)
    if url.drivername in _POSTGRES_SCHEMES:
        url = url.set(drivername="postgresql+asyncpg")
    if url.drivername == "postgresql+asyncpg":
        renamed = {
            _LIBPQ_TO_ASYNCPG[key]: value
            for key, value in url.query.items() if key in _LIBPQ_TO_ASYNCPG
        }
        url = url.difference_update_query(_LIBPQ_TO_ASYNCPG).update_query_dict(renamed)
    return url.difference_update_query(_DOCTRINE_ONLY_PARAMS)


class DatabaseProbe:
    """Runs SELECT 1 through an async SQLAlchemy engine."""

    def __init__(self, database_url: str | None):
        self.database_url = database_url
        self._engine: AsyncEngine | None = None

    @property
    def redacted_url(self) -> str:
        return redact_dsn(self.database_url) if self.database_url else "<unset>"

    def _get_engine(self) -> AsyncEngine:
        if self._engine is None:
            if not self.database_url:
                raise DatabaseError("DATABASE_URL is not set", "connect")
            try:
                self._engine = create_async_engine(
                    normalize_database_url(self.database_url),
                    poolclass=pool.NullPool,
                )
            except (InvalidRequestError, ValueError, ImportError) as e:
                raise DatabaseError(
                    f"unusable DATABASE_URL {self.redacted_url} ({type(e).__name__})",
                    "configure",
                )
        return self._engine

    async def ping(self, quiet: bool = True) -> None:
        """Execute the round-trip query once."""
        engine = self._get_engine()
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except OperationalError as e:
            raise DatabaseError(f"connection refused or unreachable: {e.orig}", "connect")
        except DBAPIError as e:
            raise DatabaseError(f"driver error: {e.orig}", "query")
        except SQLAlchemyError as e:
            raise DatabaseError(str(e), "query")
        except OSError as e:
            raise DatabaseError(str(e), "connect")
        except (TypeError, ValueError) as e:
            raise DatabaseError(f"rejected connection options: {e}", "configure")

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            await self.ping()
            return True
        except DatabaseError as e:
            logger.debug(f"DB health check failed: {e.message}")
            return False
        except Exception as e:
            logger.error(f"DB health check failed: {type(e).__name__}: {e}")
            return False

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None


class ConsoleProbe:
    """Runs `php bin/console dbal:run-sql "SELECT 1"` through the application."""

    def __init__(self, argv: tuple[str, ...], runner: CommandRunner):
        self.argv = argv
        self.runner = runner

    async def ping(self, quiet: bool = True) -> None:
        returncode = await self.runner.run(self.argv, quiet=quiet)
        if returncode != 0:
            raise DatabaseError(
                f"{' '.join(self.argv)} exited with {returncode}", "query",
            )

    async def health_check(self) -> bool:
        try:
            await self.ping()
            return True
        except DatabaseError as e:
            logger.debug(f"Console health check failed: {e.message}")
            return False

    async def close(self) -> None:
        return None
