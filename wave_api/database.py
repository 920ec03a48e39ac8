import ssl as _ssl
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from wave_api.config import Settings

_PROBE_QUERY = text("SELECT 1")


def _asyncpg_url(url: str) -> tuple[str, dict]:
    """Convert a database URL for asyncpg compatibility.

    asyncpg does not accept ``sslmode`` as a query parameter; it expects
    ``ssl`` to be passed via ``connect_args``.  Plain ``postgresql://`` and
    ``postgres://`` schemes are rewritten to ``postgresql+asyncpg://`` so the
    same ``DATABASE_URL`` used by other tooling works unchanged.
    """
    parts = urlsplit(url)
    if parts.scheme in ("postgres", "postgresql"):
        parts = parts._replace(scheme="postgresql+asyncpg")

    qs = parse_qs(parts.query)
    connect_args: dict = {}

    if "sslmode" in qs:
        mode = qs.pop("sslmode")[0]
        if mode in ("require", "verify-ca", "verify-full"):
            connect_args["ssl"] = _ssl.create_default_context()
        parts = parts._replace(query=urlencode(qs, doseq=True))

    return urlunsplit(parts), connect_args


class Database:
    """Process-scoped handle on the connection pool.

    Built once at startup and handed to whatever needs the store.  ``dispose``
    releases every pooled connection; the engine lazily reconnects if used
    afterwards, so callers guard against a second release themselves.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url, connect_args = _asyncpg_url(settings.database_url)
        engine = create_async_engine(
            url,
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            connect_args=connect_args,
        )
        return cls(engine)

    async def ping(self) -> None:
        """Run ``SELECT 1``.  Raises whatever the driver raises on failure."""
        async with self.engine.connect() as conn:
            await conn.execute(_PROBE_QUERY)

    async def dispose(self) -> None:
        await self.engine.dispose()
