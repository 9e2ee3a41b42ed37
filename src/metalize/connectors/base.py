import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Union
from sqlalchemy import event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from ..domain.models import ConnectionHealth, HealthStatus
from ..exceptions import ConfigurationError, ConnectionError, SessionClosedError

logger = logging.getLogger(__name__)

class SQLAlchemyConnector:
    """
    Generic asyncio SQLAlchemy connector, specialized per dialect for the
    driver name and the read-only session settings.

    Holds a single open connection. Queries are serialized through a lock,
    so callers may fan out with asyncio.gather() without pipelining on the wire.
    """
    driver_name: Optional[str] = None
    # Strategy 2: driver connect arguments that make the session read-only
    read_only_connect_args: Dict[str, Any] = {}

    def __init__(
        self,
        connection_string: Union[str, URL, None] = None,
        db_alias: str = "unknown",
        client: Union[AsyncEngine, AsyncConnection, None] = None,
    ):
        if connection_string is None and client is None:
            raise ConfigurationError("Either a connection string or an existing client is required")

        self.connection_string = connection_string
        self.db_alias = db_alias
        self._engine: Optional[AsyncEngine] = None
        self._connection: Optional[AsyncConnection] = None
        self._owns_engine = client is None
        self._owns_connection = not isinstance(client, AsyncConnection)
        self._closed = False
        self._lock = asyncio.Lock()

        if isinstance(client, AsyncConnection):
            self._connection = client
            self._engine = client.engine
        elif isinstance(client, AsyncEngine):
            self._engine = client
        elif client is not None:
            raise ConfigurationError(
                f"Unsupported client type '{type(client).__name__}': expected AsyncEngine or AsyncConnection"
            )
        else:
            # fails here, before any connection attempt, on a bad URL or a non-async driver
            self._engine = self._create_engine()

    @staticmethod
    def _enforce_read_only_listener(conn, cursor, statement, parameters, context, executemany):
        """
        Strategy 1: Event Hook (Interceptor).
        Blocks any SQL that doesn't start with a whitelist keyword.
        """
        sql = statement.strip().upper()

        allowed_starts = (
            "SELECT",
            "WITH",
            "EXPLAIN",
            "DESCRIBE",
            "SHOW",
            "SET",  # session configuration issued by drivers
        )

        if not any(sql.startswith(keyword) for keyword in allowed_starts):
            raise PermissionError(
                f"SAFETY BLOCK: Operation blocked! Only read-only queries are allowed. "
                f"Attempted: {sql[:50]}..."
            )

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _engine_options(self) -> Dict[str, Any]:
        url = make_url(self.connection_string)
        if self.driver_name and url.drivername == self.driver_name and self.read_only_connect_args:
            return {"connect_args": dict(self.read_only_connect_args)}
        return {}

    def _create_engine(self) -> AsyncEngine:
        try:
            engine = create_async_engine(self.connection_string, **self._engine_options())
        except Exception as e:
            raise ConfigurationError(f"Failed to create engine for '{self.db_alias}': {e}") from e

        # Register Strategy 1: Interceptor (events live on the sync core of the async engine)
        event.listen(engine.sync_engine, "before_cursor_execute", self._enforce_read_only_listener)
        return engine

    async def connect(self) -> None:
        async with self._lock:
            await self._ensure_connected()

    async def _ensure_connected(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Session '{self.db_alias}' has been ended")
        if self._connection is not None:
            return

        try:
            self._connection = await self._engine.connect()
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            raise ConnectionError(f"Failed to connect to '{self.db_alias}': {e}") from e
        logger.info("Connected to %s (%s)", self.db_alias, self._engine.dialect.name)

    async def query(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Executes one read-only statement and returns its rows as dicts.
        Driver errors propagate unchanged.
        """
        async with self._lock:
            await self._ensure_connected()
            try:
                result = await self._connection.execute(text(sql), params or {})
                return [dict(row) for row in result.mappings().all()]
            finally:
                # close our implicit transaction; a caller's connection keeps its own
                if self._owns_connection:
                    await self._connection.rollback()

    async def end_connection(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Session '{self.db_alias}' has already been ended")
        self._closed = True

        async with self._lock:
            if self._connection is not None:
                await self._connection.close()
                self._connection = None
            if self._engine is not None and self._owns_engine:
                await self._engine.dispose()
            self._engine = None
        logger.info("Connection to %s ended", self.db_alias)

    async def check_health(self) -> ConnectionHealth:
        start_time = time.time()
        status = HealthStatus.FAILED
        error_msg = None

        try:
            await self.query("SELECT 1")
            status = HealthStatus.SUCCESS
        except Exception as e:
            error_msg = str(e)
            status = HealthStatus.FAILED

        latency = (time.time() - start_time) * 1000  # ms

        if latency > 5000 and status == HealthStatus.SUCCESS:
            status = HealthStatus.TIMEOUT

        return ConnectionHealth(
            db_alias=self.db_alias,
            status=status,
            latency_ms=round(latency, 2),
            error_message=error_msg
        )
