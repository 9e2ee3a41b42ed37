from typing import Optional, Sequence, Union
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from ..connectors.factory import ConnectionSpec, get_connector
from ..dialects import get_adapter, parse_dialect
from ..domain.models import ConnectionHealth, Dialect, ReadResult
from .checker import ConnectionChecker
from .crawler import MetadataCrawler

class Metalize:
    """
    Facade Pattern: unified entry point for reading catalog metadata.

    Usage:
        async with Metalize(dialect="postgres", connection_config={...}) as metalize:
            result = await metalize.read(tables=["public.users"], sequences=["users_seq"])

    The dialect is fixed at construction; all dialect-specific knowledge
    lives in the adapter chosen here.
    """
    def __init__(
        self,
        dialect: Union[Dialect, str],
        connection_config: ConnectionSpec = None,
        client: Union[AsyncEngine, AsyncConnection, None] = None,
        alias: str = "default",
    ):
        self.dialect = parse_dialect(dialect)
        self._connector = get_connector(self.dialect, connection_config, client, alias)
        self._adapter = get_adapter(self.dialect, self._connector)
        self._checker = ConnectionChecker(self._connector)
        self._crawler = MetadataCrawler(self._adapter)

    async def __aenter__(self) -> "Metalize":
        try:
            await self.connect()
        except Exception:
            await self.end_connection()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self.is_closed:
            await self.end_connection()

    @property
    def is_closed(self) -> bool:
        return self._connector.is_closed

    async def connect(self) -> None:
        """Opens the session now instead of on the first query."""
        await self._connector.connect()

    async def read(
        self,
        tables: Optional[Sequence[str]] = None,
        sequences: Optional[Sequence[str]] = None,
    ) -> ReadResult:
        return await self._crawler.read(tables=tables, sequences=sequences)

    async def check_health(self) -> ConnectionHealth:
        return await self._checker.check_health()

    async def end_connection(self) -> None:
        await self._connector.end_connection()

    def quote_object_name(self, name: str) -> str:
        return self._adapter.quote_object_name(name)

__all__ = ["Metalize", "MetadataCrawler", "ConnectionChecker"]
