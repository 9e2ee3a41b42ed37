from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
from .models import ConnectionHealth

@runtime_checkable
class QuerySession(Protocol):
    """
    Connection Session seen by the dialect adapters: one open connection,
    read-only request/response queries, explicit end.
    """
    async def connect(self) -> None:
        ...

    async def query(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        ...

    async def end_connection(self) -> None:
        ...

@runtime_checkable
class DatabaseConnector(QuerySession, Protocol):
    db_alias: str

    async def check_health(self) -> ConnectionHealth:
        ...
