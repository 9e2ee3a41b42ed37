from typing import Any, Dict, Mapping, Type, Union
from pydantic import ValidationError
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from ..config import ConnectionConfig, with_async_driver
from ..dialects import parse_dialect
from ..domain.models import Dialect
from ..exceptions import ConfigurationError
from .base import SQLAlchemyConnector
from .mysql import MySQLConnector
from .postgres import PostgresConnector

_CONNECTORS: Dict[Dialect, Type[SQLAlchemyConnector]] = {
    Dialect.POSTGRES: PostgresConnector,
    Dialect.MYSQL: MySQLConnector,
}

ConnectionSpec = Union[ConnectionConfig, Mapping[str, Any], str, URL]

def _to_connection_config(connection_config: Mapping[str, Any]) -> ConnectionConfig:
    try:
        return ConnectionConfig(**connection_config)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid connection config: {e}")

def get_connector(
    dialect: Union[Dialect, str],
    connection_config: ConnectionSpec = None,
    client: Union[AsyncEngine, AsyncConnection, None] = None,
    alias: str = "unknown",
) -> SQLAlchemyConnector:
    """
    Factory function to create the connector for a dialect.
    An existing client wins over connection_config; with neither, construction fails.
    """
    connector_cls = _CONNECTORS[parse_dialect(dialect)]

    if client is not None:
        return connector_cls(db_alias=alias, client=client)
    if connection_config is None:
        raise ConfigurationError("Either connection_config or client must be provided")

    if isinstance(connection_config, (str, URL)):
        connection_string = with_async_driver(connection_config, connector_cls.driver_name)
    else:
        if not isinstance(connection_config, ConnectionConfig):
            connection_config = _to_connection_config(connection_config)
        connection_string = connection_config.connection_url(connector_cls.driver_name)

    return connector_cls(connection_string, alias)
