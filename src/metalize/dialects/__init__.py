"""
Dialect adapters: one catalog query set and row parser per supported dialect.
"""

from typing import Dict, Type, Union
from ..domain.interfaces import QuerySession
from ..domain.models import Dialect
from ..exceptions import ConfigurationError
from .base import CatalogKind, DialectAdapter
from .mysql import MySQLAdapter
from .postgres import PostgresAdapter
from .quoting import ObjectName, quote_object_name, split_object_name

_ADAPTERS: Dict[Dialect, Type[DialectAdapter]] = {
    Dialect.POSTGRES: PostgresAdapter,
    Dialect.MYSQL: MySQLAdapter,
}

def parse_dialect(dialect: Union[Dialect, str]) -> Dialect:
    try:
        return Dialect(dialect)
    except ValueError:
        supported = ", ".join(d.value for d in Dialect)
        raise ConfigurationError(f"Unsupported dialect '{dialect}'. Expected one of: {supported}")

def get_adapter(dialect: Union[Dialect, str], session: QuerySession) -> DialectAdapter:
    return _ADAPTERS[parse_dialect(dialect)](session)

__all__ = [
    "CatalogKind",
    "DialectAdapter",
    "MySQLAdapter",
    "ObjectName",
    "PostgresAdapter",
    "get_adapter",
    "parse_dialect",
    "quote_object_name",
    "split_object_name",
]
