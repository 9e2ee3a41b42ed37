"""
metalize: read relational catalog metadata into one dialect-independent model.
"""

from .domain.models import (
    Check,
    Column,
    ConnectionHealth,
    Dialect,
    ForeignKey,
    Generation,
    HealthStatus,
    Identity,
    Index,
    MatchType,
    ReadResult,
    Reference,
    ReferentialAction,
    SequenceMetadata,
    TableMetadata,
    TypeDetails,
)
from .config import ConnectionConfig
from .exceptions import (
    CatalogError,
    ConfigurationError,
    ConnectionError,
    MetalizeException,
    SessionClosedError,
)
from .inspector import Metalize

__version__ = "0.1.0"

__all__ = [
    "CatalogError",
    "Check",
    "Column",
    "ConfigurationError",
    "ConnectionConfig",
    "ConnectionError",
    "ConnectionHealth",
    "Dialect",
    "ForeignKey",
    "Generation",
    "HealthStatus",
    "Identity",
    "Index",
    "MatchType",
    "Metalize",
    "MetalizeException",
    "ReadResult",
    "Reference",
    "ReferentialAction",
    "SequenceMetadata",
    "SessionClosedError",
    "TableMetadata",
    "TypeDetails",
]
