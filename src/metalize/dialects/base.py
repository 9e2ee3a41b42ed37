import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple
from ..domain.interfaces import QuerySession
from ..domain.models import (
    Check,
    Column,
    Dialect,
    MatchType,
    ReferentialAction,
    SequenceMetadata,
)
from ..exceptions import CatalogError
from .quoting import ObjectName, quote_object_name
from .types import TypeDescriptorParser

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

class CatalogKind(str, Enum):
    COLUMNS = "columns"
    PRIMARY_KEY = "primary_key"
    UNIQUE = "unique"
    INDEXES = "indexes"
    FOREIGN_KEYS = "foreign_keys"
    CHECKS = "checks"
    SEQUENCES = "sequences"

class DialectAdapter(ABC):
    """
    Catalog queries and row parsing for one dialect.

    Every row returned by run_query() carries the owning object's
    'table_schema'/'table_name' (or 'sequence_schema'/'sequence_name'),
    so the crawler can group rows without knowing the dialect.
    Key/index rows also carry 'constraint_name' or 'index_name',
    'column_name' and an ordinal 'position'.
    """
    dialect: Dialect
    check_support: bool = False
    sequence_support: bool = False
    quote_char: Optional[str] = None
    type_parser: TypeDescriptorParser

    # catalog encodings -> canonical values; unknown codes are fatal
    action_codes: Dict[str, ReferentialAction] = {}
    match_codes: Dict[str, MatchType] = {}

    def __init__(self, session: QuerySession):
        self.session = session

    def quote_object_name(self, name: str) -> str:
        return quote_object_name(name, self.quote_char)

    @property
    @abstractmethod
    def default_schema_query(self) -> str:
        """Single-row query selecting the session's default schema as 'schema_name'."""
        pass

    async def default_schema(self) -> Optional[str]:
        """None when the session has no schema selected (e.g. MySQL without a database)."""
        rows = await self.session.query(self.default_schema_query)
        if not rows:
            return None
        return rows[0]["schema_name"]

    def supports(self, kind: CatalogKind) -> bool:
        if kind is CatalogKind.CHECKS:
            return self.check_support
        if kind is CatalogKind.SEQUENCES:
            return self.sequence_support
        return True

    async def run_query(self, kind: CatalogKind, objects: Sequence[ObjectName]) -> List[Row]:
        """
        Runs the catalog query for `kind` restricted to `objects`.
        Unsupported kinds and empty object lists yield no rows.
        """
        if not objects or not self.supports(kind):
            return []
        sql, params = self.build_query(kind, objects)
        logger.debug("%s: querying %s for %d object(s)", self.dialect.value, kind.value, len(objects))
        return await self.session.query(sql, params)

    @abstractmethod
    def build_query(self, kind: CatalogKind, objects: Sequence[ObjectName]) -> Tuple[str, Dict[str, Any]]:
        pass

    @abstractmethod
    def parse_column(self, row: Row) -> Column:
        pass

    @staticmethod
    def object_filter(
        objects: Sequence[ObjectName], schema_column: str, name_column: str
    ) -> Tuple[str, Dict[str, Any]]:
        """
        Builds an exact-match predicate, one bound (schema, name) pair per object.
        """
        clauses = []
        params: Dict[str, Any] = {}
        for i, obj in enumerate(objects):
            clauses.append(f"({schema_column} = :schema_{i} and {name_column} = :name_{i})")
            params[f"schema_{i}"] = obj.schema
            params[f"name_{i}"] = obj.name
        return "(" + " or ".join(clauses) + ")", params

    def parse_action(self, code: Any) -> ReferentialAction:
        try:
            return self.action_codes[code]
        except (KeyError, TypeError):
            raise CatalogError(f"{self.dialect.value}: unknown referential action code {code!r}")

    def parse_match(self, code: Any) -> MatchType:
        try:
            return self.match_codes[code]
        except (KeyError, TypeError):
            raise CatalogError(f"{self.dialect.value}: unknown foreign key match code {code!r}")

    def parse_check(self, row: Row) -> Check:
        return Check(name=row["constraint_name"], condition=row["condition"])

    def parse_sequence(self, row: Row) -> SequenceMetadata:
        return SequenceMetadata(
            start=str(row["start_value"]),
            min=str(row["minimum_value"]),
            max=str(row["maximum_value"]),
            increment=str(row["increment"]),
            cycle=parse_flag(row["cycle_option"]),
        )

def parse_flag(value: Any) -> bool:
    """Catalog yes/no columns come back as 'YES'/'NO' text or as booleans."""
    if isinstance(value, str):
        return value.upper() in ("YES", "Y", "TRUE")
    return bool(value)

def optional_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None
