import asyncio
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence
from ..dialects.base import CatalogKind, DialectAdapter, Row
from ..dialects.quoting import ObjectName, split_object_name
from ..domain.models import (
    ForeignKey,
    Index,
    ReadResult,
    Reference,
    SequenceMetadata,
    TableMetadata,
)

logger = logging.getLogger(__name__)

_CONSTRAINT_KINDS = (
    CatalogKind.PRIMARY_KEY,
    CatalogKind.UNIQUE,
    CatalogKind.INDEXES,
    CatalogKind.FOREIGN_KEYS,
    CatalogKind.CHECKS,
)

class MetadataCrawler:
    """
    SRP: Responsible only for turning catalog rows into metadata records.
    Dialect knowledge stays in the adapter.
    """
    def __init__(self, adapter: DialectAdapter):
        self.adapter = adapter

    async def read(
        self,
        tables: Optional[Sequence[str]] = None,
        sequences: Optional[Sequence[str]] = None,
    ) -> ReadResult:
        tables = list(tables or [])
        sequences = list(sequences or [])
        if not tables and not sequences:
            return ReadResult()

        # tables need it to name foreign key references, bare names to resolve
        bare = any(_is_bare(name) for name in tables + sequences)
        default_schema = None
        if tables or bare:
            default_schema = await self.adapter.default_schema()
            if default_schema is None and bare:
                logger.warning("%s: session has no default schema, bare names resolve to nothing",
                               self.adapter.dialect.value)

        table_result, sequence_result = await asyncio.gather(
            self._read_tables(tables, default_schema),
            self._read_sequences(sequences, default_schema),
        )
        return ReadResult(tables=table_result, sequences=sequence_result)

    async def _read_tables(self, names: List[str], default_schema: Optional[str]) -> Dict[str, Optional[TableMetadata]]:
        if not names:
            return {}
        requested = _resolve(names, default_schema)
        objects = _distinct(requested)
        if not objects:
            return {name: None for name in names}

        column_rows = _group_rows(await self.adapter.run_query(CatalogKind.COLUMNS, objects))
        # no point asking for constraints of tables that do not exist
        existing = [obj for obj in objects if obj in column_rows]
        logger.debug("Found %d of %d requested table(s)", len(existing), len(objects))

        results = await asyncio.gather(
            *(self.adapter.run_query(kind, existing) for kind in _CONSTRAINT_KINDS)
        )
        rows_by_kind = {kind: _group_rows(rows) for kind, rows in zip(_CONSTRAINT_KINDS, results)}

        metadata = {
            obj: self._build_table(obj, column_rows[obj], rows_by_kind, default_schema)
            for obj in existing
        }
        return {name: metadata.get(obj) for name, obj in requested.items()}

    async def _read_sequences(self, names: List[str], default_schema: Optional[str]) -> Dict[str, Optional[SequenceMetadata]]:
        if not names:
            return {}
        requested = _resolve(names, default_schema)

        rows = await self.adapter.run_query(CatalogKind.SEQUENCES, _distinct(requested))
        found = {
            ObjectName(row["sequence_schema"], row["sequence_name"]): self.adapter.parse_sequence(row)
            for row in rows
        }
        return {name: found.get(obj) for name, obj in requested.items()}

    def _build_table(
        self,
        obj: ObjectName,
        column_rows: List[Row],
        rows_by_kind: Dict[CatalogKind, Dict[ObjectName, List[Row]]],
        default_schema: Optional[str],
    ) -> TableMetadata:
        def rows_for(kind: CatalogKind) -> List[Row]:
            return rows_by_kind[kind].get(obj, [])

        columns = [self.adapter.parse_column(row) for row in _by_position(column_rows)]

        primary_keys = _build_indexes(rows_for(CatalogKind.PRIMARY_KEY), "constraint_name")
        primary_key = primary_keys[0] if primary_keys else None
        unique = _build_indexes(rows_for(CatalogKind.UNIQUE), "constraint_name")

        # indexes backing the primary key or a unique constraint are reported there only
        claimed = {index.name for index in unique}
        if primary_key is not None:
            claimed.add(primary_key.name)
        indexes = [
            index for index in _build_indexes(rows_for(CatalogKind.INDEXES), "index_name")
            if index.name not in claimed
        ]

        foreign_keys = self._build_foreign_keys(rows_for(CatalogKind.FOREIGN_KEYS), default_schema)

        checks = None
        if self.adapter.check_support:
            checks = [self.adapter.parse_check(row) for row in rows_for(CatalogKind.CHECKS)]

        return TableMetadata(
            columns=columns,
            primary_key=primary_key,
            unique=unique,
            indexes=indexes,
            foreign_keys=foreign_keys,
            checks=checks,
        )

    def _build_foreign_keys(self, rows: List[Row], default_schema: Optional[str]) -> List[ForeignKey]:
        foreign_keys = []
        for name, parts in sorted(_group_by(rows, "constraint_name").items()):
            # pairing follows the key sequence, never the column names
            parts = _by_position(parts)
            first = parts[0]
            foreign_keys.append(ForeignKey(
                name=name,
                columns=[part["column_name"] for part in parts],
                references=Reference(
                    table=_reference_name(first["referenced_schema"], first["referenced_table"], default_schema),
                    columns=[part["referenced_column_name"] for part in parts],
                ),
                match=self.adapter.parse_match(first["match_type"]),
                on_update=self.adapter.parse_action(first["update_rule"]),
                on_delete=self.adapter.parse_action(first["delete_rule"]),
            ))
        return foreign_keys

def _group_rows(rows: List[Row]) -> Dict[ObjectName, List[Row]]:
    grouped: Dict[ObjectName, List[Row]] = defaultdict(list)
    for row in rows:
        grouped[ObjectName(row["table_schema"], row["table_name"])].append(row)
    return dict(grouped)

def _group_by(rows: List[Row], key: str) -> Dict[str, List[Row]]:
    grouped: Dict[str, List[Row]] = defaultdict(list)
    for row in rows:
        grouped[row[key]].append(row)
    return dict(grouped)

def _by_position(rows: List[Row]) -> List[Row]:
    return sorted(rows, key=lambda row: int(row["position"]))

def _build_indexes(rows: List[Row], name_key: str) -> List[Index]:
    return [
        Index(name=name, columns=[part["column_name"] for part in _by_position(parts)])
        for name, parts in sorted(_group_by(rows, name_key).items())
    ]

def _reference_name(schema: str, table: str, default_schema: Optional[str]) -> str:
    if schema == default_schema:
        return table
    return f"{schema}.{table}"

def _is_bare(name: str) -> bool:
    return "." not in name

def _resolve(names: List[str], default_schema: Optional[str]) -> Dict[str, Optional[ObjectName]]:
    """Bare names cannot be resolved without a default schema."""
    return {
        name: None if default_schema is None and _is_bare(name) else split_object_name(name, default_schema)
        for name in names
    }

def _distinct(requested: Dict[str, Optional[ObjectName]]) -> List[ObjectName]:
    return [obj for obj in dict.fromkeys(requested.values()) if obj is not None]
