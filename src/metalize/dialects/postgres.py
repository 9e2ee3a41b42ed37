"""
PostgreSQL catalog queries.

Columns and identity metadata come from information_schema.columns; keys,
indexes, foreign keys and checks come straight from pg_constraint/pg_index
so that key parts keep their declared order. pg_catalog queries locate the
table through to_regclass() on the quoted qualified name.
"""

from typing import Any, Dict, Sequence, Tuple
from ..domain.models import (
    Column,
    Dialect,
    Generation,
    Identity,
    MatchType,
    ReferentialAction,
)
from ..exceptions import CatalogError
from .base import CatalogKind, DialectAdapter, Row, optional_int, parse_flag
from .quoting import ObjectName
from .types import TypeDescriptorParser

_COLUMNS_QUERY = """
select
    c.table_schema as table_schema,
    c.table_name as table_name,
    c.column_name as column_name,
    c.ordinal_position as position,
    c.data_type as data_type,
    pg_catalog.format_type(a.atttypid, a.atttypmod) as column_type,
    c.character_maximum_length as character_maximum_length,
    c.numeric_precision as numeric_precision,
    c.numeric_scale as numeric_scale,
    c.is_nullable as is_nullable,
    c.column_default as column_default,
    c.is_identity as is_identity,
    c.identity_generation as identity_generation,
    c.identity_start as identity_start,
    c.identity_minimum as identity_minimum,
    c.identity_maximum as identity_maximum,
    c.identity_increment as identity_increment,
    c.identity_cycle as identity_cycle
from information_schema.columns c
join pg_catalog.pg_namespace n on n.nspname = c.table_schema
join pg_catalog.pg_class t on t.relnamespace = n.oid and t.relname = c.table_name
join pg_catalog.pg_attribute a on a.attrelid = t.oid and a.attname = c.column_name
where {filter}
order by c.table_schema, c.table_name, c.ordinal_position
"""

_KEY_CONSTRAINT_QUERY = """
select
    n.nspname as table_schema,
    t.relname as table_name,
    c.conname as constraint_name,
    a.attname as column_name,
    k.ord as position
from pg_catalog.pg_constraint c
join pg_catalog.pg_class t on t.oid = c.conrelid
join pg_catalog.pg_namespace n on n.oid = t.relnamespace
cross join lateral unnest(c.conkey) with ordinality as k(attnum, ord)
join pg_catalog.pg_attribute a on a.attrelid = c.conrelid and a.attnum = k.attnum
where c.contype = '{contype}' and {filter}
order by n.nspname, t.relname, c.conname, k.ord
"""

# expression parts (attnum 0) have no pg_attribute row and drop out of the join
_INDEXES_QUERY = """
select
    n.nspname as table_schema,
    t.relname as table_name,
    i.relname as index_name,
    a.attname as column_name,
    k.ord as position
from pg_catalog.pg_index x
join pg_catalog.pg_class t on t.oid = x.indrelid
join pg_catalog.pg_namespace n on n.oid = t.relnamespace
join pg_catalog.pg_class i on i.oid = x.indexrelid
cross join lateral unnest(x.indkey) with ordinality as k(attnum, ord)
join pg_catalog.pg_attribute a on a.attrelid = t.oid and a.attnum = k.attnum
where k.ord <= x.indnkeyatts and {filter}
order by n.nspname, t.relname, i.relname, k.ord
"""

_FOREIGN_KEYS_QUERY = """
select
    n.nspname as table_schema,
    t.relname as table_name,
    c.conname as constraint_name,
    a.attname as column_name,
    k.ord as position,
    rn.nspname as referenced_schema,
    rt.relname as referenced_table,
    ra.attname as referenced_column_name,
    cast(c.confmatchtype as text) as match_type,
    cast(c.confupdtype as text) as update_rule,
    cast(c.confdeltype as text) as delete_rule
from pg_catalog.pg_constraint c
join pg_catalog.pg_class t on t.oid = c.conrelid
join pg_catalog.pg_namespace n on n.oid = t.relnamespace
join pg_catalog.pg_class rt on rt.oid = c.confrelid
join pg_catalog.pg_namespace rn on rn.oid = rt.relnamespace
cross join lateral unnest(c.conkey, c.confkey) with ordinality as k(attnum, refattnum, ord)
join pg_catalog.pg_attribute a on a.attrelid = c.conrelid and a.attnum = k.attnum
join pg_catalog.pg_attribute ra on ra.attrelid = c.confrelid and ra.attnum = k.refattnum
where c.contype = 'f' and {filter}
order by n.nspname, t.relname, c.conname, k.ord
"""

_CHECKS_QUERY = """
select
    n.nspname as table_schema,
    t.relname as table_name,
    c.conname as constraint_name,
    pg_catalog.pg_get_expr(c.conbin, c.conrelid) as condition
from pg_catalog.pg_constraint c
join pg_catalog.pg_class t on t.oid = c.conrelid
join pg_catalog.pg_namespace n on n.oid = t.relnamespace
where c.contype = 'c' and {filter}
order by n.nspname, t.relname, c.conname
"""

_SEQUENCES_QUERY = """
select
    s.sequence_schema as sequence_schema,
    s.sequence_name as sequence_name,
    s.start_value as start_value,
    s.minimum_value as minimum_value,
    s.maximum_value as maximum_value,
    s.increment as increment,
    s.cycle_option as cycle_option
from information_schema.sequences s
where {filter}
order by s.sequence_schema, s.sequence_name
"""

class PostgresAdapter(DialectAdapter):
    dialect = Dialect.POSTGRES
    check_support = True
    sequence_support = True
    quote_char = '"'
    type_parser = TypeDescriptorParser(
        length_types=("character varying", "character", "bit", "bit varying"),
        exact_numeric_types=("numeric", "decimal"),
    )

    # pg_constraint.confupdtype / confdeltype
    action_codes = {
        "a": ReferentialAction.NO_ACTION,
        "r": ReferentialAction.RESTRICT,
        "c": ReferentialAction.CASCADE,
        "n": ReferentialAction.SET_NULL,
        "d": ReferentialAction.SET_DEFAULT,
    }
    # pg_constraint.confmatchtype
    match_codes = {
        "f": MatchType.FULL,
        "p": MatchType.PARTIAL,
        "s": MatchType.SIMPLE,
    }

    @property
    def default_schema_query(self) -> str:
        return "select current_schema() as schema_name"

    def relation_filter(self, objects: Sequence[ObjectName]) -> Tuple[str, Dict[str, Any]]:
        clauses = []
        params: Dict[str, Any] = {}
        for i, obj in enumerate(objects):
            clauses.append(f"t.oid = pg_catalog.to_regclass(:relation_{i})")
            params[f"relation_{i}"] = self.quote_object_name(obj.qualified)
        return "(" + " or ".join(clauses) + ")", params

    def build_query(self, kind: CatalogKind, objects: Sequence[ObjectName]) -> Tuple[str, Dict[str, Any]]:
        if kind is CatalogKind.COLUMNS:
            where, params = self.object_filter(objects, "n.nspname", "t.relname")
            return _COLUMNS_QUERY.format(filter=where), params
        if kind is CatalogKind.SEQUENCES:
            where, params = self.object_filter(
                objects, "cast(s.sequence_schema as text)", "cast(s.sequence_name as text)"
            )
            return _SEQUENCES_QUERY.format(filter=where), params

        where, params = self.relation_filter(objects)
        if kind is CatalogKind.PRIMARY_KEY:
            return _KEY_CONSTRAINT_QUERY.format(contype="p", filter=where), params
        if kind is CatalogKind.UNIQUE:
            return _KEY_CONSTRAINT_QUERY.format(contype="u", filter=where), params
        if kind is CatalogKind.INDEXES:
            return _INDEXES_QUERY.format(filter=where), params
        if kind is CatalogKind.FOREIGN_KEYS:
            return _FOREIGN_KEYS_QUERY.format(filter=where), params
        if kind is CatalogKind.CHECKS:
            return _CHECKS_QUERY.format(filter=where), params
        raise ValueError(f"Unsupported catalog kind: {kind}")

    def parse_generation(self, value: Any) -> Generation:
        try:
            return Generation(value)
        except ValueError:
            raise CatalogError(f"{self.dialect.value}: unknown identity generation {value!r}")

    def parse_column(self, row: Row) -> Column:
        data_type = row["data_type"]
        if data_type in ("USER-DEFINED", "ARRAY"):
            # information_schema hides the real type; use the formatted one
            details = self.type_parser.parse(column_type=row["column_type"])
        else:
            details = self.type_parser.parse(
                data_type,
                length=optional_int(row["character_maximum_length"]),
                precision=optional_int(row["numeric_precision"]),
                scale=optional_int(row["numeric_scale"]),
            )

        identity = None
        if parse_flag(row["is_identity"]):
            identity = Identity(
                start=str(row["identity_start"]),
                min=str(row["identity_minimum"]),
                max=str(row["identity_maximum"]),
                increment=str(row["identity_increment"]),
                cycle=parse_flag(row["identity_cycle"]),
                generation=self.parse_generation(row["identity_generation"]),
            )

        return Column(
            name=row["column_name"],
            type=row["column_type"],
            details=details,
            nullable=parse_flag(row["is_nullable"]),
            default=row["column_default"],
            identity=identity,
        )
