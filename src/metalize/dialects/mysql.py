from typing import Any, Dict, List, Sequence, Tuple
from ..domain.models import Column, Dialect, MatchType, ReferentialAction
from .base import CatalogKind, DialectAdapter, Row, optional_int, parse_flag
from .quoting import ObjectName
from .types import TypeDescriptorParser

# MySQL 8 reports information_schema columns upper-cased unless aliased,
# so every selected column carries an explicit lower-case alias.

_COLUMNS_QUERY = """
select
    c.table_schema as table_schema,
    c.table_name as table_name,
    c.column_name as column_name,
    c.ordinal_position as position,
    c.data_type as data_type,
    c.column_type as column_type,
    c.character_maximum_length as character_maximum_length,
    c.numeric_precision as numeric_precision,
    c.numeric_scale as numeric_scale,
    c.is_nullable as is_nullable,
    c.column_default as column_default
from information_schema.columns c
where {filter}
order by c.table_schema, c.table_name, c.ordinal_position
"""

_KEY_CONSTRAINT_QUERY = """
select
    tc.table_schema as table_schema,
    tc.table_name as table_name,
    tc.constraint_name as constraint_name,
    k.column_name as column_name,
    k.ordinal_position as position
from information_schema.table_constraints tc
join information_schema.key_column_usage k
    on k.constraint_schema = tc.constraint_schema
    and k.constraint_name = tc.constraint_name
    and k.table_schema = tc.table_schema
    and k.table_name = tc.table_name
where tc.constraint_type = '{constraint_type}' and {filter}
order by tc.table_schema, tc.table_name, tc.constraint_name, k.ordinal_position
"""

# functional key parts have a null column_name
_INDEXES_QUERY = """
select
    s.table_schema as table_schema,
    s.table_name as table_name,
    s.index_name as index_name,
    s.column_name as column_name,
    s.seq_in_index as position
from information_schema.statistics s
where s.column_name is not null and {filter}
order by s.table_schema, s.table_name, s.index_name, s.seq_in_index
"""

_FOREIGN_KEYS_QUERY = """
select
    k.table_schema as table_schema,
    k.table_name as table_name,
    k.constraint_name as constraint_name,
    k.column_name as column_name,
    k.ordinal_position as position,
    k.referenced_table_schema as referenced_schema,
    k.referenced_table_name as referenced_table,
    k.referenced_column_name as referenced_column_name,
    rc.match_option as match_type,
    rc.update_rule as update_rule,
    rc.delete_rule as delete_rule
from information_schema.key_column_usage k
join information_schema.referential_constraints rc
    on rc.constraint_schema = k.constraint_schema
    and rc.constraint_name = k.constraint_name
    and rc.table_name = k.table_name
where k.referenced_table_name is not null and {filter}
order by k.table_schema, k.table_name, k.constraint_name, k.ordinal_position
"""

class MySQLAdapter(DialectAdapter):
    """
    MySQL reads everything from information_schema. There is no native
    sequence catalog, and check constraints are not reported, so tables
    come back without a 'checks' field.
    """
    dialect = Dialect.MYSQL
    check_support = False
    sequence_support = False
    quote_char = None
    type_parser = TypeDescriptorParser(
        length_types=("char", "varchar", "binary", "varbinary"),
        exact_numeric_types=("decimal", "numeric"),
    )

    action_codes = {
        "CASCADE": ReferentialAction.CASCADE,
        "RESTRICT": ReferentialAction.RESTRICT,
        "NO ACTION": ReferentialAction.NO_ACTION,
        "SET NULL": ReferentialAction.SET_NULL,
        "SET DEFAULT": ReferentialAction.SET_DEFAULT,
    }
    # InnoDB does not distinguish match types and reports NONE
    match_codes = {
        "NONE": MatchType.SIMPLE,
        "SIMPLE": MatchType.SIMPLE,
        "PARTIAL": MatchType.PARTIAL,
        "FULL": MatchType.FULL,
    }

    @property
    def default_schema_query(self) -> str:
        return "select database() as schema_name"

    async def run_query(self, kind: CatalogKind, objects: Sequence[ObjectName]) -> List[Row]:
        rows = await super().run_query(kind, objects)
        return [{key: _text(value) for key, value in row.items()} for row in rows]

    def build_query(self, kind: CatalogKind, objects: Sequence[ObjectName]) -> Tuple[str, Dict[str, Any]]:
        if kind is CatalogKind.COLUMNS:
            where, params = self.object_filter(objects, "c.table_schema", "c.table_name")
            return _COLUMNS_QUERY.format(filter=where), params
        if kind is CatalogKind.PRIMARY_KEY:
            where, params = self.object_filter(objects, "tc.table_schema", "tc.table_name")
            return _KEY_CONSTRAINT_QUERY.format(constraint_type="PRIMARY KEY", filter=where), params
        if kind is CatalogKind.UNIQUE:
            where, params = self.object_filter(objects, "tc.table_schema", "tc.table_name")
            return _KEY_CONSTRAINT_QUERY.format(constraint_type="UNIQUE", filter=where), params
        if kind is CatalogKind.INDEXES:
            where, params = self.object_filter(objects, "s.table_schema", "s.table_name")
            return _INDEXES_QUERY.format(filter=where), params
        if kind is CatalogKind.FOREIGN_KEYS:
            where, params = self.object_filter(objects, "k.table_schema", "k.table_name")
            return _FOREIGN_KEYS_QUERY.format(filter=where), params
        raise ValueError(f"Unsupported catalog kind: {kind}")

    def parse_column(self, row: Row) -> Column:
        details = self.type_parser.parse(
            row["data_type"],
            length=optional_int(row["character_maximum_length"]),
            precision=optional_int(row["numeric_precision"]),
            scale=optional_int(row["numeric_scale"]),
            column_type=row["column_type"],
        )
        # auto_increment is not reported as identity: it has no generator bounds
        return Column(
            name=row["column_name"],
            type=row["column_type"],
            details=details,
            nullable=parse_flag(row["is_nullable"]),
            default=row["column_default"],
        )

def _text(value: Any) -> Any:
    # some MySQL builds return information_schema text as binary strings
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return value
