import pytest
from metalize.dialects import CatalogKind, MySQLAdapter, PostgresAdapter, get_adapter, parse_dialect
from metalize.dialects.quoting import ObjectName
from metalize.domain.models import Dialect, Generation, MatchType, ReferentialAction
from metalize.exceptions import CatalogError, ConfigurationError
from helpers import FakeSession, pg_column, run

USERS = ObjectName("public", "users")
ORDERS = ObjectName("sales", "orders")

def test_parse_dialect_accepts_names_and_enums():
    assert parse_dialect("postgres") is Dialect.POSTGRES
    assert parse_dialect(Dialect.MYSQL) is Dialect.MYSQL

def test_parse_dialect_rejects_unknown():
    with pytest.raises(ConfigurationError) as excinfo:
        parse_dialect("oracle")
    assert "oracle" in str(excinfo.value)

def test_get_adapter_binds_session():
    session = FakeSession()
    adapter = get_adapter("mysql", session)
    assert isinstance(adapter, MySQLAdapter)
    assert adapter.session is session

# --- PostgreSQL ---

def test_postgres_columns_query_filters_each_object_exactly():
    sql, params = PostgresAdapter(FakeSession()).build_query(CatalogKind.COLUMNS, [USERS, ORDERS])
    assert "n.nspname = :schema_0 and t.relname = :name_0" in sql
    assert "n.nspname = :schema_1 and t.relname = :name_1" in sql
    assert params == {"schema_0": "public", "name_0": "users", "schema_1": "sales", "name_1": "orders"}

def test_postgres_constraint_queries_locate_tables_by_quoted_name():
    adapter = PostgresAdapter(FakeSession())
    sql, params = adapter.build_query(CatalogKind.PRIMARY_KEY, [ObjectName("my schema", 'we"ird')])
    assert "contype = 'p'" in sql
    assert "to_regclass(:relation_0)" in sql
    assert params == {"relation_0": '"my schema"."we""ird"'}

    sql, _ = adapter.build_query(CatalogKind.UNIQUE, [USERS])
    assert "contype = 'u'" in sql
    sql, _ = adapter.build_query(CatalogKind.FOREIGN_KEYS, [USERS])
    assert "contype = 'f'" in sql
    sql, _ = adapter.build_query(CatalogKind.CHECKS, [USERS])
    assert "pg_get_expr" in sql

def test_postgres_run_query_skips_empty_object_lists():
    session = FakeSession()
    assert run(PostgresAdapter(session).run_query(CatalogKind.INDEXES, [])) == []
    assert session.queries == []

def test_postgres_default_schema():
    session = FakeSession([("current_schema()", [{"schema_name": "public"}])])
    assert run(PostgresAdapter(session).default_schema()) == "public"

def test_default_schema_missing_is_none():
    session = FakeSession([("database()", [{"schema_name": None}])])
    assert run(MySQLAdapter(session).default_schema()) is None

def test_postgres_parse_column_with_identity():
    row = pg_column(
        "users", "id", 1, "bigint", nullable=False,
        identity={
            "identity_generation": "BY DEFAULT",
            "identity_start": "1",
            "identity_minimum": "1",
            "identity_maximum": "9223372036854775807",
            "identity_increment": "1",
            "identity_cycle": "NO",
        },
    )
    column = PostgresAdapter(FakeSession()).parse_column(row)
    assert column.name == "id"
    assert column.nullable is False
    assert column.default is None
    assert column.identity.generation == Generation.BY_DEFAULT
    assert column.identity.max == "9223372036854775807"
    assert column.identity.cycle is False

def test_postgres_parse_column_with_default():
    row = pg_column("users", "status", 2, "character varying", "character varying(16)",
                    length=16, default="'new'::character varying")
    column = PostgresAdapter(FakeSession()).parse_column(row)
    assert column.type == "character varying(16)"
    assert column.details.to_dict() == {"type": "character varying", "length": 16}
    assert column.default == "'new'::character varying"
    assert column.identity is None

def test_postgres_user_defined_type_uses_formatted_type():
    row = pg_column("users", "mood", 3, "USER-DEFINED", "mood")
    column = PostgresAdapter(FakeSession()).parse_column(row)
    assert column.details.to_dict() == {"type": "mood"}

def test_postgres_unknown_identity_generation_fails():
    row = pg_column("users", "id", 1, "bigint", identity={"identity_generation": "SOMETIMES"})
    with pytest.raises(CatalogError):
        PostgresAdapter(FakeSession()).parse_column(row)

@pytest.mark.parametrize("code, action", [
    ("a", ReferentialAction.NO_ACTION),
    ("r", ReferentialAction.RESTRICT),
    ("c", ReferentialAction.CASCADE),
    ("n", ReferentialAction.SET_NULL),
    ("d", ReferentialAction.SET_DEFAULT),
])
def test_postgres_action_codes(code, action):
    assert PostgresAdapter(FakeSession()).parse_action(code) == action

def test_unknown_action_code_is_catalog_error():
    with pytest.raises(CatalogError):
        PostgresAdapter(FakeSession()).parse_action("x")

def test_postgres_match_codes():
    adapter = PostgresAdapter(FakeSession())
    assert adapter.parse_match("s") == MatchType.SIMPLE
    assert adapter.parse_match("f") == MatchType.FULL
    with pytest.raises(CatalogError):
        adapter.parse_match(None)

def test_postgres_parse_sequence():
    sequence = PostgresAdapter(FakeSession()).parse_sequence({
        "sequence_schema": "public",
        "sequence_name": "users_seq",
        "start_value": "100",
        "minimum_value": "99",
        "maximum_value": "1000",
        "increment": "2",
        "cycle_option": "YES",
    })
    assert sequence.model_dump() == {"start": "100", "min": "99", "max": "1000", "increment": "2", "cycle": True}

# --- MySQL ---

def test_mysql_has_no_check_or_sequence_queries():
    session = FakeSession()
    adapter = MySQLAdapter(session)
    assert run(adapter.run_query(CatalogKind.CHECKS, [USERS])) == []
    assert run(adapter.run_query(CatalogKind.SEQUENCES, [USERS])) == []
    assert session.queries == []

def test_mysql_queries_select_only_parsed_columns():
    adapter = MySQLAdapter(FakeSession())
    columns_sql, _ = adapter.build_query(CatalogKind.COLUMNS, [USERS])
    indexes_sql, _ = adapter.build_query(CatalogKind.INDEXES, [USERS])
    assert "extra" not in columns_sql
    assert "non_unique" not in indexes_sql
    pg_indexes_sql, _ = PostgresAdapter(FakeSession()).build_query(CatalogKind.INDEXES, [USERS])
    assert "indisunique" not in pg_indexes_sql

def test_mysql_build_query_rejects_unsupported_kind():
    with pytest.raises(ValueError):
        MySQLAdapter(FakeSession()).build_query(CatalogKind.SEQUENCES, [USERS])

def test_mysql_key_queries_use_constraint_types():
    adapter = MySQLAdapter(FakeSession())
    sql, params = adapter.build_query(CatalogKind.PRIMARY_KEY, [USERS])
    assert "'PRIMARY KEY'" in sql
    assert params == {"schema_0": "public", "name_0": "users"}
    sql, _ = adapter.build_query(CatalogKind.UNIQUE, [USERS])
    assert "'UNIQUE'" in sql

def test_mysql_run_query_decodes_binary_text():
    session = FakeSession([("information_schema.columns", [{"table_name": b"users", "position": 1}])])
    rows = run(MySQLAdapter(session).run_query(CatalogKind.COLUMNS, [USERS]))
    assert rows == [{"table_name": "users", "position": 1}]

def test_mysql_parse_column():
    column = MySQLAdapter(FakeSession()).parse_column({
        "column_name": "budget",
        "data_type": "decimal",
        "column_type": "decimal(16,3)",
        "character_maximum_length": None,
        "numeric_precision": 16,
        "numeric_scale": 3,
        "is_nullable": "YES",
        "column_default": None,
    })
    assert column.type == "decimal(16,3)"
    assert column.details.to_dict() == {"type": "decimal", "precision": 16, "scale": 3}
    assert column.nullable is True
    assert column.identity is None

def test_mysql_auto_increment_is_not_identity():
    column = MySQLAdapter(FakeSession()).parse_column({
        "column_name": "id",
        "data_type": "bigint",
        "column_type": "bigint",
        "character_maximum_length": None,
        "numeric_precision": 19,
        "numeric_scale": 0,
        "is_nullable": "NO",
        "column_default": None,
    })
    assert column.identity is None
    assert column.details.to_dict() == {"type": "bigint"}

def test_mysql_rule_names():
    adapter = MySQLAdapter(FakeSession())
    assert adapter.parse_action("RESTRICT") == ReferentialAction.RESTRICT
    assert adapter.parse_action("SET NULL") == ReferentialAction.SET_NULL
    assert adapter.parse_match("NONE") == MatchType.SIMPLE
    with pytest.raises(CatalogError):
        adapter.parse_action("r")
