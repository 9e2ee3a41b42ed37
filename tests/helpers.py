import asyncio
from typing import Any, Dict, List, Optional, Sequence, Tuple

def run(coro):
    return asyncio.run(coro)

class FakeSession:
    """
    Stands in for the connector: records every query and answers it with the
    rows of the first (sql fragment, rows) pair whose fragment occurs in the SQL.
    """
    def __init__(self, responses: Sequence[Tuple[str, List[Dict[str, Any]]]] = ()):
        self.responses = list(responses)
        self.queries: List[Tuple[str, Dict[str, Any]]] = []

    async def connect(self) -> None:
        pass

    async def query(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        self.queries.append((sql, dict(params or {})))
        for fragment, rows in self.responses:
            if fragment in sql:
                return [dict(row) for row in rows]
        return []

    async def end_connection(self) -> None:
        pass

def pg_column(
    table: str,
    name: str,
    position: int,
    data_type: str,
    column_type: Optional[str] = None,
    length: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    nullable: bool = True,
    default: Optional[str] = None,
    schema: str = "public",
    identity: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    row = {
        "table_schema": schema,
        "table_name": table,
        "column_name": name,
        "position": position,
        "data_type": data_type,
        "column_type": column_type or data_type,
        "character_maximum_length": length,
        "numeric_precision": precision,
        "numeric_scale": scale,
        "is_nullable": "YES" if nullable else "NO",
        "column_default": default,
        "is_identity": "NO",
        "identity_generation": None,
        "identity_start": None,
        "identity_minimum": None,
        "identity_maximum": None,
        "identity_increment": None,
        "identity_cycle": "NO",
    }
    if identity:
        row["is_identity"] = "YES"
        row.update(identity)
    return row

def key_part(table: str, constraint: str, column: str, position: int, schema: str = "public") -> Dict[str, Any]:
    return {
        "table_schema": schema,
        "table_name": table,
        "constraint_name": constraint,
        "column_name": column,
        "position": position,
    }

def index_part(table: str, index: str, column: str, position: int, schema: str = "public") -> Dict[str, Any]:
    return {
        "table_schema": schema,
        "table_name": table,
        "index_name": index,
        "column_name": column,
        "position": position,
    }

def fk_part(
    table: str,
    constraint: str,
    column: str,
    referenced_column: str,
    position: int,
    referenced_table: str,
    referenced_schema: str = "public",
    match_type: str = "s",
    update_rule: str = "a",
    delete_rule: str = "a",
    schema: str = "public",
) -> Dict[str, Any]:
    return {
        "table_schema": schema,
        "table_name": table,
        "constraint_name": constraint,
        "column_name": column,
        "position": position,
        "referenced_schema": referenced_schema,
        "referenced_table": referenced_table,
        "referenced_column_name": referenced_column,
        "match_type": match_type,
        "update_rule": update_rule,
        "delete_rule": delete_rule,
    }
