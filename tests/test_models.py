import pytest
from pydantic import ValidationError
from metalize.domain.models import (
    Check,
    Column,
    ForeignKey,
    Index,
    ReadResult,
    Reference,
    TableMetadata,
    TypeDetails,
)

def make_column(name="id"):
    return Column(name=name, type="bigint", details=TypeDetails(type="bigint"), nullable=False)

def test_type_details_rejects_length_with_precision():
    with pytest.raises(ValidationError):
        TypeDetails(type="varchar", length=10, precision=5)

def test_type_details_omits_absent_modifiers():
    assert TypeDetails(type="text").to_dict() == {"type": "text"}

def test_foreign_key_column_counts_must_match():
    with pytest.raises(ValidationError):
        ForeignKey(name="fk", columns=["a", "b"], references=Reference(table="t", columns=["x"]))

def test_foreign_key_defaults():
    fk = ForeignKey(name="fk", columns=["a"], references=Reference(table="t", columns=["x"]))
    assert fk.match == "SIMPLE"
    assert fk.on_update == "NO ACTION"
    assert fk.on_delete == "NO ACTION"

def test_index_needs_a_column():
    with pytest.raises(ValidationError):
        Index(name="idx", columns=[])

def test_table_needs_a_column():
    with pytest.raises(ValidationError):
        TableMetadata(columns=[])

def test_metadata_is_immutable():
    table = TableMetadata(columns=[make_column()])
    with pytest.raises(ValidationError):
        table.primary_key = Index(name="pk", columns=["id"])

def test_table_to_dict_drops_checks_only_when_unsupported():
    without = TableMetadata(columns=[make_column()]).to_dict()
    assert "checks" not in without
    assert without["unique"] == []

    with_checks = TableMetadata(columns=[make_column()], checks=[]).to_dict()
    assert with_checks["checks"] == []

def test_get_column():
    table = TableMetadata(columns=[make_column("id"), make_column("other")])
    assert table.get_column("other").name == "other"
    assert table.get_column("missing") is None

def test_read_result_to_dict():
    result = ReadResult(
        tables={"t": TableMetadata(columns=[make_column()], checks=[Check(name="c", condition="(id > 0)")]), "gone": None},
        sequences={"s": None},
    )
    data = result.to_dict()
    assert data["tables"]["gone"] is None
    assert data["tables"]["t"]["checks"] == [{"name": "c", "condition": "(id > 0)"}]
    assert data["sequences"] == {"s": None}

def test_read_result_is_immutable():
    result = ReadResult(tables={"t": None})
    with pytest.raises(ValidationError):
        result.tables = {}
