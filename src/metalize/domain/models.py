from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

class Dialect(str, Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"

class HealthStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"

class ConnectionHealth(BaseModel):
    db_alias: str
    status: HealthStatus
    latency_ms: Optional[float] = None
    error_message: Optional[str] = None

class ReferentialAction(str, Enum):
    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"

class MatchType(str, Enum):
    FULL = "FULL"
    PARTIAL = "PARTIAL"
    SIMPLE = "SIMPLE"

class Generation(str, Enum):
    ALWAYS = "ALWAYS"
    BY_DEFAULT = "BY DEFAULT"

class CatalogModel(BaseModel):
    """Immutable snapshot of one catalog object."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

class TypeDetails(CatalogModel):
    """
    Normalized type descriptor: bare type, type + length,
    or type + precision/scale. Never both kinds of modifier.
    """
    type: str
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> "TypeDetails":
        if self.length is not None and (self.precision is not None or self.scale is not None):
            raise ValueError(f"Type '{self.type}' cannot carry both length and precision/scale")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

class SequenceMetadata(CatalogModel):
    # Numeric bounds stay strings: bigint/numeric ranges overflow floats
    start: str
    min: str
    max: str
    increment: str
    cycle: bool

class Identity(SequenceMetadata):
    generation: Generation

class Column(CatalogModel):
    name: str
    type: str
    details: TypeDetails
    nullable: bool
    default: Optional[str] = None
    identity: Optional[Identity] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["details"] = self.details.to_dict()
        return data

class Index(CatalogModel):
    name: str
    columns: List[str] = Field(min_length=1)

class Reference(CatalogModel):
    table: str
    columns: List[str]

class ForeignKey(CatalogModel):
    name: str
    columns: List[str] = Field(min_length=1)
    references: Reference
    match: MatchType = MatchType.SIMPLE
    on_update: ReferentialAction = ReferentialAction.NO_ACTION
    on_delete: ReferentialAction = ReferentialAction.NO_ACTION

    @model_validator(mode="after")
    def _check_correspondence(self) -> "ForeignKey":
        if len(self.columns) != len(self.references.columns):
            raise ValueError(
                f"Foreign key '{self.name}' has {len(self.columns)} columns "
                f"but references {len(self.references.columns)}"
            )
        return self

class Check(CatalogModel):
    name: str
    condition: str

class TableMetadata(CatalogModel):
    columns: List[Column] = Field(min_length=1)
    primary_key: Optional[Index] = None
    unique: List[Index] = Field(default_factory=list)
    indexes: List[Index] = Field(default_factory=list)
    foreign_keys: List[ForeignKey] = Field(default_factory=list)
    # None when the dialect has no check-constraint catalog
    checks: Optional[List[Check]] = None

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["columns"] = [column.to_dict() for column in self.columns]
        if self.checks is None:
            del data["checks"]
        return data

class ReadResult(BaseModel):
    """
    Result of one read() call. A requested object that does not exist
    is present with a None value; objects never requested are absent.
    """
    model_config = ConfigDict(frozen=True)

    tables: Dict[str, Optional[TableMetadata]] = Field(default_factory=dict)
    sequences: Dict[str, Optional[SequenceMetadata]] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": {
                name: table.to_dict() if table is not None else None
                for name, table in self.tables.items()
            },
            "sequences": {
                name: sequence.model_dump() if sequence is not None else None
                for name, sequence in self.sequences.items()
            },
        }
