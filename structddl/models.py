from __future__ import annotations
from enum import Enum
from typing import Dict, FrozenSet, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Dialect(str, Enum):
    SQLITE = "sqlite"
    MYSQL = "mysql"


class EmitterOptions(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    mode: Dialect = Dialect.SQLITE
    schema_name: str = ""
    # treated as a set of characters trimmed from the right of the record name
    suffix: str = "Model"
    wrap: bool = True
    drop: bool = False

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, v):
        if isinstance(v, str) and not isinstance(v, Dialect):
            return v.strip().lower()
        return v

    @property
    def quote(self) -> str:
        return "`" if self.mode == Dialect.MYSQL else "'"


class ColumnSpec(BaseModel):
    """Normalized form of a field's ``gen`` tag.

    ``options`` and ``flags`` keep every token that was written, including
    keys and flags nothing acts on yet.
    """

    model_config = ConfigDict(frozen=True)

    sql_type: Optional[str] = None
    length: Optional[str] = None
    decimal: Optional[str] = None
    default: Optional[str] = None
    comment: Optional[str] = None
    flags: FrozenSet[str] = Field(default_factory=frozenset)
    options: Dict[str, str] = Field(default_factory=dict)

    @property
    def unsigned(self) -> bool:
        return "unsigned" in self.flags

    @property
    def notnull(self) -> bool:
        return "notnull" in self.flags

    @property
    def pk(self) -> bool:
        return "pk" in self.flags

    @property
    def ai(self) -> bool:
        return "ai" in self.flags

    @property
    def has_default(self) -> bool:
        return self.default is not None


class GeneratedDDL(BaseModel):
    schema_name: str
    table: str
    op: Literal["DROP", "CREATE"]
    mode: Dialect
    sql: str
