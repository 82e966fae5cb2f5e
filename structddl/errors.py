from __future__ import annotations
from typing import Optional


class DDLError(Exception):
    """Base class for every failure raised while building DDL for a record."""

    def __init__(self, record: str, message: str):
        self.record = record
        super().__init__(message)


class UnsupportedKindError(DDLError):
    def __init__(self, record: str, kind: str):
        self.kind = kind
        super().__init__(record, f"unsupported type {record} (kind {kind}), only records are supported")


class EmptyRecordError(DDLError):
    def __init__(self, record: str, reason: str = "has no fields"):
        super().__init__(record, f"record {record} {reason}")


class UnsupportedColumnTypeError(DDLError):
    def __init__(self, record: str, field: str, type_name: str):
        self.field = field
        self.type_name = type_name
        super().__init__(record, f"record {record}: field {field}: unsupported column type {type_name}")


class UnsupportedEmbeddingError(DDLError):
    def __init__(self, record: str, field: str, type_name: str):
        self.field = field
        self.type_name = type_name
        super().__init__(record, f"record {record}: field {field}: cannot embed non-record type {type_name}")


class UnresolvedTypeError(DDLError):
    def __init__(self, record: str, field: str, type_name: str):
        self.field = field
        self.type_name = type_name
        super().__init__(record, f"record {record}: field {field}: cannot resolve type {type_name}")


class SheetFormatError(ValueError):
    def __init__(self, missing, sheet: Optional[str] = None):
        self.missing = list(missing)
        where = f" in sheet {sheet}" if sheet else ""
        super().__init__(f"schema sheet{where} is missing required columns: {', '.join(self.missing)}")
