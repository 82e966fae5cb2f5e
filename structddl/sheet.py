"""
Schema sheets: records described as rows of a CSV/XLSX table.

One row per field with the columns ``Record``, ``Field``, ``Type`` and
optionally ``Db``, ``Gen`` and ``Embedded``. An embedded row's ``Type``
names another record of the same sheet.
"""
from __future__ import annotations
import io, re
import logging
from typing import Dict, List, Optional
import chardet
import pandas as pd
from .errors import SheetFormatError
from .introspect import EMBEDDED, FieldDescriptor, Kind, TypeDescriptor

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("record", "field", "type")
_TRUTHY = {"y", "yes", "true", "1", "x"}


def _norm(s: str) -> str:
    return re.sub(r'[^a-z0-9]+', '_', str(s).strip().lower()).strip('_')


def _cell(row, col: Optional[str]) -> str:
    if col is None:
        return ""
    v = row.get(col, "")
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return ""
    s = str(v).strip()
    return "" if s.lower() == "nan" else s


def load_schema_dataframe(data: bytes, filename: str, sheet: Optional[str] = None) -> pd.DataFrame:
    if filename.lower().endswith('.xlsx'):
        xls = pd.ExcelFile(io.BytesIO(data), engine="openpyxl")
        if sheet and sheet in xls.sheet_names:
            use = sheet
        elif "Schema" in xls.sheet_names:
            use = "Schema"
        else:
            use = xls.sheet_names[0]
        logger.debug("reading sheet %s of %s", use, filename)
        return xls.parse(use, dtype=str)
    enc = chardet.detect(data).get('encoding') or 'utf-8'
    return pd.read_csv(io.StringIO(data.decode(enc)), dtype=str, keep_default_na=False)


def describe_sheet(df: pd.DataFrame) -> Dict[str, TypeDescriptor]:
    """Build one descriptor per record named in the sheet, in first-seen order."""
    cols = {_norm(c): c for c in df.columns}
    missing = [c for c in REQUIRED_COLUMNS if c not in cols]
    if missing:
        raise SheetFormatError(missing)

    rows: Dict[str, List[dict]] = {}
    for _, r in df.iterrows():
        record = _cell(r, cols["record"])
        fname = _cell(r, cols["field"])
        if not record or not fname:
            continue
        rows.setdefault(record, []).append({
            "name": fname,
            "type": _cell(r, cols["type"]),
            "db": _cell(r, cols.get("db")),
            "gen": _cell(r, cols.get("gen")),
            EMBEDDED: _cell(r, cols.get(EMBEDDED)).lower() in _TRUTHY,
        })

    built: Dict[str, TypeDescriptor] = {}

    def build(record: str, stack: tuple) -> TypeDescriptor:
        if record in built:
            return built[record]
        if record not in rows or record in stack:
            return TypeDescriptor(name=record, kind=Kind.OTHER)
        fields = []
        for row in rows[record]:
            tags = {"db": row["db"], "gen": row["gen"]}
            if row[EMBEDDED]:
                sub = build(row["type"], stack + (record,))
                fields.append(FieldDescriptor(name=row["name"], type_name=row["type"], embedded=True, tags=tags, record=sub))
            else:
                fields.append(FieldDescriptor(name=row["name"], type_name=row["type"], tags=tags))
        built[record] = TypeDescriptor(name=record, fields=tuple(fields))
        return built[record]

    for record in rows:
        build(record, ())
    logger.debug("sheet describes %d records", len(built))
    return built


def load_schema_sheet(data: bytes, filename: str, sheet: Optional[str] = None) -> Dict[str, TypeDescriptor]:
    return describe_sheet(load_schema_dataframe(data, filename, sheet))
