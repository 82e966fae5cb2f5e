"""
CREATE TABLE generation for annotated records.

An ``Emitter`` holds dialect settings only; every ``model``/``generate``
call works on a snapshot of them, walks the record's fields (embedded
records flattened in place), parses the ``db``/``gen`` tags and assembles
the statement(s).
"""
from __future__ import annotations
import logging
from typing import Iterator, List, Optional, Tuple
from . import typemap
from .dialects import DialectRules, rules_for
from .errors import EmptyRecordError, UnsupportedColumnTypeError, UnsupportedEmbeddingError, UnsupportedKindError
from .introspect import Kind, TypeDescriptor, describe
from .models import ColumnSpec, EmitterOptions, GeneratedDDL
from .tags import parse_db, parse_gen

logger = logging.getLogger(__name__)

Column = Tuple[str, str]  # (definition, trailer placed after the separator)


def snake(name: str) -> str:
    out = []
    for i, ch in enumerate(name):
        if "A" <= ch <= "Z":
            if i > 0:
                out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def table_name(record_name: str, suffix: str = "Model") -> str:
    """Table name derived from a record name.

    ``suffix`` is a set of characters trimmed from the right (``UserModel``
    gives ``user`` but ``ArticleModel`` gives ``artic``), then CamelCase
    becomes snake_case.
    """
    trimmed = record_name.rstrip(suffix) or record_name
    return snake(trimmed)


def column_type(rules: DialectRules, type_name: str, spec: ColumnSpec) -> Optional[str]:
    if rules.integer_pk_override and spec.pk and spec.ai and typemap.is_integer(type_name):
        return "integer"
    if spec.sql_type:
        if spec.length and spec.decimal:
            return f"{spec.sql_type}({spec.length},{spec.decimal})"
        if spec.length:
            return f"{spec.sql_type}({spec.length})"
        return spec.sql_type
    base = typemap.sql_type_for(type_name)
    if base is None:
        return None
    if typemap.is_float(type_name):
        return f"{base}({spec.length},{spec.decimal or '2'})" if spec.length else base
    if typemap.is_integer(type_name) or typemap.is_string(type_name):
        return f"{base}({spec.length})" if spec.length else base
    return base


def column_definition(rules: DialectRules, name: str, sql_type: str, spec: ColumnSpec) -> str:
    parts = [f"{rules.quote_ident(name)} {sql_type}"]
    if spec.unsigned and rules.supports_unsigned:
        parts.append("UNSIGNED")
    if spec.pk:
        parts.append("PRIMARY KEY")
    if spec.ai:
        parts.append(rules.auto_increment)
    if spec.notnull:
        parts.append("NOT NULL")
    if spec.has_default:
        # present but empty renders as an empty string literal
        parts.append("DEFAULT " + (spec.default or "''"))
    sql = " ".join(parts)
    if spec.comment:
        sql += rules.inline_comment(spec.comment)
    return sql


def assemble(columns: List[Column], wrap: bool) -> str:
    indent = "  " if wrap else ""
    last = len(columns) - 1
    lines = [
        f"{indent}{definition}{',' if i < last else ''}{trailer}"
        for i, (definition, trailer) in enumerate(columns)
    ]
    if wrap:
        return "\n" + "\n".join(lines) + "\n"
    return "".join(lines)


class Emitter:
    """Configurable CREATE TABLE generator (SQLite by default)."""

    def __init__(self, options: Optional[EmitterOptions] = None):
        self._options = options.model_copy() if options is not None else EmitterOptions()

    @classmethod
    def from_options(cls, options: EmitterOptions) -> "Emitter":
        return cls(options)

    @property
    def options(self) -> EmitterOptions:
        return self._options.model_copy()

    @property
    def quote(self) -> str:
        return self._options.quote

    def set_mode(self, mode) -> None:
        # the quote character follows the mode
        self._options.mode = mode

    def set_schema(self, schema: str) -> None:
        self._options.schema_name = schema

    def set_suffix(self, suffix: str) -> None:
        self._options.suffix = suffix

    def set_wrap(self, wrap: bool) -> None:
        self._options.wrap = wrap

    def set_drop(self, drop: bool) -> None:
        self._options.drop = drop

    def model(self, record, table: Optional[str] = None) -> List[str]:
        return [item.sql for item in self.generate(record, table)]

    def generate(self, record, table: Optional[str] = None) -> List[GeneratedDDL]:
        opts = self._options.model_copy()
        rules = rules_for(opts.mode)
        desc = describe(record)

        if desc.kind != Kind.RECORD:
            raise UnsupportedKindError(desc.name, desc.kind.value)
        if not desc.fields:
            raise EmptyRecordError(desc.name)

        columns = list(self._columns(desc, desc.name, rules, opts.wrap))
        if not columns:
            raise EmptyRecordError(desc.name, "has no columns, every field is omitted")

        name = table or table_name(desc.name, opts.suffix)
        ident = rules.qualified(name, opts.schema_name)
        body = assemble(columns, opts.wrap)

        items: List[GeneratedDDL] = []
        if opts.drop:
            items.append(GeneratedDDL(schema_name=opts.schema_name, table=name, op="DROP", mode=opts.mode,
                                      sql=f"DROP TABLE IF EXISTS {ident};"))
        items.append(GeneratedDDL(schema_name=opts.schema_name, table=name, op="CREATE", mode=opts.mode,
                                  sql=f"CREATE TABLE {ident}({body}){rules.table_suffix};"))
        logger.debug("generated %s table %s from %s (%d columns)", opts.mode.value, name, desc.name, len(columns))
        return items

    def _columns(self, desc: TypeDescriptor, record: str, rules: DialectRules, wrap: bool) -> Iterator[Column]:
        for f in desc.fields:
            if f.embedded:
                if f.record is None or f.record.kind != Kind.RECORD:
                    raise UnsupportedEmbeddingError(record, f.name, f.type_name)
                logger.debug("flattening %s into %s", f.record.name, desc.name)
                yield from self._columns(f.record, record, rules, wrap)
                continue

            name = parse_db(f.tag("db"))
            if name is None:
                logger.debug("%s.%s has no column name, skipped", desc.name, f.name)
                continue

            spec = parse_gen(f.tag("gen"))
            sql_type = column_type(rules, f.type_name, spec)
            if sql_type is None:
                raise UnsupportedColumnTypeError(record, f.name, f.type_name)

            trailer = rules.trailing_comment(spec.comment, wrap) if spec.comment else ""
            yield column_definition(rules, name, sql_type, spec), trailer


def new() -> Emitter:
    return Emitter()
