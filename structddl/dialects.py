from __future__ import annotations
from dataclasses import dataclass
from typing import Dict
from .models import Dialect


def _quote_literal(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] == "'":
        return text
    return "'" + text.replace("'", "''") + "'"


@dataclass(frozen=True)
class DialectRules:
    name: Dialect
    quote: str
    auto_increment: str
    table_suffix: str
    supports_unsigned: bool
    # SQLite only honours AUTOINCREMENT on an INTEGER PRIMARY KEY column
    integer_pk_override: bool
    # COMMENT clause inside the column definition, otherwise an SQL comment after it
    inline_comments: bool

    def quote_ident(self, ident: str) -> str:
        return f"{self.quote}{ident}{self.quote}"

    def qualified(self, table: str, schema: str = "") -> str:
        tb = self.quote_ident(table)
        return f"{self.quote_ident(schema)}.{tb}" if schema else tb

    def inline_comment(self, text: str) -> str:
        if not self.inline_comments:
            return ""
        return f" COMMENT {_quote_literal(text)}"

    def trailing_comment(self, text: str, wrap: bool) -> str:
        """Comment placed after the column's separator; block form keeps a single line valid."""
        if self.inline_comments:
            return ""
        return f" -- {text}" if wrap else f" /* {text} */"


SQLITE = DialectRules(
    name=Dialect.SQLITE,
    quote="'",
    auto_increment="AUTOINCREMENT",
    table_suffix="",
    supports_unsigned=False,
    integer_pk_override=True,
    inline_comments=False,
)

MYSQL = DialectRules(
    name=Dialect.MYSQL,
    quote="`",
    auto_increment="AUTO_INCREMENT",
    table_suffix=" ENGINE=InnoDB AUTO_INCREMENT=0 DEFAULT CHARSET=utf8mb4",
    supports_unsigned=True,
    integer_pk_override=False,
    inline_comments=True,
)

RULES: Dict[Dialect, DialectRules] = {SQLITE.name: SQLITE, MYSQL.name: MYSQL}


def rules_for(mode) -> DialectRules:
    return RULES[Dialect(mode)]
