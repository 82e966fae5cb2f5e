from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional
import sqlglot
from sqlglot.errors import SqlglotError
from .models import GeneratedDDL
from .utils import remove_sql_comments

logger = logging.getLogger(__name__)


def validate_sql_with_sqlglot(items: Iterable[GeneratedDDL], read_dialect: Optional[str] = None) -> List[Dict[str, str]]:
    """Parse every statement with sqlglot, in the dialect it was generated for unless overridden."""
    report: List[Dict[str, str]] = []
    for it in items:
        sqltxt = it.sql.strip()
        dialect = read_dialect or it.mode.value
        result = "OK"
        rendered = sqltxt
        try:
            node = sqlglot.parse_one(remove_sql_comments(sqltxt).rstrip().rstrip(";"), read=dialect)
            rendered = node.sql(dialect=dialect)
        except SqlglotError as e:
            logger.debug("%s %s did not parse as %s: %s", it.op, it.table, dialect, e)
            result = "ERROR"
        report.append({"Result": result, "SQL": rendered})
    return report
