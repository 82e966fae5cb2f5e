from __future__ import annotations
import csv
import io, zipfile
from typing import Iterable, List
from .models import GeneratedDDL


def _comment_start(line: str) -> int:
    in_s = False
    in_d = False
    for i, ch in enumerate(line):
        if ch == "'" and not in_d:
            in_s = not in_s
        elif ch == '"' and not in_s:
            in_d = not in_d
        elif ch == "-" and not in_s and not in_d and line.startswith("--", i):
            return i
    return -1


def remove_sql_comments(text: str) -> str:
    """Strip single-line '--' comments; '--' inside quoted literals is kept."""
    lines = []
    for line in text.splitlines():
        cut = _comment_start(line)
        if cut >= 0:
            line = line[:cut].rstrip()
        lines.append(line)
    return "\n".join(lines)


def join_statements(items: Iterable[GeneratedDDL]) -> str:
    """One script, statements separated by a blank line."""
    stmts = [it.sql.strip() for it in items if (it.sql or "").strip()]
    return "\n\n".join(stmts) + "\n" if stmts else ""


def bundle_outputs_zip(items: Iterable[GeneratedDDL], validate: bool = True) -> bytes:
    """Grouped outputs (empty groups omitted):

      - bundle/drop.sql                  all DROP TABLE statements
      - bundle/create.sql                all CREATE TABLE statements
      - validation/sqlglot_report.csv    per-statement parse result, when ``validate``
    """
    items = list(items)
    drops: List[GeneratedDDL] = [it for it in items if it.op == "DROP"]
    creates: List[GeneratedDDL] = [it for it in items if it.op == "CREATE"]

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        if drops:
            zf.writestr("bundle/drop.sql", join_statements(drops))
        if creates:
            zf.writestr("bundle/create.sql", join_statements(creates))

        if validate and items:
            from .validation import validate_sql_with_sqlglot
            rep = validate_sql_with_sqlglot(items)
            out = io.StringIO()
            writer = csv.DictWriter(out, fieldnames=["Table", "Op", "Result", "SQL"])
            writer.writeheader()
            for it, r in zip(items, rep):
                writer.writerow({"Table": it.table, "Op": it.op, "Result": r["Result"], "SQL": r["SQL"]})
            zf.writestr("validation/sqlglot_report.csv", out.getvalue())

    buf.seek(0)
    return buf.read()
