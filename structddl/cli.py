"""
structddl command line.

  structddl model myapp.models:UserModel --mode mysql --drop
  structddl sheet schema.xlsx --out-dir out --bundle
"""
from __future__ import annotations
import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional
from .emitter import Emitter
from .errors import DDLError, SheetFormatError
from .models import EmitterOptions, GeneratedDDL
from .sheet import load_schema_sheet
from .utils import bundle_outputs_zip, join_statements
from .validation import validate_sql_with_sqlglot

logger = logging.getLogger(__name__)


def load_target(ref: str):
    """Import ``package.module:Name``."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"expected MODULE:NAME, got {ref!r}")
    obj = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj


def _emitter(args) -> Emitter:
    return Emitter(EmitterOptions(
        mode=args.mode,
        schema_name=args.schema,
        suffix=args.suffix,
        wrap=not args.no_wrap,
        drop=args.drop,
    ))


def _report(items: List[GeneratedDDL], fail_on_error: bool) -> None:
    rep = validate_sql_with_sqlglot(items)
    errs = [(it, r) for it, r in zip(items, rep) if r["Result"] != "OK"]
    if not errs:
        print(f"[validate] OK ({len(items)} statements)")
        return
    print("VALIDATION ERRORS:")
    for it, _ in errs:
        print(f" - {it.op} {it.table}")
    if fail_on_error:
        raise SystemExit(2)


def cmd_model(args) -> None:
    try:
        target = load_target(args.target)
    except (ValueError, ImportError, AttributeError) as e:
        logger.debug("loading %s failed", args.target, exc_info=True)
        print(f"ERROR: cannot load {args.target}: {e}")
        raise SystemExit(2)
    items = _emitter(args).generate(target, args.table)
    sql = join_statements(items)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(sql, encoding="utf-8")
        print(f"[OK] wrote {out}")
    else:
        sys.stdout.write(sql)
    if args.validate:
        _report(items, args.fail_on_error)


def cmd_sheet(args) -> None:
    path = Path(args.file)
    records = load_schema_sheet(path.read_bytes(), path.name, args.sheet)
    wanted = args.record or list(records)
    unknown = [r for r in wanted if r not in records]
    if unknown:
        print(f"ERROR: unknown record(s) in {path.name}: {', '.join(unknown)}")
        raise SystemExit(2)

    emitter = _emitter(args)
    items: List[GeneratedDDL] = []
    for name in wanted:
        items.extend(emitter.generate(records[name]))
    sql = join_statements(items)

    if args.out_dir:
        out_dir = Path(args.out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / "00_all.sql").write_text(sql, encoding="utf-8")
        print(f"[OK] wrote {out_dir / '00_all.sql'}")
        if args.bundle:
            (out_dir / "sql_bundle.zip").write_bytes(bundle_outputs_zip(items, validate=args.validate))
            print(f"[OK] wrote {out_dir / 'sql_bundle.zip'}")
    else:
        sys.stdout.write(sql)
    if args.validate:
        _report(items, args.fail_on_error)


def _add_emitter_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--mode", default="sqlite", choices=["sqlite", "mysql"], help="SQL dialect")
    ap.add_argument("--schema", default="", help="Qualify tables as schema.table")
    ap.add_argument("--suffix", default="Model", help="Characters trimmed from the right of record names")
    ap.add_argument("--no-wrap", action="store_true", help="Emit each CREATE TABLE on a single line")
    ap.add_argument("--drop", action="store_true", help="Precede each CREATE TABLE with DROP TABLE IF EXISTS")
    ap.add_argument("--validate", action="store_true", help="Parse the generated DDL with sqlglot")
    ap.add_argument("--fail-on-error", action="store_true", help="Exit non-zero if validation fails")


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="structddl", description="CREATE TABLE DDL from annotated records")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_m = sub.add_parser("model", help="DDL for a dataclass or pydantic model")
    ap_m.add_argument("target", help="MODULE:CLASS")
    ap_m.add_argument("--table", default=None, help="Table name (derived from the class name if omitted)")
    ap_m.add_argument("--out", default=None, help="Write the DDL to this file")
    _add_emitter_args(ap_m)
    ap_m.set_defaults(func=cmd_model)

    ap_s = sub.add_parser("sheet", help="DDL for every record of a CSV/XLSX schema sheet")
    ap_s.add_argument("file")
    ap_s.add_argument("--sheet", default=None, help="XLSX sheet name")
    ap_s.add_argument("--record", action="append", default=None, help="Only this record (repeatable)")
    ap_s.add_argument("--out-dir", default=None, help="Write 00_all.sql here")
    ap_s.add_argument("--bundle", action="store_true", help="Also write sql_bundle.zip to --out-dir")
    _add_emitter_args(ap_s)
    ap_s.set_defaults(func=cmd_sheet)
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except (DDLError, SheetFormatError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"ERROR: {e}")
        raise SystemExit(2)


if __name__ == "__main__":
    main()
