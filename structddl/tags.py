from __future__ import annotations
from typing import Dict, Optional, Set, Tuple
from .models import ColumnSpec

KNOWN_KEYS = ("type", "length", "decimal", "default", "comment")
KNOWN_FLAGS = ("unsigned", "notnull", "pk", "ai")


def split_gen(tag: str) -> Tuple[Dict[str, str], Set[str]]:
    """Split a ``gen`` tag into its key:value map and bare flag set."""
    kv: Dict[str, str] = {}
    flags: Set[str] = set()
    for token in (tag or "").split(","):
        parts = token.split(":", 1)
        if len(parts) == 2:
            key = parts[0].strip()
            if key:
                kv[key] = parts[1].strip()
        else:
            flag = parts[0].strip()
            if flag:
                flags.add(flag)
    return kv, flags


def _value(kv: Dict[str, str], key: str) -> Optional[str]:
    v = kv.get(key)
    return v if v else None


def parse_gen(tag: str) -> ColumnSpec:
    kv, flags = split_gen(tag)
    return ColumnSpec(
        sql_type=_value(kv, "type"),
        length=_value(kv, "length"),
        decimal=_value(kv, "decimal"),
        # present-but-empty default is meaningful: it renders as ''
        default=kv.get("default"),
        comment=_value(kv, "comment"),
        flags=frozenset(flags),
        options=kv,
    )


def parse_db(tag: str) -> Optional[str]:
    """Column name from a ``db`` tag, or None when the field is omitted."""
    name = (tag or "").split(",", 1)[0].strip()
    if not name or name == "omitempty":
        return None
    return name
