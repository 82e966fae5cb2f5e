"""
Record introspection.

Turns a dataclass or pydantic model (class or instance) into a
``TypeDescriptor``: the record name plus its fields in declaration order,
each carrying its canonical type name and raw ``db``/``gen`` tags.
Other schema sources (see ``structddl.sheet``) build descriptors directly.
"""
from __future__ import annotations
import dataclasses
import logging
import sys
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
from pydantic import BaseModel
from .errors import UnresolvedTypeError
from .typemap import type_name

logger = logging.getLogger(__name__)

EMBEDDED = "embedded"
# metadata key for the namespace of the function that declared the record
NAMESPACE = "__namespace__"


class Kind(str, Enum):
    RECORD = "record"
    OTHER = "other"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    type_name: str
    embedded: bool = False
    tags: Mapping[str, str] = field(default_factory=dict)
    # descriptor of the embedded type; only set when ``embedded`` is true
    record: Optional["TypeDescriptor"] = None

    def tag(self, key: str) -> str:
        return self.tags.get(key, "")


@dataclass(frozen=True)
class TypeDescriptor:
    name: str
    kind: Kind = Kind.RECORD
    fields: Tuple[FieldDescriptor, ...] = ()


def column(db: str, gen: str = "", **kwargs):
    """dataclasses.field() carrying ``db`` and ``gen`` tags."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata.update({"db": db, "gen": gen})
    return dataclasses.field(metadata=metadata, **kwargs)


def embed(**kwargs):
    """dataclasses.field() marking a record field whose columns are flattened in place."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[EMBEDDED] = True
    namespace = _declaring_namespace()
    if namespace is not None:
        metadata[NAMESPACE] = namespace
    return dataclasses.field(metadata=metadata, **kwargs)


def _declaring_namespace() -> Optional[Dict[str, Any]]:
    """Locals of the function whose body declares the record calling ``embed()``.

    Records declared inside a function can embed other local records; with
    postponed annotations those names are not reachable from the module.
    """
    # 0: here, 1: embed(), 2: the class body
    frame = sys._getframe(2).f_back
    if frame is None or frame.f_locals is frame.f_globals:
        return None
    return dict(frame.f_locals)


def _tags(meta: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    if not meta:
        return {}
    return {str(k): str(v) for k, v in meta.items() if isinstance(v, str)}


def _resolve(cls, f: dataclasses.Field):
    if not isinstance(f.type, str):
        return f.type
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = dict(f.metadata.get(NAMESPACE) or {})
    localns.update(vars(cls))
    localns.setdefault(cls.__name__, cls)
    try:
        return eval(f.type, globalns, localns)
    except (NameError, SyntaxError, TypeError, AttributeError) as e:
        logger.debug("%s.%s: annotation %r left unevaluated: %s", cls.__name__, f.name, f.type, e)
        return f.type


def _hints(cls) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        logger.debug("resolving annotations of %s field by field: %s", cls.__name__, e)
    return {f.name: _resolve(cls, f) for f in dataclasses.fields(cls)}


def _embedded_field(name: str, tp, tags: Dict[str, str]) -> FieldDescriptor:
    return FieldDescriptor(name=name, type_name=type_name(tp), embedded=True, tags=tags, record=describe(tp))


def _describe_dataclass(cls) -> TypeDescriptor:
    hints = _hints(cls)
    fields = []
    for f in dataclasses.fields(cls):
        tp = hints.get(f.name, f.type)
        tags = _tags(f.metadata)
        if f.metadata.get(EMBEDDED):
            if isinstance(tp, str):
                raise UnresolvedTypeError(cls.__name__, f.name, tp)
            fields.append(_embedded_field(f.name, tp, tags))
        else:
            fields.append(FieldDescriptor(name=f.name, type_name=type_name(tp), tags=tags))
    return TypeDescriptor(name=cls.__name__, fields=tuple(fields))


def _describe_pydantic(cls) -> TypeDescriptor:
    fields = []
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        tags = _tags(extra)
        if extra.get(EMBEDDED):
            fields.append(_embedded_field(name, info.annotation, tags))
        else:
            fields.append(FieldDescriptor(name=name, type_name=type_name(info.annotation), tags=tags))
    return TypeDescriptor(name=cls.__name__, fields=tuple(fields))


def describe(record) -> TypeDescriptor:
    """Describe a record given as a class, an instance or a ready descriptor."""
    if isinstance(record, TypeDescriptor):
        return record
    cls = record if isinstance(record, type) else type(record)
    if dataclasses.is_dataclass(cls):
        return _describe_dataclass(cls)
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return _describe_pydantic(cls)
    return TypeDescriptor(name=type_name(cls), kind=Kind.OTHER)
