import unittest
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from structddl import Kind, TypeDescriptor, column, describe, embed
from structddl.typemap import Byte, Int8, Rune, Uint64, type_name


@dataclass
class AuditModel:
    created_by: str = column("created_by")


@dataclass
class PostModel:
    id: Uint64 = column("id", "pk")
    audit: AuditModel = embed()
    flags: Int8 = column("flags", "default:0")
    plain: str = field(default="", metadata={"db": "plain", "owner": 7})


class NoteModel(BaseModel):
    id: int = Field(json_schema_extra={"db": "id", "gen": "pk,ai"})
    body: Optional[str] = None


class DescribeTests(unittest.TestCase):
    def test_dataclass_fields_in_order(self):
        desc = describe(PostModel)
        self.assertEqual(desc.name, "PostModel")
        self.assertEqual(desc.kind, Kind.RECORD)
        self.assertEqual([f.name for f in desc.fields], ["id", "audit", "flags", "plain"])
        self.assertEqual([f.type_name for f in desc.fields], ["uint64", "AuditModel", "int8", "string"])

    def test_tags(self):
        desc = describe(PostModel)
        self.assertEqual(desc.fields[0].tag("db"), "id")
        self.assertEqual(desc.fields[0].tag("gen"), "pk")
        self.assertEqual(desc.fields[3].tag("gen"), "")
        # non-string metadata is not a tag
        self.assertEqual(desc.fields[3].tag("owner"), "")

    def test_embedded_field_carries_descriptor(self):
        audit = describe(PostModel).fields[1]
        self.assertTrue(audit.embedded)
        self.assertEqual(audit.record.name, "AuditModel")
        self.assertEqual(audit.record.fields[0].name, "created_by")

    def test_pydantic_model(self):
        desc = describe(NoteModel)
        self.assertEqual(desc.kind, Kind.RECORD)
        self.assertEqual([f.type_name for f in desc.fields], ["int", "Optional[string]"])
        self.assertEqual(desc.fields[0].tag("gen"), "pk,ai")
        self.assertEqual(desc.fields[1].tag("db"), "")

    def test_instance_and_descriptor_inputs(self):
        self.assertEqual(describe(AuditModel(created_by="x")).name, "AuditModel")
        ready = TypeDescriptor(name="Ready")
        self.assertIs(describe(ready), ready)

    def test_other_kinds(self):
        self.assertEqual(describe(3).kind, Kind.OTHER)
        self.assertEqual(describe(dict).kind, Kind.OTHER)


class TypeNameTests(unittest.TestCase):
    def test_builtins(self):
        self.assertEqual(type_name(int), "int")
        self.assertEqual(type_name(float), "float64")
        self.assertEqual(type_name(str), "string")
        self.assertEqual(type_name(bytes), "bytes")
        self.assertEqual(type_name(datetime), "datetime")

    def test_newtype_aliases(self):
        self.assertEqual(type_name(Byte), "byte")
        self.assertEqual(type_name(Rune), "rune")
        self.assertEqual(type_name(Uint64), "uint64")

    def test_optional(self):
        self.assertEqual(type_name(Optional[datetime]), "Optional[datetime]")

    def test_unevaluated_annotations(self):
        self.assertEqual(type_name("str"), "string")
        self.assertEqual(type_name("float"), "float64")
        self.assertEqual(type_name("Int64"), "int64")
        self.assertEqual(type_name("typemap.Uint8"), "uint8")
        self.assertEqual(type_name("datetime.datetime"), "datetime")
        self.assertEqual(type_name("typing.Optional[datetime]"), "Optional[datetime]")
        self.assertEqual(type_name("datetime | None"), "Optional[datetime]")
        self.assertEqual(type_name("None | str"), "Optional[string]")
        # canonical and unknown names pass through
        self.assertEqual(type_name("int32"), "int32")
        self.assertEqual(type_name("Stamps"), "Stamps")

    def test_generic_falls_back_to_repr(self):
        self.assertEqual(type_name(List[int]), str(List[int]))


if __name__ == "__main__":
    unittest.main()
