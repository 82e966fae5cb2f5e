import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

import pandas as pd

from structddl import (
    Dialect,
    Emitter,
    EmitterOptions,
    Kind,
    SheetFormatError,
    UnsupportedEmbeddingError,
    describe_sheet,
    load_schema_dataframe,
    load_schema_sheet,
)

ROWS = [
    {"Record": "ArticleModel", "Field": "Id", "Type": "int64", "Db": "id", "Gen": "pk,ai", "Embedded": ""},
    {"Record": "ArticleModel", "Field": "Timestamps", "Type": "TimestampsModel", "Db": "", "Gen": "", "Embedded": "Y"},
    {"Record": "ArticleModel", "Field": "Title", "Type": "string", "Db": "title", "Gen": "length:64,notnull", "Embedded": ""},
    {"Record": "TimestampsModel", "Field": "Created", "Type": "datetime", "Db": "created", "Gen": "", "Embedded": ""},
    {"Record": "TimestampsModel", "Field": "Updated", "Type": "Optional[datetime]", "Db": "updated", "Gen": "", "Embedded": ""},
]

EXPECTED_ARTICLE = (
    "CREATE TABLE `artic`(\n"
    "  `id` bigint PRIMARY KEY AUTO_INCREMENT,\n"
    "  `created` datetime,\n"
    "  `updated` datetime,\n"
    "  `title` varchar(64) NOT NULL\n"
    ") ENGINE=InnoDB AUTO_INCREMENT=0 DEFAULT CHARSET=utf8mb4;"
)


def _mysql():
    return Emitter(EmitterOptions(mode=Dialect.MYSQL))


class DescribeSheetTests(unittest.TestCase):
    def test_records_in_sheet_order(self):
        records = describe_sheet(pd.DataFrame(ROWS))
        self.assertEqual(list(records), ["ArticleModel", "TimestampsModel"])
        article = records["ArticleModel"]
        self.assertEqual([f.name for f in article.fields], ["Id", "Timestamps", "Title"])
        self.assertTrue(article.fields[1].embedded)
        self.assertIs(article.fields[1].record, records["TimestampsModel"])

    def test_generates_flattened_table(self):
        records = describe_sheet(pd.DataFrame(ROWS))
        self.assertEqual(_mysql().model(records["ArticleModel"]), [EXPECTED_ARTICLE])

    def test_headers_are_normalized(self):
        df = pd.DataFrame([{" record ": "UserModel", "FIELD": "Name", "Type": "string", "DB": "name"}])
        records = describe_sheet(df)
        self.assertEqual(records["UserModel"].fields[0].tag("db"), "name")
        self.assertEqual(records["UserModel"].fields[0].tag("gen"), "")

    def test_missing_columns(self):
        with self.assertRaises(SheetFormatError) as ctx:
            describe_sheet(pd.DataFrame([{"Record": "UserModel", "Db": "id"}]))
        self.assertEqual(ctx.exception.missing, ["field", "type"])

    def test_unknown_embedded_record(self):
        df = pd.DataFrame([
            {"Record": "PostModel", "Field": "Id", "Type": "int", "Db": "id", "Embedded": ""},
            {"Record": "PostModel", "Field": "Meta", "Type": "MetaModel", "Db": "", "Embedded": "yes"},
        ])
        post = describe_sheet(df)["PostModel"]
        self.assertEqual(post.fields[1].record.kind, Kind.OTHER)
        with self.assertRaises(UnsupportedEmbeddingError) as ctx:
            _mysql().model(post)
        self.assertEqual(ctx.exception.record, "PostModel")
        self.assertEqual(ctx.exception.type_name, "MetaModel")


class LoadSheetTests(unittest.TestCase):
    def test_csv_bytes(self):
        data = pd.DataFrame(ROWS).to_csv(index=False).encode("utf-8")
        records = load_schema_sheet(data, "schema.csv")
        self.assertEqual(_mysql().model(records["ArticleModel"]), [EXPECTED_ARTICLE])

    def test_xlsx_prefers_schema_sheet(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "schema.xlsx"
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                pd.DataFrame([{"Notes": "ignored"}]).to_excel(writer, sheet_name="Notes", index=False)
                pd.DataFrame(ROWS).to_excel(writer, sheet_name="Schema", index=False)

            df = load_schema_dataframe(path.read_bytes(), path.name)
            self.assertIn("Record", df.columns)
            records = describe_sheet(df)
            self.assertEqual(_mysql().model(records["ArticleModel"]), [EXPECTED_ARTICLE])

    def test_xlsx_named_sheet(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "schema.xlsx"
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                pd.DataFrame(ROWS).to_excel(writer, sheet_name="Tables", index=False)
                pd.DataFrame([{"Other": 1}]).to_excel(writer, sheet_name="Schema", index=False)

            records = load_schema_sheet(path.read_bytes(), path.name, sheet="Tables")
            self.assertIn("ArticleModel", records)


if __name__ == "__main__":
    unittest.main()
