from .models import Dialect, EmitterOptions, ColumnSpec, GeneratedDDL
from .emitter import Emitter, new, table_name
from .introspect import FieldDescriptor, Kind, TypeDescriptor, column, describe, embed
from .errors import (DDLError, EmptyRecordError, SheetFormatError, UnsupportedColumnTypeError,
                     UnsupportedEmbeddingError, UnsupportedKindError, UnresolvedTypeError)
from .tags import parse_db, parse_gen
from .sheet import describe_sheet, load_schema_dataframe, load_schema_sheet
from .utils import bundle_outputs_zip, join_statements, remove_sql_comments
from .validation import validate_sql_with_sqlglot
__all__ = ["Dialect","EmitterOptions","ColumnSpec","GeneratedDDL","Emitter","new","table_name",
           "FieldDescriptor","Kind","TypeDescriptor","column","describe","embed",
           "DDLError","EmptyRecordError","SheetFormatError","UnsupportedColumnTypeError",
           "UnsupportedEmbeddingError","UnsupportedKindError","UnresolvedTypeError","parse_db","parse_gen",
           "describe_sheet","load_schema_dataframe","load_schema_sheet",
           "bundle_outputs_zip","join_statements","remove_sql_comments","validate_sql_with_sqlglot"]
