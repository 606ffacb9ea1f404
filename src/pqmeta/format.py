"""
Mutable records mirroring the footer structs of the Parquet format.

These are what the compact codec reads and writes. Builders fill them in
while a file is written; read views wrap them without ever mutating them.
Optional footer fields are ``None`` when absent from the encoded bytes.
"""

from dataclasses import dataclass, field

from .enums import (
    Compression,
    ConvertedType,
    Encoding,
    Repetition,
    Type,
)


@dataclass
class Statistics:
    max: bytes | None = None
    min: bytes | None = None
    null_count: int | None = None
    distinct_count: int | None = None


@dataclass
class KeyValue:
    key: str
    value: str | None = None


@dataclass
class ColumnMetaData:
    type: Type = Type.BOOLEAN
    encodings: list[Encoding] = field(default_factory=list)
    path_in_schema: list[str] = field(default_factory=list)
    codec: Compression = Compression.UNCOMPRESSED
    num_values: int = 0
    total_uncompressed_size: int = 0
    total_compressed_size: int = 0
    data_page_offset: int = 0
    index_page_offset: int | None = None
    dictionary_page_offset: int | None = None
    statistics: Statistics | None = None


@dataclass
class ColumnChunk:
    file_offset: int = 0
    file_path: str | None = None
    meta_data: ColumnMetaData | None = None


@dataclass
class RowGroup:
    columns: list[ColumnChunk] = field(default_factory=list)
    total_byte_size: int = 0
    num_rows: int = 0


@dataclass
class SchemaElement:
    name: str
    type: Type | None = None
    type_length: int | None = None
    repetition_type: Repetition | None = None
    num_children: int | None = None
    converted_type: ConvertedType | None = None
    scale: int | None = None
    precision: int | None = None
    field_id: int | None = None

    def is_group(self) -> bool:
        return self.num_children is not None


@dataclass
class FileMetaData:
    version: int = 0
    schema: list[SchemaElement] = field(default_factory=list)
    num_rows: int = 0
    row_groups: list[RowGroup] = field(default_factory=list)
    key_value_metadata: list[KeyValue] | None = None
    created_by: str | None = None
