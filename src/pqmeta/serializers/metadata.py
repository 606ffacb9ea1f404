"""
Encoding of footer records into compact Thrift bytes.

Each ``write_*`` method emits one struct: its fields in ascending id order,
optional fields only when set, then the stop byte.
"""

import logging

from pqmeta.format import (
    ColumnChunk,
    ColumnMetaData,
    FileMetaData,
    KeyValue,
    RowGroup,
    SchemaElement,
    Statistics,
)
from pqmeta.parsers.enums import (
    ColumnChunkFieldId,
    ColumnMetadataFieldId,
    FileMetadataFieldId,
    KeyValueFieldId,
    RowGroupFieldId,
    SchemaElementFieldId,
    StatisticsFieldId,
)
from pqmeta.thrift import ThriftCompactWriter, ThriftFieldType, ThriftStructWriter

logger = logging.getLogger(__name__)


class MetadataSerializer:
    def __init__(self) -> None:
        self.writer = ThriftCompactWriter()

    def serialize(self, metadata: FileMetaData) -> bytes:
        self.write_file_metadata(metadata)
        data = self.writer.getvalue()
        logger.debug(
            'Serialized FileMetaData: %d bytes, %d row groups, %d schema elements',
            len(data),
            len(metadata.row_groups),
            len(metadata.schema),
        )
        return data

    def write_file_metadata(self, metadata: FileMetaData) -> None:
        struct_writer = ThriftStructWriter(self.writer)
        struct_writer.write_i32(FileMetadataFieldId.VERSION, metadata.version)
        struct_writer.write_list(
            FileMetadataFieldId.SCHEMA,
            ThriftFieldType.STRUCT,
            metadata.schema,
            self.write_schema_element,
        )
        struct_writer.write_i64(FileMetadataFieldId.NUM_ROWS, metadata.num_rows)
        struct_writer.write_list(
            FileMetadataFieldId.ROW_GROUPS,
            ThriftFieldType.STRUCT,
            metadata.row_groups,
            self.write_row_group,
        )
        if metadata.key_value_metadata is not None:
            struct_writer.write_list(
                FileMetadataFieldId.KEY_VALUE_METADATA,
                ThriftFieldType.STRUCT,
                metadata.key_value_metadata,
                self.write_key_value,
            )
        if metadata.created_by is not None:
            struct_writer.write_string(
                FileMetadataFieldId.CREATED_BY,
                metadata.created_by,
            )
        struct_writer.write_stop()

    def write_schema_element(self, element: SchemaElement) -> None:
        struct_writer = ThriftStructWriter(self.writer)
        if element.type is not None:
            struct_writer.write_i32(SchemaElementFieldId.TYPE, element.type)
        if element.type_length is not None:
            struct_writer.write_i32(
                SchemaElementFieldId.TYPE_LENGTH,
                element.type_length,
            )
        if element.repetition_type is not None:
            struct_writer.write_i32(
                SchemaElementFieldId.REPETITION_TYPE,
                element.repetition_type,
            )
        struct_writer.write_string(SchemaElementFieldId.NAME, element.name)
        if element.num_children is not None:
            struct_writer.write_i32(
                SchemaElementFieldId.NUM_CHILDREN,
                element.num_children,
            )
        if element.converted_type is not None:
            struct_writer.write_i32(
                SchemaElementFieldId.CONVERTED_TYPE,
                element.converted_type,
            )
        if element.scale is not None:
            struct_writer.write_i32(SchemaElementFieldId.SCALE, element.scale)
        if element.precision is not None:
            struct_writer.write_i32(SchemaElementFieldId.PRECISION, element.precision)
        if element.field_id is not None:
            struct_writer.write_i32(SchemaElementFieldId.FIELD_ID, element.field_id)
        struct_writer.write_stop()

    def write_row_group(self, row_group: RowGroup) -> None:
        struct_writer = ThriftStructWriter(self.writer)
        struct_writer.write_list(
            RowGroupFieldId.COLUMNS,
            ThriftFieldType.STRUCT,
            row_group.columns,
            self.write_column_chunk,
        )
        struct_writer.write_i64(
            RowGroupFieldId.TOTAL_BYTE_SIZE,
            row_group.total_byte_size,
        )
        struct_writer.write_i64(RowGroupFieldId.NUM_ROWS, row_group.num_rows)
        struct_writer.write_stop()

    def write_column_chunk(self, chunk: ColumnChunk) -> None:
        struct_writer = ThriftStructWriter(self.writer)
        if chunk.file_path is not None:
            struct_writer.write_string(ColumnChunkFieldId.FILE_PATH, chunk.file_path)
        struct_writer.write_i64(ColumnChunkFieldId.FILE_OFFSET, chunk.file_offset)
        if chunk.meta_data is not None:
            meta_data = chunk.meta_data
            struct_writer.write_struct(
                ColumnChunkFieldId.META_DATA,
                lambda: self.write_column_metadata(meta_data),
            )
        struct_writer.write_stop()

    def write_column_metadata(self, meta: ColumnMetaData) -> None:
        struct_writer = ThriftStructWriter(self.writer)
        struct_writer.write_i32(ColumnMetadataFieldId.TYPE, meta.type)
        struct_writer.write_list(
            ColumnMetadataFieldId.ENCODINGS,
            ThriftFieldType.I32,
            meta.encodings,
            self.writer.write_i32,
        )
        struct_writer.write_list(
            ColumnMetadataFieldId.PATH_IN_SCHEMA,
            ThriftFieldType.BINARY,
            meta.path_in_schema,
            self.writer.write_string,
        )
        struct_writer.write_i32(ColumnMetadataFieldId.CODEC, meta.codec)
        struct_writer.write_i64(ColumnMetadataFieldId.NUM_VALUES, meta.num_values)
        struct_writer.write_i64(
            ColumnMetadataFieldId.TOTAL_UNCOMPRESSED_SIZE,
            meta.total_uncompressed_size,
        )
        struct_writer.write_i64(
            ColumnMetadataFieldId.TOTAL_COMPRESSED_SIZE,
            meta.total_compressed_size,
        )
        struct_writer.write_i64(
            ColumnMetadataFieldId.DATA_PAGE_OFFSET,
            meta.data_page_offset,
        )
        if meta.index_page_offset is not None:
            struct_writer.write_i64(
                ColumnMetadataFieldId.INDEX_PAGE_OFFSET,
                meta.index_page_offset,
            )
        if meta.dictionary_page_offset is not None:
            struct_writer.write_i64(
                ColumnMetadataFieldId.DICTIONARY_PAGE_OFFSET,
                meta.dictionary_page_offset,
            )
        if meta.statistics is not None:
            statistics = meta.statistics
            struct_writer.write_struct(
                ColumnMetadataFieldId.STATISTICS,
                lambda: self.write_statistics(statistics),
            )
        struct_writer.write_stop()

    def write_statistics(self, stats: Statistics) -> None:
        struct_writer = ThriftStructWriter(self.writer)
        if stats.max is not None:
            struct_writer.write_bytes(StatisticsFieldId.MAX, stats.max)
        if stats.min is not None:
            struct_writer.write_bytes(StatisticsFieldId.MIN, stats.min)
        if stats.null_count is not None:
            struct_writer.write_i64(StatisticsFieldId.NULL_COUNT, stats.null_count)
        if stats.distinct_count is not None:
            struct_writer.write_i64(
                StatisticsFieldId.DISTINCT_COUNT,
                stats.distinct_count,
            )
        struct_writer.write_stop()

    def write_key_value(self, key_value: KeyValue) -> None:
        struct_writer = ThriftStructWriter(self.writer)
        struct_writer.write_string(KeyValueFieldId.KEY, key_value.key)
        if key_value.value is not None:
            struct_writer.write_string(KeyValueFieldId.VALUE, key_value.value)
        struct_writer.write_stop()
