"""
Column metadata parsing for Parquet column chunks.

Teaching Points:
- Column chunks are the fundamental storage unit in Parquet row groups
- Each chunk records its codec, encodings, and where its pages start
- Statistics travel as raw bytes; interpreting them needs the column type
- Path in schema connects column chunks back to the logical schema structure
"""

import logging

from pqmeta.enums import Compression, Encoding, Type
from pqmeta.format import ColumnChunk, ColumnMetaData, Statistics
from pqmeta.thrift import ThriftFieldType, ThriftStructParser

from .base import BaseParser, to_enum, to_str
from .enums import (
    ColumnChunkFieldId,
    ColumnMetadataFieldId,
    StatisticsFieldId,
)

logger = logging.getLogger(__name__)


class ColumnParser(BaseParser):
    """Parses ColumnChunk, ColumnMetaData and Statistics structs."""

    def read_column_chunk(self) -> ColumnChunk:
        struct_parser = ThriftStructParser(self.parser)
        chunk = ColumnChunk()

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.STRUCT:
                if field_id == ColumnChunkFieldId.META_DATA:
                    chunk.meta_data = self.read_column_metadata()
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case ColumnChunkFieldId.FILE_PATH:
                    chunk.file_path = to_str(value)
                case ColumnChunkFieldId.FILE_OFFSET:
                    chunk.file_offset = value

        logger.debug('Read column chunk at file offset %d', chunk.file_offset)
        return chunk

    def read_column_metadata(self) -> ColumnMetaData:  # noqa: C901
        struct_parser = ThriftStructParser(self.parser)
        meta = ColumnMetaData()

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.LIST:
                if field_id == ColumnMetadataFieldId.ENCODINGS:
                    meta.encodings = self._read_encodings()
                elif field_id == ColumnMetadataFieldId.PATH_IN_SCHEMA:
                    meta.path_in_schema = self.read_list(self.read_string)
                else:
                    struct_parser.skip_field(field_type)
                continue

            if field_type == ThriftFieldType.STRUCT:
                if field_id == ColumnMetadataFieldId.STATISTICS:
                    meta.statistics = self.read_statistics()
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case ColumnMetadataFieldId.TYPE:
                    meta.type = to_enum(Type, value)
                case ColumnMetadataFieldId.CODEC:
                    meta.codec = to_enum(Compression, value)
                case ColumnMetadataFieldId.NUM_VALUES:
                    meta.num_values = value
                case ColumnMetadataFieldId.TOTAL_UNCOMPRESSED_SIZE:
                    meta.total_uncompressed_size = value
                case ColumnMetadataFieldId.TOTAL_COMPRESSED_SIZE:
                    meta.total_compressed_size = value
                case ColumnMetadataFieldId.DATA_PAGE_OFFSET:
                    meta.data_page_offset = value
                case ColumnMetadataFieldId.INDEX_PAGE_OFFSET:
                    meta.index_page_offset = value
                case ColumnMetadataFieldId.DICTIONARY_PAGE_OFFSET:
                    meta.dictionary_page_offset = value

        return meta

    def _read_encodings(self) -> list[Encoding]:
        # the list only describes the chunk's pages; ids from newer writers
        # are dropped rather than failing the whole footer
        encodings = []
        for value in self.read_list(self.read_i32):
            try:
                encodings.append(Encoding(value))
            except ValueError:
                logger.warning('Ignoring unknown encoding id %d', value)
        return encodings

    def read_statistics(self) -> Statistics:
        """
        Read a Statistics struct.

        min/max stay opaque bytes here. The newer min_value/max_value fields
        land in the same slots as the deprecated min/max ones.
        """
        struct_parser = ThriftStructParser(self.parser)
        stats = Statistics()

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case StatisticsFieldId.MAX | StatisticsFieldId.MAX_VALUE:
                    stats.max = value
                case StatisticsFieldId.MIN | StatisticsFieldId.MIN_VALUE:
                    stats.min = value
                case StatisticsFieldId.NULL_COUNT:
                    stats.null_count = value
                case StatisticsFieldId.DISTINCT_COUNT:
                    stats.distinct_count = value

        return stats
