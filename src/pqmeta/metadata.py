"""
Read-only views over a decoded footer.

Teaching Points:
- A FileMetadata owns the decoded footer record and the schema derived from it
- Row group and column chunk views are created on request, never up front
- Views borrow the record; nothing here ever writes to it
- Every view of the same file shares one SchemaDescriptor instance
"""

from __future__ import annotations

import logging

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ConfigDict

from .enums import Compression, Encoding, Type
from .exceptions import OutOfRangeError
from .format import ColumnChunk, ColumnMetaData, FileMetaData, RowGroup
from .parsers import MetadataParser
from .schema import ColumnPath, SchemaDescriptor, convert_flat_schema
from .serialization import unstructure_file_metadata
from .serializers import MetadataSerializer

if TYPE_CHECKING:
    from .protocols import Writable

logger = logging.getLogger(__name__)


class ColumnStatistics(BaseModel):
    """Chunk statistics; min and max are the raw encoded values."""

    model_config = ConfigDict(frozen=True)

    null_count: int | None = None
    distinct_count: int | None = None
    min: bytes | None = None
    max: bytes | None = None


class ColumnChunkMetadata:
    """Accessors for one column chunk of one row group."""

    def __init__(self, column: ColumnChunk):
        self._column = column
        self._meta_data = column.meta_data
        if self._meta_data is None:
            # external chunks may omit their metadata
            self._meta_data = ColumnMetaData()

    @property
    def file_offset(self) -> int:
        return self._column.file_offset

    @property
    def file_path(self) -> str | None:
        return self._column.file_path

    @property
    def type(self) -> Type:
        return self._meta_data.type

    @property
    def num_values(self) -> int:
        return self._meta_data.num_values

    @property
    def path_in_schema(self) -> ColumnPath:
        return ColumnPath.of(self._meta_data.path_in_schema)

    @property
    def is_stats_set(self) -> bool:
        return self._meta_data.statistics is not None

    @property
    def statistics(self) -> ColumnStatistics | None:
        """The chunk statistics, or ``None`` when ``is_stats_set`` is false."""
        stats = self._meta_data.statistics
        if stats is None:
            return None
        return ColumnStatistics(
            null_count=stats.null_count,
            distinct_count=stats.distinct_count,
            min=stats.min,
            max=stats.max,
        )

    @property
    def compression(self) -> Compression:
        return self._meta_data.codec

    @property
    def encodings(self) -> tuple[Encoding, ...]:
        return tuple(self._meta_data.encodings)

    @property
    def has_dictionary_page(self) -> bool:
        return self._meta_data.dictionary_page_offset is not None

    @property
    def dictionary_page_offset(self) -> int | None:
        return self._meta_data.dictionary_page_offset

    @property
    def data_page_offset(self) -> int:
        return self._meta_data.data_page_offset

    @property
    def index_page_offset(self) -> int | None:
        return self._meta_data.index_page_offset

    @property
    def total_compressed_size(self) -> int:
        return self._meta_data.total_compressed_size

    @property
    def total_uncompressed_size(self) -> int:
        return self._meta_data.total_uncompressed_size

    def __repr__(self) -> str:
        return (
            f'ColumnChunkMetadata(path={self.path_in_schema}, '
            f'type={self.type.name}, num_values={self.num_values})'
        )


class RowGroupMetadata:
    """Accessors for one row group; column chunks are indexed in schema order."""

    def __init__(self, row_group: RowGroup, schema: SchemaDescriptor):
        self._row_group = row_group
        self._schema = schema

    @property
    def num_columns(self) -> int:
        return len(self._row_group.columns)

    @property
    def num_rows(self) -> int:
        return self._row_group.num_rows

    @property
    def total_byte_size(self) -> int:
        return self._row_group.total_byte_size

    @property
    def schema(self) -> SchemaDescriptor:
        return self._schema

    def column_chunk(self, i: int) -> ColumnChunkMetadata:
        if not 0 <= i < self.num_columns:
            raise OutOfRangeError(
                f'The file only has {self.num_columns} columns, '
                f'requested metadata for column: {i}',
                index=i,
                bound=self.num_columns,
            )
        return ColumnChunkMetadata(self._row_group.columns[i])

    def iter_column_chunks(self) -> Iterator[ColumnChunkMetadata]:
        for i in range(self.num_columns):
            yield self.column_chunk(i)

    def __repr__(self) -> str:
        return (
            f'RowGroupMetadata(num_rows={self.num_rows}, '
            f'num_columns={self.num_columns}, '
            f'total_byte_size={self.total_byte_size})'
        )


class FileMetadata:
    """
    The decoded footer of a Parquet file.

    Construct one with ``parse``/``from_bytes`` when reading, or obtain one
    from ``FileMetadataBuilder.finish`` when writing.
    """

    def __init__(self, metadata: FileMetaData):
        self._metadata = metadata
        self._schema = SchemaDescriptor(convert_flat_schema(metadata.schema))

    @classmethod
    def parse(
        cls,
        buffer: bytes | bytearray | memoryview,
        length: int | None = None,
    ) -> tuple[Self, int]:
        """
        Decode a footer from the start of ``buffer``.

        Args:
            buffer: Bytes beginning with the compact-encoded footer
            length: Upper bound on the bytes that may be consumed

        Returns:
            The metadata and the number of bytes the footer occupied
        """
        parser = MetadataParser(buffer, length)
        record = parser.parse()
        return cls(record), parser.consumed

    @classmethod
    def from_bytes(cls, buffer: bytes | bytearray | memoryview) -> Self:
        metadata, _ = cls.parse(buffer)
        return metadata

    @property
    def version(self) -> int:
        return self._metadata.version

    @property
    def created_by(self) -> str | None:
        return self._metadata.created_by

    @property
    def num_rows(self) -> int:
        return self._metadata.num_rows

    @property
    def num_row_groups(self) -> int:
        return len(self._metadata.row_groups)

    @property
    def num_columns(self) -> int:
        return self._schema.num_columns

    @property
    def num_schema_elements(self) -> int:
        return len(self._metadata.schema)

    @property
    def schema(self) -> SchemaDescriptor:
        return self._schema

    @property
    def key_value_metadata(self) -> dict[str, str | None]:
        return {kv.key: kv.value for kv in self._metadata.key_value_metadata or []}

    def row_group(self, i: int) -> RowGroupMetadata:
        if not 0 <= i < self.num_row_groups:
            raise OutOfRangeError(
                f'The file only has {self.num_row_groups} row groups, '
                f'requested metadata for row group: {i}',
                index=i,
                bound=self.num_row_groups,
            )
        return RowGroupMetadata(self._metadata.row_groups[i], self._schema)

    def iter_row_groups(self) -> Iterator[RowGroupMetadata]:
        for i in range(self.num_row_groups):
            yield self.row_group(i)

    def to_bytes(self) -> bytes:
        return MetadataSerializer().serialize(self._metadata)

    def write_to(self, sink: Writable) -> int:
        """Write the compact-encoded footer to ``sink``; returns bytes written."""
        data = self.to_bytes()
        sink.write(data)
        logger.debug('Wrote %d bytes of file metadata', len(data))
        return len(data)

    def to_dict(self) -> dict[str, Any]:
        return unstructure_file_metadata(self._metadata)

    def __repr__(self) -> str:
        return (
            f'FileMetadata(version={self.version}, num_rows={self.num_rows}, '
            f'num_row_groups={self.num_row_groups}, '
            f'num_columns={self.num_columns})'
        )
