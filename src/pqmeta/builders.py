"""
Builders that assemble footer metadata while a file is written.

Teaching Points:
- One FileMetadataBuilder per file, one RowGroupMetadataBuilder per row group,
  and one ColumnChunkMetadataBuilder per column chunk
- Children are claimed strictly in order: the next column (or row group) can
  only be claimed once the previous one has been finished
- A row group cannot be finished until every schema column has been claimed
  and finished, so a footer can never describe a half-written row group
- Each builder writes into a record owned by its parent; finishing the file
  builder hands those records to an immutable FileMetadata
"""

from __future__ import annotations

import copy
import logging

from collections.abc import Mapping

from .enums import Encoding, ParquetVersion
from .exceptions import (
    BuilderStateError,
    IncompleteBuildError,
    MetadataConsistencyError,
    OutOfRangeError,
)
from .format import (
    ColumnChunk,
    ColumnMetaData,
    FileMetaData,
    KeyValue,
    RowGroup,
    Statistics,
)
from .metadata import ColumnStatistics, FileMetadata
from .properties import WriterProperties
from .schema import ColumnDescriptor, SchemaDescriptor, flatten_schema

logger = logging.getLogger(__name__)


class ColumnChunkMetadataBuilder:
    """
    Fills in the metadata of a single column chunk.

    The column's type, path, and codec are fixed at construction. Statistics
    and an external file path may be set until ``finish`` is called; after
    that the builder is closed.
    """

    def __init__(
        self,
        properties: WriterProperties,
        column: ColumnDescriptor,
        contents: ColumnChunk,
    ):
        self._properties = properties
        self._column = column
        self._contents = contents
        self._finished = False

        contents.meta_data = ColumnMetaData(
            type=column.physical_type,
            path_in_schema=column.path.to_dot_vector(),
            codec=properties.compression_for(column.path),
        )

    @property
    def descr(self) -> ColumnDescriptor:
        return self._column

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def file_offset(self) -> int:
        return self._contents.file_offset

    @property
    def total_compressed_size(self) -> int:
        return self._meta_data.total_compressed_size

    @property
    def _meta_data(self) -> ColumnMetaData:
        assert self._contents.meta_data is not None
        return self._contents.meta_data

    def _check_open(self) -> None:
        if self._finished:
            raise BuilderStateError(
                f"Column chunk '{self._column.path}' is already finished",
            )

    def set_file_path(self, path: str) -> None:
        self._check_open()
        self._contents.file_path = path

    def set_statistics(self, statistics: ColumnStatistics) -> None:
        self._check_open()
        if self._meta_data.statistics is not None:
            raise BuilderStateError(
                f"Statistics for column chunk '{self._column.path}' are already set",
            )
        self._meta_data.statistics = Statistics(
            max=statistics.max,
            min=statistics.min,
            null_count=statistics.null_count,
            distinct_count=statistics.distinct_count,
        )

    def finish(
        self,
        num_values: int,
        dictionary_page_offset: int,
        index_page_offset: int,
        data_page_offset: int,
        compressed_size: int,
        uncompressed_size: int,
        dictionary_fallback: bool = False,
    ) -> None:
        """
        Record where the chunk's pages landed and how they were encoded.

        Offsets of zero mean the page type is absent. The chunk's file_offset
        is the position just past its data, counted from its first page.
        """
        self._check_open()

        if dictionary_page_offset > 0:
            self._contents.file_offset = dictionary_page_offset + compressed_size
        else:
            self._contents.file_offset = data_page_offset + compressed_size

        meta = self._meta_data
        meta.num_values = num_values
        meta.dictionary_page_offset = (
            dictionary_page_offset if dictionary_page_offset > 0 else None
        )
        meta.index_page_offset = index_page_offset if index_page_offset > 0 else None
        meta.data_page_offset = data_page_offset
        meta.total_uncompressed_size = uncompressed_size
        meta.total_compressed_size = compressed_size
        meta.encodings = self._encodings(dictionary_fallback)

        self._finished = True
        logger.debug(
            "Finished column chunk '%s': %d values, %d bytes, encodings %s",
            self._column.path,
            num_values,
            compressed_size,
            [e.name for e in meta.encodings],
        )

    def _encodings(self, dictionary_fallback: bool) -> list[Encoding]:
        properties = self._properties
        path = self._column.path
        dictionary_enabled = properties.dictionary_enabled_for(path)

        # definition/repetition levels are always RLE
        encodings = [Encoding.RLE]
        if dictionary_enabled:
            encodings.append(properties.dictionary_page_encoding)
            if properties.version >= ParquetVersion.PARQUET_2_0:
                encodings.append(properties.dictionary_index_encoding)
        if not dictionary_enabled or dictionary_fallback:
            encodings.append(properties.encoding_for(path))
        return encodings


class RowGroupMetadataBuilder:
    """
    Assembles one row group, one column chunk per schema column.

    Columns are handed out by ``next_column_chunk`` in schema order; a new
    column can only be claimed once the previous one is finished.
    """

    def __init__(
        self,
        num_rows: int,
        properties: WriterProperties,
        schema: SchemaDescriptor,
        contents: RowGroup,
    ):
        self._properties = properties
        self._schema = schema
        self._contents = contents
        self._column_builders: list[ColumnChunkMetadataBuilder] = []
        self._finished = False

        contents.num_rows = num_rows
        contents.columns = [ColumnChunk() for _ in range(schema.num_columns)]

    @property
    def num_columns(self) -> int:
        return len(self._contents.columns)

    @property
    def num_rows(self) -> int:
        return self._contents.num_rows

    @property
    def current_column(self) -> int:
        """Number of columns claimed so far."""
        return len(self._column_builders)

    @property
    def is_finished(self) -> bool:
        return self._finished

    def next_column_chunk(self) -> ColumnChunkMetadataBuilder:
        if self._finished:
            raise BuilderStateError('Row group is already finished')

        index = self.current_column
        if not index < self._schema.num_columns:
            raise OutOfRangeError(
                f'The schema only has {self._schema.num_columns} columns, '
                f'requested metadata for column: {index}',
                index=index,
                bound=self._schema.num_columns,
            )

        if self._column_builders and not self._column_builders[-1].is_finished:
            raise BuilderStateError(
                f'Column {index - 1} must be finished before column {index} '
                'can be claimed',
            )

        builder = ColumnChunkMetadataBuilder(
            self._properties,
            self._schema.column(index),
            self._contents.columns[index],
        )
        self._column_builders.append(builder)
        return builder

    def finish(self, total_bytes_written: int) -> None:
        """
        Close the row group once every column chunk is finished.

        Raises:
            IncompleteBuildError: If a column was never claimed or never
                finished
            MetadataConsistencyError: If the columns' compressed sizes do not
                add up to ``total_bytes_written``
        """
        if self._finished:
            raise BuilderStateError('Row group is already finished')

        if self.current_column != self._schema.num_columns:
            raise IncompleteBuildError(
                f'Only {self.current_column} out of {self._schema.num_columns} '
                'columns are initialized',
            )

        total_byte_size = 0
        for i, column in enumerate(self._contents.columns):
            if not column.file_offset > 0:
                raise IncompleteBuildError(f'Column {i} is not complete.')
            assert column.meta_data is not None
            total_byte_size += column.meta_data.total_compressed_size

        if total_byte_size != total_bytes_written:
            raise MetadataConsistencyError(
                f'Total bytes in this row group ({total_bytes_written}) do not '
                f'match the compressed sizes of its columns ({total_byte_size})',
            )

        self._contents.total_byte_size = total_byte_size
        self._finished = True
        logger.debug(
            'Finished row group: %d rows, %d columns, %d bytes',
            self._contents.num_rows,
            self.num_columns,
            total_byte_size,
        )


class FileMetadataBuilder:
    """Collects row groups and produces the file's FileMetadata."""

    def __init__(
        self,
        schema: SchemaDescriptor,
        properties: WriterProperties | None = None,
        key_value_metadata: Mapping[str, str | None] | None = None,
    ):
        self._schema = schema
        self._properties = properties if properties is not None else WriterProperties()
        self._key_value_metadata = (
            dict(key_value_metadata) if key_value_metadata is not None else None
        )
        self._row_groups: list[RowGroup] = []
        self._row_group_builders: list[RowGroupMetadataBuilder] = []
        self._done = False

    @property
    def num_row_groups(self) -> int:
        return len(self._row_groups)

    def _check_open(self) -> None:
        if self._done:
            raise BuilderStateError('File metadata has already been finished')

    def append_row_group(self, num_rows: int) -> RowGroupMetadataBuilder:
        self._check_open()
        if self._row_group_builders and not self._row_group_builders[-1].is_finished:
            raise BuilderStateError(
                f'Row group {len(self._row_group_builders) - 1} must be finished '
                'before another row group can be appended',
            )

        row_group = RowGroup()
        builder = RowGroupMetadataBuilder(
            num_rows,
            self._properties,
            self._schema,
            row_group,
        )
        self._row_groups.append(row_group)
        self._row_group_builders.append(builder)
        logger.debug(
            'Appended row group %d with %d rows',
            len(self._row_groups) - 1,
            num_rows,
        )
        return builder

    def finish(self) -> FileMetadata:
        """
        Produce the file's metadata. The builder cannot be used afterwards.

        Raises:
            IncompleteBuildError: If the last appended row group is unfinished
        """
        self._check_open()
        for i, builder in enumerate(self._row_group_builders):
            if not builder.is_finished:
                raise IncompleteBuildError(f'Row group {i} is not complete.')

        row_groups = copy.deepcopy(self._row_groups)
        key_value_metadata = (
            [KeyValue(key=k, value=v) for k, v in self._key_value_metadata.items()]
            if self._key_value_metadata is not None
            else None
        )
        record = FileMetaData(
            version=int(self._properties.version),
            schema=flatten_schema(self._schema.schema_root),
            num_rows=sum(rg.num_rows for rg in row_groups),
            row_groups=row_groups,
            key_value_metadata=key_value_metadata,
            created_by=self._properties.created_by,
        )
        self._done = True

        logger.debug(
            'Finished file metadata: %d rows in %d row groups',
            record.num_rows,
            len(row_groups),
        )
        # the schema is re-derived from the flattened elements, exactly as a
        # reader of the serialized footer will see it
        return FileMetadata(record)
