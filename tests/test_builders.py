import pytest

from pqmeta.builders import (
    ColumnChunkMetadataBuilder,
    FileMetadataBuilder,
    RowGroupMetadataBuilder,
)
from pqmeta.enums import Compression, Encoding, ParquetVersion, Type
from pqmeta.exceptions import (
    BuilderStateError,
    IncompleteBuildError,
    MetadataConsistencyError,
    OutOfRangeError,
)
from pqmeta.format import ColumnChunk, RowGroup
from pqmeta.metadata import ColumnChunkMetadata, ColumnStatistics
from pqmeta.properties import ColumnProperties, WriterProperties
from pqmeta.schema import SchemaDescriptor


def _column_builder(
    schema: SchemaDescriptor,
    properties: WriterProperties,
    index: int = 0,
) -> tuple[ColumnChunkMetadataBuilder, ColumnChunk]:
    contents = ColumnChunk()
    builder = ColumnChunkMetadataBuilder(properties, schema.column(index), contents)
    return builder, contents


def _finish(builder: ColumnChunkMetadataBuilder, **kwargs) -> None:
    args = {
        'num_values': 10,
        'dictionary_page_offset': 0,
        'index_page_offset': 0,
        'data_page_offset': 4,
        'compressed_size': 50,
        'uncompressed_size': 80,
    }
    args.update(kwargs)
    builder.finish(**args)


def test_column_chunk_identity(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, contents = _column_builder(schema, properties, 2)
    assert builder.descr is schema.column(2)
    assert contents.meta_data is not None
    assert contents.meta_data.type == Type.BYTE_ARRAY
    assert contents.meta_data.path_in_schema == ['b', 'd']
    assert contents.meta_data.codec == Compression.UNCOMPRESSED


def test_file_offset_from_dictionary_page(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, contents = _column_builder(schema, properties)
    _finish(
        builder,
        dictionary_page_offset=100,
        data_page_offset=120,
        compressed_size=50,
    )

    chunk = ColumnChunkMetadata(contents)
    assert builder.file_offset == 150
    assert chunk.file_offset == 150
    assert chunk.has_dictionary_page
    assert chunk.dictionary_page_offset == 100
    assert chunk.data_page_offset == 120


def test_file_offset_from_data_page(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, contents = _column_builder(schema, properties)
    _finish(builder, data_page_offset=200, compressed_size=50)

    chunk = ColumnChunkMetadata(contents)
    assert chunk.file_offset == 250
    assert not chunk.has_dictionary_page
    assert chunk.dictionary_page_offset is None
    assert chunk.index_page_offset is None


def test_finish_records_sizes(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, contents = _column_builder(schema, properties)
    _finish(
        builder,
        num_values=7,
        index_page_offset=300,
        compressed_size=60,
        uncompressed_size=90,
    )

    chunk = ColumnChunkMetadata(contents)
    assert builder.is_finished
    assert chunk.num_values == 7
    assert chunk.index_page_offset == 300
    assert chunk.total_compressed_size == 60
    assert chunk.total_uncompressed_size == 90


@pytest.mark.parametrize(
    ('version', 'dictionary_enabled', 'fallback', 'expected'),
    [
        (
            ParquetVersion.PARQUET_1_0,
            True,
            False,
            [Encoding.RLE, Encoding.PLAIN_DICTIONARY],
        ),
        (
            ParquetVersion.PARQUET_1_0,
            True,
            True,
            [Encoding.RLE, Encoding.PLAIN_DICTIONARY, Encoding.PLAIN],
        ),
        (
            ParquetVersion.PARQUET_2_0,
            True,
            False,
            [Encoding.RLE, Encoding.PLAIN, Encoding.RLE_DICTIONARY],
        ),
        (
            ParquetVersion.PARQUET_2_0,
            True,
            True,
            [Encoding.RLE, Encoding.PLAIN, Encoding.RLE_DICTIONARY, Encoding.PLAIN],
        ),
        (
            ParquetVersion.PARQUET_1_0,
            False,
            False,
            [Encoding.RLE, Encoding.PLAIN],
        ),
        (
            ParquetVersion.PARQUET_2_0,
            False,
            True,
            [Encoding.RLE, Encoding.PLAIN],
        ),
    ],
)
def test_encodings(
    schema: SchemaDescriptor,
    version: ParquetVersion,
    dictionary_enabled: bool,
    fallback: bool,
    expected: list[Encoding],
) -> None:
    properties = WriterProperties(
        version=version,
        dictionary_enabled=dictionary_enabled,
    )
    builder, contents = _column_builder(schema, properties)
    _finish(builder, dictionary_fallback=fallback)
    assert ColumnChunkMetadata(contents).encodings == tuple(expected)


def test_column_overrides(schema: SchemaDescriptor) -> None:
    properties = WriterProperties(
        compression=Compression.SNAPPY,
        columns={
            'b.c': ColumnProperties(
                compression=Compression.GZIP,
                encoding=Encoding.BYTE_STREAM_SPLIT,
                dictionary_enabled=False,
            ),
        },
    )

    builder, contents = _column_builder(schema, properties, 1)
    _finish(builder)
    chunk = ColumnChunkMetadata(contents)
    assert chunk.compression == Compression.GZIP
    assert chunk.encodings == (Encoding.RLE, Encoding.BYTE_STREAM_SPLIT)

    builder, contents = _column_builder(schema, properties, 0)
    _finish(builder)
    chunk = ColumnChunkMetadata(contents)
    assert chunk.compression == Compression.SNAPPY
    assert chunk.encodings == (Encoding.RLE, Encoding.PLAIN_DICTIONARY)


def test_statistics_and_file_path(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, contents = _column_builder(schema, properties)
    assert not ColumnChunkMetadata(contents).is_stats_set

    stats = ColumnStatistics(null_count=0, distinct_count=5, min=b'\x01', max=b'\x09')
    builder.set_statistics(stats)
    builder.set_file_path('part-0.parquet')
    _finish(builder)

    chunk = ColumnChunkMetadata(contents)
    assert chunk.is_stats_set
    assert chunk.statistics == stats
    assert chunk.file_path == 'part-0.parquet'


def test_statistics_set_at_most_once(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, contents = _column_builder(schema, properties)
    first = ColumnStatistics(null_count=0)
    builder.set_statistics(first)
    with pytest.raises(BuilderStateError, match='already set'):
        builder.set_statistics(ColumnStatistics(null_count=7))
    _finish(builder)

    assert ColumnChunkMetadata(contents).statistics == first


def test_finished_column_chunk_is_closed(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, _ = _column_builder(schema, properties)
    _finish(builder)

    with pytest.raises(BuilderStateError):
        _finish(builder)
    with pytest.raises(BuilderStateError):
        builder.set_file_path('x.parquet')
    with pytest.raises(BuilderStateError):
        builder.set_statistics(ColumnStatistics(null_count=1))


def _row_group_builder(
    schema: SchemaDescriptor,
    properties: WriterProperties,
    num_rows: int = 10,
) -> tuple[RowGroupMetadataBuilder, RowGroup]:
    contents = RowGroup()
    return RowGroupMetadataBuilder(num_rows, properties, schema, contents), contents


def test_row_group_claims_columns_in_order(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, contents = _row_group_builder(schema, properties)
    assert builder.num_columns == 3
    assert len(contents.columns) == 3

    for i in range(3):
        assert builder.current_column == i
        column = builder.next_column_chunk()
        assert column.descr is schema.column(i)
        _finish(column, data_page_offset=4 + i * 50)

    assert builder.current_column == 3
    builder.finish(150)
    assert builder.is_finished
    assert contents.total_byte_size == 150
    assert contents.num_rows == 10


def test_row_group_too_many_columns(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, _ = _row_group_builder(schema, properties)
    for _ in range(3):
        _finish(builder.next_column_chunk())

    with pytest.raises(
        OutOfRangeError,
        match='The schema only has 3 columns, requested metadata for column: 3',
    ):
        builder.next_column_chunk()


def test_row_group_previous_column_unfinished(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, _ = _row_group_builder(schema, properties)
    builder.next_column_chunk()
    with pytest.raises(BuilderStateError, match='Column 0 must be finished'):
        builder.next_column_chunk()


def test_row_group_unclaimed_columns(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, _ = _row_group_builder(schema, properties)
    _finish(builder.next_column_chunk())
    _finish(builder.next_column_chunk())

    with pytest.raises(
        IncompleteBuildError,
        match='Only 2 out of 3 columns are initialized',
    ):
        builder.finish(100)
    assert not builder.is_finished


def test_row_group_unfinished_column(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, _ = _row_group_builder(schema, properties)
    _finish(builder.next_column_chunk())
    _finish(builder.next_column_chunk())
    builder.next_column_chunk()

    with pytest.raises(IncompleteBuildError, match='Column 2 is not complete.'):
        builder.finish(100)


def test_row_group_size_mismatch(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder, _ = _row_group_builder(schema, properties)
    for _ in range(3):
        _finish(builder.next_column_chunk(), compressed_size=50)

    with pytest.raises(MetadataConsistencyError):
        builder.finish(149)

    builder.finish(150)
    with pytest.raises(BuilderStateError):
        builder.finish(150)
    with pytest.raises(BuilderStateError):
        builder.next_column_chunk()


def test_file_builder(schema: SchemaDescriptor) -> None:
    properties = WriterProperties(
        version=ParquetVersion.PARQUET_2_0,
        created_by='writer 1.2.3',
    )
    builder = FileMetadataBuilder(
        schema,
        properties,
        key_value_metadata={'origin': 'test', 'empty': None},
    )

    for num_rows in (10, 20):
        rg = builder.append_row_group(num_rows)
        for _ in range(3):
            _finish(rg.next_column_chunk(), num_values=num_rows)
        rg.finish(150)

    assert builder.num_row_groups == 2
    metadata = builder.finish()

    assert metadata.version == 2
    assert metadata.created_by == 'writer 1.2.3'
    assert metadata.num_rows == 30
    assert metadata.num_row_groups == 2
    assert metadata.num_columns == 3
    assert metadata.num_schema_elements == 5
    assert metadata.key_value_metadata == {'origin': 'test', 'empty': None}
    assert metadata.row_group(1).num_rows == 20
    assert metadata.schema == schema
    assert metadata.schema is not schema


def test_file_builder_empty(schema: SchemaDescriptor) -> None:
    metadata = FileMetadataBuilder(schema).finish()
    assert metadata.num_rows == 0
    assert metadata.num_row_groups == 0
    assert metadata.key_value_metadata == {}
    assert metadata.created_by is not None
    assert metadata.created_by.startswith('pqmeta version ')


def test_file_builder_unfinished_row_group(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder = FileMetadataBuilder(schema, properties)
    builder.append_row_group(5)

    with pytest.raises(BuilderStateError, match='Row group 0 must be finished'):
        builder.append_row_group(5)
    with pytest.raises(IncompleteBuildError, match='Row group 0 is not complete.'):
        builder.finish()


def test_file_builder_is_terminal(
    schema: SchemaDescriptor,
    properties: WriterProperties,
) -> None:
    builder = FileMetadataBuilder(schema, properties)
    builder.finish()

    with pytest.raises(BuilderStateError):
        builder.finish()
    with pytest.raises(BuilderStateError):
        builder.append_row_group(1)
