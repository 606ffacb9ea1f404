from io import BytesIO

import pytest

from conftest import BuildFile

from pqmeta.enums import Compression, Encoding, Repetition, Type
from pqmeta.exceptions import OutOfRangeError, ParquetFormatError, ThriftParsingError
from pqmeta.format import (
    ColumnChunk,
    ColumnMetaData,
    FileMetaData,
    RowGroup,
    SchemaElement,
    Statistics,
)
from pqmeta.metadata import FileMetadata
from pqmeta.schema import ColumnPath

ROW_GROUPS = [(10, [40, 50, 60]), (20, [70, 80, 90]), (5, [1, 2, 3])]


def _single_column_schema() -> list[SchemaElement]:
    return [
        SchemaElement(name='schema', num_children=1),
        SchemaElement(
            name='x',
            type=Type.INT32,
            repetition_type=Repetition.REQUIRED,
        ),
    ]


@pytest.fixture
def metadata(build_file: BuildFile) -> FileMetadata:
    return build_file(ROW_GROUPS, key_value_metadata={'writer': 'tests'})


def test_file_accessors(metadata: FileMetadata) -> None:
    assert metadata.version == 1
    assert metadata.created_by == 'pqmeta tests'
    assert metadata.num_rows == 35
    assert metadata.num_row_groups == 3
    assert metadata.num_columns == 3
    assert metadata.num_schema_elements == 5
    assert metadata.key_value_metadata == {'writer': 'tests'}
    assert metadata.schema.column_paths == ['a', 'b.c', 'b.d']


def test_row_groups_share_schema(metadata: FileMetadata) -> None:
    for row_group in metadata.iter_row_groups():
        assert row_group.schema is metadata.schema
    assert metadata.row_group(0).schema is metadata.row_group(2).schema


def test_row_group_byte_size_is_sum_of_chunks(metadata: FileMetadata) -> None:
    for row_group, (num_rows, sizes) in zip(
        metadata.iter_row_groups(),
        ROW_GROUPS,
        strict=True,
    ):
        assert row_group.num_rows == num_rows
        assert row_group.num_columns == 3
        assert row_group.total_byte_size == sum(sizes)
        assert row_group.total_byte_size == sum(
            chunk.total_compressed_size for chunk in row_group.iter_column_chunks()
        )


def test_column_chunk_accessors(metadata: FileMetadata) -> None:
    chunk = metadata.row_group(1).column_chunk(2)
    assert chunk.type == Type.BYTE_ARRAY
    assert chunk.path_in_schema == ColumnPath.of(['b', 'd'])
    assert str(chunk.path_in_schema) == 'b.d'
    assert chunk.num_values == 20
    assert chunk.compression == Compression.UNCOMPRESSED
    # 4 byte magic + first row group (150) + two earlier chunks (70 + 80)
    assert chunk.data_page_offset == 304
    assert chunk.file_offset == 304 + 90
    assert chunk.total_compressed_size == 90
    assert chunk.total_uncompressed_size == 180
    assert chunk.file_path is None
    assert chunk.statistics is None


@pytest.mark.parametrize('index', [3, -1, 100])
def test_row_group_out_of_range(metadata: FileMetadata, index: int) -> None:
    with pytest.raises(OutOfRangeError) as exc_info:
        metadata.row_group(index)
    assert exc_info.value.index == index
    assert exc_info.value.bound == 3
    assert 'The file only has 3 row groups' in str(exc_info.value)


@pytest.mark.parametrize('index', [3, -1])
def test_column_chunk_out_of_range(metadata: FileMetadata, index: int) -> None:
    row_group = metadata.row_group(2)
    assert row_group.column_chunk(2).total_compressed_size == 3
    with pytest.raises(
        OutOfRangeError,
        match=f'The file only has 3 columns, requested metadata for column: {index}',
    ):
        row_group.column_chunk(index)


def test_round_trip(metadata: FileMetadata) -> None:
    data = metadata.to_bytes()
    decoded = FileMetadata.from_bytes(data)
    again = FileMetadata.from_bytes(decoded.to_bytes())

    assert decoded.to_bytes() == data
    assert again.to_bytes() == data
    for md in (decoded, again):
        assert md.version == metadata.version
        assert md.created_by == metadata.created_by
        assert md.num_rows == metadata.num_rows
        assert md.num_row_groups == metadata.num_row_groups
        assert md.schema == metadata.schema
        assert md.key_value_metadata == metadata.key_value_metadata
        assert md.to_dict() == metadata.to_dict()


def test_parse_reports_consumed_bytes(metadata: FileMetadata) -> None:
    data = metadata.to_bytes()
    decoded, consumed = FileMetadata.parse(data + b'trailing garbage')
    assert consumed == len(data)
    assert decoded.num_rows == 35

    _, consumed = FileMetadata.parse(data + b'\x00' * 8, length=len(data))
    assert consumed == len(data)


def test_parse_truncated(metadata: FileMetadata) -> None:
    data = metadata.to_bytes()
    with pytest.raises(ThriftParsingError):
        FileMetadata.parse(data, length=len(data) // 2)
    with pytest.raises(ThriftParsingError):
        FileMetadata.from_bytes(data[:-1])
    with pytest.raises(ThriftParsingError):
        FileMetadata.from_bytes(b'')


def test_parse_without_schema() -> None:
    # i32 version field followed by stop
    with pytest.raises(ThriftParsingError, match='missing its schema'):
        FileMetadata.from_bytes(b'\x15\x02\x00')


@pytest.mark.parametrize(
    'text',
    [b'pqmeta tests', b'schema', b'writer'],
    ids=['created_by', 'schema_name', 'key_value'],
)
def test_parse_invalid_utf8(metadata: FileMetadata, text: bytes) -> None:
    data = metadata.to_bytes()
    assert data.count(text) == 1
    corrupted = data.replace(text, b'\xff\xfe' * (len(text) // 2))
    with pytest.raises(ThriftParsingError, match='Invalid UTF-8'):
        FileMetadata.from_bytes(corrupted)


def test_parse_invalid_utf8_file_path() -> None:
    record = FileMetaData(
        schema=_single_column_schema(),
        row_groups=[
            RowGroup(
                columns=[
                    ColumnChunk(
                        file_offset=8,
                        file_path='zz',
                        meta_data=ColumnMetaData(
                            type=Type.INT32,
                            path_in_schema=['x'],
                        ),
                    ),
                ],
            ),
        ],
    )
    data = FileMetadata(record).to_bytes().replace(b'zz', b'\xff\xfe')
    with pytest.raises(ThriftParsingError, match='Invalid UTF-8'):
        FileMetadata.from_bytes(data)


def _encodings_record(encodings: list[int], codec: int = 0) -> FileMetaData:
    return FileMetaData(
        schema=_single_column_schema(),
        row_groups=[
            RowGroup(
                columns=[
                    ColumnChunk(
                        file_offset=8,
                        meta_data=ColumnMetaData(
                            type=Type.INT32,
                            path_in_schema=['x'],
                            encodings=encodings,
                            codec=codec,
                        ),
                    ),
                ],
            ),
        ],
    )


def test_unknown_encodings_are_dropped() -> None:
    record = _encodings_record([Encoding.RLE, 42, Encoding.GROUP_VAR_INT])
    decoded = FileMetadata.from_bytes(FileMetadata(record).to_bytes())
    assert decoded.row_group(0).column_chunk(0).encodings == (
        Encoding.RLE,
        Encoding.GROUP_VAR_INT,
    )


def test_unknown_codec_is_rejected() -> None:
    data = FileMetadata(_encodings_record([Encoding.PLAIN], codec=99)).to_bytes()
    with pytest.raises(ThriftParsingError, match='Invalid Compression value: 99'):
        FileMetadata.from_bytes(data)


def test_write_to(metadata: FileMetadata) -> None:
    sink = BytesIO()
    written = metadata.write_to(sink)
    assert written == len(sink.getvalue())
    assert sink.getvalue() == metadata.to_bytes()


def test_external_statistics_and_optional_fields() -> None:
    record = FileMetaData(
        version=1,
        schema=_single_column_schema(),
        num_rows=3,
        row_groups=[
            RowGroup(
                columns=[
                    ColumnChunk(
                        file_offset=30,
                        file_path='other.parquet',
                        meta_data=ColumnMetaData(
                            type=Type.INT32,
                            path_in_schema=['x'],
                            num_values=3,
                            total_compressed_size=26,
                            total_uncompressed_size=26,
                            data_page_offset=4,
                            dictionary_page_offset=None,
                            statistics=Statistics(
                                max=b'\x03\x00\x00\x00',
                                min=b'\x01\x00\x00\x00',
                                null_count=0,
                            ),
                        ),
                    ),
                ],
                total_byte_size=26,
                num_rows=3,
            ),
        ],
    )
    decoded = FileMetadata.from_bytes(FileMetadata(record).to_bytes())
    chunk = decoded.row_group(0).column_chunk(0)

    assert chunk.file_path == 'other.parquet'
    assert chunk.is_stats_set
    assert chunk.statistics is not None
    assert chunk.statistics.min == b'\x01\x00\x00\x00'
    assert chunk.statistics.max == b'\x03\x00\x00\x00'
    assert chunk.statistics.null_count == 0
    assert chunk.statistics.distinct_count is None
    assert not chunk.has_dictionary_page
    assert decoded.created_by is None
    assert decoded.key_value_metadata == {}


def test_chunk_without_metadata() -> None:
    record = FileMetaData(
        schema=_single_column_schema(),
        row_groups=[RowGroup(columns=[ColumnChunk(file_offset=8)])],
    )
    chunk = FileMetadata(record).row_group(0).column_chunk(0)
    assert chunk.file_offset == 8
    assert chunk.num_values == 0
    assert chunk.encodings == ()


def test_malformed_schema() -> None:
    record = FileMetaData(schema=[SchemaElement(name='schema', num_children=2)])
    with pytest.raises(ParquetFormatError):
        FileMetadata(record)
