import json

from .metadata import ColumnChunkMetadata, FileMetadata, RowGroupMetadata
from .schema import GroupNode, Node


def _header(title: str) -> str:
    return f'{title}\n{"=" * 60}'


def _ratio(compressed: int, uncompressed: int) -> float:
    return compressed / uncompressed if uncompressed > 0 else 0


def _format_basic_info(metadata: FileMetadata) -> list[str]:
    return [
        f'Version: {metadata.version}',
        f'Created by: {metadata.created_by or "unknown"}',
        f'Total rows: {metadata.num_rows:,}',
        f'Row groups: {metadata.num_row_groups}',
        f'Columns: {metadata.num_columns}',
        f'Schema elements: {metadata.num_schema_elements}',
    ]


def _format_schema_node(node: Node, depth: int = 0) -> list[str]:
    indent = '  ' * (depth + 1)
    if isinstance(node, GroupNode):
        rep = f' {node.repetition.name}' if node.repetition and depth else ''
        lines = [f'{indent}Group({node.name}){rep}']
        for child in node.children:
            lines.extend(_format_schema_node(child, depth + 1))
        return lines
    return [f'{indent}{node!r}']


def _format_row_group_line(index: int, rg: RowGroupMetadata) -> str:
    return (
        f'  {index:2}: {rg.num_rows:,} rows, {rg.num_columns} cols, '
        f'{rg.total_byte_size:,} bytes'
    )


def _format_column_line(index: int, col: ColumnChunkMetadata) -> str:
    compressed = col.total_compressed_size
    uncompressed = col.total_uncompressed_size
    return (
        f'  {index:2}: {col.path_in_schema} ({col.compression.name}, '
        f'{col.num_values:,} values, {compressed}B/{uncompressed}B C/UC '
        f'({_ratio(compressed, uncompressed):.2f}x))'
    )


def format_summary(metadata: FileMetadata) -> str:
    lines = [
        _header('Parquet File Summary'),
        *_format_basic_info(metadata),
    ]

    compressed = 0
    uncompressed = 0
    for rg in metadata.iter_row_groups():
        for col in rg.iter_column_chunks():
            compressed += col.total_compressed_size
            uncompressed += col.total_uncompressed_size
    if uncompressed > 0:
        lines.append(f'Compression ratio: {_ratio(compressed, uncompressed):.3f}')

    if metadata.num_row_groups:
        lines.extend(['\nRow Groups:', '-' * 40])
        for i, rg in enumerate(metadata.iter_row_groups()):
            lines.append(_format_row_group_line(i, rg))

    kv = metadata.key_value_metadata
    if kv:
        lines.append(f'\nKey-Value Metadata: {len(kv)} keys')
        lines.extend(f'  {key}' for key in kv)

    return '\n'.join(lines)


def format_schema(metadata: FileMetadata) -> str:
    return '\n'.join(
        [
            _header('Schema Structure'),
            *_format_schema_node(metadata.schema.schema_root),
        ],
    )


def format_row_group(metadata: FileMetadata, index: int) -> str:
    rg = metadata.row_group(index)
    lines = [
        _header(f'Row Group {index}'),
        f'Rows: {rg.num_rows:,}',
        f'Total byte size: {rg.total_byte_size:,}',
        f'Columns: {rg.num_columns}',
    ]
    if rg.num_columns:
        lines.append('\nColumns:')
        for i, col in enumerate(rg.iter_column_chunks()):
            lines.append(_format_column_line(i, col))
            if col.file_path:
                lines.append(f'      File: {col.file_path}')
            stats = col.statistics
            if stats is not None and stats.null_count is not None:
                lines.append(f'      Nulls: {stats.null_count:,}')
    return '\n'.join(lines)


def format_columns(metadata: FileMetadata) -> str:
    lines = [_header('Column Information')]

    if not metadata.num_row_groups:
        return '\n'.join([*lines, 'No row groups found.'])

    # all row groups share the schema's columns
    rg = metadata.row_group(0)

    for i, col in enumerate(rg.iter_column_chunks()):
        encodings = ', '.join(e.name for e in col.encodings)
        ratio = _ratio(col.total_compressed_size, col.total_uncompressed_size)
        lines.extend(
            [
                f'  {i:2}: {col.path_in_schema}',
                f'      Type: {col.type.name}',
                f'      Codec: {col.compression.name}',
                f'      Encodings: {encodings}',
                f'      Values: {col.num_values:,}',
                f'      Size: {col.total_compressed_size:,} '
                f'bytes (ratio: {ratio:.3f})',
                f'      Dictionary page: '
                f'{col.dictionary_page_offset if col.has_dictionary_page else "none"}',
            ],
        )
        if metadata.num_row_groups > 1:
            lines.append(f'      (from row group 0 of {metadata.num_row_groups})')
        lines.append('')

    return '\n'.join(lines)


def format_dump(metadata: FileMetadata) -> str:
    return json.dumps(metadata.to_dict(), indent=2)
