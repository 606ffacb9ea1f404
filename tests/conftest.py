from collections.abc import Callable, Sequence
from typing import TypeAlias

import pytest

from pqmeta.builders import FileMetadataBuilder
from pqmeta.enums import ConvertedType, Repetition, Type
from pqmeta.metadata import FileMetadata
from pqmeta.properties import WriterProperties
from pqmeta.schema import GroupNode, PrimitiveNode, SchemaDescriptor

BuildFile: TypeAlias = Callable[..., FileMetadata]

# first page offset, just past the leading magic
FIRST_PAGE_OFFSET = 4


@pytest.fixture
def schema_root() -> GroupNode:
    """
    schema
      a: INT64 REQUIRED
      b: group OPTIONAL
        c: DOUBLE REQUIRED
        d: BYTE_ARRAY OPTIONAL [UTF8]
    """
    return GroupNode(
        name='schema',
        repetition=None,
        children=(
            PrimitiveNode(name='a', physical_type=Type.INT64),
            GroupNode(
                name='b',
                repetition=Repetition.OPTIONAL,
                children=(
                    PrimitiveNode(name='c', physical_type=Type.DOUBLE),
                    PrimitiveNode(
                        name='d',
                        physical_type=Type.BYTE_ARRAY,
                        repetition=Repetition.OPTIONAL,
                        converted_type=ConvertedType.UTF8,
                    ),
                ),
            ),
        ),
    )


@pytest.fixture
def schema(schema_root: GroupNode) -> SchemaDescriptor:
    return SchemaDescriptor(schema_root)


@pytest.fixture
def properties() -> WriterProperties:
    return WriterProperties(created_by='pqmeta tests')


@pytest.fixture
def build_file(schema: SchemaDescriptor, properties: WriterProperties) -> BuildFile:
    """
    Build finished metadata for the test schema.

    Each row group is given as (num_rows, [compressed size per column]);
    column chunks are laid out back to back after the leading magic.
    """

    def _build_file(
        row_groups: Sequence[tuple[int, Sequence[int]]],
        key_value_metadata: dict[str, str | None] | None = None,
        props: WriterProperties | None = None,
    ) -> FileMetadata:
        builder = FileMetadataBuilder(
            schema,
            props or properties,
            key_value_metadata=key_value_metadata,
        )
        offset = FIRST_PAGE_OFFSET
        for num_rows, sizes in row_groups:
            rg_builder = builder.append_row_group(num_rows)
            for size in sizes:
                rg_builder.next_column_chunk().finish(
                    num_values=num_rows,
                    dictionary_page_offset=0,
                    index_page_offset=0,
                    data_page_offset=offset,
                    compressed_size=size,
                    uncompressed_size=size * 2,
                )
                offset += size
            rg_builder.finish(sum(sizes))
        return builder.finish()

    return _build_file
