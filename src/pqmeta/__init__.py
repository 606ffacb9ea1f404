from .builders import (
    ColumnChunkMetadataBuilder,
    FileMetadataBuilder,
    RowGroupMetadataBuilder,
)
from .enums import (
    Compression,
    ConvertedType,
    Encoding,
    ParquetVersion,
    Repetition,
    Type,
)
from .exceptions import (
    BuilderStateError,
    IncompleteBuildError,
    MetadataConsistencyError,
    OutOfRangeError,
    ParquetFormatError,
    PqMetaError,
    ThriftParsingError,
)
from .footer import read_file_metadata, write_file_footer
from .metadata import (
    ColumnChunkMetadata,
    ColumnStatistics,
    FileMetadata,
    RowGroupMetadata,
)
from .properties import ColumnProperties, WriterProperties
from .schema import (
    ColumnDescriptor,
    ColumnPath,
    GroupNode,
    PrimitiveNode,
    SchemaDescriptor,
)

__all__ = [
    'BuilderStateError',
    'ColumnChunkMetadata',
    'ColumnChunkMetadataBuilder',
    'ColumnDescriptor',
    'ColumnPath',
    'ColumnProperties',
    'ColumnStatistics',
    'Compression',
    'ConvertedType',
    'Encoding',
    'FileMetadata',
    'FileMetadataBuilder',
    'GroupNode',
    'IncompleteBuildError',
    'MetadataConsistencyError',
    'OutOfRangeError',
    'ParquetFormatError',
    'ParquetVersion',
    'PqMetaError',
    'PrimitiveNode',
    'Repetition',
    'RowGroupMetadata',
    'RowGroupMetadataBuilder',
    'SchemaDescriptor',
    'ThriftParsingError',
    'Type',
    'WriterProperties',
    'read_file_metadata',
    'write_file_footer',
]
