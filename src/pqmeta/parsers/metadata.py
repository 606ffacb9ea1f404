"""
Metadata orchestrator that composes all component parsers.

Teaching Points:
- FileMetaData is the root of all Parquet file information
- It delegates schema, row group, and key/value parsing to specialized parsers
- The number of bytes consumed tells a caller where the footer struct ends
- Parsing progress can be followed by enabling debug logging for this module
"""

import logging

from pqmeta.exceptions import ThriftParsingError
from pqmeta.format import FileMetaData, KeyValue, RowGroup, SchemaElement
from pqmeta.thrift import ThriftCompactParser, ThriftFieldType, ThriftStructParser

from .base import BaseParser, to_str
from .enums import FileMetadataFieldId, KeyValueFieldId
from .row_group import RowGroupParser
from .schema import SchemaParser

logger = logging.getLogger(__name__)


class MetadataParser(BaseParser):
    """Parses a complete FileMetaData struct from footer bytes."""

    def __init__(
        self,
        metadata_bytes: bytes | bytearray | memoryview,
        length: int | None = None,
    ):
        """
        Args:
            metadata_bytes: Compact-encoded footer, possibly followed by
                other trailer bytes
            length: Only the first ``length`` bytes may be consumed
        """
        super().__init__(ThriftCompactParser(metadata_bytes, length))

    @property
    def consumed(self) -> int:
        """Bytes read so far; after ``parse`` this is the footer length."""
        return self.parser.pos

    def parse(self) -> FileMetaData:
        logger.debug('Starting FileMetaData parsing...')

        struct_parser = ThriftStructParser(self.parser)
        metadata = FileMetaData()

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            logger.debug('Processing field %s of type %s', field_id, field_type.name)

            if field_type == ThriftFieldType.LIST:
                match field_id:
                    case FileMetadataFieldId.SCHEMA:
                        metadata.schema = self._parse_schema_field()
                    case FileMetadataFieldId.ROW_GROUPS:
                        metadata.row_groups = self._parse_row_groups_field()
                    case FileMetadataFieldId.KEY_VALUE_METADATA:
                        metadata.key_value_metadata = (
                            self._parse_key_value_metadata_field()
                        )
                    case _:
                        struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case FileMetadataFieldId.VERSION:
                    metadata.version = value
                case FileMetadataFieldId.NUM_ROWS:
                    metadata.num_rows = value
                case FileMetadataFieldId.CREATED_BY:
                    metadata.created_by = to_str(value)

        if not metadata.schema:
            raise ThriftParsingError('FileMetaData is missing its schema')

        logger.debug(
            'FileMetaData parsing complete: %d bytes, %d row groups',
            self.consumed,
            len(metadata.row_groups),
        )
        return metadata

    def _parse_schema_field(self) -> list[SchemaElement]:
        return SchemaParser(self.parser).parse_schema_field()

    def _parse_row_groups_field(self) -> list[RowGroup]:
        row_group_parser = RowGroupParser(self.parser)
        return self.read_list(row_group_parser.read_row_group)

    def _parse_key_value_metadata_field(self) -> list[KeyValue]:
        def parse_key_value() -> KeyValue:
            struct_parser = ThriftStructParser(self.parser)
            key = None
            value = None

            while True:
                field_type, field_id = struct_parser.read_field_header()
                if field_type == ThriftFieldType.STOP:
                    break

                field_value = struct_parser.read_value(field_type)
                if field_value is None:
                    continue

                if field_id == KeyValueFieldId.KEY:
                    key = to_str(field_value)
                elif field_id == KeyValueFieldId.VALUE:
                    value = to_str(field_value)

            if key is None:
                raise ThriftParsingError(
                    'Incomplete key/value pair: missing key field. '
                    'This may indicate corrupted metadata.',
                )

            return KeyValue(key=key, value=value)

        return self.read_list(parse_key_value)
