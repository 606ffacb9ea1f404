"""
Row group parsing for Parquet file organization.

Teaching Points:
- Row groups are the primary unit of parallelization in Parquet
- Each row group contains a subset of rows across all columns
- Column chunks appear in the same order as the schema's leaf columns
"""

import logging

from pqmeta.format import RowGroup
from pqmeta.thrift import ThriftFieldType, ThriftStructParser

from .base import BaseParser
from .column import ColumnParser
from .enums import RowGroupFieldId

logger = logging.getLogger(__name__)


class RowGroupParser(BaseParser):
    """Parses RowGroup structs."""

    def read_row_group(self) -> RowGroup:
        struct_parser = ThriftStructParser(self.parser)
        rg = RowGroup()

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.LIST:
                if field_id == RowGroupFieldId.COLUMNS:
                    column_parser = ColumnParser(self.parser)
                    rg.columns = self.read_list(column_parser.read_column_chunk)
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case RowGroupFieldId.TOTAL_BYTE_SIZE:
                    rg.total_byte_size = value
                case RowGroupFieldId.NUM_ROWS:
                    rg.num_rows = value

        logger.debug(
            'Read row group with %d columns, %d rows, %d bytes',
            len(rg.columns),
            rg.num_rows,
            rg.total_byte_size,
        )
        return rg
