"""
Schema element parsing.

Teaching Points:
- The footer stores the schema tree as a flat, depth-first list of elements
- Groups announce how many children follow them through num_children
- Leaves carry the physical type; groups carry none
- Rebuilding the tree from this list is left to ``pqmeta.schema``
"""

import logging

from pqmeta.enums import ConvertedType, Repetition, Type
from pqmeta.exceptions import ThriftParsingError
from pqmeta.format import SchemaElement
from pqmeta.thrift import ThriftFieldType, ThriftStructParser

from .base import BaseParser, to_enum, to_str
from .enums import SchemaElementFieldId

logger = logging.getLogger(__name__)


class SchemaParser(BaseParser):
    """Parses the flat list of SchemaElement structs."""

    def read_schema_element(self) -> SchemaElement:  # noqa: C901
        struct_parser = ThriftStructParser(self.parser)
        element = SchemaElement(name='')
        seen_name = False

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            # `read_value` returns the primitive value, or None if it's a
            # complex type (e.g. logicalType) that we skip.
            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case SchemaElementFieldId.TYPE:
                    element.type = to_enum(Type, value)
                case SchemaElementFieldId.TYPE_LENGTH:
                    element.type_length = value
                case SchemaElementFieldId.REPETITION_TYPE:
                    element.repetition_type = to_enum(Repetition, value)
                case SchemaElementFieldId.NAME:
                    element.name = to_str(value)
                    seen_name = True
                case SchemaElementFieldId.NUM_CHILDREN:
                    element.num_children = value
                case SchemaElementFieldId.CONVERTED_TYPE:
                    element.converted_type = to_enum(ConvertedType, value)
                case SchemaElementFieldId.SCALE:
                    element.scale = value
                case SchemaElementFieldId.PRECISION:
                    element.precision = value
                case SchemaElementFieldId.FIELD_ID:
                    element.field_id = value

        if not seen_name:
            raise ThriftParsingError('Schema element is missing its required name')

        logger.debug(
            'Read schema element: %s (type=%s, children=%s)',
            element.name,
            element.type,
            element.num_children,
        )
        return element

    def parse_schema_field(self) -> list[SchemaElement]:
        elements = self.read_list(self.read_schema_element)
        logger.debug('Read %d schema elements', len(elements))
        return elements
