from enum import IntEnum


class ThriftFieldType(IntEnum):
    """Type ids used by the Thrift compact protocol."""

    STOP = 0
    BOOL_TRUE = 1
    BOOL_FALSE = 2
    BYTE = 3
    I16 = 4
    I32 = 5
    I64 = 6
    DOUBLE = 7
    BINARY = 8
    LIST = 9
    SET = 10
    MAP = 11
    STRUCT = 12


# Field header: upper nibble is the field id delta, lower nibble the type.
# List header: upper nibble is the size, lower nibble the element type.
THRIFT_FIELD_TYPE_MASK = 0x0F
THRIFT_FIELD_DELTA_SHIFT = 4
THRIFT_SIZE_SHIFT = 4
THRIFT_SPECIAL_LIST_SIZE = 15
THRIFT_MAX_FIELD_DELTA = 15
