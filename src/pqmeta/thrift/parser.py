"""
Thrift compact protocol decoding.

Teaching Points:
- Parquet footers are Thrift structs serialized with the compact protocol
- Integers are zigzag-encoded varints, so small magnitudes take few bytes
- Field headers store the id as a delta from the previous field when possible
- Unknown fields can always be skipped, which keeps old readers working
"""

import logging
import struct

from pqmeta.exceptions import ThriftParsingError

from .enums import (
    THRIFT_FIELD_DELTA_SHIFT,
    THRIFT_FIELD_TYPE_MASK,
    THRIFT_SIZE_SHIFT,
    THRIFT_SPECIAL_LIST_SIZE,
    ThriftFieldType,
)

logger = logging.getLogger(__name__)


class ThriftCompactParser:
    """Low-level reader over a compact-encoded byte buffer."""

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        length: int | None = None,
    ):
        view = memoryview(data)
        if length is not None:
            if length < 0 or length > len(view):
                raise ThriftParsingError(
                    f'Requested length {length} is outside the buffer '
                    f'of {len(view)} bytes',
                )
            view = view[:length]
        self.data = view
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def read(self, length: int = 1) -> bytes:
        end = self.pos + length
        if length < 0 or end > len(self.data):
            raise ThriftParsingError(
                f'Unexpected end of data: wanted {length} bytes at position '
                f'{self.pos}, only {len(self.data) - self.pos} available',
            )
        value = bytes(self.data[self.pos : end])
        self.pos = end
        return value

    def read_byte(self) -> int:
        if self.pos >= len(self.data):
            raise ThriftParsingError(
                f'Unexpected end of data at position {self.pos}',
            )
        value = self.data[self.pos]
        self.pos += 1
        return value

    def read_varint(self) -> int:
        result = 0
        shift = 0
        while True:
            byte = self.read_byte()
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7
            if shift > 63:
                raise ThriftParsingError(
                    f'Varint too long at position {self.pos}',
                )

    def read_zigzag(self) -> int:
        n = self.read_varint()
        return (n >> 1) ^ -(n & 1)

    def read_i8(self) -> int:
        return struct.unpack('<b', self.read(1))[0]

    def read_i16(self) -> int:
        return self.read_zigzag()

    def read_i32(self) -> int:
        return self.read_zigzag()

    def read_i64(self) -> int:
        return self.read_zigzag()

    def read_double(self) -> float:
        return struct.unpack('<d', self.read(8))[0]

    def read_bytes(self) -> bytes:
        length = self.read_varint()
        return self.read(length)

    def read_string(self) -> str:
        raw = self.read_bytes()
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ThriftParsingError(f'Invalid UTF-8 string: {e}') from e

    def read_list_header(self) -> tuple[int, ThriftFieldType]:
        header = self.read_byte()
        size = header >> THRIFT_SIZE_SHIFT
        element_type = _field_type(header & THRIFT_FIELD_TYPE_MASK, self.pos)

        # sizes of 15 or more are stored in a following varint
        if size == THRIFT_SPECIAL_LIST_SIZE:
            size = self.read_varint()

        return size, element_type

    def read_map_header(
        self,
    ) -> tuple[int, ThriftFieldType | None, ThriftFieldType | None]:
        size = self.read_varint()
        if size == 0:
            return 0, None, None
        types = self.read_byte()
        return (
            size,
            _field_type(types >> 4, self.pos),
            _field_type(types & THRIFT_FIELD_TYPE_MASK, self.pos),
        )

    def skip(self, field_type: ThriftFieldType) -> None:  # noqa: C901
        """Skip over one value of the given type."""
        match field_type:
            case ThriftFieldType.BOOL_TRUE | ThriftFieldType.BOOL_FALSE:
                # field-header bools carry no payload
                pass
            case ThriftFieldType.BYTE:
                self.read(1)
            case ThriftFieldType.I16 | ThriftFieldType.I32 | ThriftFieldType.I64:
                self.read_varint()
            case ThriftFieldType.DOUBLE:
                self.read(8)
            case ThriftFieldType.BINARY:
                self.read_bytes()
            case ThriftFieldType.LIST | ThriftFieldType.SET:
                size, element_type = self.read_list_header()
                for _ in range(size):
                    self._skip_element(element_type)
            case ThriftFieldType.MAP:
                size, key_type, value_type = self.read_map_header()
                for _ in range(size):
                    self._skip_element(key_type)
                    self._skip_element(value_type)
            case ThriftFieldType.STRUCT:
                ThriftStructParser(self).skip_struct()
            case _:
                raise ThriftParsingError(f'Cannot skip field of type {field_type}')

    def _skip_element(self, element_type: ThriftFieldType | None) -> None:
        # container bools are one byte each, unlike field-header bools
        if element_type in (ThriftFieldType.BOOL_TRUE, ThriftFieldType.BOOL_FALSE):
            self.read(1)
        elif element_type is not None:
            self.skip(element_type)


class ThriftStructParser:
    """
    Reads the fields of a single struct.

    Field ids are delta-encoded relative to the previous field of the same
    struct, so each nested struct needs its own instance.
    """

    def __init__(self, parser: ThriftCompactParser):
        self.parser = parser
        self.last_field_id = 0

    def read_field_header(self) -> tuple[ThriftFieldType, int]:
        byte = self.parser.read_byte()
        if byte == ThriftFieldType.STOP:
            return ThriftFieldType.STOP, 0

        field_type = _field_type(byte & THRIFT_FIELD_TYPE_MASK, self.parser.pos)
        delta = byte >> THRIFT_FIELD_DELTA_SHIFT
        if delta == 0:
            field_id = self.parser.read_i16()
        else:
            field_id = self.last_field_id + delta

        self.last_field_id = field_id
        return field_type, field_id

    def read_value(
        self,
        field_type: ThriftFieldType,
    ) -> int | float | bool | bytes | None:
        """
        Read a primitive field value.

        Complex values (lists, sets, maps, structs) are skipped and ``None``
        is returned; callers dispatch those types before calling this.
        """
        match field_type:
            case ThriftFieldType.BOOL_TRUE:
                return True
            case ThriftFieldType.BOOL_FALSE:
                return False
            case ThriftFieldType.BYTE:
                return self.parser.read_i8()
            case ThriftFieldType.I16 | ThriftFieldType.I32 | ThriftFieldType.I64:
                return self.parser.read_zigzag()
            case ThriftFieldType.DOUBLE:
                return self.parser.read_double()
            case ThriftFieldType.BINARY:
                return self.parser.read_bytes()
            case _:
                self.skip_field(field_type)
                return None

    def skip_field(self, field_type: ThriftFieldType) -> None:
        logger.debug('Skipping field of type %s', field_type.name)
        self.parser.skip(field_type)

    def skip_struct(self) -> None:
        while True:
            field_type, _ = self.read_field_header()
            if field_type == ThriftFieldType.STOP:
                return
            self.parser.skip(field_type)


def _field_type(value: int, pos: int) -> ThriftFieldType:
    try:
        return ThriftFieldType(value)
    except ValueError:
        raise ThriftParsingError(
            f'Unknown compact type id {value} near position {pos}',
        ) from None
