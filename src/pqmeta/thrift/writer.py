"""Thrift compact protocol encoding, the mirror of ``parser``."""

import struct

from collections.abc import Callable, Iterable
from typing import TypeVar

from .enums import (
    THRIFT_FIELD_DELTA_SHIFT,
    THRIFT_MAX_FIELD_DELTA,
    THRIFT_SIZE_SHIFT,
    THRIFT_SPECIAL_LIST_SIZE,
    ThriftFieldType,
)

T = TypeVar('T')


class ThriftCompactWriter:
    """Low-level writer appending compact-encoded values to a buffer."""

    def __init__(self) -> None:
        self.buffer = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self.buffer)

    def write(self, data: bytes) -> None:
        self.buffer.extend(data)

    def write_byte(self, value: int) -> None:
        self.buffer.append(value & 0xFF)

    def write_varint(self, value: int) -> None:
        if value < 0:
            raise ValueError(f'Varints must be non-negative, got {value}')
        while value > 0x7F:
            self.buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self.buffer.append(value)

    def write_zigzag(self, value: int, bits: int = 64) -> None:
        self.write_varint(((value << 1) ^ (value >> (bits - 1))) & ((1 << bits) - 1))

    def write_i8(self, value: int) -> None:
        self.write(struct.pack('<b', value))

    def write_i16(self, value: int) -> None:
        self.write_zigzag(value, 16)

    def write_i32(self, value: int) -> None:
        self.write_zigzag(value, 32)

    def write_i64(self, value: int) -> None:
        self.write_zigzag(value, 64)

    def write_double(self, value: float) -> None:
        self.write(struct.pack('<d', value))

    def write_bytes(self, value: bytes) -> None:
        self.write_varint(len(value))
        self.write(value)

    def write_string(self, value: str) -> None:
        self.write_bytes(value.encode('utf-8'))

    def write_list_header(self, element_type: ThriftFieldType, size: int) -> None:
        if size < THRIFT_SPECIAL_LIST_SIZE:
            self.write_byte((size << THRIFT_SIZE_SHIFT) | element_type)
        else:
            self.write_byte(
                (THRIFT_SPECIAL_LIST_SIZE << THRIFT_SIZE_SHIFT) | element_type,
            )
            self.write_varint(size)


class ThriftStructWriter:
    """Writes the fields of a single struct, tracking field id deltas."""

    def __init__(self, writer: ThriftCompactWriter):
        self.writer = writer
        self.last_field_id = 0

    def write_field_header(self, field_type: ThriftFieldType, field_id: int) -> None:
        delta = field_id - self.last_field_id
        if 0 < delta <= THRIFT_MAX_FIELD_DELTA:
            self.writer.write_byte((delta << THRIFT_FIELD_DELTA_SHIFT) | field_type)
        else:
            self.writer.write_byte(field_type)
            self.writer.write_i16(field_id)
        self.last_field_id = field_id

    def write_bool(self, field_id: int, value: bool) -> None:
        field_type = (
            ThriftFieldType.BOOL_TRUE if value else ThriftFieldType.BOOL_FALSE
        )
        self.write_field_header(field_type, field_id)

    def write_i32(self, field_id: int, value: int) -> None:
        self.write_field_header(ThriftFieldType.I32, field_id)
        self.writer.write_i32(value)

    def write_i64(self, field_id: int, value: int) -> None:
        self.write_field_header(ThriftFieldType.I64, field_id)
        self.writer.write_i64(value)

    def write_bytes(self, field_id: int, value: bytes) -> None:
        self.write_field_header(ThriftFieldType.BINARY, field_id)
        self.writer.write_bytes(value)

    def write_string(self, field_id: int, value: str) -> None:
        self.write_field_header(ThriftFieldType.BINARY, field_id)
        self.writer.write_string(value)

    def write_list(
        self,
        field_id: int,
        element_type: ThriftFieldType,
        values: Iterable[T],
        write_element: Callable[[T], None],
    ) -> None:
        values = list(values)
        self.write_field_header(ThriftFieldType.LIST, field_id)
        self.writer.write_list_header(element_type, len(values))
        for value in values:
            write_element(value)

    def write_struct(self, field_id: int, write_body: Callable[[], None]) -> None:
        """Write a nested struct; ``write_body`` must end with its own stop."""
        self.write_field_header(ThriftFieldType.STRUCT, field_id)
        write_body()

    def write_stop(self) -> None:
        self.writer.write_byte(ThriftFieldType.STOP)
