from collections.abc import Callable
from enum import IntEnum
from typing import TypeVar

from pqmeta.exceptions import ThriftParsingError
from pqmeta.thrift import ThriftCompactParser

T = TypeVar('T')


class BaseParser:
    """Shared helpers for the footer struct parsers."""

    def __init__(self, parser: ThriftCompactParser):
        self.parser = parser

    def read_list(self, read_element_func: Callable[[], T]) -> list[T]:
        """Read a list header and then each of its elements."""
        size, _ = self.parser.read_list_header()
        return [read_element_func() for _ in range(size)]

    def read_i32(self) -> int:
        return self.parser.read_i32()

    def read_i64(self) -> int:
        return self.parser.read_i64()

    def read_string(self) -> str:
        return self.parser.read_string()


E = TypeVar('E', bound=IntEnum)


def to_enum(enum_cls: type[E], value: int) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise ThriftParsingError(
            f'Invalid {enum_cls.__name__} value: {value}',
        ) from None


def to_str(value: bytes) -> str:
    """Decode a BINARY field that holds UTF-8 text."""
    try:
        return value.decode('utf-8')
    except UnicodeDecodeError as e:
        raise ThriftParsingError(f'Invalid UTF-8 string: {e}') from e
