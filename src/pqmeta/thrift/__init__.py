from .enums import ThriftFieldType
from .parser import ThriftCompactParser, ThriftStructParser
from .writer import ThriftCompactWriter, ThriftStructWriter

__all__ = [
    'ThriftCompactParser',
    'ThriftCompactWriter',
    'ThriftFieldType',
    'ThriftStructParser',
    'ThriftStructWriter',
]
