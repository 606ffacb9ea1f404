from .converter import convert_flat_schema, flatten_schema
from .descriptor import ColumnDescriptor, ColumnPath, SchemaDescriptor
from .nodes import GroupNode, Node, PrimitiveNode

__all__ = [
    'ColumnDescriptor',
    'ColumnPath',
    'GroupNode',
    'Node',
    'PrimitiveNode',
    'SchemaDescriptor',
    'convert_flat_schema',
    'flatten_schema',
]
