from __future__ import annotations

import logging

from collections.abc import Iterable, Iterator
from functools import cached_property

from pydantic import BaseModel, ConfigDict

from pqmeta.enums import ConvertedType, Repetition, Type
from pqmeta.exceptions import OutOfRangeError

from .nodes import GroupNode, Node, PrimitiveNode

logger = logging.getLogger(__name__)


class ColumnPath(BaseModel):
    """Path from the schema root (exclusive) to a leaf column."""

    model_config = ConfigDict(frozen=True)

    parts: tuple[str, ...]

    @classmethod
    def of(cls, parts: Iterable[str]) -> ColumnPath:
        return cls(parts=tuple(parts))

    @classmethod
    def from_dot_string(cls, dotted: str) -> ColumnPath:
        return cls(parts=tuple(dotted.split('.')))

    def extend(self, name: str) -> ColumnPath:
        return ColumnPath(parts=(*self.parts, name))

    def to_dot_string(self) -> str:
        return '.'.join(self.parts)

    def to_dot_vector(self) -> list[str]:
        return list(self.parts)

    def __str__(self) -> str:
        return self.to_dot_string()

    def __len__(self) -> int:
        return len(self.parts)


class ColumnDescriptor(BaseModel):
    """A leaf column together with its position-derived attributes."""

    model_config = ConfigDict(frozen=True)

    node: PrimitiveNode
    path: ColumnPath
    max_definition_level: int
    max_repetition_level: int

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def physical_type(self) -> Type:
        return self.node.physical_type

    @property
    def converted_type(self) -> ConvertedType | None:
        return self.node.converted_type

    @property
    def type_length(self) -> int | None:
        return self.node.type_length


class SchemaDescriptor:
    """
    Indexed view of a schema tree's leaf columns.

    Leaves are numbered in depth-first pre-order, the same order in which
    ``flatten_schema`` emits them and column chunks appear in a row group.
    """

    def __init__(self, schema_root: GroupNode):
        self._schema_root = schema_root
        self._leaves: list[ColumnDescriptor] = []
        self._leaf_index: dict[ColumnPath, int] = {}

        for child in schema_root.children:
            self._build_tree(child, ColumnPath(parts=()), 0, 0)

        logger.debug(
            "Schema '%s' initialized with %d columns",
            schema_root.name,
            len(self._leaves),
        )

    def _build_tree(
        self,
        node: Node,
        parent_path: ColumnPath,
        max_def_level: int,
        max_rep_level: int,
    ) -> None:
        if node.repetition == Repetition.OPTIONAL:
            max_def_level += 1
        elif node.repetition == Repetition.REPEATED:
            max_def_level += 1
            max_rep_level += 1

        path = parent_path.extend(node.name)
        if isinstance(node, GroupNode):
            for child in node.children:
                self._build_tree(child, path, max_def_level, max_rep_level)
            return

        assert isinstance(node, PrimitiveNode)
        self._leaf_index[path] = len(self._leaves)
        self._leaves.append(
            ColumnDescriptor(
                node=node,
                path=path,
                max_definition_level=max_def_level,
                max_repetition_level=max_rep_level,
            ),
        )

    @property
    def schema_root(self) -> GroupNode:
        return self._schema_root

    @property
    def name(self) -> str:
        return self._schema_root.name

    @property
    def num_columns(self) -> int:
        return len(self._leaves)

    def column(self, i: int) -> ColumnDescriptor:
        if not 0 <= i < self.num_columns:
            raise OutOfRangeError(
                f'The schema only has {self.num_columns} columns, '
                f'requested column: {i}',
                index=i,
                bound=self.num_columns,
            )
        return self._leaves[i]

    def column_index(self, path: ColumnPath | str) -> int:
        if isinstance(path, str):
            path = ColumnPath.from_dot_string(path)
        try:
            return self._leaf_index[path]
        except KeyError:
            raise KeyError(f"No column with path '{path}' in schema") from None

    def __iter__(self) -> Iterator[ColumnDescriptor]:
        return iter(self._leaves)

    @cached_property
    def column_paths(self) -> list[str]:
        return [str(leaf.path) for leaf in self._leaves]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaDescriptor):
            return NotImplemented
        # the root's own repetition is not part of the on-disk schema
        return (
            self.name == other.name
            and self._schema_root.children == other._schema_root.children
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'SchemaDescriptor({self._schema_root!r})'
