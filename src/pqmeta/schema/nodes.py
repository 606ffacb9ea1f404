from __future__ import annotations

from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    field_validator,
    model_validator,
)

from pqmeta.enums import ConvertedType, Repetition, Type


class Node(BaseModel):
    """Base of the schema tree; names are unique among siblings."""

    model_config = ConfigDict(frozen=True)

    name: str
    repetition: Repetition | None = Repetition.REQUIRED
    converted_type: ConvertedType | None = None
    field_id: int | None = None

    def is_group(self) -> bool:
        return False


class PrimitiveNode(Node):
    node_type: Literal['primitive'] = 'primitive'
    physical_type: Type
    type_length: int | None = None
    scale: int | None = None
    precision: int | None = None

    @model_validator(mode='after')
    def check_type_length(self) -> PrimitiveNode:
        if self.physical_type == Type.FIXED_LEN_BYTE_ARRAY and (
            self.type_length is None or self.type_length <= 0
        ):
            raise ValueError(
                f"Column '{self.name}' is FIXED_LEN_BYTE_ARRAY "
                'but has no positive type_length',
            )
        return self

    def __repr__(self) -> str:
        rep = f' {self.repetition.name}' if self.repetition is not None else ''
        logical = f' [{self.converted_type.name}]' if self.converted_type else ''
        return f'Column({self.name}: {self.physical_type.name}{rep}{logical})'


class GroupNode(Node):
    node_type: Literal['group'] = 'group'
    children: tuple[AnyNode, ...] = ()

    @field_validator('children')
    @classmethod
    def check_unique_names(cls, children: tuple[Node, ...]) -> tuple[Node, ...]:
        seen: set[str] = set()
        for child in children:
            if child.name in seen:
                raise ValueError(f"Duplicate child name '{child.name}' in group")
            seen.add(child.name)
        return children

    def is_group(self) -> bool:
        return True

    def count_leaf_columns(self) -> int:
        """Count all columns (leaves) in this group and its descendants."""
        return sum(
            child.count_leaf_columns() if isinstance(child, GroupNode) else 1
            for child in self.children
        )

    def find_element(self, path: str | list[str]) -> Node:
        """Finds a descendant node by its dotted path."""
        not_found = KeyError(f"Schema element for path '{path}' not found")

        if isinstance(path, str):
            path = path.split('.')

        child_name, *rest = path
        for child in self.children:
            if child.name == child_name:
                break
        else:
            raise not_found

        if not rest:
            return child
        if isinstance(child, GroupNode):
            return child.find_element(rest)
        raise not_found

    def __repr__(self) -> str:
        inner = ', '.join(repr(child) for child in self.children)
        return f'Group({self.name}){{{inner}}}'


AnyNode = Annotated[PrimitiveNode | GroupNode, Discriminator('node_type')]

GroupNode.model_rebuild()
