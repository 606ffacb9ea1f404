"""
Conversion between the schema tree and the footer's flat element list.

Teaching Points:
- The footer stores the schema as a depth-first (pre-order) list of elements
- Each group element records how many children immediately follow it
- Leaves come out of the flattening in the same order they are indexed as
  columns, which is what lets row groups address column chunks by position
"""

import logging

from collections.abc import Iterator

from pydantic import ValidationError

from pqmeta.enums import Repetition
from pqmeta.exceptions import ParquetFormatError
from pqmeta.format import SchemaElement

from .nodes import GroupNode, Node, PrimitiveNode

logger = logging.getLogger(__name__)


def flatten_schema(schema_root: GroupNode) -> list[SchemaElement]:
    """Flatten a schema tree into its pre-order list of footer elements."""
    elements: list[SchemaElement] = []
    _flatten_node(schema_root, elements, is_root=True)
    logger.debug(
        "Flattened schema '%s' into %d elements",
        schema_root.name,
        len(elements),
    )
    return elements


def _flatten_node(
    node: Node,
    elements: list[SchemaElement],
    is_root: bool = False,
) -> None:
    if isinstance(node, GroupNode):
        # the root element never carries a repetition
        elements.append(
            SchemaElement(
                name=node.name,
                repetition_type=None if is_root else node.repetition,
                num_children=len(node.children),
                converted_type=node.converted_type,
                field_id=node.field_id,
            ),
        )
        for child in node.children:
            _flatten_node(child, elements)
        return

    assert isinstance(node, PrimitiveNode)
    elements.append(
        SchemaElement(
            name=node.name,
            type=node.physical_type,
            type_length=node.type_length,
            repetition_type=node.repetition,
            converted_type=node.converted_type,
            scale=node.scale,
            precision=node.precision,
            field_id=node.field_id,
        ),
    )


def convert_flat_schema(elements: list[SchemaElement]) -> GroupNode:
    """
    Rebuild the schema tree from its flat footer elements.

    Raises:
        ParquetFormatError: If the list is empty, the root is not a group,
            a group claims more children than exist, or elements are left
            over once the root is complete
    """
    if not elements:
        raise ParquetFormatError('Schema has no elements')

    root_element = elements[0]
    if not root_element.is_group():
        raise ParquetFormatError(
            f"Schema root '{root_element.name}' must be a group",
        )
    if root_element.repetition_type is not None:
        logger.warning(
            "Schema root '%s' carries repetition %s; root elements should not",
            root_element.name,
            root_element.repetition_type.name,
        )

    elements_iter = iter(elements)
    try:
        root = _read_schema_tree(elements_iter, is_root=True)
    except ValidationError as e:
        raise ParquetFormatError(f'Invalid schema element: {e}') from e

    remaining = sum(1 for _ in elements_iter)
    if remaining:
        raise ParquetFormatError(
            f'Schema has {remaining} elements not reachable from the root',
        )

    assert isinstance(root, GroupNode)
    return root


def _read_schema_tree(
    elements_iter: Iterator[SchemaElement],
    is_root: bool = False,
) -> Node:
    try:
        element = next(elements_iter)
    except StopIteration:
        raise ParquetFormatError(
            'Unexpected end of schema elements. This suggests a malformed '
            'schema where a parent element claims more children than exist.',
        ) from None

    repetition = element.repetition_type
    if repetition is None and not is_root:
        logger.warning(
            "Schema element '%s' has no repetition; assuming REQUIRED",
            element.name,
        )
        repetition = Repetition.REQUIRED

    if element.is_group():
        children = [
            _read_schema_tree(elements_iter) for _ in range(element.num_children or 0)
        ]
        return GroupNode(
            name=element.name,
            repetition=repetition,
            converted_type=element.converted_type,
            field_id=element.field_id,
            children=children,
        )

    if element.type is None:
        raise ParquetFormatError(
            f"Schema element '{element.name}' is neither a group nor typed",
        )

    return PrimitiveNode(
        name=element.name,
        repetition=repetition,
        physical_type=element.type,
        type_length=element.type_length,
        converted_type=element.converted_type,
        scale=element.scale,
        precision=element.precision,
        field_id=element.field_id,
    )
