"""Plain-dict rendering of footer records, e.g. for JSON output."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

import cattrs

from .enums import Compression, ConvertedType, Encoding, Repetition, Type
from .format import FileMetaData

_ENUMS: tuple[type[IntEnum], ...] = (
    Compression,
    ConvertedType,
    Encoding,
    Repetition,
    Type,
)


def _structure_enum(value: Any, enum_cls: type[IntEnum]) -> IntEnum:
    if isinstance(value, str):
        return enum_cls[value]
    return enum_cls(value)


def create_converter() -> cattrs.Converter:
    """
    Create a converter for footer records.

    Enums are rendered by name and raw statistics bytes as hex strings, so
    the output is JSON-safe and reversible.
    """
    converter = cattrs.Converter()

    converter.register_unstructure_hook(bytes, lambda value: value.hex())
    converter.register_structure_hook(bytes, lambda value, _: bytes.fromhex(value))

    # enums are registered one by one so they win over the int hooks
    for enum_cls in _ENUMS:
        converter.register_unstructure_hook(enum_cls, lambda member: member.name)
        converter.register_structure_hook(enum_cls, _structure_enum)

    return converter


_converter = create_converter()


def unstructure_file_metadata(metadata: FileMetaData) -> dict[str, Any]:
    return _converter.unstructure(metadata)


def structure_file_metadata(data: dict[str, Any]) -> FileMetaData:
    return _converter.structure(data, FileMetaData)
