"""Writer configuration consumed by the metadata builders."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from ._version import get_version
from .enums import DICTIONARY_ENCODINGS, Compression, Encoding, ParquetVersion
from .schema import ColumnPath

DEFAULT_CREATED_BY = f'pqmeta version {get_version()}'


def _check_data_encoding(encoding: Encoding) -> Encoding:
    if encoding in DICTIONARY_ENCODINGS:
        raise ValueError(
            f'{encoding.name} is a dictionary encoding and cannot be used '
            'as a column data encoding; enable dictionary encoding instead',
        )
    return encoding


DataEncoding = Annotated[Encoding, AfterValidator(_check_data_encoding)]


class ColumnProperties(BaseModel):
    """Per-column overrides; unset fields fall back to the writer defaults."""

    model_config = ConfigDict(frozen=True)

    compression: Compression | None = None
    encoding: DataEncoding | None = None
    dictionary_enabled: bool | None = None


class WriterProperties(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: ParquetVersion = ParquetVersion.PARQUET_1_0
    created_by: str = DEFAULT_CREATED_BY
    compression: Compression = Compression.UNCOMPRESSED
    encoding: DataEncoding = Encoding.PLAIN
    dictionary_enabled: bool = True
    columns: dict[str, ColumnProperties] = Field(default_factory=dict)

    def _column(self, path: ColumnPath | str) -> ColumnProperties | None:
        return self.columns.get(str(path))

    def compression_for(self, path: ColumnPath | str) -> Compression:
        column = self._column(path)
        if column is not None and column.compression is not None:
            return column.compression
        return self.compression

    def encoding_for(self, path: ColumnPath | str) -> Encoding:
        column = self._column(path)
        if column is not None and column.encoding is not None:
            return column.encoding
        return self.encoding

    def dictionary_enabled_for(self, path: ColumnPath | str) -> bool:
        column = self._column(path)
        if column is not None and column.dictionary_enabled is not None:
            return column.dictionary_enabled
        return self.dictionary_enabled

    @property
    def dictionary_page_encoding(self) -> Encoding:
        if self.version == ParquetVersion.PARQUET_1_0:
            return Encoding.PLAIN_DICTIONARY
        return Encoding.PLAIN

    @property
    def dictionary_index_encoding(self) -> Encoding:
        if self.version == ParquetVersion.PARQUET_1_0:
            return Encoding.PLAIN_DICTIONARY
        return Encoding.RLE_DICTIONARY
