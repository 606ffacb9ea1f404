class PqMetaError(Exception):
    """Base class for all errors raised by pqmeta."""


class ParquetFormatError(PqMetaError):
    """The file, its trailer, or its flat schema is malformed."""


class ThriftParsingError(ParquetFormatError):
    """The compact-encoded footer bytes could not be decoded."""


class ParquetUrlError(PqMetaError):
    pass


class ParquetNetworkError(PqMetaError):
    pass


class OutOfRangeError(PqMetaError, IndexError):
    """An index was outside the valid range of a metadata container."""

    def __init__(self, message: str, index: int, bound: int) -> None:
        super().__init__(message)
        self.index = index
        self.bound = bound


class IncompleteBuildError(PqMetaError):
    """A builder was finished before all of its children were finished."""


class BuilderStateError(PqMetaError):
    """A builder was used out of sequence or after it was finished."""


class MetadataConsistencyError(PqMetaError):
    """Recorded sizes disagree with what the writer reports it wrote."""
