from typing import Protocol, runtime_checkable


@runtime_checkable
class ReadableSeekable(Protocol):
    def read(self, size: int = -1, /) -> bytes: ...

    def seek(self, offset: int, whence: int = 0, /) -> int: ...

    def tell(self) -> int: ...


@runtime_checkable
class Writable(Protocol):
    def write(self, data: bytes, /) -> int | None: ...
