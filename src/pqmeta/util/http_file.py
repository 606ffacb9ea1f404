"""
Read-only file object over HTTP range requests.

Teaching Points:
- Reading a footer only needs the last few kilobytes of a file, so a remote
  file never has to be downloaded in full
- The file size comes from the Content-Range header of a one-byte request
- seek and tell only move a local cursor; bytes are fetched lazily on read
"""

import logging
import urllib.request

from os import SEEK_SET
from typing import Self

from ..exceptions import ParquetNetworkError, ParquetUrlError

logger = logging.getLogger(__name__)


def check_url(url: str) -> None:
    if not url.startswith(('http:', 'https:')):
        raise ParquetUrlError(f"URL must start with 'http:' or 'https:': {url}")


class HttpFile:
    """
    Seekable, read-only view of a remote file.

    Ranges that have been fetched once are cached for the life of the object,
    which matters because footer reading touches the tail of the file twice.
    """

    def __init__(self, url: str):
        """
        Raises:
            ParquetUrlError: If the URL is not HTTP(S)
            ParquetNetworkError: If the server is unreachable or does not
                honor range requests
        """
        check_url(url)
        self.url = url
        self._position = 0
        self._cache: dict[tuple[int, int], bytes] = {}
        self._closed = False
        self._size = self._fetch_size()
        logger.debug('Opened %s (%d bytes)', url, self._size)

    def _request(self, start: int, end: int) -> tuple[bytes, str | None]:
        # security rule S310 mitigated by check_url() call
        request = urllib.request.Request(  # noqa: S310
            self.url,
            headers={'Range': f'bytes={start}-{end - 1}'},
        )
        try:
            with urllib.request.urlopen(request) as response:  # noqa: S310
                return response.read(), response.headers.get('Content-Range')
        except (OSError, ValueError) as e:
            raise ParquetNetworkError(
                f'Failed to fetch bytes {start}-{end} from {self.url}: {e}',
            ) from e

    def _fetch_size(self) -> int:
        _, content_range = self._request(0, 1)
        if content_range is None:
            raise ParquetNetworkError(
                f'Server does not support range requests for {self.url}',
            )
        try:
            return int(content_range.split('/')[-1])
        except ValueError as e:
            raise ParquetNetworkError(
                f'Cannot determine file size for {self.url} '
                f'from Content-Range {content_range!r}',
            ) from e

    @property
    def size(self) -> int:
        return self._size

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1, /) -> bytes:
        if self._closed:
            raise ValueError('I/O operation on closed file')

        if size < 0:
            size = self._size - self._position

        start = self._position
        end = min(start + size, self._size)
        if start >= end:
            return b''

        key = (start, end)
        data = self._cache.get(key)
        if data is None:
            logger.debug('Fetching bytes %d-%d from %s', start, end, self.url)
            data, _ = self._request(start, end)
            self._cache[key] = data

        self._position = end
        return data

    def seek(self, offset: int, whence: int = SEEK_SET, /) -> int:
        match whence:
            case 0:
                position = offset
            case 1:
                position = self._position + offset
            case 2:
                position = self._size + offset
            case _:
                raise ValueError(f'Invalid whence value: {whence}')

        self._position = max(0, min(position, self._size))
        return self._position

    def tell(self) -> int:
        return self._position

    def close(self) -> None:
        self._cache.clear()
        self._closed = True

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def seekable(self) -> bool:
        return True

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f'HttpFile(url={self.url!r}, size={self._size}, pos={self._position})'
