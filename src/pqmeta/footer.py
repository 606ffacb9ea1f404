"""
Reading and writing the file trailer that wraps the encoded footer.

Teaching Points:
- A Parquet file ends with: encoded FileMetaData, its length as a 4-byte
  little-endian integer, and the magic bytes 'PAR1'
- Readers find the footer by seeking to the end, never by scanning forward
- The same trailer layout works for local files and HTTP range reads, so the
  reader only needs read, seek, and tell
"""

import logging
import struct

from os import SEEK_END

from .constants import FOOTER_SIZE, MIN_FILE_SIZE, PARQUET_MAGIC
from .exceptions import ParquetFormatError
from .metadata import FileMetadata
from .protocols import ReadableSeekable, Writable

logger = logging.getLogger(__name__)


def write_file_footer(metadata: FileMetadata, sink: Writable) -> int:
    """
    Write the footer, its length, and the trailing magic to ``sink``.

    Returns:
        Total number of bytes written
    """
    metadata_size = metadata.write_to(sink)
    sink.write(struct.pack('<I', metadata_size))
    sink.write(PARQUET_MAGIC)
    return metadata_size + FOOTER_SIZE


def read_file_metadata(reader: ReadableSeekable) -> FileMetadata:
    """
    Locate and decode the footer of a Parquet file.

    Raises:
        ParquetFormatError: If the file is too small, the trailing magic is
            wrong, or the recorded footer length does not fit in the file
    """
    file_size = reader.seek(0, SEEK_END)
    if file_size < MIN_FILE_SIZE:
        raise ParquetFormatError(
            f'File too small to be a valid Parquet file: {file_size} bytes',
        )

    reader.seek(-FOOTER_SIZE, SEEK_END)
    footer_start = reader.tell()
    footer_bytes = reader.read(FOOTER_SIZE)
    if len(footer_bytes) != FOOTER_SIZE:
        raise ParquetFormatError('Could not read complete footer')

    magic_footer = footer_bytes[4:8]
    if magic_footer != PARQUET_MAGIC:
        raise ParquetFormatError(
            'Invalid magic footer: expected '
            f'{PARQUET_MAGIC!r}, got {magic_footer!r}',
        )

    metadata_size = struct.unpack('<I', footer_bytes[:4])[0]
    metadata_start = footer_start - metadata_size
    if metadata_start < len(PARQUET_MAGIC):
        raise ParquetFormatError(
            f'Footer length {metadata_size} points before the start of the file',
        )

    logger.debug(
        'Reading %d bytes of file metadata at offset %d',
        metadata_size,
        metadata_start,
    )
    reader.seek(metadata_start)
    metadata_bytes = reader.read(metadata_size)
    if len(metadata_bytes) != metadata_size:
        raise ParquetFormatError('Could not read complete metadata')

    metadata, consumed = FileMetadata.parse(metadata_bytes, metadata_size)
    if consumed != metadata_size:
        logger.warning(
            'File metadata used %d of the %d bytes the footer declares',
            consumed,
            metadata_size,
        )
    return metadata
