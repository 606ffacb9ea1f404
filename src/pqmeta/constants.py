PARQUET_MAGIC = b'PAR1'

# 4-byte little-endian footer length followed by the magic
FOOTER_SIZE = 8
MIN_FILE_SIZE = len(PARQUET_MAGIC) + FOOTER_SIZE
