"""Fixed-width binary encoding of CI strings for the diagonalization solver."""

from .alphadets import (
    record_width,
    integer_to_bytes,
    ci_strs_to_bytes,
    alphadets_filename,
    write_bytestrings_to_file,
    read_alphadets_file,
)

__all__ = [
    "record_width",
    "integer_to_bytes",
    "ci_strs_to_bytes",
    "alphadets_filename",
    "write_bytestrings_to_file",
    "read_alphadets_file",
]
