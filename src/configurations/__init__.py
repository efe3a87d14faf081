"""Configuration extraction: bitstrings to unique, truncated CI strings."""

from .ci_strings import (
    MAX_NORB,
    as_bitstring_matrix,
    bitstrings_to_matrix,
    split_sectors,
    sectors_to_ci_strs,
    sector_to_ci_string,
    ci_string_to_sector,
    hartree_fock_ci_string,
)
from .selection import (
    symmetrize_ci_strs,
    bitstring_matrix_to_ci_strs,
    unique_ci_strs_with_reference,
    truncate_ci_strs,
)

__all__ = [
    "MAX_NORB",
    "as_bitstring_matrix",
    "bitstrings_to_matrix",
    "split_sectors",
    "sectors_to_ci_strs",
    "sector_to_ci_string",
    "ci_string_to_sector",
    "hartree_fock_ci_string",
    "symmetrize_ci_strs",
    "bitstring_matrix_to_ci_strs",
    "unique_ci_strs_with_reference",
    "truncate_ci_strs",
]
