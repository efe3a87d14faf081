"""
Bitstring to CI-string conversion.

A sampled configuration is a row of ``2 * norb`` bits. Column ``i`` is bit
``i``; columns ``[0, norb)`` form the right sector and ``[norb, 2 * norb)``
the left sector. Each sector is encoded as the integer

    ci_str = sum_i bit_i * 2^i

which is a bijection between sector bit patterns and ``[0, 2^norb)``.
"""

import numpy as np
import torch
from typing import Iterable, List, Optional, Sequence, Tuple, Union

# Widest sector representable in unsigned 64-bit arithmetic
MAX_NORB = 64

BitstringMatrix = Union[np.ndarray, torch.Tensor, Sequence[Sequence[int]]]


def as_bitstring_matrix(bitstring_matrix: BitstringMatrix) -> np.ndarray:
    """Validate a batch and return it as a (n_configs, 2 * norb) uint8 array."""
    if isinstance(bitstring_matrix, torch.Tensor):
        array = bitstring_matrix.detach().cpu().numpy()
    elif isinstance(bitstring_matrix, np.ndarray):
        array = bitstring_matrix
    else:
        rows = list(bitstring_matrix)
        if not rows:
            raise ValueError("Batch contains no configurations")
        width = len(rows[0])
        for idx, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(
                    f"Configuration {idx} has {len(row)} bits, expected {width}"
                )
        array = np.asarray(rows)

    if array.ndim != 2:
        raise ValueError(
            f"Bitstring matrix must be 2-dimensional, got shape {array.shape}"
        )
    if array.shape[0] == 0:
        raise ValueError("Batch contains no configurations")
    if array.shape[1] == 0 or array.shape[1] % 2 != 0:
        raise ValueError(
            f"Configuration length must be a positive even number, got {array.shape[1]}"
        )
    _check_bits(array)
    return array.astype(np.uint8)


def _check_bits(array: np.ndarray):
    if array.dtype != np.bool_ and not np.all((array == 0) | (array == 1)):
        raise ValueError("Bitstring matrix may only contain 0 and 1")


def _check_norb(norb: int):
    if norb <= 0 or norb > MAX_NORB:
        raise ValueError(f"norb must be in [1, {MAX_NORB}], got {norb}")


def bitstrings_to_matrix(bitstrings: Iterable[str]) -> np.ndarray:
    """
    Convert text bitstrings to a bitstring matrix.

    The rightmost character is bit 0, matching the ordering of measurement
    counts (e.g. the keys of ``{"0011": 12, ...}``).

    Args:
        bitstrings: Iterable of strings made of '0' and '1'

    Returns:
        (n_configs, n_bits) uint8 array with column ``i`` holding bit ``i``
    """
    bitstrings = [s.strip() for s in bitstrings]
    if not bitstrings:
        raise ValueError("No bitstrings given")

    width = len(bitstrings[0])
    matrix = np.zeros((len(bitstrings), width), dtype=np.uint8)
    for i, s in enumerate(bitstrings):
        if len(s) != width:
            raise ValueError(f"Mixed-length bitstrings detected: '{s}'")
        if set(s) - {"0", "1"}:
            raise ValueError(f"Invalid bitstring: '{s}'")
        matrix[i, :] = np.frombuffer(s[::-1].encode("ascii"), dtype=np.uint8) - ord("0")
    return matrix


def split_sectors(bitstring_matrix: BitstringMatrix) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split every configuration into its two spin sectors.

    Args:
        bitstring_matrix: (n_configs, 2 * norb) bits

    Returns:
        (right, left): each (n_configs, norb); right holds bits [0, norb),
        left holds bits [norb, 2 * norb)
    """
    bits = as_bitstring_matrix(bitstring_matrix)
    norb = bits.shape[1] // 2
    return bits[:, :norb], bits[:, norb:]


def sectors_to_ci_strs(sectors: np.ndarray) -> List[int]:
    """
    Encode each row of a sector array as an integer CI string.

    Args:
        sectors: (n_configs, norb) array of 0/1

    Returns:
        CI strings aligned with the input rows
    """
    sectors = np.asarray(sectors)
    if sectors.ndim == 1:
        sectors = sectors[np.newaxis, :]
    norb = sectors.shape[1]
    _check_norb(norb)
    _check_bits(sectors)

    # Distinct powers of two never overflow uint64 for norb <= 64
    powers = np.left_shift(np.uint64(1), np.arange(norb, dtype=np.uint64))
    values = (sectors.astype(np.uint64) * powers).sum(axis=1, dtype=np.uint64)
    return [int(v) for v in values]


def sector_to_ci_string(sector: Sequence[int]) -> int:
    """Encode a single sector of bits as its CI string."""
    return sectors_to_ci_strs(np.asarray(sector).reshape(1, -1))[0]


def ci_string_to_sector(ci_str: int, norb: int) -> np.ndarray:
    """
    Decode a CI string back into ``norb`` occupation bits.

    Bit ``i`` of the result is ``(ci_str >> i) & 1``.
    """
    _check_norb(norb)
    if ci_str < 0 or ci_str >> norb:
        raise ValueError(f"CI string {ci_str} does not fit in {norb} orbitals")
    return np.array([(ci_str >> i) & 1 for i in range(norb)], dtype=np.uint8)


def hartree_fock_ci_string(num_elec: int, norb: Optional[int] = None) -> int:
    """
    CI string of the Hartree-Fock reference: the lowest ``num_elec`` orbitals occupied.

    Args:
        num_elec: Number of electrons in one sector
        norb: Optional number of spatial orbitals used to bound ``num_elec``
    """
    if num_elec < 0:
        raise ValueError(f"num_elec must be non-negative, got {num_elec}")
    if norb is not None and num_elec > norb:
        raise ValueError(
            f"num_elec ({num_elec}) cannot exceed the number of orbitals ({norb})"
        )
    return (1 << num_elec) - 1
