"""
Deduplication, symmetrization, reference injection and truncation of CI strings.

The selected set is built in two explicit phases: first a unique set is
formed (sector union, optional Hartree-Fock reference), then it is sorted
ascending and cut to the configuration budget.
"""

from typing import Iterable, List, Optional, Tuple

# Support both package imports and direct script execution
try:
    from .ci_strings import (
        BitstringMatrix,
        split_sectors,
        sectors_to_ci_strs,
        hartree_fock_ci_string,
    )
except ImportError:
    from configurations.ci_strings import (
        BitstringMatrix,
        split_sectors,
        sectors_to_ci_strs,
        hartree_fock_ci_string,
    )


def symmetrize_ci_strs(
    left_ci_strs: Iterable[int],
    right_ci_strs: Iterable[int],
    open_shell: bool = False,
) -> Tuple[List[int], List[int]]:
    """
    Reduce each sector to its unique CI strings.

    For closed-shell systems alpha and beta electrons share one active space,
    so both sectors are replaced by the union of the two unique sets.

    Args:
        left_ci_strs: CI strings of the left sector
        right_ci_strs: CI strings of the right sector
        open_shell: Keep the sectors independent

    Returns:
        (left, right) ascending lists of unique CI strings
    """
    unique_left = set(left_ci_strs)
    unique_right = set(right_ci_strs)

    if not open_shell:
        combined = unique_left | unique_right
        unique_left = unique_right = combined

    return sorted(unique_left), sorted(unique_right)


def bitstring_matrix_to_ci_strs(
    bitstring_matrix: BitstringMatrix,
    open_shell: bool = False,
) -> Tuple[List[int], List[int]]:
    """
    Convert a batch of configurations into unique left and right CI strings.

    Args:
        bitstring_matrix: (n_configs, 2 * norb) bits
        open_shell: Keep the two sectors independent

    Returns:
        (left_ci_strs, right_ci_strs), identical when ``open_shell`` is False
    """
    right, left = split_sectors(bitstring_matrix)
    return symmetrize_ci_strs(
        sectors_to_ci_strs(left),
        sectors_to_ci_strs(right),
        open_shell=open_shell,
    )


def unique_ci_strs_with_reference(
    left_ci_strs: Iterable[int],
    right_ci_strs: Iterable[int],
    num_elec: int,
    with_reference: bool = True,
    norb: Optional[int] = None,
) -> List[int]:
    """
    Merge both sectors, and optionally the Hartree-Fock reference, into one set.

    Sector identity is not kept: the result is the list of CI strings
    consumed by the downstream solver for both alpha and beta strings.

    Args:
        left_ci_strs: CI strings of the left sector
        right_ci_strs: CI strings of the right sector
        num_elec: Electrons per sector, defines the reference ``2^num_elec - 1``
        with_reference: Add the reference CI string
        norb: Number of spatial orbitals, bounds ``num_elec`` when given

    Returns:
        Ascending list of unique CI strings
    """
    unique_set = set()
    if with_reference:
        unique_set.add(hartree_fock_ci_string(num_elec, norb))
    unique_set.update(left_ci_strs)
    unique_set.update(right_ci_strs)
    return sorted(unique_set)


def truncate_ci_strs(
    ci_strs: Iterable[int],
    max_configurations: Optional[int],
) -> Tuple[List[int], int]:
    """
    Keep at most ``max_configurations`` CI strings, smallest values first.

    The input is deduplicated and sorted ascending before the cut, so the
    result does not depend on the input order.

    Args:
        ci_strs: CI strings to truncate
        max_configurations: Budget, ``None`` for no limit

    Returns:
        (kept, n_dropped)
    """
    ordered = sorted(set(ci_strs))

    if max_configurations is None:
        return ordered, 0
    if max_configurations < 0:
        raise ValueError(
            f"max_configurations must be non-negative, got {max_configurations}"
        )

    n_dropped = max(len(ordered) - max_configurations, 0)
    return ordered[:max_configurations], n_dropped
