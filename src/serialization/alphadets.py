"""
AlphaDets binary files.

Each CI string is stored as a fixed-width big-endian record of
``ceil(norb / 8)`` bytes. Records follow each other with no header,
separator or trailer; the downstream diagonalization solver reads them
back using the same width.
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

PathLike = Union[str, Path]


def record_width(norb: int) -> int:
    """Number of bytes used to store one CI string of ``norb`` orbitals."""
    if norb <= 0:
        raise ValueError(f"norb must be positive, got {norb}")
    return (norb + 7) // 8


def integer_to_bytes(n: int, norb: int) -> bytes:
    """
    Encode one CI string as a big-endian record.

    Args:
        n: CI string, must fit in ``norb`` bits
        norb: Number of spatial orbitals

    Returns:
        ``ceil(norb / 8)`` bytes, most significant byte first
    """
    if n < 0 or n >> norb:
        raise ValueError(f"CI string {n} does not fit in {norb} orbitals")
    return int(n).to_bytes(record_width(norb), byteorder="big", signed=False)


def ci_strs_to_bytes(ci_strs: Iterable[int], norb: int) -> List[bytes]:
    """Encode CI strings as records, keeping their order."""
    return [integer_to_bytes(ci_str, norb) for ci_str in ci_strs]


def alphadets_filename(
    run_id: str,
    i_recovery: int,
    directory: Optional[PathLike] = None,
) -> Path:
    """
    Artifact path for one recovery iteration.

    Args:
        run_id: Run identifier
        i_recovery: Recovery iteration index
        directory: Parent directory (default: current directory)
    """
    name = f"AlphaDets_{run_id}_{i_recovery}_cpp.bin"
    return Path(directory) / name if directory is not None else Path(name)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_bytestrings_to_file(byte_strings: Sequence[bytes], filename: PathLike) -> Path:
    """
    Write records back to back into ``filename``.

    The data goes to a temporary file in the target directory which is then
    renamed over ``filename``, so a failed write never leaves a partial
    artifact behind. Errors propagate to the caller.
    The file gets the same permissions as one created with ``open``.

    Returns:
        Path of the written file
    """
    target = Path(filename)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
    )
    try:
        with os.fdopen(fd, "wb") as f:
            for byte_string in byte_strings:
                f.write(byte_string)
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    return target


def read_alphadets_file(filename: PathLike, norb: int) -> List[int]:
    """
    Decode an AlphaDets file back into CI strings.

    Args:
        filename: Artifact path
        norb: Number of spatial orbitals the file was written with

    Returns:
        CI strings in file order
    """
    width = record_width(norb)
    data = Path(filename).read_bytes()
    if len(data) % width != 0:
        raise ValueError(
            f"File size {len(data)} is not a multiple of the record width {width}"
        )
    return [
        int.from_bytes(data[i:i + width], byteorder="big", signed=False)
        for i in range(0, len(data), width)
    ]
