"""
Configuration Recovery Pipeline.

This module provides the end-to-end step that turns sampled electron
configurations into the AlphaDets file read by the classical SQD solver:

1. Split each sampled bitstring into its two spin sectors
2. Encode each sector as an integer CI string
3. Deduplicate, and symmetrize the sectors for closed-shell systems
4. Add the Hartree-Fock reference
5. Sort ascending and truncate to the configuration budget
6. Write fixed-width big-endian records to disk

One artifact is written per configuration recovery iteration.
"""

import numpy as np
from typing import Optional, List, Tuple
from dataclasses import dataclass, field
from pathlib import Path
from tqdm import tqdm

# Support both package imports and direct script execution
try:
    from .configurations.ci_strings import (
        BitstringMatrix,
        as_bitstring_matrix,
        split_sectors,
        sectors_to_ci_strs,
    )
    from .configurations.selection import (
        symmetrize_ci_strs,
        unique_ci_strs_with_reference,
        truncate_ci_strs,
    )
    from .serialization.alphadets import (
        alphadets_filename,
        ci_strs_to_bytes,
        write_bytestrings_to_file,
    )
    from .utils.run_log import RunLogger, get_time
except ImportError:
    from configurations.ci_strings import (
        BitstringMatrix,
        as_bitstring_matrix,
        split_sectors,
        sectors_to_ci_strs,
    )
    from configurations.selection import (
        symmetrize_ci_strs,
        unique_ci_strs_with_reference,
        truncate_ci_strs,
    )
    from serialization.alphadets import (
        alphadets_filename,
        ci_strs_to_bytes,
        write_bytestrings_to_file,
    )
    from utils.run_log import RunLogger, get_time


@dataclass(frozen=True)
class SQDConfig:
    """Configuration for one configuration recovery run."""

    # Run identification
    date_str: str = field(default_factory=lambda: get_time(compact=True))
    run_id: Optional[str] = None  # Defaults to date_str

    # Recovery loop
    n_recovery: int = 3  # Number of configuration recovery iterations
    samples_per_batch: int = 1000  # Number of samples per batch
    seed: Optional[int] = None  # RNG seed for batch drawing

    # Configuration selection
    max_configurations: Optional[int] = None  # None keeps every unique CI string
    with_hf: bool = True  # Use Hartree-Fock as a reference state
    open_shell: bool = False  # Keep alpha and beta sectors independent

    # Output
    output_dir: str = "."
    verbose: bool = False  # Print messages to stdout

    # Bookkeeping only, reported in the summary
    backend_name: str = ""
    num_shots: int = 10000

    def __post_init__(self):
        if self.run_id is None:
            object.__setattr__(self, "run_id", self.date_str)
        if self.n_recovery < 0:
            raise ValueError(f"n_recovery must be non-negative, got {self.n_recovery}")
        if self.samples_per_batch <= 0:
            raise ValueError(
                f"samples_per_batch must be positive, got {self.samples_per_batch}"
            )
        if self.max_configurations is not None and self.max_configurations < 0:
            raise ValueError(
                f"max_configurations must be non-negative, got {self.max_configurations}"
            )

    def summary(self) -> str:
        """Header describing the run, one ``# key: value`` line per field."""
        lines = [
            f"# date: {self.date_str}",
            f"# run_id: {self.run_id}",
            f"# n_recovery: {self.n_recovery}",
            f"# samples_per_batch: {self.samples_per_batch}",
            f"# backend_name: {self.backend_name}",
            f"# num_shots: {self.num_shots}",
        ]
        return "\n".join(lines) + "\n"


class ConfigurationRecoveryPipeline:
    """
    Extracts, selects and serializes CI strings for SQD.

    Example usage:
    ```python
    config = SQDConfig(n_recovery=3, samples_per_batch=500, max_configurations=2000)
    pipeline = ConfigurationRecoveryPipeline(config)

    # bitstrings: (n_samples, 2 * norb) array of measured bits
    paths = pipeline.run(bitstrings, norb=16, num_elec=5)
    ```

    Args:
        config: Run configuration
        logger: Progress logger (default: verbose setting of ``config``)
    """

    def __init__(
        self,
        config: Optional[SQDConfig] = None,
        logger: Optional[RunLogger] = None,
    ):
        self.config = config or SQDConfig()
        self.logger = logger or RunLogger(verbose=self.config.verbose)

    def extract_ci_strs(
        self,
        batch: BitstringMatrix,
        norb: int,
        num_elec: int,
    ) -> Tuple[List[int], int]:
        """
        Turn one batch of configurations into the selected CI strings.

        Args:
            batch: (n_configs, 2 * norb) sampled configurations
            norb: Number of spatial orbitals
            num_elec: Electrons per sector, defines the HF reference

        Returns:
            (ci_strs, n_truncated): ascending CI strings within budget and the
            number of strings dropped by truncation
        """
        right, left = split_sectors(batch)
        if right.shape[1] != norb:
            raise ValueError(
                f"Configurations have {2 * right.shape[1]} bits, expected 2 * norb = {2 * norb}"
            )

        self.logger.log("number of items in a batch: ", len(right))

        left_ci_strs, right_ci_strs = symmetrize_ci_strs(
            sectors_to_ci_strs(left),
            sectors_to_ci_strs(right),
            open_shell=self.config.open_shell,
        )
        self.logger.log("number of items in left ci_strs: ", len(left_ci_strs))
        self.logger.log("number of items in right ci_strs: ", len(right_ci_strs))

        unique_ci_strs = unique_ci_strs_with_reference(
            left_ci_strs,
            right_ci_strs,
            num_elec,
            with_reference=self.config.with_hf,
            norb=norb,
        )

        n_unique = len(unique_ci_strs)
        ci_strs, n_truncated = truncate_ci_strs(
            unique_ci_strs, self.config.max_configurations
        )
        if n_truncated:
            self.logger.log(
                "number of unique ci_strs: ", n_unique,
                ", kept: ", len(ci_strs),
                ", truncated: ", n_truncated,
            )
        else:
            self.logger.log("number of unique ci_strs: ", n_unique)

        return ci_strs, n_truncated

    def write_alphadets_file(
        self,
        batch: BitstringMatrix,
        norb: int,
        num_elec: int,
        i_recovery: int,
    ) -> Path:
        """
        Select CI strings from one batch and write them as an AlphaDets file.

        Returns:
            Path of the written artifact
        """
        ci_strs, _ = self.extract_ci_strs(batch, norb, num_elec)
        byte_strings = ci_strs_to_bytes(ci_strs, norb)

        filename = alphadets_filename(
            self.config.run_id, i_recovery, directory=self.config.output_dir
        )
        try:
            return write_bytestrings_to_file(byte_strings, filename)
        except OSError as e:
            self.logger.error("Error: Could not write file ", filename, ": ", e)
            raise

    def draw_batch(
        self,
        bitstring_matrix: BitstringMatrix,
        rng: np.random.Generator,
    ) -> np.ndarray:
        """
        Draw up to ``samples_per_batch`` configurations without replacement.

        The whole matrix is returned when it holds fewer rows than a batch.
        """
        bits = as_bitstring_matrix(bitstring_matrix)

        n_samples = len(bits)
        if n_samples <= self.config.samples_per_batch:
            return bits

        indices = rng.choice(n_samples, size=self.config.samples_per_batch, replace=False)
        return bits[np.sort(indices)]

    def run(
        self,
        bitstring_matrix: BitstringMatrix,
        norb: int,
        num_elec: int,
        progress: bool = True,
    ) -> List[Path]:
        """
        Run all configuration recovery iterations.

        Args:
            bitstring_matrix: (n_samples, 2 * norb) sampled configurations
            norb: Number of spatial orbitals
            num_elec: Electrons per sector
            progress: Show a progress bar

        Returns:
            Artifact paths, one per recovery iteration
        """
        self.logger.log("run summary\n", self.config.summary())

        rng = np.random.default_rng(self.config.seed)
        paths = []

        iterator = range(self.config.n_recovery)
        if progress:
            iterator = tqdm(iterator, desc="Configuration recovery")

        for i_recovery in iterator:
            batch = self.draw_batch(bitstring_matrix, rng)
            path = self.write_alphadets_file(batch, norb, num_elec, i_recovery)
            self.logger.log("written: ", path)
            paths.append(path)

        return paths
