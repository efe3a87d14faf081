"""
Command line entry point for configuration recovery.

Reads measured bitstrings from a text file (one per line, optionally
followed by a count) and writes one AlphaDets file per recovery iteration.

Run with:
    sqd-recover --input samples.txt --num-elec 5 --recovery 3 -v
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

# Support both package imports and direct script execution
try:
    from .configurations.ci_strings import bitstrings_to_matrix
    from .pipeline import ConfigurationRecoveryPipeline, SQDConfig
except ImportError:
    from configurations.ci_strings import bitstrings_to_matrix
    from pipeline import ConfigurationRecoveryPipeline, SQDConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract CI strings from sampled configurations for SQD"
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Text file with one bitstring per line, optionally followed by a count",
    )
    parser.add_argument(
        "--norb",
        type=int,
        default=None,
        help="Number of spatial orbitals (default: half the bitstring length)",
    )
    parser.add_argument(
        "--num-elec",
        type=int,
        default=None,
        help="Electrons per spin sector, defines the Hartree-Fock reference "
        "(required unless --no-hf is given)",
    )
    parser.add_argument(
        "--recovery",
        type=int,
        default=3,
        help="Number of configuration recovery iterations",
    )
    parser.add_argument(
        "--number_of_samples",
        type=int,
        default=1000,
        help="Number of samples per batch",
    )
    parser.add_argument(
        "--max-configurations",
        type=int,
        default=None,
        help="Maximum number of CI strings kept per iteration",
    )
    parser.add_argument(
        "--open-shell",
        action="store_true",
        help="Keep alpha and beta sectors independent",
    )
    parser.add_argument(
        "--no-hf",
        action="store_true",
        help="Do not add the Hartree-Fock reference",
    )
    parser.add_argument("--run-id", type=str, default=None, help="Run identifier")
    parser.add_argument(
        "--output-dir", type=str, default=".", help="Directory for AlphaDets files"
    )
    parser.add_argument("--seed", type=int, default=None, help="Batch sampling seed")
    parser.add_argument("--backend_name", type=str, default="", help="Backend name")
    parser.add_argument("--num_shots", type=int, default=10000, help="Number of shots")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print progress")
    return parser


def generate_sqd_config(argv: Optional[List[str]] = None) -> Tuple[SQDConfig, argparse.Namespace]:
    """Parse command line arguments into a run configuration."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.num_elec is None and not args.no_hf:
        parser.error("--num-elec is required unless --no-hf is given")

    config = SQDConfig(
        run_id=args.run_id,
        n_recovery=args.recovery,
        samples_per_batch=args.number_of_samples,
        seed=args.seed,
        max_configurations=args.max_configurations,
        with_hf=not args.no_hf,
        open_shell=args.open_shell,
        output_dir=args.output_dir,
        verbose=args.verbose,
        backend_name=args.backend_name,
        num_shots=args.num_shots,
    )
    return config, args


def read_bitstring_file(path: str) -> np.ndarray:
    """
    Load a bitstring file as a bitstring matrix.

    Lines of the form ``<bitstring> <count>`` are repeated ``count`` times.
    Blank lines and lines starting with ``#`` are skipped.
    """
    bitstrings = []
    counts = []
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            fields = line.split()
            bitstrings.append(fields[0])
            counts.append(int(fields[1]) if len(fields) > 1 else 1)

    matrix = bitstrings_to_matrix(bitstrings)
    return np.repeat(matrix, counts, axis=0)


def main(argv: Optional[List[str]] = None) -> int:
    config, args = generate_sqd_config(argv)
    if args.input is None:
        print("Error: --input is required", file=sys.stderr)
        return 1

    bitstring_matrix = read_bitstring_file(args.input)
    norb = args.norb if args.norb is not None else bitstring_matrix.shape[1] // 2
    # Only the Hartree-Fock reference depends on num_elec
    num_elec = args.num_elec if args.num_elec is not None else 0

    Path(config.output_dir).mkdir(parents=True, exist_ok=True)

    pipeline = ConfigurationRecoveryPipeline(config)
    paths = pipeline.run(
        bitstring_matrix, norb=norb, num_elec=num_elec, progress=config.verbose
    )

    for path in paths:
        print(f"[written] {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
