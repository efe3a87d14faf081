"""Smoke test for the configuration recovery pipeline."""
import sys
import tempfile
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import numpy as np

from pipeline import ConfigurationRecoveryPipeline, SQDConfig
from serialization.alphadets import read_alphadets_file


def main():
    """Run the 4-orbital reference scenario with and without truncation."""
    print("=" * 70)
    print("SQD Configuration Recovery")
    print("=" * 70)

    batch = np.array([
        [1, 1, 0, 0, 1, 0, 0, 0],
        [0, 1, 0, 0, 1, 0, 0, 0],
    ])
    norb, num_elec = 4, 2

    with tempfile.TemporaryDirectory() as workdir:
        for budget, expected in [(10, b"\x01\x02\x03"), (2, b"\x01\x02")]:
            print(f"\nmax_configurations = {budget}")
            config = SQDConfig(
                run_id=f"smoke{budget}",
                n_recovery=1,
                max_configurations=budget,
                output_dir=workdir,
                verbose=True,
            )
            pipeline = ConfigurationRecoveryPipeline(config)
            path = pipeline.run(batch, norb=norb, num_elec=num_elec, progress=False)[0]

            data = path.read_bytes()
            print(f"CI strings: {read_alphadets_file(path, norb)}")
            print(f"Bytes: {data.hex()}")

            if data != expected:
                print(f"FAILED: expected {expected.hex()}")
                return 1

    print("\nAll checks passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
