"""
Example: Configuration Recovery on Synthetic Samples

This example draws synthetic electron configurations with a fixed number of
electrons per spin sector (as a particle-conserving sampler would), runs a
few configuration recovery iterations and plots how the configuration
budget trims the selected CI strings.

Run with:
    python examples/recovery_example.py
"""

import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import matplotlib.pyplot as plt

from pipeline import ConfigurationRecoveryPipeline, SQDConfig
from serialization.alphadets import read_alphadets_file


def sample_configurations(norb: int, num_elec: int, n_samples: int, seed: int = 0) -> np.ndarray:
    """Random configurations with ``num_elec`` electrons in each sector."""
    rng = np.random.default_rng(seed)
    samples = np.zeros((n_samples, 2 * norb), dtype=np.uint8)
    for i in range(n_samples):
        samples[i, rng.choice(norb, num_elec, replace=False)] = 1
        samples[i, norb + rng.choice(norb, num_elec, replace=False)] = 1
    return samples


def run_budget_scan():
    """Compare the number of kept CI strings for several budgets."""
    print("=" * 70)
    print("Configuration Recovery: budget scan")
    print("=" * 70)

    norb, num_elec = 12, 4
    samples = sample_configurations(norb, num_elec, n_samples=5000)
    print(f"\nSystem: {norb} orbitals, {num_elec} electrons per sector, "
          f"{len(samples)} samples")

    budgets = [50, 100, 200, 400]
    kept = []

    with tempfile.TemporaryDirectory() as workdir:
        for budget in budgets:
            config = SQDConfig(
                run_id=f"budget{budget}",
                n_recovery=1,
                samples_per_batch=1000,
                max_configurations=budget,
                output_dir=workdir,
                seed=0,
                verbose=True,
            )
            pipeline = ConfigurationRecoveryPipeline(config)
            path = pipeline.run(samples, norb=norb, num_elec=num_elec, progress=False)[0]

            ci_strs = read_alphadets_file(path, norb)
            kept.append(ci_strs)
            print(f"Budget {budget}: {len(ci_strs)} CI strings, "
                  f"largest = {ci_strs[-1] if ci_strs else None}")

    plt.figure(figsize=(10, 6))
    for budget, ci_strs in zip(budgets, kept):
        plt.hist(ci_strs, bins=40, alpha=0.5, label=f"budget {budget}")

    plt.xlabel("CI string value", fontsize=12)
    plt.ylabel("Count", fontsize=12)
    plt.title("Selected CI strings per configuration budget", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.3)
    plt.savefig("budget_scan.png", dpi=150, bbox_inches="tight")
    print("\nPlot saved to budget_scan.png")


if __name__ == "__main__":
    run_budget_scan()
