"""
SQD Configuration Recovery

Turns sampled electron configurations from a quantum device into the
deduplicated, budgeted set of CI strings used by a classical
sample-based quantum diagonalization (SQD) solver.

Modules:
    - configurations: Sector splitting, CI-string encoding and selection
    - serialization: Fixed-width big-endian AlphaDets files
    - utils: Run logging
    - pipeline: End-to-end recovery iterations
    - cli: Command line entry point
"""

__version__ = "0.1.0"

from .pipeline import ConfigurationRecoveryPipeline, SQDConfig

__all__ = [
    "ConfigurationRecoveryPipeline",
    "SQDConfig",
    "__version__",
]
