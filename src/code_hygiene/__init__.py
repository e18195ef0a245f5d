"""code_hygiene — flags commented-out code, merge-conflict markers and silent catch blocks."""

__all__ = [
    "__version__",
    "run_analysis",
    "load_config",
]
__version__ = "0.1.0"

# Programmatic entrypoints: see core.runner and core.config.
from code_hygiene.core.config import load_config  # noqa: E402, F401
from code_hygiene.core.runner import run_analysis  # noqa: E402, F401
