"""Pipeline contracts: fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly when pipeline stages don't produce
their promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate pipeline correctness
- Per-image errors are handled by the orchestrator
"""

from scalemask.contracts.failure import ContractViolation
from scalemask.contracts.base import require
from scalemask.contracts.calibration import assert_calibrated
from scalemask.contracts.overlay import assert_overlay

__all__ = [
    "ContractViolation",
    "require",
    "assert_calibrated",
    "assert_overlay",
]
