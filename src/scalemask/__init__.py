"""`scalemask` - infer a scalar field from a color legend and render it as an alpha overlay.

Subpackages:
- calibration: Legend sampling, row/value tables, nearest-color classification
- imaging: Image decode and encode
- pipeline: Per-image transformer, batch orchestrator
- schemas: Pydantic configuration layers
- contracts: Stage invariants
"""

__version__ = "0.1.0"
