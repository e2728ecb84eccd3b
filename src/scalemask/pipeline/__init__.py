"""Pipeline modules.

- transformer: Per-image overlay rendering
- orchestrator: Concurrent batch driver
"""

from scalemask.pipeline.transformer import ImageTransformer, TransformResult, output_path_for
from scalemask.pipeline.orchestrator import BatchOrchestrator

__all__ = [
    "ImageTransformer",
    "TransformResult",
    "BatchOrchestrator",
    "output_path_for",
]
