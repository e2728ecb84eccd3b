"""Command-line interface for the overlay pipeline.

This package contains the execution logic, keeping scripts/ as thin wrappers.
"""

from scalemask.cli.run_overlay import main, run_overlay_pipeline

__all__ = ['main', 'run_overlay_pipeline']
