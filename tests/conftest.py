"""Root-level pytest fixtures for the scalemask test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture. Tests should use these fixtures instead of raw dict configs.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from scalemask.calibration import CalibrationTables, RGBColor
from scalemask.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_custom_threshold(make_config):
    ...     config = make_config(saturation_threshold=40)
    ...     assert config.overlay.saturation_threshold == 40.0
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


@pytest.fixture
def small_legend_config(make_config):
    """Config matching ``tests.helpers.fake_images.make_legend()`` (10 rows, 6 columns)."""
    return make_config(
        scan_rows=(0, 9),
        sample_columns=(2, 4),
        anchors=[(0, 50.0), (9, 0.0)],
        image_workers=2,
        row_workers=2,
    )


# =============================================================================
# Calibration Fixtures
# =============================================================================

@pytest.fixture
def rgb_tables():
    """Three-row table: red=10, green=20, blue=30."""
    return CalibrationTables.from_mappings(
        {
            0: RGBColor(255, 0, 0),
            1: RGBColor(0, 255, 0),
            2: RGBColor(0, 0, 255),
        },
        {0: 10.0, 1: 20.0, 2: 30.0},
    )


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)
