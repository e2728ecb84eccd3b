import numpy as np
import pytest

from scalemask.calibration import CalibrationTables, RGBColor, classify, classify_pixels
from scalemask.calibration.classifier import nearest_rows
from scalemask.contracts import ContractViolation

pytestmark = pytest.mark.unit


def test_exact_match(rgb_tables):
    assert classify(RGBColor(0, 255, 0), rgb_tables) == 20.0


def test_nearest_color(rgb_tables):
    assert classify(RGBColor(250, 5, 5), rgb_tables) == 10.0
    assert classify(RGBColor(0, 0, 250), rgb_tables) == 30.0


def test_tie_resolves_to_lowest_row():
    # (5, 5, 5) is at squared distance 75 from both entries
    tables = CalibrationTables.from_mappings(
        {5: RGBColor(0, 0, 0), 3: RGBColor(10, 10, 10)},
        {3: 1.5, 5: 2.5},
    )
    assert classify(RGBColor(5, 5, 5), tables) == 1.5


def test_gap_row_returns_none():
    tables = CalibrationTables.from_mappings(
        {0: RGBColor(255, 0, 0), 1: RGBColor(0, 255, 0)},
        {0: 10.0},
    )
    assert classify(RGBColor(0, 250, 0), tables) is None
    assert classify(RGBColor(250, 0, 0), tables) == 10.0


def test_single_entry_table_matches_everything():
    tables = CalibrationTables.from_mappings({0: RGBColor(1, 2, 3)}, {0: 7.0})
    assert classify(RGBColor(255, 255, 255), tables) == 7.0
    assert classify(RGBColor(0, 0, 0), tables) == 7.0


def test_empty_table_is_contract_violation():
    tables = CalibrationTables.from_mappings({}, {})
    with pytest.raises(ContractViolation, match="non-empty"):
        classify(RGBColor(0, 0, 0), tables)


def test_classify_pixels_vectorised(rgb_tables):
    pixels = np.array([
        [255, 0, 0],
        [0, 200, 10],
        [10, 10, 240],
        [0, 0, 0],
    ], dtype=np.uint8)
    values = classify_pixels(pixels, rgb_tables)
    # black is equidistant from all three; row 0 wins
    np.testing.assert_array_equal(values, [10.0, 20.0, 30.0, 10.0])


def test_classify_pixels_marks_gaps_with_nan():
    tables = CalibrationTables.from_mappings(
        {0: RGBColor(255, 0, 0), 1: RGBColor(0, 0, 255)},
        {1: 4.0},
    )
    values = classify_pixels(np.array([[255, 0, 0], [0, 0, 255]], dtype=np.uint8), tables)
    assert np.isnan(values[0])
    assert values[1] == 4.0


def test_chunking_does_not_change_result(rgb_tables):
    rng = np.random.default_rng(0)
    pixels = rng.integers(0, 256, size=(50, 3), dtype=np.uint8)
    np.testing.assert_array_equal(
        nearest_rows(pixels, rgb_tables, chunk_size=7),
        nearest_rows(pixels, rgb_tables),
    )


def test_extra_channels_are_ignored(rgb_tables):
    pixels = np.array([[0, 0, 255, 0], [255, 0, 0, 255]], dtype=np.uint8)
    np.testing.assert_array_equal(classify_pixels(pixels, rgb_tables), [30.0, 10.0])


def test_scalar_and_vectorised_paths_agree():
    tables = CalibrationTables.from_mappings(
        {0: RGBColor(0, 0, 0), 2: RGBColor(10, 10, 10), 4: RGBColor(200, 50, 0), 7: RGBColor(0, 90, 255)},
        {0: 1.0, 4: 3.0, 7: 4.0},
    )
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(200, 3), dtype=np.uint8)
    pixels[:3] = [(5, 5, 5), (10, 10, 10), (100, 25, 0)]

    vectorised = classify_pixels(pixels, tables)
    for pixel, expected in zip(pixels, vectorised):
        value = classify(RGBColor(*(int(c) for c in pixel)), tables)
        if np.isnan(expected):
            assert value is None
        else:
            assert value == expected
