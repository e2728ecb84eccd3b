"""Value types shared by calibration and classification.

The two calibration tables are held as row-indexed ``xarray.DataArray``
objects so that lookups read like the legend they came from
(``tables.values.sel(row=120)``) while classification works directly on
the underlying numpy arrays.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Mapping, NamedTuple, Optional

import numpy as np
import xarray as xr

from scalemask.contracts.base import require

__all__ = [
    'RGBColor',
    'PixelCoordinate',
    'CalibrationAnchor',
    'RowRange',
    'CalibrationTables',
]

CHANNELS = ("r", "g", "b")


class RGBColor(NamedTuple):
    """8-bit RGB color."""
    r: int
    g: int
    b: int

    def distance(self, other: "RGBColor") -> int:
        """Squared Euclidean distance in RGB space."""
        return (
            (self.r - other.r) ** 2
            + (self.g - other.g) ** 2
            + (self.b - other.b) ** 2
        )


class PixelCoordinate(NamedTuple):
    """Zero-based (column, row) position."""
    x: int
    y: int


class CalibrationAnchor(NamedTuple):
    """Known (row, value) point on the legend's scalar curve."""
    row: int
    value: float


class RowRange(NamedTuple):
    """Inclusive range of pixel indices."""
    start: int
    end: int

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __len__(self) -> int:
        return max(0, self.end - self.start + 1)

    def __contains__(self, index) -> bool:
        return self.start <= index <= self.end


@dataclass(frozen=True, eq=False)
class CalibrationTables:
    """Row→color and row→value tables derived from a legend.

    Attributes
    ----------
    colors : xr.DataArray
        uint8, dims ``("row", "channel")``. One entry per legend row whose
        average color was sampled successfully, rows ascending.
    values : xr.DataArray
        float64, dim ``("row",)``. One entry per legend row covered by an
        anchor segment, rows ascending.

    Rows may be present in ``colors`` but missing from ``values``; pixels
    matched to such a row are classification gaps.

    Both arrays are made read-only on construction. The tables are shared
    between all worker threads for the lifetime of a run.
    """

    colors: xr.DataArray
    values: xr.DataArray
    _lookup: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        require(
            self.colors.indexes["row"].is_unique and self.values.indexes["row"].is_unique,
            "Calibration contract violated: duplicate rows in calibration tables"
        )
        self.colors.values.setflags(write=False)
        self.values.values.setflags(write=False)
        # value for each color row, NaN where the value table has a gap
        lookup = self.values.reindex(row=self.colors["row"].values).values.astype(np.float64)
        lookup.setflags(write=False)
        object.__setattr__(self, "_lookup", lookup)

    @classmethod
    def from_arrays(cls, rows, colors, value_rows, values) -> "CalibrationTables":
        """Build tables from parallel arrays (rows need not be sorted)."""
        rows = np.asarray(rows, dtype=np.int64)
        colors = np.asarray(colors, dtype=np.uint8).reshape(-1, 3)
        value_rows = np.asarray(value_rows, dtype=np.int64)
        values = np.asarray(values, dtype=np.float64)

        color_da = xr.DataArray(
            colors,
            dims=("row", "channel"),
            coords={"row": rows, "channel": list(CHANNELS)},
            name="color",
        ).sortby("row")
        value_da = xr.DataArray(
            values,
            dims=("row",),
            coords={"row": value_rows},
            name="value",
        ).sortby("row")
        # sortby returns views in some cases; copy so read-only flags stay local
        return cls(colors=color_da.copy(), values=value_da.copy())

    @classmethod
    def from_mappings(
        cls,
        color_table: Mapping[int, RGBColor],
        value_table: Mapping[int, float],
    ) -> "CalibrationTables":
        """Build tables from ``{row: RGBColor}`` and ``{row: value}`` dicts."""
        rows = list(color_table.keys())
        colors = [tuple(color_table[row]) for row in rows]
        value_rows = list(value_table.keys())
        values = [value_table[row] for row in value_rows]
        return cls.from_arrays(rows, colors, value_rows, values)

    @property
    def rows(self) -> np.ndarray:
        """Rows of the color table, ascending."""
        return self.colors["row"].values

    @property
    def color_array(self) -> np.ndarray:
        """``(N, 3)`` uint8 colors aligned with :attr:`rows`."""
        return self.colors.values

    @property
    def value_lookup(self) -> np.ndarray:
        """``(N,)`` float64 values aligned with :attr:`rows`; NaN marks a gap."""
        return self._lookup

    def __len__(self) -> int:
        return self.colors.sizes["row"]

    def color_at(self, row: int) -> Optional[RGBColor]:
        if row not in self.colors.indexes["row"]:
            return None
        return RGBColor(*(int(c) for c in self.colors.sel(row=row).values))

    def value_at(self, row: int) -> Optional[float]:
        if row not in self.values.indexes["row"]:
            return None
        return float(self.values.sel(row=row).item())

    def color_table(self) -> Dict[int, RGBColor]:
        return {
            int(row): RGBColor(*(int(c) for c in color))
            for row, color in zip(self.rows, self.color_array)
        }

    def value_table(self) -> Dict[int, float]:
        return {
            int(row): float(value)
            for row, value in zip(self.values["row"].values, self.values.values)
        }

    def gap_rows(self) -> np.ndarray:
        """Color rows with no value entry."""
        return self.rows[np.isnan(self._lookup)]
