"""Grid geometry for the GridFlow canvas.

Maps pixel positions on the canvas surface to grid cells and back. Every
node occupies exactly one cell; pixel math lives here so the stores and
controllers only ever deal with integer ``(col, row)`` addresses.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .constants import CELL_SIZE, NODE_SIZE, SURFACE_PX

logger = logging.getLogger(__name__)


def is_grid_index(value: object) -> bool:
    """Return True for plain integers (bool is rejected)."""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class GridConfig:
    """Surface extent and cell geometry."""

    cell_size: int = CELL_SIZE
    node_size: int = NODE_SIZE
    columns: int = SURFACE_PX // CELL_SIZE
    rows: int = SURFACE_PX // CELL_SIZE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GridConfig":
        """Build a config, honouring GRIDFLOW_* overrides.

        Unparsable or non-positive values fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def read(name: str, default: int) -> int:
            raw = env.get(name)
            if raw is None:
                return default
            try:
                value = int(raw)
            except ValueError:
                logger.warning("Ignoring %s=%r: not an integer", name, raw)
                return default
            if value <= 0:
                logger.warning("Ignoring %s=%r: must be positive", name, raw)
                return default
            return value

        cell_size = read("GRIDFLOW_CELL_SIZE", defaults.cell_size)
        return cls(
            cell_size=cell_size,
            node_size=min(defaults.node_size, cell_size),
            columns=read("GRIDFLOW_COLUMNS", defaults.columns),
            rows=read("GRIDFLOW_ROWS", defaults.rows),
        )

    @property
    def surface_width(self) -> int:
        return self.columns * self.cell_size

    @property
    def surface_height(self) -> int:
        return self.rows * self.cell_size

    def contains(self, col: object, row: object) -> bool:
        if not is_grid_index(col) or not is_grid_index(row):
            return False
        return 0 <= col < self.columns and 0 <= row < self.rows

    def cell_at(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """Return the cell under pixel ``(x, y)``, or None off the surface."""
        if x < 0 or y < 0:
            return None
        col = math.floor(x / self.cell_size)
        row = math.floor(y / self.cell_size)
        if not self.contains(col, row):
            return None
        return (col, row)

    def cell_origin(self, col: int, row: int) -> Tuple[float, float]:
        """Top-left pixel of a node box centred in its cell."""
        inset = (self.cell_size - self.node_size) / 2
        return (col * self.cell_size + inset, row * self.cell_size + inset)

    def cell_center(self, col: int, row: int) -> Tuple[float, float]:
        half = self.cell_size / 2
        return (col * self.cell_size + half, row * self.cell_size + half)

    def clamp_point(self, x: float, y: float) -> Tuple[float, float]:
        """Clamp a pointer position onto the surface."""
        return (
            max(0.0, min(float(self.surface_width), x)),
            max(0.0, min(float(self.surface_height), y)),
        )
