"""
Pre-allocated terrain map over a symmetric coordinate bound.

The agent does not know where on the island it starts, so the map spans
[-max_x..max_x] x [-max_y..max_y] around the starting cell, which is
enough room whichever corner the agent started in.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np

from treasure_hunter.terrain import Coordinate, TerrainKind


class TerrainGrid:
    """
    A numpy-backed map from coordinates to terrain kinds.

    Every cell starts UNEXPLORED. Reads outside the bound return
    UNEXPLORED, which no passability rule accepts, so searches never
    leave the map. Writes outside the bound are a configuration error.
    """

    def __init__(self, max_x: int = 80, max_y: int = 80,
                 cells: Optional[np.ndarray] = None):
        if max_x <= 0 or max_y <= 0:
            raise ValueError(f"Map bound must be positive, got ({max_x}, {max_y})")
        self.max_x = max_x
        self.max_y = max_y
        if cells is None:
            cells = np.full((2 * max_x + 1, 2 * max_y + 1),
                            int(TerrainKind.UNEXPLORED), dtype=np.int8)
        self.cells = cells

    @property
    def shape(self) -> Tuple[int, int]:
        return self.cells.shape

    def in_bounds(self, coord: Coordinate) -> bool:
        return abs(coord[0]) <= self.max_x and abs(coord[1]) <= self.max_y

    def index(self, coord: Coordinate) -> Tuple[int, int]:
        """Array index of a coordinate."""
        return coord[0] + self.max_x, coord[1] + self.max_y

    def coordinate(self, index: Iterable[int]) -> Coordinate:
        i, j = index
        return int(i) - self.max_x, int(j) - self.max_y

    def __getitem__(self, coord: Coordinate) -> TerrainKind:
        if not self.in_bounds(coord):
            return TerrainKind.UNEXPLORED
        return TerrainKind(int(self.cells[self.index(coord)]))

    def __setitem__(self, coord: Coordinate, kind: TerrainKind) -> None:
        if not self.in_bounds(coord):
            raise IndexError(
                f"{coord} lies outside the map bound "
                f"(±{self.max_x}, ±{self.max_y})"
            )
        self.cells[self.index(coord)] = int(kind)

    def read_only(self) -> "TerrainGrid":
        """A snapshot view sharing memory that refuses writes."""
        view = self.cells.view()
        view.flags.writeable = False
        return TerrainGrid(self.max_x, self.max_y, cells=view)

    def copy(self) -> "TerrainGrid":
        return TerrainGrid(self.max_x, self.max_y, cells=self.cells.copy())

    # -----------------------------------------------------------------------
    # Mask queries
    # -----------------------------------------------------------------------

    def known_mask(self) -> np.ndarray:
        return self.cells != int(TerrainKind.UNEXPLORED)

    def kind_mask(self, kinds: Iterable[TerrainKind]) -> np.ndarray:
        return np.isin(self.cells, [int(k) for k in kinds])

    def coordinates_where(self, mask: np.ndarray) -> List[Coordinate]:
        return [self.coordinate(idx) for idx in np.argwhere(mask)]

    def count(self, kind: TerrainKind) -> int:
        return int(np.count_nonzero(self.cells == int(kind)))
