"""Neighbour lists for sets of spheres, built with cell lists."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

Coordinate = tuple[float, float, float]


def _as_coordinates(coords: Iterable[Sequence[float]]) -> list[Coordinate]:
    points = []
    for point in coords:
        if len(point) != 3:
            raise ValueError(f"coordinate {point!r} does not have three components")
        x, y, z = point
        points.append((float(x), float(y), float(z)))
    return points


@dataclass(eq=False)
class Cell:
    """A box in space holding the indices of the coordinates inside it.

    ``neighbors`` holds the cell itself and its "forward" neighbours only,
    so that each pair of cells is visited once.
    """

    atoms: list[int] = field(default_factory=list)
    neighbors: list[Cell] = field(default_factory=list, repr=False)


class CellList:
    """Divides the bounding box of a set of coordinates into cubic cells."""

    def __init__(self, cell_size: float, coords: Iterable[Sequence[float]]) -> None:
        if cell_size <= 0:
            raise ValueError("cell size must be positive")
        points = _as_coordinates(coords)
        if not points:
            raise ValueError("cannot build a cell list without coordinates")

        self.d = float(cell_size)
        half = self.d / 2.0
        xs, ys, zs = zip(*points)
        self.x_min, self.x_max = min(xs) - half, max(xs) + half
        self.y_min, self.y_max = min(ys) - half, max(ys) + half
        self.z_min, self.z_max = min(zs) - half, max(zs) + half
        self.nx = math.ceil((self.x_max - self.x_min) / self.d)
        self.ny = math.ceil((self.y_max - self.y_min) / self.d)
        self.nz = math.ceil((self.z_max - self.z_min) / self.d)
        self.n = self.nx * self.ny * self.nz

        self.cells: list[Cell] = [Cell() for _ in range(self.n)]
        for index, point in enumerate(points):
            self.cells[self._cell_of(point)].atoms.append(index)

        for ix in range(self.nx):
            for iy in range(self.ny):
                for iz in range(self.nz):
                    self._fill_neighbors(ix, iy, iz)

    def __len__(self) -> int:
        return self.n

    def cell_index(self, ix: int, iy: int, iz: int) -> int:
        """Index into ``cells`` of the cell at grid position (ix, iy, iz)."""
        if not (0 <= ix < self.nx and 0 <= iy < self.ny and 0 <= iz < self.nz):
            raise IndexError(f"cell ({ix}, {iy}, {iz}) outside the grid")
        return ix + self.nx * (iy + self.ny * iz)

    def _cell_of(self, point: Coordinate) -> int:
        x, y, z = point
        return self.cell_index(
            int((x - self.x_min) / self.d),
            int((y - self.y_min) / self.d),
            int((z - self.z_min) / self.d),
        )

    def _fill_neighbors(self, ix: int, iy: int, iz: int) -> None:
        cell = self.cells[self.cell_index(ix, iy, iz)]
        x_range = range(max(ix - 1, 0), min(ix + 1, self.nx - 1) + 1)
        y_range = range(max(iy - 1, 0), min(iy + 1, self.ny - 1) + 1)
        z_range = range(max(iz - 1, 0), min(iz + 1, self.nz - 1) + 1)
        cell.neighbors = [
            self.cells[self.cell_index(i, j, k)]
            for i in x_range
            for j in y_range
            for k in z_range
            # only cells in the direction of (1,1,1), to avoid double counting
            if (i - ix) + (j - iy) + (k - iz) >= 0
        ]


class NeighborList:
    """All pairs of spheres that overlap, given centres and radii.

    For each element ``i``, ``neighbors[i]`` lists the overlapping
    elements, ``xy_distances[i]`` the distances to them in the xy-plane,
    and ``x_offsets[i]``/``y_offsets[i]`` the signed offsets along x and y.
    """

    def __init__(
        self, coords: Iterable[Sequence[float]], radii: Iterable[float]
    ) -> None:
        if coords is None or radii is None:
            raise ValueError("coordinates and radii are required")
        points = _as_coordinates(coords)
        radii = [float(r) for r in radii]
        if not points:
            raise ValueError("cannot build a neighbour list without coordinates")
        if len(radii) != len(points):
            raise ValueError(
                f"{len(radii)} radii given for {len(points)} coordinates"
            )

        n = len(points)
        self.neighbors: list[list[int]] = [[] for _ in range(n)]
        self.xy_distances: list[list[float]] = [[] for _ in range(n)]
        self.x_offsets: list[list[float]] = [[] for _ in range(n)]
        self.y_offsets: list[list[float]] = [[] for _ in range(n)]

        cell_size = 2 * max(max(radii), 0.0)
        if cell_size <= 0:
            raise ValueError("at least one radius must be positive")
        cells = CellList(cell_size, points)

        for cell in cells.cells:
            for other in cell.neighbors:
                self._add_cell_pair(points, radii, cell, other)

    def __len__(self) -> int:
        return len(self.neighbors)

    def contact(self, i: int, j: int) -> bool:
        """Whether elements ``i`` and ``j`` overlap."""
        n = len(self)
        if not (0 <= i < n and 0 <= j < n):
            raise IndexError(f"index pair ({i}, {j}) out of range for {n} elements")
        return j in self.neighbors[i]

    def _add_cell_pair(
        self,
        points: list[Coordinate],
        radii: list[float],
        first: Cell,
        second: Cell,
    ) -> None:
        same = first is second
        for position, ia in enumerate(first.atoms):
            xi, yi, zi = points[ia]
            ri = radii[ia]
            candidates = second.atoms[position + 1:] if same else second.atoms
            for ja in candidates:
                xj, yj, zj = points[ja]
                cutoff = ri + radii[ja]
                dx, dy, dz = xj - xi, yj - yi, zj - zi
                if dx * dx + dy * dy + dz * dz < cutoff * cutoff:
                    self._add_pair(ia, ja, dx, dy)

    def _add_pair(self, i: int, j: int, dx: float, dy: float) -> None:
        distance = math.sqrt(dx * dx + dy * dy)
        self.neighbors[i].append(j)
        self.neighbors[j].append(i)
        self.xy_distances[i].append(distance)
        self.xy_distances[j].append(distance)
        self.x_offsets[i].append(dx)
        self.x_offsets[j].append(-dx)
        self.y_offsets[i].append(dy)
        self.y_offsets[j].append(-dy)