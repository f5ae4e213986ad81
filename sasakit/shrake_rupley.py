"""Solvent accessible surface area by the Shrake & Rupley test-point algorithm."""

from __future__ import annotations

import math
import warnings
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from sasakit.nb import NeighborList

MAX_THREADS = 16

Point = tuple[float, float, float]


def test_points(n: int) -> list[Point]:
    """``n`` roughly evenly spread points on the unit sphere (golden section spiral)."""
    if n <= 0:
        raise ValueError("number of test points must be positive")
    dlong = math.pi * (3 - math.sqrt(5))
    dz = 2.0 / n
    longitude = 0.0
    z = 1 - dz / 2
    points = []
    for _ in range(n):
        r = math.sqrt(max(0.0, 1 - z * z))
        points.append((math.cos(longitude) * r, math.sin(longitude) * r, z))
        z -= dz
        longitude += dlong
    return points


def _as_points(coords: Iterable[Sequence[float]]) -> list[Point]:
    points = []
    for point in coords:
        if len(point) != 3:
            raise ValueError(f"coordinate {point!r} does not have three components")
        x, y, z = point
        points.append((float(x), float(y), float(z)))
    return points


def _run_blocks(
    area: Callable[[int], float], n_atoms: int, n_threads: int
) -> list[float]:
    if n_threads == 1:
        return [area(i) for i in range(n_atoms)]
    block = n_atoms // n_threads
    bounds = [
        (t * block, n_atoms if t == n_threads - 1 else (t + 1) * block)
        for t in range(n_threads)
    ]
    with ThreadPoolExecutor(max_workers=n_threads) as pool:
        parts = pool.map(lambda span: [area(i) for i in range(*span)], bounds)
        return [value for part in parts for value in part]


def shrake_rupley(
    coords: Iterable[Sequence[float]],
    radii: Iterable[float],
    probe_radius: float = 1.4,
    n_points: int = 100,
    n_threads: int = 1,
) -> list[float]:
    """Per-atom SASA of spheres at ``coords`` with ``radii``, using test points.

    Returns an empty list (with a warning) when there are no coordinates.
    """
    if n_threads > MAX_THREADS:
        raise ValueError(f"S&R does not support more than {MAX_THREADS} threads")
    if n_threads < 1:
        raise ValueError("number of threads must be 1 or larger")
    if n_points <= 0:
        raise ValueError(
            f"{n_points} test points invalid resolution in S&R, must be > 0"
        )

    points = _as_points(coords)
    atom_radii = [float(r) for r in radii]
    if len(atom_radii) != len(points):
        raise ValueError(f"{len(atom_radii)} radii given for {len(points)} coordinates")
    n_atoms = len(points)
    if n_atoms == 0:
        warnings.warn("empty coordinates", RuntimeWarning, stacklevel=2)
        return []
    if n_threads > n_atoms:
        n_threads = n_atoms
        warnings.warn(
            "no sense in having more threads than atoms, "
            f"only using {n_threads} threads",
            RuntimeWarning,
            stacklevel=2,
        )

    spheres = [r + probe_radius for r in atom_radii]
    squared = [r * r for r in spheres]
    unit_points = test_points(n_points)
    nb = NeighborList(points, spheres)

    def atom_area(i: int) -> float:
        ri = spheres[i]
        xi, yi, zi = points[i]
        neighbors = nb.neighbors[i]

        def covered_by(a: int, px: float, py: float, pz: float) -> bool:
            xa, ya, za = points[a]
            dx, dy, dz = px - xa, py - ya, pz - za
            return dx * dx + dy * dy + dz * dz <= squared[a]

        n_surface = 0
        current = 0
        for ux, uy, uz in unit_points:
            px, py, pz = ux * ri + xi, uy * ri + yi, uz * ri + zi
            # try the neighbour that covered the previous point first
            if neighbors and covered_by(neighbors[current], px, py, pz):
                continue
            for k, a in enumerate(neighbors):
                if covered_by(a, px, py, pz):
                    current = k
                    break
            else:
                n_surface += 1
        return 4.0 * math.pi * ri * ri * n_surface / n_points

    return _run_blocks(atom_area, n_atoms, n_threads)