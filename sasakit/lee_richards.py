"""Solvent accessible surface area by the Lee & Richards slicing algorithm."""

from __future__ import annotations

import math
import warnings
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from sasakit.nb import NeighborList

TWO_PI = 2 * math.pi
MAX_THREADS = 16

Arc = tuple[float, float]


def exposed_arc_length(arcs: Iterable[Arc]) -> float:
    """Length of the part of a circle not covered by any of the buried arcs.

    Each arc is a pair ``(start, end)`` of angles with ``start <= end``;
    no arc may cross zero.
    """
    ordered = sorted(arcs, key=lambda arc: arc[0])
    if not ordered:
        return TWO_PI
    total, sup = ordered[0]
    for start, end in ordered[1:]:
        if sup < start:
            total += start - sup
        if end > sup:
            sup = end
    return total + TWO_PI - sup


def _as_points(coords: Iterable[Sequence[float]]) -> list[tuple[float, float, float]]:
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


def _check_threads(n_threads: int, n_atoms: int) -> int:
    if n_threads > n_atoms:
        warnings.warn(
            "no sense in having more threads than atoms, "
            f"only using {n_atoms} threads",
            RuntimeWarning,
            stacklevel=3,
        )
        return n_atoms
    return n_threads


def lee_richards(
    coords: Iterable[Sequence[float]],
    radii: Iterable[float],
    probe_radius: float = 1.4,
    n_slices: int = 20,
    n_threads: int = 1,
) -> list[float]:
    """Per-atom SASA of spheres at ``coords`` with ``radii``, using slices.

    ``n_slices`` is the number of slices per atom. Returns an empty list
    (with a warning) when there are no coordinates.
    """
    if n_threads > MAX_THREADS:
        raise ValueError(f"L&R does not support more than {MAX_THREADS} threads")
    if n_threads < 1:
        raise ValueError("number of threads must be 1 or larger")
    if n_slices <= 0:
        raise ValueError(
            f"{n_slices} slices per atom invalid resolution in L&R, must be > 0"
        )

    points = _as_points(coords)
    atom_radii = [float(r) for r in radii]
    if len(atom_radii) != len(points):
        raise ValueError(f"{len(atom_radii)} radii given for {len(points)} coordinates")
    n_atoms = len(points)
    if n_atoms == 0:
        warnings.warn("empty coordinates", RuntimeWarning, stacklevel=2)
        return []
    n_threads = _check_threads(n_threads, n_atoms)

    spheres = [r + probe_radius for r in atom_radii]
    adj = NeighborList(points, spheres)

    def atom_area(i: int) -> float:
        zi = points[i][2]
        ri = spheres[i]
        neighbors = [
            (points[j][2], spheres[j], dxy, dx, dy)
            for j, dxy, dx, dy in zip(
                adj.neighbors[i], adj.xy_distances[i], adj.x_offsets[i], adj.y_offsets[i]
            )
        ]
        delta = 2 * ri / n_slices
        z = zi - ri - 0.5 * delta
        sasa = 0.0
        for _ in range(n_slices):
            z += delta
            di = abs(zi - z)
            ri_prime2 = ri * ri - di * di
            if ri_prime2 < 0:
                continue
            ri_prime = math.sqrt(ri_prime2)
            if ri_prime <= 0:
                continue
            arcs: list[Arc] = []
            buried = False
            for zj, rj, dij, dx, dy in neighbors:
                dj = abs(zj - z)
                if dj >= rj:
                    continue
                rj_prime2 = rj * rj - dj * dj
                rj_prime = math.sqrt(rj_prime2)
                if dij >= ri_prime + rj_prime:
                    continue  # circles not in contact
                if dij + ri_prime < rj_prime:
                    buried = True  # circle i inside circle j
                    break
                if dij + rj_prime < ri_prime:
                    continue  # circle j inside circle i
                cos_alpha = (ri_prime2 + dij * dij - rj_prime2) / (2.0 * ri_prime * dij)
                alpha = math.acos(min(1.0, max(-1.0, cos_alpha)))
                beta = math.atan2(dy, dx) + math.pi
                inf = beta - alpha
                sup = beta + alpha
                if inf < 0:
                    inf += TWO_PI
                if sup > TWO_PI:
                    sup -= TWO_PI
                if sup < inf:
                    arcs.append((0.0, sup))
                    arcs.append((inf, TWO_PI))
                else:
                    arcs.append((inf, sup))
            if not buried:
                sasa += delta * ri * exposed_arc_length(arcs)
        return sasa

    return _run_blocks(atom_area, n_atoms, n_threads)