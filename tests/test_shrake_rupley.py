import math

import pytest

from sasakit import shrake_rupley as sr


@pytest.mark.parametrize("n", [1, 5, 20, 100])
def test_points_lie_on_unit_sphere(n):
    points = sr.test_points(n)
    assert len(points) == n
    for x, y, z in points:
        assert math.sqrt(x * x + y * y + z * z) == pytest.approx(1.0)


def test_points_are_symmetric_in_z():
    points = sr.test_points(50)
    zs = [p[2] for p in points]
    assert sum(zs) == pytest.approx(0.0, abs=1e-9)
    assert zs == sorted(zs, reverse=True)


def test_points_need_positive_count():
    with pytest.raises(ValueError):
        sr.test_points(0)


def test_isolated_atom_has_full_sphere_area():
    (area,) = sr.shrake_rupley([(1.0, 2.0, 3.0)], [1.0], probe_radius=1.4, n_points=100)
    assert area == pytest.approx(4 * math.pi * 2.4**2, rel=1e-12)


def test_distant_atoms_do_not_interact():
    areas = sr.shrake_rupley([(0, 0, 0), (50, 0, 0)], [1.5, 2.0], probe_radius=0.0)
    assert areas[0] == pytest.approx(4 * math.pi * 1.5**2)
    assert areas[1] == pytest.approx(4 * math.pi * 2.0**2)


def test_buried_atom_has_no_area():
    areas = sr.shrake_rupley([(0, 0, 0), (0.1, 0, 0)], [3.0, 0.5], probe_radius=0.0)
    assert areas[1] == 0.0
    assert areas[0] == pytest.approx(4 * math.pi * 9.0)


def test_overlapping_pair_is_reduced():
    areas = sr.shrake_rupley(
        [(0, 0, 0), (2, 0, 0)], [2.0, 2.0], probe_radius=0.0, n_points=500
    )
    full = 4 * math.pi * 4.0
    for area in areas:
        assert full / 2 < area < full
    assert areas[0] == pytest.approx(areas[1], rel=0.05)


def test_closer_atoms_expose_less():
    far = sr.shrake_rupley([(0, 0, 0), (3, 0, 0)], [2.0, 2.0], 0.0, 200, 1)
    near = sr.shrake_rupley([(0, 0, 0), (1, 0, 0)], [2.0, 2.0], 0.0, 200, 1)
    assert near[0] < far[0]


def test_threads_give_same_result():
    coords = [(i * 1.3, (i % 3) * 1.1, (i % 2) * 0.9) for i in range(10)]
    radii = [1.5 + 0.1 * (i % 4) for i in range(10)]
    single = sr.shrake_rupley(coords, radii, 1.4, 100, 1)
    multi = sr.shrake_rupley(coords, radii, 1.4, 100, 3)
    assert multi == single


def test_more_threads_than_atoms_warns():
    with pytest.warns(RuntimeWarning):
        areas = sr.shrake_rupley([(0, 0, 0)], [1.0], 0.0, 50, 4)
    assert areas[0] == pytest.approx(4 * math.pi)


def test_empty_coordinates_warn():
    with pytest.warns(RuntimeWarning):
        assert sr.shrake_rupley([], [], 1.4, 100, 1) == []


def test_too_many_threads():
    with pytest.raises(ValueError):
        sr.shrake_rupley([(0, 0, 0)], [1.0], 1.4, 100, 17)


def test_invalid_resolution():
    with pytest.raises(ValueError):
        sr.shrake_rupley([(0, 0, 0)], [1.0], 1.4, 0, 1)


def test_mismatched_radii():
    with pytest.raises(ValueError):
        sr.shrake_rupley([(0, 0, 0), (1, 1, 1)], [1.0], 1.4, 100, 1)