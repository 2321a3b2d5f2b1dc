import sys
from pathlib import Path

import numpy as np
import pytest

# Add repo root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from almond.complex_number import Complex
from almond.divergence import divergence_at, divergence_grid


@pytest.mark.parametrize("cap", [1, 2, 10, 250])
def test_origin_never_escapes(cap):
    assert divergence_at(Complex.from_pair(0.0, 0.0), cap) == cap


@pytest.mark.parametrize("c", [3 + 0j, -2.5j, 1.5 + 1.5j, -2.01 + 0j])
def test_outside_radius_two_escapes_at_first_step(c):
    """z_0 = 0 passes the test, z_1 = c is the first value that can exceed it."""
    assert divergence_at(c, 100) == 1


def test_known_orbits():
    # 0, 1, 2, 5: |z_2|^2 == 4 is not an escape, z_3 is
    assert divergence_at(1.0, 10) == 3
    # 0, -2, 2, 2, ... sits on the boundary forever
    assert divergence_at(-2.0, 10) == 10
    # period-2 cycle 0, -1, 0, -1
    assert divergence_at(-1.0, 50) == 50
    assert divergence_at(complex(-0.75, 0.1), 100) == 33


def test_cap_limits_count():
    assert divergence_at(1.0, 2) == 2


def test_deterministic():
    c = Complex.from_pair(-0.7436, 0.1318)
    assert divergence_at(c, 200) == divergence_at(c, 200)


def test_orbit_stays_cartesian():
    c = Complex.from_pair(0.3, 0.5)
    divergence_at(c, 30)
    assert not c.has_polar()


@pytest.mark.parametrize("cap", [0, -3, 2.5, True])
def test_invalid_cap(cap):
    with pytest.raises(ValueError):
        divergence_at(0j, cap)
    with pytest.raises(ValueError):
        divergence_grid([0.0], [0.0], cap)


def test_grid_matches_pointwise():
    xs = np.linspace(-2.2, 1.2, 17)
    ys = np.linspace(-1.5, 1.5, 13)
    cap = 60

    grid = divergence_grid(xs[None, :], ys[:, None], cap)
    expected = np.array([[divergence_at(complex(x, y), cap) for x in xs] for y in ys])

    assert grid.shape == (13, 17)
    np.testing.assert_array_equal(grid, expected)


def test_grid_all_escaped_early():
    grid = divergence_grid(np.array([5.0, -5.0]), np.array([0.0, 3.0]), 1000)
    np.testing.assert_array_equal(grid, [1, 1])
