"""
Tests for the closed-form polynomial solvers.

Tests for trefoilworlds/portal/quartic.py
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from trefoilworlds.portal.quartic import cubic, quadratic, quartic


def _monic_from_roots(*roots: complex) -> np.ndarray:
    coeffs = np.real_if_close(np.poly(roots))
    assert coeffs[0] == pytest.approx(1.0)
    return np.real(coeffs)


class TestQuadratic:
    """Test quadratic()."""

    def test_two_roots_ascending(self):
        ok, lo, hi = quadratic(-4.0, 3.0)
        assert ok
        assert lo == pytest.approx(1.0)
        assert hi == pytest.approx(3.0)

    def test_negative_linear_term_order(self):
        ok, lo, hi = quadratic(4.0, 3.0)
        assert ok
        assert (lo, hi) == (pytest.approx(-3.0), pytest.approx(-1.0))

    def test_no_real_roots(self):
        ok, lo, hi = quadratic(0.0, 1.0)
        assert not ok
        assert math.isnan(lo) and math.isnan(hi)

    def test_double_root_at_zero(self):
        ok, lo, hi = quadratic(0.0, 0.0)
        assert ok
        assert lo == 0.0 and hi == 0.0

    def test_random_roots_satisfy_equation(self, rng):
        checked = 0
        for b, c in rng.uniform(-10.0, 10.0, size=(300, 2)):
            if b * b - 4.0 * c < 0.0:
                assert not quadratic(b, c)[0]
                continue

            ok, lo, hi = quadratic(b, c)
            assert ok
            assert lo <= hi
            for x in (lo, hi):
                scale = max(1.0, x * x, abs(b * x), abs(c))
                assert abs(x * x + b * x + c) <= 1e-12 * scale
            checked += 1

        assert checked > 50


class TestCubic:
    """Test cubic()."""

    def test_three_real_roots_returns_largest(self):
        # (x - 1)(x - 2)(x - 5)
        assert cubic(-8.0, 17.0, -10.0) == pytest.approx(5.0)

    def test_one_real_root(self):
        # (x - 2)(x^2 + 1)
        assert cubic(-2.0, 1.0, -2.0) == pytest.approx(2.0)

    def test_one_real_root_negative(self):
        # (x + 3)(x^2 + x + 1)
        a1, a2, a3 = _monic_from_roots(-3.0, complex(-0.5, math.sqrt(3) / 2), complex(-0.5, -math.sqrt(3) / 2))[1:]
        assert cubic(a1, a2, a3) == pytest.approx(-3.0)

    def test_triple_root(self):
        # (x - 2)^3
        assert cubic(-6.0, 12.0, -8.0) == pytest.approx(2.0)

    def test_random_coefficients_give_a_root(self, rng):
        for a1, a2, a3 in rng.uniform(-10.0, 10.0, size=(300, 3)):
            x = cubic(a1, a2, a3)
            scale = 1.0 + abs(x) ** 3 + abs(a1) * x * x + abs(a2 * x) + abs(a3)
            assert abs(x ** 3 + a1 * x * x + a2 * x + a3) <= 1e-9 * scale

    def test_largest_of_three_real_roots_matches_reference(self, rng):
        for _ in range(200):
            roots = np.sort(rng.uniform(-5.0, 5.0, size=3))
            if np.min(np.diff(roots)) < 0.2:
                continue
            _, a1, a2, a3 = np.poly(roots)

            reference = np.roots([1.0, a1, a2, a3])
            assert np.all(np.abs(reference.imag) < 1e-9)

            assert cubic(a1, a2, a3) == pytest.approx(reference.real.max(), abs=1e-8)


class TestQuartic:
    """Test quartic()."""

    @pytest.mark.parametrize("roots", [
        (1.0, 2.0, 3.0, 4.0),
        (-3.0, -1.0, 0.5, 2.0),
        (-2.5, -0.3, 0.7, 10.0),
        (-1.0, -0.5, 0.5, 1.0),
    ])
    def test_four_real_roots(self, roots):
        _, a, b, c, d = _monic_from_roots(*roots)

        count, found = quartic(a, b, c, d)

        assert count == 4
        assert list(found) == pytest.approx(sorted(roots), abs=1e-8)

    def test_two_real_roots(self):
        # (x - 1)(x + 2)(x^2 + x + 3)
        coeffs = np.polymul([1.0, 1.0, -2.0], [1.0, 1.0, 3.0])
        _, a, b, c, d = coeffs

        count, found = quartic(a, b, c, d)

        assert count == 2
        assert list(found[:2]) == pytest.approx([-2.0, 1.0], abs=1e-9)
        assert all(math.isnan(v) for v in found[2:])

    def test_no_real_roots(self):
        # (x^2 + 1)(x^2 + 2x + 5)
        _, a, b, c, d = np.polymul([1.0, 0.0, 1.0], [1.0, 2.0, 5.0])

        count, found = quartic(a, b, c, d)

        assert count == 0
        assert all(math.isnan(v) for v in found)

    def test_x4_plus_one_has_no_real_roots(self):
        count, _ = quartic(0.0, 0.0, 0.0, 1.0)
        assert count == 0

    def test_zero_pivot(self):
        # x^4 - 1: the resolvent's largest root is 0, so t cannot be divided by.
        count, found = quartic(0.0, 0.0, 0.0, -1.0)

        assert count == 2
        assert list(found[:2]) == pytest.approx([-1.0, 1.0])

    def test_biquadratic(self):
        # (x^2 - 1)(x^2 - 4)
        count, found = quartic(0.0, -5.0, 0.0, 4.0)

        assert count == 4
        assert list(found) == pytest.approx([-2.0, -1.0, 1.0, 2.0])

    def test_random_four_real_roots_match(self, rng):
        for _ in range(200):
            roots = np.sort(rng.uniform(-5.0, 5.0, size=4))
            if np.min(np.diff(roots)) < 0.3:
                continue
            _, a, b, c, d = np.poly(roots)

            count, found = quartic(a, b, c, d)

            assert count == 4
            np.testing.assert_allclose(found, roots, atol=1e-6)

    def test_random_two_real_roots_match(self, rng):
        for _ in range(200):
            real = np.sort(rng.uniform(-5.0, 5.0, size=2))
            if real[1] - real[0] < 0.3:
                continue
            m = rng.uniform(-5.0, 5.0)
            k = rng.uniform(0.5, 3.0)
            _, a, b, c, d = _monic_from_roots(real[0], real[1], complex(m, k), complex(m, -k))

            count, found = quartic(a, b, c, d)

            assert count == 2
            np.testing.assert_allclose(found[:2], real, atol=1e-6)

    def test_roots_are_ascending(self, rng):
        for a, b, c, d in rng.uniform(-20.0, 20.0, size=(300, 4)):
            count, found = quartic(a, b, c, d)
            assert count in (0, 2, 4)
            assert list(found[:count]) == sorted(found[:count])
