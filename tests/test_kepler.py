"""
Test suite for the Kepler equation solver.

Tests cover:
- Zero eccentricity and typical convergence
- Round trip E -> M -> E over a grid of eccentricities
- Initial guess selection
- Non-convergence reporting (warning and strict mode)
- Degrees conversion and input validation
"""

import math
import warnings
import pytest
from keplerbody import (
    solve_kepler, KeplerSolution, temp_config,
    ConvergenceError, NonConvergenceWarning
)
from keplerbody.kepler import kepler_residual


class TestBasicSolves:
    """Test simple cases of the solver."""

    @pytest.mark.parametrize("M", [0.0, 0.5, 1.0, 2.0, 5.0])
    def test_zero_eccentricity(self, M):
        """If e=0, E=M exactly with no iterations."""
        sol = solve_kepler(M, 0.0)
        assert sol.E == M
        assert sol.iterations == 0
        assert sol.converged

    def test_converges_typical(self):
        sol = solve_kepler(1.0, 0.4)
        assert sol.converged
        assert abs(sol.residual) <= 1e-3
        assert sol.residual == pytest.approx(kepler_residual(sol.E, 1.0, 0.4))

    def test_returns_structured_result(self):
        sol = solve_kepler(1.0, 0.4)
        assert isinstance(sol, KeplerSolution)
        assert float(sol) == sol.E

    def test_degrees(self):
        sol = solve_kepler(2.0, 0.3)
        assert sol.degrees == pytest.approx(math.degrees(sol.E))
        assert sol.degrees == sol.E / (math.pi / 180)

    def test_explicit_tolerance(self):
        sol = solve_kepler(2.0, 0.6, tol=1e-12)
        assert abs(sol.residual) <= 1e-12


class TestRoundTrip:
    """E -> M = E - e*sin(E) -> solver -> E."""

    @pytest.mark.parametrize("ecc", [0.0, 0.1, 0.3, 0.5, 0.7, 0.8, 0.9, 0.95])
    @pytest.mark.parametrize("E", [0.3, 1.0, 2.0, 3.0, 4.0, 5.5, 6.0])
    def test_recovers_eccentric_anomaly(self, ecc, E):
        M = E - ecc * math.sin(E)
        sol = solve_kepler(M, ecc, tol=1e-12)
        assert sol.converged
        assert sol.E == pytest.approx(E, abs=1e-9)

    @pytest.mark.parametrize("ecc", [0.0, 0.1, 0.3, 0.5, 0.7, 0.8, 0.9, 0.95])
    @pytest.mark.parametrize("E", [0.3, 1.0, 2.0, 3.0, 4.0, 5.5, 6.0])
    def test_default_tolerance_met(self, ecc, E):
        M = E - ecc * math.sin(E)
        sol = solve_kepler(M, ecc)
        assert sol.converged
        assert abs(kepler_residual(sol.E, M, ecc)) <= 1e-3
        # |F'| >= 1 - ecc, so a residual of tol bounds the error in E
        assert abs(sol.E - E) <= 1e-3 / (1 - ecc) + 1e-12


class TestInitialGuess:
    """E0 = M below the high-eccentricity threshold, π at or above it."""

    def test_low_eccentricity_starts_at_mean_anomaly(self):
        with pytest.warns(NonConvergenceWarning):
            sol = solve_kepler(1.0, 0.79, max_iter=0)
        assert sol.E == 1.0

    def test_high_eccentricity_starts_at_pi(self):
        with pytest.warns(NonConvergenceWarning):
            sol = solve_kepler(1.0, 0.8, max_iter=0)
        assert sol.E == math.pi

    def test_threshold_from_config(self):
        with temp_config(HIGH_ECC_THRESHOLD=0.5):
            with pytest.warns(NonConvergenceWarning):
                sol = solve_kepler(1.0, 0.6, max_iter=0)
        assert sol.E == math.pi


class TestNonConvergence:
    """Iteration cap reached without meeting tolerance."""

    def test_warns_and_flags(self):
        with pytest.warns(NonConvergenceWarning):
            sol = solve_kepler(0.1, 0.95, max_iter=1)
        assert not sol.converged
        assert sol.iterations == 1
        assert abs(sol.residual) > 1e-3

    def test_max_iter_from_config(self):
        with temp_config(KEPLER_MAX_ITER=1):
            with pytest.warns(NonConvergenceWarning):
                sol = solve_kepler(0.1, 0.95)
        assert sol.iterations == 1

    def test_strict_mode_raises(self):
        with temp_config(STRICT_CONVERGENCE=True):
            with pytest.raises(ConvergenceError):
                solve_kepler(0.1, 0.95, max_iter=1)

    def test_converged_solve_is_silent(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            sol = solve_kepler(1.0, 0.2)
        assert sol.converged


class TestInputValidation:
    """Invalid solver inputs."""

    @pytest.mark.parametrize("M,ecc", [
        (float('nan'), 0.1),
        (1.0, float('inf')),
    ])
    def test_non_finite(self, M, ecc):
        with pytest.raises(ValueError):
            solve_kepler(M, ecc)

    def test_non_positive_tolerance(self):
        with pytest.raises(ValueError):
            solve_kepler(1.0, 0.1, tol=0.0)

    def test_negative_max_iter(self):
        with pytest.raises(ValueError):
            solve_kepler(1.0, 0.1, max_iter=-1)
