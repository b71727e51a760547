'''Kepler equation solver

Finds the eccentric anomaly E satisfying E - e*sin(E) = M by Newton-Raphson
iteration, reporting whether the residual tolerance was met.'''

import math
from dataclasses import dataclass
from typing import Optional

from .config import config
from .errors import ConvergenceError, NonConvergenceWarning
from .utils import report_failure


@dataclass(frozen=True)
class KeplerSolution:
    """
    Result of a Kepler equation solve.

    Attributes
    ----------
    E : float
        Eccentric anomaly [rad] at the last iterate
    converged : bool
        True if |residual| <= tolerance
    iterations : int
        Number of Newton-Raphson updates performed
    residual : float
        E - e*sin(E) - M at the returned E
    """
    E: float
    converged: bool
    iterations: int
    residual: float

    @property
    def degrees(self) -> float:
        """Eccentric anomaly in degrees, E / (π/180)"""
        return self.E / (math.pi / 180)

    def __float__(self):
        return float(self.E)


def kepler_residual(E: float, M: float, ecc: float) -> float:
    """F(E) = E - e*sin(E) - M"""
    return E - ecc * math.sin(E) - M


def solve_kepler(M: float, ecc: float,
                 tol: Optional[float] = None,
                 max_iter: Optional[int] = None) -> KeplerSolution:
    """
    Solve Kepler's equation for the eccentric anomaly.

    Starts from E = M for eccentricities below config.HIGH_ECC_THRESHOLD and
    from E = π otherwise, then iterates E <- E - F(E)/(1 - e*cos(E)) while
    |F(E)| > tol and fewer than max_iter updates have been made.

    Parameters
    ----------
    M : float
        Mean anomaly [rad], already reduced to [0, 2π)
    ecc : float
        Eccentricity, 0 <= e < 1
    tol : float, optional
        Residual tolerance (default config.KEPLER_TOL)
    max_iter : int, optional
        Iteration cap (default config.KEPLER_MAX_ITER)

    Returns
    -------
    KeplerSolution
        Last iterate with convergence flag and iteration count

    Raises
    ------
    ValueError
        If M or ecc is not finite, or tol/max_iter are not positive
    ConvergenceError
        If the cap is reached and config.STRICT_CONVERGENCE is True

    Warns
    -----
    NonConvergenceWarning
        If the cap is reached and config.STRICT_CONVERGENCE is False

    Examples
    --------
    >>> sol = solve_kepler(1.0, 0.4)
    >>> sol.converged
    True
    """
    if tol is None:
        tol = config.KEPLER_TOL
    if max_iter is None:
        max_iter = config.KEPLER_MAX_ITER
    if not (math.isfinite(M) and math.isfinite(ecc)):
        raise ValueError(f"Mean anomaly and eccentricity must be finite, "
                         f"got M={M}, e={ecc}")
    if tol <= 0:
        raise ValueError(f"Tolerance must be positive, got {tol}")
    if max_iter < 0:
        raise ValueError(f"max_iter must be non-negative, got {max_iter}")

    # initial guess, E = M diverges for high eccentricity
    if ecc < config.HIGH_ECC_THRESHOLD:
        E = float(M)
    else:
        E = math.pi

    F = kepler_residual(E, M, ecc)
    i = 0
    while abs(F) > tol and i < max_iter:
        E = E - F / (1.0 - ecc * math.cos(E))
        F = kepler_residual(E, M, ecc)
        i += 1

    converged = abs(F) <= tol
    if not converged:
        report_failure(
            f"Kepler solver did not converge after {i} iterations "
            f"(M={M}, e={ecc}, residual={F:.3e}, tol={tol})",
            ConvergenceError, NonConvergenceWarning
        )
    return KeplerSolution(E=E, converged=converged, iterations=i, residual=F)
