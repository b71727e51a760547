'''Anomaly pipeline

Mean anomaly (time driven) -> eccentric anomaly (Kepler solver) -> true
anomaly -> position. The mean anomaly is carried as a fraction of a
revolution and reduced with 2π·(M - floor(M)).'''

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .kepler import KeplerSolution, solve_kepler
from .utils import checked_sqrt


@dataclass(frozen=True)
class Epoch:
    """
    Reference point for advancing a body in time.

    Attributes
    ----------
    tick : float
        Simulation tick at which ``mean_anomaly`` holds
    mean_anomaly : float
        Mean anomaly at epoch Mt [fraction of a revolution]
    mean_motion : float, optional
        Mean motion n [revolutions per tick]. If None the body's derived
        mean motion 1/p is used.
    """
    tick: float = 0.0
    mean_anomaly: float = 0.0
    mean_motion: Optional[float] = None

    def __post_init__(self):
        if not math.isfinite(self.tick):
            raise ValueError(f"Epoch tick must be finite, got {self.tick}")
        if not math.isfinite(self.mean_anomaly):
            raise ValueError(f"Mean anomaly at epoch must be finite, got {self.mean_anomaly}")
        if self.mean_motion is not None and not math.isfinite(self.mean_motion):
            raise ValueError(f"Mean motion must be finite, got {self.mean_motion}")


@dataclass(frozen=True)
class AnomalyState:
    """
    Output of one pass through the anomaly pipeline.

    Attributes
    ----------
    tick : float
        Tick the state was evaluated at
    M : float
        Mean anomaly [rad], in [0, 2π)
    E : float
        Eccentric anomaly [rad]
    E_deg : float
        Eccentric anomaly [deg]
    phi : float
        True anomaly normalized by π (half revolutions)
    position : np.ndarray
        Inertial position vector
    solution : KeplerSolution
        Solver result E came from
    """
    tick: float
    M: float
    E: float
    E_deg: float
    phi: float
    position: np.ndarray
    solution: KeplerSolution

    @property
    def converged(self) -> bool:
        return self.solution.converged


def mean_anomaly(Mt: float, n: float, tick: float, epoch: float) -> float:
    """
    Advance the mean anomaly to ``tick`` and reduce it to [0, 2π).

    Mt and n are in revolutions (and revolutions per tick); the result is
    in radians.
    """
    M = Mt + n * (tick - epoch)
    frac = M - math.floor(M)
    if frac >= 1.0:
        # tiny negative M rounds up to a full revolution
        frac = 0.0
    return 2.0 * math.pi * frac


def eccentric_anomaly(M: float, ecc: float, **solver_kwargs) -> KeplerSolution:
    """Eccentric anomaly for mean anomaly M, see solve_kepler()"""
    return solve_kepler(M, ecc, **solver_kwargs)


def true_anomaly(E: float, ecc: float) -> float:
    """
    True anomaly from eccentric anomaly, divided by π.

    phi = atan2(√(1-e²)·sin(E), cos(E) - e) / π, so one full revolution
    spans (-1, 1].

    Raises
    ------
    DomainError
        If ecc > 1
    """
    fak = checked_sqrt(1.0 - ecc * ecc, "1 - ecc²")
    return math.atan2(fak * math.sin(E), math.cos(E) - ecc) / math.pi


def perifocal_position(E: float, a: float, b: float, ecc: float) -> np.ndarray:
    """Position in the perifocal frame, (a(cos E - e), b sin E, 0)"""
    return np.array([a * (math.cos(E) - ecc), b * math.sin(E), 0.0])


def perifocal_to_inertial(vec, argp: float, inc: float = 0.0,
                          raan: float = 0.0) -> np.ndarray:
    """
    Rotate a perifocal-frame vector into the inertial frame.

    Parameters
    ----------
    vec : array-like
        3-vector in the perifocal frame
    argp : float
        Argument of periapsis [rad]
    inc : float, optional
        Inclination [rad]
    raan : float, optional
        Right ascension of the ascending node [rad]

    Returns
    -------
    np.ndarray
        R3(raan) @ R1(inc) @ R3(argp) @ vec
    """
    # rotation about z-axis by RAAN
    R3_raan = np.array([
        [np.cos(raan), -np.sin(raan), 0],
        [np.sin(raan),  np.cos(raan), 0],
        [0,             0,            1]
    ])
    # rotation about x-axis by inclination
    R1_i = np.array([
        [1,  0,            0          ],
        [0,  np.cos(inc), -np.sin(inc)],
        [0,  np.sin(inc),  np.cos(inc)]
    ])
    # rotation about z-axis by argument of periapsis
    R3_w = np.array([
        [np.cos(argp), -np.sin(argp), 0],
        [np.sin(argp),  np.cos(argp), 0],
        [0,             0,            1]
    ])
    DCM = R3_raan @ R1_i @ R3_w
    return DCM @ np.asarray(vec, dtype=float)
