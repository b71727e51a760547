'''Track class definition

A span of ticks over which an OrbitalBody is advanced through the anomaly
pipeline.'''

import numpy as np
import pandas as pd
from typing import List, Optional, Union, TYPE_CHECKING

from .anomaly import AnomalyState, Epoch
from .config import config

if TYPE_CHECKING:
    from .orbital_body import OrbitalBody


class Track:
    """
    Anomaly pipeline evaluated over a tick interval.

    Evaluation does not touch the body's ``last_state``; only
    OrbitalBody.advance() does.

    Attributes:
        body: OrbitalBody being tracked
        t0: Start tick
        tf: End tick
        epoch: Epoch override (None uses the body's epoch)
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, body: "OrbitalBody", t0: float, tf: float,
                 epoch: Optional[Epoch] = None):
        if not (np.isfinite(t0) and np.isfinite(tf)):
            raise ValueError(f"Track bounds must be finite, got [{t0}, {tf}]")
        self._body = body
        self._t0 = float(t0)
        self._tf = float(tf)
        self._epoch = epoch

    # ========== PROPERTY ACCESS ==========
    @property
    def body(self) -> "OrbitalBody":
        return self._body

    @property
    def t0(self):
        return self._t0

    @property
    def tf(self):
        return self._tf

    @property
    def epoch(self) -> Epoch:
        return self._epoch if self._epoch is not None else self._body.epoch

    @property
    def duration(self):
        """Track duration in ticks."""
        return self.tf - self.t0

    # ========== EVALUATION ==========
    def state_at(self, tick: float) -> AnomalyState:
        """
        Get anomaly state at specified tick.

        Parameters:
            tick: Tick to query (must be in [t0, tf])
        """
        self._validate_tick(tick)
        return self._body.state_at(float(tick), self.epoch)

    def evaluate(self, ticks: Union[float, np.ndarray, list]
                 ) -> Union[AnomalyState, List[AnomalyState]]:
        """
        Evaluate track at one or more ticks.

        Parameters:
            ticks: Single tick or array of ticks

        Returns:
            Single AnomalyState if ticks is scalar,
            list of AnomalyState if ticks is array-like
        """
        # Handle scalar input
        if np.ndim(ticks) == 0:
            return self.state_at(ticks)

        ticks = np.asarray(ticks, dtype=float)
        return [self.state_at(t) for t in ticks]

    def sample(self, n_points: Optional[int] = None) -> List[AnomalyState]:
        """
        Uniformly sample track in ticks.

        Parameters:
            n_points: Number of points to sample (default: config.DEFAULT_SAMPLE_POINTS)

        Returns:
            List of AnomalyState uniformly spaced in ticks
        """
        return self.evaluate(self.get_ticks(n_points))

    def positions(self, ticks: Optional[np.ndarray] = None,
                  n_points: Optional[int] = None) -> np.ndarray:
        """
        Inertial positions as an array of shape (n, 3).

        Parameters:
            ticks: Specific ticks to evaluate. If None, uses uniform sampling.
            n_points: Number of uniform samples if ticks not provided
        """
        if ticks is None:
            ticks = self.get_ticks(n_points)
        states = self.evaluate(np.asarray(ticks, dtype=float))
        return np.array([s.position for s in states]).reshape(-1, 3)

    def _validate_tick(self, tick: float):
        """Validate that tick is within track bounds."""
        t_min = min(self.t0, self.tf)
        t_max = max(self.t0, self.tf)

        if not (t_min <= tick <= t_max):
            raise ValueError(
                f"Tick {tick} outside track bounds [{self.t0}, {self.tf}]"
            )

    def contains_tick(self, tick: float) -> bool:
        """Check if tick is within track bounds."""
        return min(self.t0, self.tf) <= tick <= max(self.t0, self.tf)

    def get_ticks(self, n_points: Optional[int] = None) -> np.ndarray:
        """Generate uniform tick array spanning track."""
        if n_points is None:
            n_points = config.DEFAULT_SAMPLE_POINTS
        if n_points < 2:
            raise ValueError("n_points must be at least 2, use .state_at()")
        return np.linspace(self.t0, self.tf, n_points)

    def to_dataframe(self,
                     ticks: Optional[np.ndarray] = None,
                     n_points: Optional[int] = None) -> pd.DataFrame:
        """
        Export track to pandas DataFrame.

        Parameters:
            ticks: Specific ticks to evaluate. If None, uses uniform sampling.
            n_points: Number of uniform samples if ticks not provided

        Returns:
            DataFrame with columns tick, M, E, E_deg, phi, x, y, z,
            converged, iterations
        """
        if ticks is None:
            ticks = self.get_ticks(n_points)
        else:
            ticks = np.asarray(ticks, dtype=float)

        states = self.evaluate(ticks)
        positions = np.array([s.position for s in states]).reshape(-1, 3)

        data = {
            'tick': ticks,
            'M': [s.M for s in states],
            'E': [s.E for s in states],
            'E_deg': [s.E_deg for s in states],
            'phi': [s.phi for s in states],
            'x': positions[:, 0],
            'y': positions[:, 1],
            'z': positions[:, 2],
            'converged': [s.converged for s in states],
            'iterations': [s.solution.iterations for s in states],
        }

        return pd.DataFrame(data)

    # ========== SPECIAL METHODS ==========
    def __repr__(self):
        return (f"Track(t0={self.t0}, tf={self.tf}, duration={self.duration})")

    def __str__(self):
        return f"Track of {self.body!r}: tick ∈ [{self.t0}, {self.tf}]"

    def __call__(self, tick: float) -> AnomalyState:
        """
        Evaluate track at tick.
        Syntactic sugar for .state_at(tick). Allows track(tick) syntax.
        """
        return self.state_at(tick)
