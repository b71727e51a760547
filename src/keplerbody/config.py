"""
Global Configuration for keplerbody Package
============================================

This module provides package-wide configuration settings that users can modify
to control the default gravitational parameter, the Kepler solver's tolerance
and iteration cap, and numerical snapping behavior.

Examples
--------
View current configuration:

>>> import keplerbody
>>> print(keplerbody.config)

Modify settings:

>>> keplerbody.config.KEPLER_TOL = 1e-10  # Tighter solver tolerance
>>> keplerbody.config.STRICT_CONVERGENCE = True  # Raise instead of warn

Reset to defaults:

>>> keplerbody.config.reset()

Temporarily modify settings:

>>> with keplerbody.temp_config(KEPLER_MAX_ITER=5):
...     # Short iteration budget for this block only
...     sol = keplerbody.solve_kepler(1.0, 0.9)

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset.
"""

from dataclasses import dataclass
from contextlib import contextmanager


@dataclass
class KeplerConfig:
    """
    Global configuration for keplerbody package.

    Attributes
    ----------
    DEFAULT_MU : float
        Gravitational parameter of the parent body used when an OrbitalBody
        is given neither a parent nor an explicit mu [km³/s²].
        Default: 398600.0
    KEPLER_TOL : float
        Residual tolerance |E - e*sin(E) - M| for the Kepler solver.
        Default: 1e-3
    KEPLER_MAX_ITER : int
        Maximum number of Newton-Raphson iterations in the Kepler solver.
        Default: 30
    HIGH_ECC_THRESHOLD : float
        Eccentricity at or above which the solver starts from E = pi
        instead of E = M.
        Default: 0.8
    STRICT_CONVERGENCE : bool
        If True, a solver that exhausts its iteration cap raises
        ConvergenceError. If False, it issues a NonConvergenceWarning.
        Default: False
    SNAP_TO_ZERO_THRESHOLD : float
        Negative square root arguments with magnitude below this threshold
        are treated as exactly zero (round-off on circular orbits).
        Default: 1e-10
    DEFAULT_SAMPLE_POINTS : int
        Default number of ticks sampled by Track.sample() and
        Track.to_dataframe().
        Default: 100
    """

    # Parent body
    DEFAULT_MU: float = 398600.0

    # Kepler solver
    KEPLER_TOL: float = 1e-3
    KEPLER_MAX_ITER: int = 30
    HIGH_ECC_THRESHOLD: float = 0.8
    STRICT_CONVERGENCE: bool = False

    # Snapping behavior
    SNAP_TO_ZERO_THRESHOLD: float = 1e-10

    # Sampling defaults
    DEFAULT_SAMPLE_POINTS: int = 100

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import keplerbody
        >>> keplerbody.config.KEPLER_TOL = 1e-8  # Modify
        >>> keplerbody.config.reset()  # Back to defaults
        >>> keplerbody.config.KEPLER_TOL
        0.001
        """
        defaults = KeplerConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["KeplerConfig:"]
        lines.append("  Parent Body:")
        lines.append(f"    DEFAULT_MU = {self.DEFAULT_MU}")
        lines.append("  Kepler Solver:")
        lines.append(f"    KEPLER_TOL = {self.KEPLER_TOL}")
        lines.append(f"    KEPLER_MAX_ITER = {self.KEPLER_MAX_ITER}")
        lines.append(f"    HIGH_ECC_THRESHOLD = {self.HIGH_ECC_THRESHOLD}")
        lines.append(f"    STRICT_CONVERGENCE = {self.STRICT_CONVERGENCE}")
        lines.append("  Snapping Thresholds:")
        lines.append(f"    SNAP_TO_ZERO_THRESHOLD = {self.SNAP_TO_ZERO_THRESHOLD}")
        lines.append("  Sampling:")
        lines.append(f"    DEFAULT_SAMPLE_POINTS = {self.DEFAULT_SAMPLE_POINTS}")
        return "\n".join(lines)


# Global configuration instance
config = KeplerConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import keplerbody
    >>> with keplerbody.temp_config(DEFAULT_MU=4.902799e3):
    ...     moon_orbiter = keplerbody.OrbitalBody([1838, 0, 0], [0, 1.63, 0], 1.0)
    ...     moon_orbiter.get('μ')
    4902.799
    >>> keplerbody.config.DEFAULT_MU
    398600.0

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"KeplerConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
