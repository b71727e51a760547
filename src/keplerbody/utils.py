"""
Utility functions for the keplerbody package.
"""

import math
import warnings
from typing import Type

import numpy as np

from .config import config
from .errors import DomainError


def as_vector(values, name: str = "vector") -> np.ndarray:
    """
    Convert input to a read-only float 3-vector.

    Parameters
    ----------
    values : array-like
        Three components
    name : str, optional
        Name used in error messages

    Returns
    -------
    np.ndarray
        Immutable copy of shape (3,)

    Raises
    ------
    ValueError
        If the input is not 3 finite real numbers
    """
    vec = np.array(values, dtype=float)
    if vec.shape != (3,):
        raise ValueError(f"{name} must be a 3-element vector, got shape {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"{name} contains NaN or Inf")
    vec.flags.writeable = False
    return vec


def checked_sqrt(x: float, name: str = "argument") -> float:
    """
    Square root that refuses negative arguments instead of returning NaN.

    Arguments in (-SNAP_TO_ZERO_THRESHOLD, 0) are snapped to zero so that
    round-off on circular orbits does not raise.

    Raises
    ------
    DomainError
        If x is negative beyond the snapping threshold, or not finite
    """
    x = float(x)
    if not math.isfinite(x):
        raise DomainError(f"sqrt of non-finite {name}: {x}")
    if x < 0:
        if x > -config.SNAP_TO_ZERO_THRESHOLD:
            return 0.0
        raise DomainError(f"sqrt of negative {name}: {x}")
    return math.sqrt(x)


def checked_acos(x: float, name: str = "argument") -> float:
    """
    Arc cosine that refuses arguments outside [-1, 1].

    Raises
    ------
    DomainError
        If |x| > 1 or x is not finite
    """
    x = float(x)
    if not math.isfinite(x) or abs(x) > 1.0:
        raise DomainError(f"arccos of {name} outside [-1, 1]: {x}")
    return math.acos(x)


def report_failure(message: str,
                   error_class: Type[Exception] = ArithmeticError,
                   warning_class: Type[Warning] = UserWarning):
    """
    Raise error or warn based on config.STRICT_CONVERGENCE.

    When STRICT_CONVERGENCE is True, raises the specified exception.
    When False (default), issues a warning of ``warning_class`` pointing at
    the caller of the function that reported the failure.

    Parameters
    ----------
    message : str
        Failure message
    error_class : Type[Exception], optional
        Exception class to raise in strict mode
    warning_class : Type[Warning], optional
        Warning category to issue otherwise

    Examples
    --------
    >>> from keplerbody.utils import report_failure
    >>> from keplerbody import config, ConvergenceError, NonConvergenceWarning
    >>> report_failure("no luck", ConvergenceError, NonConvergenceWarning)  # warns
    >>> config.STRICT_CONVERGENCE = True
    >>> report_failure("no luck", ConvergenceError, NonConvergenceWarning)  # raises
    """
    if config.STRICT_CONVERGENCE:
        raise error_class(message)
    else:
        warnings.warn(message, warning_class, stacklevel=3)
