"""
keplerbody: Orbital Elements from State Vectors

A Python package that derives classical orbital elements from a body's
position and velocity on demand, and advances the body in time by solving
Kepler's equation.
"""

# Core classes
from .orbital_body import OrbitalBody, OrbitalBody as Body
from .derivations import Attr, Derivation, DERIVATIONS
from .kepler import KeplerSolution, solve_kepler
from .anomaly import (AnomalyState, Epoch, mean_anomaly, true_anomaly,
                      perifocal_position, perifocal_to_inertial)
from .track import Track
from .bodies import BodyParams

# Commonly-used celestial bodies
from .bodies import EARTH, MOON, MARS, SUN

# Configuration
from .config import config, temp_config

# Errors
from .errors import (KeplerBodyError, MissingDerivationError,
                     CyclicDependencyError, DomainError, ConvergenceError,
                     NonConvergenceWarning)

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from keplerbody import *"
__all__ = [
    # Classes
    "OrbitalBody",
    "Attr",
    "Derivation",
    "KeplerSolution",
    "AnomalyState",
    "Epoch",
    "Track",
    "BodyParams",
    # Abbreviations
    "Body",
    # Functions
    "solve_kepler",
    "mean_anomaly",
    "true_anomaly",
    "perifocal_position",
    "perifocal_to_inertial",
    # Tables and constants
    "DERIVATIONS",
    "EARTH",
    "MOON",
    "MARS",
    "SUN",
    # Configuration
    "config",
    "temp_config",
    # Errors
    "KeplerBodyError",
    "MissingDerivationError",
    "CyclicDependencyError",
    "DomainError",
    "ConvergenceError",
    "NonConvergenceWarning",
]
