'''Derivation rule table for OrbitalBody attributes

Each derivable attribute is keyed by an Attr member and mapped to the
attributes it requires plus the formula that computes it. Formulas read
their inputs through ``body.get`` so every prerequisite comes from the
body's cache.'''

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Tuple, Union, TYPE_CHECKING

import numpy as np

from .errors import DomainError, MissingDerivationError
from .utils import checked_acos, checked_sqrt

if TYPE_CHECKING:
    from .orbital_body import OrbitalBody

# define an enumerated list of derivable attributes
class Attr(Enum):
    R = 'r'                     # radius scalar
    V = 'v'                     # speed scalar
    MU = 'μ'                    # gravitational parameter of parent
    EK = 'ek'                   # kinetic energy (specific)
    EP = 'ep'                   # potential energy (specific)
    ENERGY = 'ε'                # specific orbital energy
    INERTIA = 'I'               # moment of inertia
    ANGULAR_VELOCITY = 'Ω'      # angular velocity vector
    ANGULAR_MOMENTUM = 'L'      # total angular momentum vector
    H = 'h'                     # specific relative angular momentum vector
    A = 'a'                     # semi-major axis
    B = 'b'                     # semi-minor axis
    ECCVEC = 'eccvec'           # eccentricity vector
    ECC = 'ecc'                 # eccentricity
    PERIOD = 'p'                # orbital period
    ET = 'Et'                   # eccentric anomaly at epoch
    APOAPSIS = 'ap'
    PERIAPSIS = 'pe'
    ARGP = 'ω'                  # argument of periapsis
    VT = 'vt'                   # true anomaly at epoch
    N = 'n'                     # mean motion [rev / time unit]


@dataclass(frozen=True)
class Derivation:
    """
    One row of the rule table.

    Attributes
    ----------
    attr : Attr
        Attribute this rule produces
    requires : tuple of Attr
        Attributes that must be cached before ``formula`` runs
    formula : callable
        ``formula(body) -> value``
    """
    attr: Attr
    requires: Tuple[Attr, ...]
    formula: Callable[["OrbitalBody"], object]

    @property
    def doc(self) -> str:
        """First line of the formula's docstring"""
        return (self.formula.__doc__ or "").strip().split("\n")[0]


DERIVATIONS: Dict[Attr, Derivation] = {}


def derivation(attr: Attr, requires=()):
    """Register ``func`` as the rule for ``attr`` in DERIVATIONS."""
    def register(func):
        DERIVATIONS[attr] = Derivation(attr, tuple(requires), func)
        return func
    return register


# ========== ATTRIBUTE NAMES ==========
_ALIASES = {
    'radius': Attr.R,
    'speed': Attr.V,
    'mu': Attr.MU,
    'epsilon': Attr.ENERGY,
    'energy': Attr.ENERGY,
    'inertia': Attr.INERTIA,
    'Omega': Attr.ANGULAR_VELOCITY,
    'angular_velocity': Attr.ANGULAR_VELOCITY,
    'angular_momentum': Attr.ANGULAR_MOMENTUM,
    'e': Attr.ECC,
    'eccentricity': Attr.ECC,
    'period': Attr.PERIOD,
    'omega': Attr.ARGP,
    'argp': Attr.ARGP,
    'mean_motion': Attr.N,
}


def parse_attr(name: Union[Attr, str]) -> Attr:
    """
    Convert a symbol, alias or Attr member to an Attr.

    Accepts the symbol used in the rule table ('μ', 'ecc'), an ASCII alias
    ('mu', 'omega') or the member name ('ECC').

    Raises
    ------
    MissingDerivationError
        If the string names no known attribute
    TypeError
        If name is neither an Attr nor a str
    """
    if isinstance(name, Attr):
        return name
    elif isinstance(name, str):
        try:
            return Attr(name)
        except ValueError:
            pass
        if name in _ALIASES:
            return _ALIASES[name]
        if name.upper() in Attr.__members__:
            return Attr[name.upper()]
        raise MissingDerivationError(name)
    else:
        raise TypeError(f"Attribute name must be Attr or str, got {type(name)}")


def _nonzero_radius(body) -> float:
    r = body.get(Attr.R)
    if r == 0:
        raise DomainError("Quantity undefined at zero radius")
    return r


# ========== RULES ==========
@derivation(Attr.R)
def radius(body):
    """Radius scalar |rvec|"""
    return float(np.linalg.norm(body.rvec))


@derivation(Attr.V)
def speed(body):
    """Speed scalar |vvec|"""
    return float(np.linalg.norm(body.vvec))


@derivation(Attr.MU)
def gravitational_parameter(body):
    """Gravitational parameter of the parent body"""
    return float(body.parent_mu)


@derivation(Attr.EK, requires=(Attr.V,))
def kinetic_energy(body):
    """Kinetic energy v²/2"""
    return body.get(Attr.V)**2 / 2


@derivation(Attr.EP, requires=(Attr.MU, Attr.R))
def potential_energy(body):
    """Gravitational potential energy -μ/r"""
    return -body.get(Attr.MU) / _nonzero_radius(body)


@derivation(Attr.ENERGY, requires=(Attr.EK, Attr.EP))
def specific_energy(body):
    """Specific orbital energy ek + ep"""
    return body.get(Attr.EK) + body.get(Attr.EP)


@derivation(Attr.INERTIA, requires=(Attr.R,))
def moment_of_inertia(body):
    """Moment of inertia mass·r²"""
    return body.mass * body.get(Attr.R)**2


@derivation(Attr.ANGULAR_VELOCITY, requires=(Attr.R,))
def angular_velocity(body):
    """Angular velocity (rvec × vvec)/r²"""
    return np.cross(body.rvec, body.vvec) / _nonzero_radius(body)**2


@derivation(Attr.ANGULAR_MOMENTUM, requires=(Attr.INERTIA, Attr.ANGULAR_VELOCITY))
def angular_momentum(body):
    """Total angular momentum I·Ω"""
    return body.get(Attr.INERTIA) * body.get(Attr.ANGULAR_VELOCITY)


@derivation(Attr.H, requires=(Attr.ANGULAR_MOMENTUM, Attr.MU))
def specific_angular_momentum(body):
    """Specific relative angular momentum L/mass"""
    return body.get(Attr.ANGULAR_MOMENTUM) / body.mass


@derivation(Attr.A, requires=(Attr.MU, Attr.ENERGY))
def semi_major_axis(body):
    """
    Semi-major axis -μ/(2ε)

    Distance from the center of the orbit to apoapsis or periapsis, half
    of the 'length' of the orbit. Negative for hyperbolic trajectories.
    """
    energy = body.get(Attr.ENERGY)
    if energy == 0:
        raise DomainError("Semi-major axis undefined for zero specific energy")
    return -body.get(Attr.MU) / (2 * energy)


@derivation(Attr.B, requires=(Attr.A, Attr.ECC))
def semi_minor_axis(body):
    """
    Semi-minor axis a·√(ecc²-1) if ecc > 1 else a·√(1-ecc²)

    The sign follows a, so hyperbolic trajectories give a negative b.
    """
    a = body.get(Attr.A)
    ecc = body.get(Attr.ECC)
    if ecc > 1:
        return a * checked_sqrt(ecc**2 - 1, "ecc² - 1")
    else:
        return a * checked_sqrt(1 - ecc**2, "1 - ecc²")


@derivation(Attr.ECCVEC, requires=(Attr.H, Attr.MU, Attr.R))
def eccentricity_vector(body):
    """Eccentricity vector (vvec × h)/μ - rvec/r, pointing at periapsis"""
    h = body.get(Attr.H)
    return (np.cross(body.vvec, h) / body.get(Attr.MU)
            - body.rvec / _nonzero_radius(body))


@derivation(Attr.ECC, requires=(Attr.ENERGY, Attr.H, Attr.MU))
def eccentricity(body):
    """Eccentricity √(1 + 2ε·h²/μ²)"""
    h = body.get(Attr.H)
    mu = body.get(Attr.MU)
    return checked_sqrt(1 + (2 * body.get(Attr.ENERGY) * np.dot(h, h)) / mu**2,
                        "1 + 2εh²/μ²")


@derivation(Attr.PERIOD, requires=(Attr.A, Attr.MU))
def orbital_period(body):
    """Orbital period 2π·√(a³/μ)"""
    return 2 * math.pi * checked_sqrt(body.get(Attr.A)**3 / body.get(Attr.MU), "a³/μ")


@derivation(Attr.ET, requires=(Attr.A,))
def eccentric_anomaly_at_epoch(body):
    """Eccentric anomaly at epoch arccos(rvec.x / a)"""
    return checked_acos(body.rvec[0] / body.get(Attr.A), "rvec.x / a")


@derivation(Attr.APOAPSIS, requires=(Attr.ECC, Attr.A))
def apoapsis(body):
    """Apoapsis (1 + ecc)·a"""
    return (1 + body.get(Attr.ECC)) * body.get(Attr.A)


@derivation(Attr.PERIAPSIS, requires=(Attr.ECC, Attr.A))
def periapsis(body):
    """Periapsis (1 - ecc)·a"""
    return (1 - body.get(Attr.ECC)) * body.get(Attr.A)


@derivation(Attr.ARGP, requires=(Attr.ECCVEC,))
def argument_of_periapsis(body):
    """Argument of periapsis atan2(eccvec.y, eccvec.x)"""
    eccvec = body.get(Attr.ECCVEC)
    return math.atan2(eccvec[1], eccvec[0])


@derivation(Attr.VT)
def true_anomaly_at_epoch(body):
    """True anomaly at epoch atan2(rvec.y, rvec.x)"""
    return math.atan2(body.rvec[1], body.rvec[0])


@derivation(Attr.N, requires=(Attr.PERIOD,))
def mean_motion(body):
    """Mean motion 1/p in revolutions per time unit"""
    return 1.0 / body.get(Attr.PERIOD)
