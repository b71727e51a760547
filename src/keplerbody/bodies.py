"""
Parent Body Parameters
======================

Immutable gravitational parameters for the body an OrbitalBody orbits,
plus predefined Solar System bodies.

Values taken from Vallado, Fundamentals of Astrodynamics, Fifth Edition,
2022, Appendix D. Units referenced to km (i.e. mu = km^3/s^2).

Examples
--------
>>> from keplerbody import OrbitalBody, MOON
>>> body = OrbitalBody([1838, 0, 0], [0, 1.63, 0], mass=1.0, parent=MOON)
>>> body.get('μ')
4902.799
"""
import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BodyParams:
    """
    Immutable parameters for a parent celestial body.

    Attributes
    ----------
    mu : float
        Gravitational parameter [km³/s²]
    radius : float
        Equatorial radius [km]
    name : str, optional
        Body identifier
    """
    mu: float
    radius: float
    name: Optional[str] = None

    def __post_init__(self):
        #Validate parameters
        if not math.isfinite(self.mu) or self.mu <= 0:
            raise ValueError(f"Gravitational parameter must be positive, got {self.mu}")
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise ValueError(f"Radius must be positive, got {self.radius}")


MERCURY = BodyParams(mu=2.2032e4, radius=2439.0, name='Mercury')

VENUS = BodyParams(mu=3.257e5, radius=6052.0, name='Venus')

EARTH = BodyParams(mu=3.986004415e5, radius=6378.1363, name='Earth')

MOON = BodyParams(mu=4.902799e3, radius=1738.0, name='Moon')

MARS = BodyParams(mu=4.305e4, radius=3397.2, name='Mars')

JUPITER = BodyParams(mu=1.268e8, radius=71492.0, name='Jupiter')

SATURN = BodyParams(mu=3.794e7, radius=60268.0, name='Saturn')

URANUS = BodyParams(mu=5.794e6, radius=25559.0, name='Uranus')

NEPTUNE = BodyParams(mu=6.809e6, radius=24764.0, name='Neptune')

SUN = BodyParams(mu=1.32712428e11, radius=6.96e5, name='Sun')
