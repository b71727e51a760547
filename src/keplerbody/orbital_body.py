'''OrbitalBody class definition

A thing in orbit around a thing. Holds the primary state (position,
velocity, mass) and derives orbital elements from it on demand, caching
every derived value for the lifetime of the body.'''

import math
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Union, TYPE_CHECKING

import numpy as np
import pandas as pd

from .anomaly import (AnomalyState, Epoch, eccentric_anomaly, mean_anomaly,
                      perifocal_position, perifocal_to_inertial, true_anomaly)
from .bodies import BodyParams
from .config import config
from .derivations import DERIVATIONS, Attr, Derivation, parse_attr
from .errors import CyclicDependencyError, MissingDerivationError
from .utils import as_vector

if TYPE_CHECKING:
    from .track import Track

AttrName = Union[Attr, str]


class OrbitalBody:
    """
    Orbital state of a body with lazily derived, memoized elements.

    Derived attributes are computed the first time they are requested,
    together with any prerequisites they need, and never recomputed.
    Primary attributes are read-only, so cached values stay valid.

    Parameters
    ----------
    rvec : array-like
        Position vector relative to the parent [km]
    vvec : array-like
        Velocity vector relative to the parent [km/s]
    mass : float
        Mass of the body
    parent : BodyParams, optional
        Parent body supplying the gravitational parameter
    mu : float, optional
        Gravitational parameter [km³/s²] if parent not provided.
        Defaults to config.DEFAULT_MU if neither is provided.
    epoch : Epoch, optional
        Reference point used by advance() (default: tick 0, Mt 0,
        derived mean motion)
    known : mapping, optional
        Precomputed attribute values to seed the cache with
    rules : mapping of Attr to Derivation, optional
        Rule table to derive from (default DERIVATIONS)

    Examples
    --------
    >>> body = OrbitalBody([7000, 0, 0], [0, 7.5, 0], mass=1.0, mu=398600)
    >>> round(body.get('a'), 1)
    6915.9
    >>> body.is_cached('ε')
    True
    """
    # Scalar elements reported by elements() by default
    DEFAULT_ELEMENTS = (Attr.R, Attr.V, Attr.MU, Attr.ENERGY, Attr.A,
                        Attr.ECC, Attr.PERIOD, Attr.APOAPSIS, Attr.PERIAPSIS,
                        Attr.ARGP, Attr.VT)

    # ========== CONSTRUCTION ==========
    def __init__(self, rvec, vvec, mass: float,
                 parent: Optional[BodyParams] = None,
                 mu: Optional[float] = None,
                 epoch: Optional[Epoch] = None,
                 known: Optional[Mapping[AttrName, object]] = None,
                 rules: Optional[Mapping[Attr, Derivation]] = None):
        self._rvec = as_vector(rvec, "rvec")
        self._vvec = as_vector(vvec, "vvec")
        if not math.isfinite(mass) or mass <= 0:
            raise ValueError(f"Mass must be positive, got {mass}")
        self._mass = float(mass)

        # Store parent or mu
        self._parent = parent
        if parent is not None:
            self._parent_mu = parent.mu
        elif mu is not None:
            if not math.isfinite(mu) or mu <= 0:
                raise ValueError(f"Gravitational parameter must be positive, got {mu}")
            self._parent_mu = float(mu)
        else:
            self._parent_mu = config.DEFAULT_MU

        self._epoch = epoch if epoch is not None else Epoch()
        self._rules = DERIVATIONS if rules is None else dict(rules)

        self._cache: Dict[Attr, object] = {}
        self._resolving = []  # attributes currently being derived, in order
        self._last_state: Optional[AnomalyState] = None

        if known:
            for name, value in known.items():
                self._store(parse_attr(name), value)

    # ========== PROPERTY ACCESS ==========
    @property
    def rvec(self) -> np.ndarray:
        """Position vector [km] (read-only)"""
        return self._rvec

    @property
    def vvec(self) -> np.ndarray:
        """Velocity vector [km/s] (read-only)"""
        return self._vvec

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def parent(self) -> Optional[BodyParams]:
        """Parent body (if provided)"""
        return self._parent

    @property
    def parent_mu(self) -> float:
        """Gravitational parameter of the parent [km³/s²]"""
        return self._parent_mu

    @property
    def epoch(self) -> Epoch:
        return self._epoch

    @property
    def rules(self) -> Mapping[Attr, Derivation]:
        return MappingProxyType(self._rules)

    @property
    def cache(self) -> Mapping[Attr, object]:
        """Read-only view of every attribute derived or seeded so far"""
        return MappingProxyType(self._cache)

    @property
    def last_state(self) -> Optional[AnomalyState]:
        """State produced by the most recent advance(), None before the first"""
        return self._last_state

    # ========== DERIVATION ==========
    def get(self, name: AttrName):
        """
        Return an attribute, deriving and caching it if needed.

        Parameters
        ----------
        name : Attr or str
            Attribute symbol ('ε'), alias ('energy') or Attr member

        Raises
        ------
        MissingDerivationError
            If the attribute has no rule and no precomputed value
        CyclicDependencyError
            If the rule table contains a dependency cycle
        DomainError
            If a formula leaves its real domain
        """
        attr = parse_attr(name)
        if attr not in self._cache:
            self._derive(attr)
        return self._cache[attr]

    def require(self, names: Iterable[AttrName]):
        """
        Ensure every attribute in ``names`` is cached.

        Each missing attribute is derived by its rule, which first requires
        its own prerequisites, so every attribute in the call tree is
        computed exactly once.
        """
        for name in names:
            attr = parse_attr(name)
            if attr not in self._cache:
                self._derive(attr)
        return self

    def is_cached(self, name: AttrName) -> bool:
        """Check whether an attribute has already been derived or seeded."""
        return parse_attr(name) in self._cache

    def _derive(self, attr: Attr):
        if attr in self._resolving:
            path = [a.value for a in self._resolving] + [attr.value]
            raise CyclicDependencyError(path)
        rule = self._rules.get(attr)
        if rule is None:
            raise MissingDerivationError(attr.value)

        self._resolving.append(attr)
        try:
            self.require(rule.requires)
            value = rule.formula(self)
        finally:
            self._resolving.pop()
        self._store(attr, value)

    def _store(self, attr: Attr, value):
        if isinstance(value, (np.ndarray, list, tuple)):
            value = np.array(value, dtype=float)
            value.flags.writeable = False
        self._cache[attr] = value

    # ========== ANOMALY PIPELINE ==========
    def advance(self, tick: float, epoch: Optional[Epoch] = None,
                **solver_kwargs) -> AnomalyState:
        """
        Run the anomaly pipeline at ``tick``.

        Mean anomaly -> eccentric anomaly -> true anomaly -> position. The
        resulting state is returned and kept as ``last_state``.

        Parameters
        ----------
        tick : float
            Current simulation tick
        epoch : Epoch, optional
            Overrides the body's epoch for this call
        **solver_kwargs
            ``tol`` / ``max_iter`` forwarded to solve_kepler()

        Returns
        -------
        AnomalyState
        """
        state = self.state_at(tick, epoch, **solver_kwargs)
        self._last_state = state
        return state

    def state_at(self, tick: float, epoch: Optional[Epoch] = None,
                 **solver_kwargs) -> AnomalyState:
        """Same as advance() without updating ``last_state``."""
        if epoch is None:
            epoch = self._epoch
        if epoch.mean_motion is None:
            n = self.get(Attr.N)
        else:
            n = epoch.mean_motion

        M = mean_anomaly(epoch.mean_anomaly, n, tick, epoch.tick)
        ecc = self.get(Attr.ECC)
        solution = eccentric_anomaly(M, ecc, **solver_kwargs)
        phi = true_anomaly(solution.E, ecc)
        position = self.position_from(solution.E)
        position.flags.writeable = False

        return AnomalyState(tick=tick, M=M, E=solution.E, E_deg=solution.degrees,
                            phi=phi, position=position, solution=solution)

    def position_from(self, E: float) -> np.ndarray:
        """
        Inertial position for eccentric anomaly E.

        Uses the perifocal position (a(cos E - e), b sin E, 0) rotated by
        the argument of periapsis about the z-axis.
        """
        a = self.get(Attr.A)
        b = self.get(Attr.B)
        ecc = self.get(Attr.ECC)
        argp = self.get(Attr.ARGP)
        return perifocal_to_inertial(perifocal_position(E, a, b, ecc), argp)

    def track(self, t0: float, tf: float, epoch: Optional[Epoch] = None) -> "Track":
        """Track of this body over ticks [t0, tf]."""
        from .track import Track
        return Track(self, t0, tf, epoch=epoch)

    # ========== SUMMARIES ==========
    def elements(self, names: Optional[Iterable[AttrName]] = None) -> Dict[str, object]:
        """
        Derive and return several attributes at once.

        Parameters
        ----------
        names : iterable of Attr or str, optional
            Attributes to report (default DEFAULT_ELEMENTS)

        Returns
        -------
        dict
            Attribute symbol -> value, in request order
        """
        if names is None:
            names = self.DEFAULT_ELEMENTS
        attrs = [parse_attr(name) for name in names]
        return {attr.value: self.get(attr) for attr in attrs}

    def to_series(self, names: Optional[Iterable[AttrName]] = None) -> pd.Series:
        """Export elements() as a pandas Series indexed by attribute symbol."""
        return pd.Series(self.elements(names), name="elements")

    # ========== SPECIAL METHODS ==========
    def __getitem__(self, name: AttrName):
        return self.get(name)

    def __contains__(self, name: AttrName) -> bool:
        return self.is_cached(name)

    def __repr__(self):
        return (f"OrbitalBody(rvec={self.rvec.tolist()}, vvec={self.vvec.tolist()}, "
                f"mass={self.mass}, mu={self.parent_mu})")

    def __str__(self):
        r = self.rvec
        v = self.vvec
        lines = ["Orbital Body:",
                 f"  r = [{r[0]:12.4f}, {r[1]:12.4f}, {r[2]:12.4f}] km",
                 f"  v = [{v[0]:12.4f}, {v[1]:12.4f}, {v[2]:12.4f}] km/s",
                 f"  mass = {self.mass:g}",
                 f"  μ = {self.parent_mu:g} km³/s²"]
        # only report what is already known, printing never derives
        for attr, value in self._cache.items():
            if isinstance(value, np.ndarray):
                lines.append(f"  {attr.value:<6} = {np.array2string(value, precision=6)}")
            else:
                lines.append(f"  {attr.value:<6} = {value:12.6f}")
        return "\n".join(lines)
