"""
Exceptions and warnings raised by the keplerbody package.
"""


class KeplerBodyError(Exception):
    """Base class for all keplerbody errors."""


class MissingDerivationError(KeplerBodyError, LookupError):
    """
    Requested attribute has neither a cached value nor a derivation rule.

    Parameters
    ----------
    name : str
        The attribute that could not be resolved
    """
    def __init__(self, name):
        self.name = name
        super().__init__(
            f"No derivation rule or precomputed value for attribute '{name}'"
        )


class CyclicDependencyError(KeplerBodyError, RuntimeError):
    """
    An attribute was requested again while it was still being derived.

    Parameters
    ----------
    path : list of str
        Resolution chain ending in the re-entered attribute
    """
    def __init__(self, path):
        self.path = list(path)
        super().__init__(
            "Cyclic dependency in derivation rules: " + " -> ".join(self.path)
        )


class DomainError(KeplerBodyError, ValueError):
    """A scalar function was evaluated outside its real domain."""


class ConvergenceError(KeplerBodyError, ArithmeticError):
    """Kepler solver exhausted its iteration cap (strict mode only)."""


class NonConvergenceWarning(RuntimeWarning):
    """Kepler solver exhausted its iteration cap without meeting tolerance."""
