"""Records passed into and returned by the Kriging engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Observation:
    """A measured value z at location (x, y)"""

    id: str
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Target:
    """A location (x, y) at which to estimate a value"""

    id: str
    x: float
    y: float


@dataclass(frozen=True)
class Result:
    """
    The Ordinary Kriging estimate at a target.

    Parameters
    ----------
    id : str
        Identifier copied from the target.
    x : float
    y : float
    zhat : float
        The estimated value.
    kstd : float
        The Kriging standard error, the square root of the Ordinary Kriging
        variance.
    """

    id: str
    x: float
    y: float
    zhat: float
    kstd: float
