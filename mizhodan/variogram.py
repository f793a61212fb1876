"""
Variograms
----------

Exponential variogram model for construction of the spatial covariance
structure from distance matrices.
"""

from dataclasses import dataclass
import numpy as np

from .constants import PRACTICAL_RANGE_FACTOR


@dataclass(frozen=True)
class ExponentialVariogram:
    r"""
    Exponential Model

    .. math::
        \gamma(h) = nugget + (sill - nugget)(1 - e^{-3h / range})

    The factor of 3 is the "practical range" scaling, the variogram reaches
    ~95% of the sill at a lag equal to `range`.

    Parameters
    ----------
    nugget : float
        The discontinuity of the variogram at a lag of 0, the variance of the
        sampling and measurement errors and the hyper-local spatial
        variation. Must be strictly positive.
    sill : float
        The value at which the variogram levels out, this is the variance of
        the underlying population. Must be strictly positive.
    range : float
        The lag at which the variogram reaches 95% of the sill. Must be
        strictly positive.
    """

    nugget: float
    sill: float
    range: float

    def __post_init__(self) -> None:
        for name in ("nugget", "sill", "range"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be strictly positive")
        return None

    def fit(self, distance_matrix: np.ndarray) -> np.ndarray:
        """Fit the ExponentialVariogram model to a distance matrix"""
        return self.nugget + (self.sill - self.nugget) * (
            1.0 - np.exp(-PRACTICAL_RANGE_FACTOR * distance_matrix / self.range)
        )

    def covariance(self, distance_matrix: np.ndarray) -> np.ndarray:
        r"""
        Covariance between locations separated by the distances in the input.

        .. math::
            C(h) = (sill - nugget) e^{-3h / range}

        This is applied to every input distance, including 0. The covariance
        of a location with itself (the sill) must be set by the caller, the
        value returned at a distance of 0 is `sill - nugget`.
        """
        return (self.sill - self.nugget) * np.exp(
            -PRACTICAL_RANGE_FACTOR * distance_matrix / self.range
        )
