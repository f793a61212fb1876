"""
Functions for performing Kriging.

Two-dimensional Ordinary Kriging with an exponential variogram model, using
all of the observations for every target.
"""

from collections.abc import Sequence
import logging
import math
import numpy as np

from .constants import MAXIMUM_COUNT, MINIMUM_COUNT
from .distances import cross_distances, distance_matrix
from .errors import ErrorKind, KrigingError
from .linear_systems import cholesky_decomposition, cholesky_solve
from .matrix import Matrix, dot_product, subtract, total
from .records import Observation, Result, Target
from .utils import adjust_small_negative
from .variogram import ExponentialVariogram

logger = logging.getLogger(__name__)


class OrdinaryKriging:
    r"""
    Class for Ordinary Kriging.

    On construction the covariance matrix between all observations is built
    and factored once using the Cholesky decomposition. The solution of

    .. math::
        C v = 1

    is also pre-computed, the factor and `v` are then shared (read-only) by
    every target.

    For each target the Kriging weights are

    .. math::
        w = u - \lambda v

    where :math:`C u = b`, :math:`b` is the covariance between the target and
    each observation, and :math:`\lambda = (\sum u - 1) / \sum v` is the
    Lagrange multiplier that constrains the weights to sum to 1.

    Parameters
    ----------
    variogram : ExponentialVariogram
        The variogram model.
    observations : Sequence[Observation]
        The observations, between 10 and 500 (inclusive) are required.

    Raises
    ------
    KrigingError
        If there are too few or too many observations, or if the Cholesky
        decomposition of the covariance matrix fails.
    """

    def __init__(
        self,
        variogram: ExponentialVariogram,
        observations: Sequence[Observation],
    ) -> None:
        self.variogram = variogram
        self.observations = tuple(observations)

        n = len(self.observations)
        if n < MINIMUM_COUNT:
            raise KrigingError(
                ErrorKind.TOO_FEW_OBSERVATIONS,
                f"There must be at least {MINIMUM_COUNT} observations.",
            )
        if n > MAXIMUM_COUNT:
            raise KrigingError(
                ErrorKind.TOO_MANY_OBSERVATIONS,
                f"There must be no more than {MAXIMUM_COUNT} observations.",
            )
        logger.debug(f"Building the Kriging system for {n} observations")

        self.positions = np.array([(o.x, o.y) for o in self.observations])
        self.values = Matrix(n, 1, [o.z for o in self.observations])
        self.covariance = self.observation_covariance()

        factor, ok = cholesky_decomposition(self.covariance)
        if not ok:
            raise KrigingError(
                ErrorKind.DECOMPOSITION_FAILED,
                "Cholesky decomposition of the Kriging system failed.",
            )
        self.factor = factor

        self.v = cholesky_solve(self.factor, Matrix(n, 1, 1.0))
        self.sum_v = total(self.v)
        return None

    @property
    def n_obs(self) -> int:
        """Number of observations"""
        return len(self.observations)

    def observation_covariance(self) -> Matrix:
        """
        Covariance between all pairs of observations. The diagonal is the
        sill, off-diagonal elements use the covariance model at the pairwise
        distance.

        Returns
        -------
        Matrix
            The symmetric (N x N) covariance matrix.
        """
        cov = self.variogram.covariance(distance_matrix(self.positions))
        np.fill_diagonal(cov, self.variogram.sill)
        return Matrix(self.n_obs, self.n_obs, cov)

    def cross_covariance(self, target: Target) -> Matrix:
        """
        Covariance between a target and each observation.

        Note that a target at the exact location of an observation is not
        treated as a special case, the covariance at a distance of 0 is
        `sill - nugget` (not the sill).

        Returns
        -------
        Matrix
            (N x 1) column of covariances, this is the right-hand-side of the
            Kriging system for the target.
        """
        dist = cross_distances((target.x, target.y), self.positions)
        return Matrix(self.n_obs, 1, self.variogram.covariance(dist))

    def kriging_weights(self, target: Target) -> tuple[Matrix, Matrix, float]:
        """
        Compute the Ordinary Kriging weights for a target.

        Parameters
        ----------
        target : Target
            The location to estimate.

        Returns
        -------
        b : Matrix
            The (N x 1) covariance between the target and the observations.
        w : Matrix
            The (N x 1) Kriging weights, these sum to 1.
        lagrange : float
            The Lagrange multiplier for the unbiasedness constraint.
        """
        b = self.cross_covariance(target)
        u = cholesky_solve(self.factor, b)
        lagrange = (total(u) - 1.0) / self.sum_v
        w = subtract(u, lagrange * self.v)
        return b, w, lagrange

    def estimate(self, target: Target) -> Result:
        """
        Compute the Ordinary Kriging estimate and the Kriging standard error
        at a target.

        The Kriging variance is `sill - b'w - lambda`. Small negative values
        due to rounding are set to 0, a larger negative variance indicates a
        numerical breakdown and the standard error is NaN.

        Parameters
        ----------
        target : Target
            The location to estimate.

        Returns
        -------
        Result
        """
        b, w, lagrange = self.kriging_weights(target)
        zhat = dot_product(w, self.values)

        variance = self.variogram.sill - dot_product(b, w) - lagrange
        variance = float(adjust_small_negative(variance))
        if variance < 0:
            logger.warning(
                f"Negative Kriging variance {variance} at target {target.id}"
            )
            kstd = math.nan
        else:
            kstd = math.sqrt(variance)

        return Result(
            id=target.id, x=target.x, y=target.y, zhat=zhat, kstd=kstd
        )

    def solve(self, targets: Sequence[Target]) -> list[Result]:
        """
        Estimate every target, in input order.

        Parameters
        ----------
        targets : Sequence[Target]
            The locations to estimate.

        Returns
        -------
        list[Result]
            One result per target, in the same order as the targets.
        """
        results = [self.estimate(target) for target in targets]
        logger.debug(f"Ordinary Kriging complete for {len(results)} targets")
        return results


def krige(
    nugget: float,
    sill: float,
    range: float,
    observations: Sequence[Observation],
    targets: Sequence[Target],
) -> list[Result]:
    """
    Perform Ordinary Kriging with an exponential variogram model.

    Each call is independent: the covariance matrix, its factor and all other
    intermediate values are discarded when the call returns. If any step
    fails no results are returned.

    Parameters
    ----------
    nugget : float
        Variogram nugget effect.
    sill : float
        Variogram sill.
    range : float
        Variogram (practical) range.
    observations : Sequence[Observation]
        The measured values, between 10 and 500 (inclusive) are required.
    targets : Sequence[Target]
        The locations to estimate, at least 1 is required.

    Returns
    -------
    list[Result]
        One result per target, in the same order as the targets.

    Raises
    ------
    KrigingError
        With kind NO_TARGETS, TOO_FEW_OBSERVATIONS, TOO_MANY_OBSERVATIONS or
        DECOMPOSITION_FAILED.
    """
    targets = list(targets)
    if len(targets) < 1:
        raise KrigingError(
            ErrorKind.NO_TARGETS, "No targets were specified."
        )

    variogram = ExponentialVariogram(nugget=nugget, sill=sill, range=range)
    okrige = OrdinaryKriging(variogram, list(observations))
    return okrige.solve(targets)
