"""
Tests of Ordinary Kriging with an exponential variogram.

The Kriging weights and variance are compared against a direct solution of
the augmented Ordinary Kriging system

    | C  1 | | w  |   | b |
    | 1' 0 | | mu | = | 1 |

computed with numpy.
"""

import pytest  # noqa: F401
import math
import numpy as np

from mizhodan.errors import ErrorKind, KrigingError
from mizhodan.kriging import OrdinaryKriging, krige
from mizhodan.matrix import total
from mizhodan.records import Observation, Target
from mizhodan.variogram import ExponentialVariogram

NUGGET = 3.0
SILL = 25.0
RANGE = 3500.0


def _random_obs(n: int, seed: int = 90210) -> list[Observation]:
    rng = np.random.default_rng(seed)
    xs = rng.uniform(0, 10_000, n)
    ys = rng.uniform(0, 10_000, n)
    zs = 10 + rng.normal(scale=5, size=n)
    return [
        Observation(id=f"obs{i}", x=x, y=y, z=z)
        for i, (x, y, z) in enumerate(zip(xs, ys, zs))
    ]


def _grid_obs(z: list[float] | None = None) -> list[Observation]:
    positions = [(1000.0 * i, 1000.0 * j) for i in range(4) for j in range(4)]
    if z is None:
        z = [float(k % 7) for k in range(len(positions))]
    return [
        Observation(id=str(k), x=x, y=y, z=zk)
        for k, ((x, y), zk) in enumerate(zip(positions, z))
    ]


def _random_targets(n: int, seed: int = 1999) -> list[Target]:
    rng = np.random.default_rng(seed)
    return [
        Target(id=f"target{i}", x=x, y=y)
        for i, (x, y) in enumerate(rng.uniform(0, 10_000, (n, 2)))
    ]


def _augmented_solution(
    variogram: ExponentialVariogram,
    obs: list[Observation],
    target: Target,
) -> tuple[np.ndarray, float, float]:
    pos = np.array([(o.x, o.y) for o in obs])
    n = len(obs)
    dist = np.sqrt(((pos[:, None, :] - pos[None, :, :]) ** 2).sum(axis=-1))
    C = variogram.covariance(dist)
    np.fill_diagonal(C, variogram.sill)
    b = variogram.covariance(
        np.sqrt(((pos - np.array([target.x, target.y])) ** 2).sum(axis=1))
    )

    M = np.ones((n + 1, n + 1))
    M[:n, :n] = C
    M[n, n] = 0.0
    rhs = np.append(b, 1.0)
    sol = np.linalg.solve(M, rhs)
    w, mu = sol[:n], sol[n]
    variance = variogram.sill - b @ w - mu
    return w, mu, variance


def test_ordinary_kriging_against_augmented_system() -> None:
    variogram = ExponentialVariogram(nugget=NUGGET, sill=SILL, range=RANGE)
    obs = _random_obs(50)
    okrige = OrdinaryKriging(variogram, obs)

    assert okrige.n_obs == 50
    for target in _random_targets(10):
        _, w, lagrange = okrige.kriging_weights(target)
        expected_w, expected_mu, expected_var = _augmented_solution(
            variogram, obs, target
        )
        assert np.allclose(w.to_numpy().ravel(), expected_w)
        assert np.isclose(lagrange, expected_mu)

        result = okrige.estimate(target)
        assert np.isclose(result.kstd, math.sqrt(expected_var))
        assert np.isclose(
            result.zhat, expected_w @ np.array([o.z for o in obs])
        )
    return None


def test_weights_sum_to_one() -> None:
    variogram = ExponentialVariogram(nugget=NUGGET, sill=SILL, range=RANGE)
    okrige = OrdinaryKriging(variogram, _random_obs(100))

    for target in _random_targets(20):
        _, w, _ = okrige.kriging_weights(target)
        assert np.isclose(total(w), 1.0)
    return None


def test_kstd_non_negative() -> None:
    results = krige(NUGGET, SILL, RANGE, _random_obs(100), _random_targets(50))

    kstd = np.array([r.kstd for r in results])
    assert np.all(np.isfinite(kstd))
    assert np.all(kstd >= 0)
    # Bounded above by the standard error of the mean of uncorrelated data
    # plus the population standard deviation.
    assert np.all(kstd < 2 * math.sqrt(SILL))
    return None


def test_results_follow_target_order() -> None:
    targets = _random_targets(25)
    results = krige(NUGGET, SILL, RANGE, _random_obs(30), targets)

    assert len(results) == len(targets)
    for target, result in zip(targets, results):
        assert result.id == target.id
        assert result.x == target.x
        assert result.y == target.y
    return None


def test_krige_is_idempotent() -> None:
    obs = _random_obs(40)
    targets = _random_targets(15)

    first = krige(NUGGET, SILL, RANGE, obs, targets)
    second = krige(NUGGET, SILL, RANGE, obs, targets)

    assert first == second
    return None


def test_constant_field() -> None:
    obs = _grid_obs(z=[7.5] * 16)
    results = krige(NUGGET, SILL, RANGE, obs, _random_targets(10))

    assert np.allclose([r.zhat for r in results], 7.5)
    return None


def test_target_at_observation_small_nugget() -> None:
    obs = _grid_obs()
    k = 5
    target = Target(id="at_obs", x=obs[k].x, y=obs[k].y)

    [result] = krige(1e-6, SILL, RANGE, obs, [target])

    assert np.isclose(result.zhat, obs[k].z, atol=1e-4)
    assert result.kstd < 1e-2
    return None


def test_target_at_observation() -> None:
    obs = _grid_obs()
    k = 5
    target = Target(id="at_obs", x=obs[k].x, y=obs[k].y)

    variogram = ExponentialVariogram(nugget=NUGGET, sill=SILL, range=RANGE)
    okrige = OrdinaryKriging(variogram, obs)
    b, w, _ = okrige.kriging_weights(target)
    result = okrige.estimate(target)

    # The covariance at zero distance is sill - nugget
    assert np.isclose(b[k, 0], SILL - NUGGET)
    assert int(np.argmax(w.to_numpy())) == k
    assert 0 < result.kstd < math.sqrt(SILL)
    return None


@pytest.mark.parametrize(
    "name, n_obs, n_targets, kind",
    [
        ("too few", 9, 5, ErrorKind.TOO_FEW_OBSERVATIONS),
        ("too many", 501, 5, ErrorKind.TOO_MANY_OBSERVATIONS),
        ("no targets", 20, 0, ErrorKind.NO_TARGETS),
        ("no targets before count", 9, 0, ErrorKind.NO_TARGETS),
    ],
)
def test_krige_errors(name, n_obs, n_targets, kind) -> None:
    obs = _random_obs(n_obs)
    targets = _random_targets(n_targets)

    with pytest.raises(KrigingError) as err:
        krige(NUGGET, SILL, RANGE, obs, targets)

    assert err.value.kind == kind
    return None


def test_error_messages() -> None:
    with pytest.raises(KrigingError, match="at least 10"):
        krige(NUGGET, SILL, RANGE, _random_obs(9), _random_targets(1))
    with pytest.raises(KrigingError, match="no more than 500"):
        krige(NUGGET, SILL, RANGE, _random_obs(501), _random_targets(1))
    with pytest.raises(KrigingError, match="No targets"):
        krige(NUGGET, SILL, RANGE, _random_obs(20), [])
    return None


@pytest.mark.parametrize("n_obs", [10, 500])
def test_count_limits_are_inclusive(n_obs) -> None:
    results = krige(NUGGET, SILL, RANGE, _random_obs(n_obs), _random_targets(2))
    assert len(results) == 2
    return None


def test_decomposition_failure() -> None:
    # Coincident observations with a vanishing nugget give a singular system
    obs = _grid_obs()[:11]
    obs.append(Observation(id="dup", x=obs[0].x, y=obs[0].y, z=obs[0].z))

    with pytest.raises(KrigingError) as err:
        krige(1e-14, 1.0, 100.0, obs, _random_targets(3))

    assert err.value.kind == ErrorKind.DECOMPOSITION_FAILED
    return None


def test_invalid_variogram() -> None:
    with pytest.raises(ValueError):
        krige(0.0, SILL, RANGE, _random_obs(20), _random_targets(1))
    return None
