"""
Mizhodan: a basic two-dimensional Ordinary Kriging interpolator using an
exponential variogram model and all of the data.

The library provides a dense Matrix type, Cholesky and least-squares linear
system solvers built on it, and the Ordinary Kriging engine.
"""

__version__ = "1.0.0"

from .errors import ErrorKind, KrigingError
from .kriging import OrdinaryKriging, krige
from .matrix import Matrix
from .records import Observation, Result, Target
from .variogram import ExponentialVariogram

__all__ = [
    "ErrorKind",
    "ExponentialVariogram",
    "KrigingError",
    "Matrix",
    "Observation",
    "OrdinaryKriging",
    "Result",
    "Target",
    "krige",
]
