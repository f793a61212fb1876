"""Constants used by various functions and methods within the library"""

import numpy as np

EPS: float = float(np.finfo(float).eps)  # Machine epsilon for float64

# Smallest acceptable pivot in the Cholesky and Gram-Schmidt routines
MIN_DIVISOR: float = 1e-12

# Bounds on the number of observations used by the Kriging engine
MINIMUM_COUNT: int = 10
MAXIMUM_COUNT: int = 500

# The exponential model reaches ~95% of the sill at the (practical) range
PRACTICAL_RANGE_FACTOR: float = 3.0

SMALL_NEGATIVE_TOL: float = 1e-8
