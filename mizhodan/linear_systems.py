"""
Linear Systems
--------------

A minimal set of decomposition and solution routines for systems of linear
equations, built on `mizhodan.matrix.Matrix`.

The decomposition routines return a success flag alongside their result
rather than raising, a False flag means the result is left in a partial,
unusable state.

References
----------
Golub, G.H., and Van Loan, C.F., 1996, MATRIX COMPUTATIONS, 3rd Edition,
Johns Hopkins University Press, Baltimore, Maryland, 694 pp.

Stewart, G., 1998, "Matrix Algorithms - Volume I: Basic Decompositions",
SIAM, Philadelphia, 458pp., ISBN 0-89871-414-1.
"""

import logging
import math

from .constants import MIN_DIVISOR
from .matrix import (
    Matrix,
    is_square,
    multiply,
    multiply_tn,
    sum_product,
)

logger = logging.getLogger(__name__)


def cholesky_decomposition(
    A: Matrix,
    min_divisor: float = MIN_DIVISOR,
) -> tuple[Matrix, bool]:
    r"""
    Compute the Cholesky decomposition of a symmetric positive definite
    Matrix.

    .. math::
        A = L L^T

    Only the lower triangular portion of A is accessed, so only the lower
    triangular portion needs to be filled. The strictly upper triangular
    portion of L is set to 0.

    This is based upon Golub and Van Loan, 1996, Algorithm 4.2-1, page 144.
    `cholesky_solve` is this routine's complementary pair.

    Parameters
    ----------
    A : Matrix
        A square, symmetric positive definite Matrix.
    min_divisor : float
        The decomposition fails if a diagonal pivot falls below this value
        before its square root is taken.

    Returns
    -------
    L : Matrix
        The lower triangular factor. Unusable if the decomposition failed.
    ok : bool
        True if the decomposition was completed successfully.
    """
    if not is_square(A):
        raise ValueError("A must be a non-empty square Matrix")

    n = A.nrows
    L = A.copy()
    buf = L.base()
    for j in range(n):
        if j > 0:
            row_j = L.base(j, 0)
            for k in range(j, n):
                buf[k * n + j] -= sum_product(j, row_j, L.base(k, 0))

        pivot = buf[j * n + j]
        if math.isnan(pivot) or pivot < min_divisor:
            logger.debug(f"Cholesky pivot {j} = {pivot} is below {min_divisor}")
            return L, False
        buf[j * n + j] = math.sqrt(pivot)

        for k in range(j + 1, n):
            buf[k * n + j] /= buf[j * n + j]
            buf[j * n + k] = 0.0
    return L, True


def cholesky_solve(L: Matrix, b: Matrix) -> Matrix:
    """
    Solve the system of linear equations L L' x = b, using the Cholesky
    factor L, by forward elimination (L y = b) followed by back substitution
    (L' x = y).

    Based upon Golub and Van Loan, 1983, Algorithms 4.1-1 and 4.1-2, page 53.

    The Cholesky decomposition MUST be successfully carried out before
    calling this routine. The factor is not modified, so it can be re-used
    for any number of right-hand-sides.

    Parameters
    ----------
    L : Matrix
        The Cholesky factor of a symmetric positive definite Matrix A = LL'.
    b : Matrix
        The right-hand-side, each column is solved independently.

    Returns
    -------
    x : Matrix
        The solution, with the same shape as b.
    """
    if not is_square(L):
        raise ValueError("L must be a non-empty square Matrix")
    if b.nrows != L.nrows:
        raise ValueError("b must have the same number of rows as L")

    n = L.nrows
    p = b.ncols
    x = b.copy()
    lbuf = L.base(readonly=True)
    xbuf = x.base()
    for c in range(p):
        # L y = b
        for i in range(n):
            s = xbuf[i * p + c]
            if i > 0:
                s -= sum_product(
                    i, L.base(i, 0, readonly=True), x.base(0, c), dy=p
                )
            xbuf[i * p + c] = s / lbuf[i * n + i]

        # L' x = y
        for i in range(n - 1, -1, -1):
            s = xbuf[i * p + c]
            if i < n - 1:
                s -= sum_product(
                    n - i - 1,
                    L.base(i + 1, i, readonly=True),
                    x.base(i + 1, c),
                    dx=n,
                    dy=p,
                )
            xbuf[i * p + c] = s / lbuf[i * n + i]
    return x


def cholesky_inverse(L: Matrix) -> Matrix:
    r"""
    Compute the inverse of a real, symmetric, positive definite Matrix A from
    its Cholesky factor L.

    L is inverted (on a copy) using the pseudo-code in Stewart (1998, p. 179),
    then:

    .. math::
        A^{-1} = (L^T)^{-1} L^{-1} = (L^{-1})^T L^{-1}

    Parameters
    ----------
    L : Matrix
        The Cholesky factor of A, with a zero strictly upper triangle.

    Returns
    -------
    Ainv : Matrix
        The inverse of A.
    """
    if not is_square(L):
        raise ValueError("L must be a non-empty square Matrix")

    n = L.nrows
    Linv = L.copy()
    buf = Linv.base()
    for k in range(n):
        buf[k * n + k] = 1.0 / buf[k * n + k]
        for i in range(k):
            buf[k * n + i] = -buf[k * n + k] * sum_product(
                k - i, Linv.base(i, i), Linv.base(k, i), dx=n
            )
    return multiply_tn(Linv, Linv)


def rspd_inverse(A: Matrix) -> tuple[Matrix, bool]:
    """
    Compute the inverse of a real, symmetric, positive definite Matrix.

    Only the lower triangular portion of A is accessed.

    Parameters
    ----------
    A : Matrix
        A real, symmetric, positive definite Matrix.

    Returns
    -------
    Ainv : Matrix
        The inverse of A, or the null Matrix if the decomposition failed.
    ok : bool
        False if the Cholesky decomposition of A failed.
    """
    L, ok = cholesky_decomposition(A)
    if not ok:
        return Matrix(), False
    return cholesky_inverse(L), True


def least_squares_solve(
    A: Matrix,
    B: Matrix,
    min_divisor: float = MIN_DIVISOR,
) -> tuple[Matrix, bool]:
    r"""
    Compute the least-squares solution to the overdetermined system A X = B
    using a modified Gram-Schmidt orthogonalisation.

    A is (m x n) with m >= n and full column rank, B is (m x p), and the
    solution X is (n x p).

    Following Golub and Van Loan (1996), Section 5.3.5, the factorisation is
    computed for the augmented Matrix

    .. math::
        [A, B] = [Q, S] \begin{bmatrix} R & Z \\ 0 & P \end{bmatrix}

    where [Q, S] has orthonormal columns, so that :math:`Q^T B = Z` and X is
    found by back-substitution of R X = Z. This has significantly better
    error properties than factoring A and applying Q' to B separately.

    The inputs are not modified, the routine works on copies.

    Parameters
    ----------
    A : Matrix
        (m x n) coefficient Matrix.
    B : Matrix
        (m x p) right-hand-side Matrix.
    min_divisor : float
        The solve fails if a diagonal element of R falls below this value.

    Returns
    -------
    X : Matrix
        (n x p) solution. Partially computed if the solve failed.
    ok : bool
        False if A is rank deficient (or nearly so).
    """
    if A.nrows != B.nrows:
        raise ValueError("A and B must have the same number of rows")
    if A.nrows < A.ncols:
        raise ValueError("A must have at least as many rows as columns")

    m, n, p = A.nrows, A.ncols, B.ncols
    X = Matrix(n, p)
    if n == 0 or p == 0:
        return X, True

    AA = A.copy()
    BB = B.copy()
    R = Matrix(n, n)

    # Golub and Van Loan (1996), Algorithm 5.2.5 applied to [A, B]. The
    # augmenting block Z is stored in X.
    for k in range(n):
        a_k = AA.base(0, k)[::n]
        s = sum_product(m, AA.base(0, k), dx=n)
        if s < min_divisor:
            logger.debug(f"Gram-Schmidt pivot {k} = {s} is below {min_divisor}")
            return X, False

        R[k, k] = math.sqrt(s)
        a_k /= R[k, k]

        for j in range(k + 1, n):
            R[k, j] = sum_product(m, AA.base(0, k), AA.base(0, j), dx=n, dy=n)
            a_j = AA.base(0, j)[::n]
            a_j -= a_k * R[k, j]

        for q in range(p):
            X[k, q] = sum_product(m, AA.base(0, k), BB.base(0, q), dx=n, dy=p)
            b_q = BB.base(0, q)[::p]
            b_q -= a_k * X[k, q]

    # Back-substitution R X = Z: Golub and Van Loan (1996) Algorithm 3.1.2.
    for i in range(n - 1, -1, -1):
        r_ii = R[i, i]
        if abs(r_ii) < min_divisor:
            logger.debug(f"R[{i}, {i}] = {r_ii} is below {min_divisor}")
            return X, False
        for q in range(p):
            s = X[i, q]
            if i < n - 1:
                s -= sum_product(
                    n - i - 1, R.base(i, i + 1), X.base(i + 1, q), dy=p
                )
            X[i, q] = s / r_ii
    return X, True


def affine_transformation(A: Matrix, B: Matrix, C: Matrix) -> Matrix:
    """
    Compute the affine transformation of each row of A:

        D(i, :) = A(i, :) B + C

    This transformation preserves the dimension of the row vectors.

    Parameters
    ----------
    A : Matrix
        (m x n) Matrix containing the rows to be transformed.
    B : Matrix
        (n x n) rotation and scale Matrix.
    C : Matrix
        (1 x n) shift Matrix.

    Returns
    -------
    D : Matrix
        (m x n) Matrix containing the transformed rows.
    """
    if A.ncols != B.nrows or not is_square(B):
        raise ValueError("B must be square with side equal to A's columns")
    if C.nrows != 1 or C.ncols != B.ncols:
        raise ValueError("C must be a single row matching B's columns")

    D = multiply(A, B)
    buf = D.base()
    shift = C.base(readonly=True)
    for i in range(D.nrows):
        buf[i * D.ncols : (i + 1) * D.ncols] += shift
    return D
