"""
Matrix
------

A minimal dense matrix with some basic operations and arithmetic. The matrix
is explicitly based on 64-bit floats and stores its values in a single,
exclusively owned, contiguous row-major buffer.

Copies are deep: no two Matrix instances share a buffer. Resizing is
destructive, the old contents are discarded and the new buffer is filled
with zeros.

Operations that violate a dimensional precondition (for example multiplying
matrices with incompatible shapes) raise ValueError. These are programmer
errors, they are not part of the recoverable failures raised as
`mizhodan.errors.KrigingError`.

References
----------
Golub, G.H., and Van Loan, C.F., 1996, MATRIX COMPUTATIONS, 3rd Edition,
Johns Hopkins University Press, Baltimore, Maryland, 694 pp.
"""

from collections.abc import Iterator, Sequence
import numpy as np

Selector = Sequence[int] | Sequence[bool] | np.ndarray


def sum_product(
    n: int,
    x: np.ndarray,
    y: np.ndarray | None = None,
    dx: int = 1,
    dy: int = 1,
) -> float:
    """
    Compute a dot product between two (possibly strided) vectors.

    If `y` is not set, then the dot product of `x` with itself is computed.

    Parameters
    ----------
    n : int
        Total number of elements in each vector.
    x : numpy.ndarray
        1d buffer whose first element is the first element of the first
        vector, for example the output of `Matrix.base`.
    y : numpy.ndarray | None
        1d buffer whose first element is the first element of the second
        vector.
    dx : int
        Stride between subsequent elements in the first vector.
    dy : int
        Stride between subsequent elements in the second vector.

    Returns
    -------
    float
        The sum of the element-wise products.
    """
    xs = _strided(x, n, dx)
    if y is None:
        return float(np.dot(xs, xs))
    return float(np.dot(xs, _strided(y, n, dy)))


def _strided(buffer: np.ndarray, n: int, stride: int) -> np.ndarray:
    if n <= 0:
        return buffer[:0]
    out = buffer[: (n - 1) * stride + 1 : stride]
    if out.shape[0] != n:
        raise ValueError("Strided access runs past the end of the buffer")
    return out


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)
    return None


def _storage_shape(nrows: int, ncols: int) -> tuple[int, int]:
    # A zero dimension is always stored as the null (0 x 0) Matrix
    if nrows == 0 or ncols == 0:
        return (0, 0)
    return (nrows, ncols)


class Matrix:
    """
    Dense, row-major matrix of floats.

    Parameters
    ----------
    nrows : int
        Number of rows, defaults to 0.
    ncols : int
        Number of columns, defaults to 0.
    fill : float | Sequence[float] | numpy.ndarray
        Either a scalar used to fill every element (default 0.0), or exactly
        `nrows * ncols` values in row-major order which are copied into the
        new buffer.

    Examples
    --------
    >>> Matrix()  # null matrix
    >>> Matrix(3, 0)  # also the null matrix, shape (0, 0)
    >>> Matrix(2, 3)  # zero fill
    >>> Matrix(2, 3, 1.2)  # scalar fill
    >>> Matrix(2, 3, [1, 2, 3, 4, 5, 6])  # array fill
    """

    __slots__ = ("_data",)

    def __init__(
        self,
        nrows: int = 0,
        ncols: int = 0,
        fill: float | Sequence[float] | np.ndarray = 0.0,
    ) -> None:
        _require(nrows >= 0 and ncols >= 0, "Dimensions must be non-negative")
        shape = _storage_shape(nrows, ncols)
        if np.isscalar(fill):
            self._data = np.full(shape, float(fill))  # type: ignore
            return None
        values = np.array(fill, dtype=np.float64).ravel()
        _require(
            values.size == nrows * ncols,
            f"Expected {nrows * ncols} values to fill a {nrows} x {ncols} "
            + f"Matrix, got {values.size}",
        )
        self._data = values.reshape(shape)
        return None

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> "Matrix":
        # Views (for example a transpose) are copied so no buffer is shared
        data = np.ascontiguousarray(arr, dtype=np.float64)
        if not data.flags.owndata:
            data = data.copy()
        out = cls.__new__(cls)
        out._data = data if data.size else np.zeros((0, 0))
        return out

    @classmethod
    def from_vector(cls, values: Sequence[float] | np.ndarray) -> "Matrix":
        """Create a column Matrix from a vector of values"""
        values = np.array(values, dtype=np.float64).ravel()
        if values.size == 0:
            return cls()
        return cls._wrap(values.reshape(-1, 1))

    @property
    def nrows(self) -> int:
        """Number of rows"""
        return self._data.shape[0]

    @property
    def ncols(self) -> int:
        """Number of columns"""
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        """(nrows, ncols)"""
        return self._data.shape  # type: ignore

    @property
    def size(self) -> int:
        """Total number of elements"""
        return self._data.size

    def is_null(self) -> bool:
        """True if the Matrix has no storage"""
        return self._data.size == 0

    def copy(self) -> "Matrix":
        """Return an independent (deep) copy"""
        return Matrix._wrap(self._data.copy())

    __copy__ = copy

    def __deepcopy__(self, memo) -> "Matrix":
        return self.copy()

    def resize(self, nrows: int, ncols: int) -> None:
        """
        Destructive resize. The resized Matrix is filled with zeros.

        Memory is only re-allocated if the dimensions change. If either
        dimension is 0 the Matrix becomes the null Matrix.
        """
        _require(nrows >= 0 and ncols >= 0, "Dimensions must be non-negative")
        shape = _storage_shape(nrows, ncols)
        if self._data.shape != shape:
            self._data = np.zeros(shape)
        else:
            self._data.fill(0.0)
        return None

    def fill(self, value: float) -> None:
        """Set every element to a scalar value"""
        self._data.fill(value)
        return None

    def _check_index(self, row: int, col: int) -> None:
        if not (0 <= row < self.nrows and 0 <= col < self.ncols):
            raise IndexError(
                f"Index ({row}, {col}) is out of range for a "
                + f"{self.nrows} x {self.ncols} Matrix"
            )
        return None

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        self._check_index(row, col)
        return float(self._data[row, col])

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        row, col = index
        self._check_index(row, col)
        self._data[row, col] = value

    def base(
        self,
        row: int = 0,
        col: int = 0,
        readonly: bool = False,
    ) -> np.ndarray:
        """
        Access to the raw storage.

        Returns a 1d view of the buffer starting at the element (row, col).
        Writing to the (mutable) view writes to the Matrix. A column can be
        accessed as a strided vector with `base(0, j)[::ncols]`.

        Parameters
        ----------
        row : int
            Row of the first element of the view.
        col : int
            Column of the first element of the view.
        readonly : bool
            Return a non-writeable view.

        Returns
        -------
        numpy.ndarray
            A 1d view into the buffer of the Matrix.
        """
        flat = self._data.reshape(-1)
        if self.is_null() and row == 0 and col == 0:
            view = flat[:0]
        else:
            self._check_index(row, col)
            view = flat[row * self.ncols + col :]
        if readonly:
            view = view.view()
            view.flags.writeable = False
        return view

    def to_numpy(self) -> np.ndarray:
        """Return an independent 2d numpy array with the Matrix values"""
        return self._data.copy()

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.ravel().tolist())

    def __repr__(self) -> str:
        return f"Matrix({self.nrows}, {self.ncols}, {self._data.tolist()})"

    def __str__(self) -> str:
        return "\n".join(
            "".join(f"{value:12.3f}" for value in row)
            for row in self._data.tolist()
        )

    def __neg__(self) -> "Matrix":
        return negative(self)

    def __add__(self, other) -> "Matrix":
        if isinstance(other, Matrix):
            return add(self, other)
        if np.isscalar(other):
            return add_scalar(other, self)  # type: ignore
        return NotImplemented

    def __radd__(self, other) -> "Matrix":
        if np.isscalar(other):
            return add_scalar(other, self)  # type: ignore
        return NotImplemented

    def __sub__(self, other) -> "Matrix":
        if isinstance(other, Matrix):
            return subtract(self, other)
        if np.isscalar(other):
            return add_scalar(-other, self)  # type: ignore
        return NotImplemented

    def __rsub__(self, other) -> "Matrix":
        if np.isscalar(other):
            return subtract_from_scalar(other, self)  # type: ignore
        return NotImplemented

    def __mul__(self, other) -> "Matrix":
        if np.isscalar(other):
            return scale(other, self)  # type: ignore
        return NotImplemented

    __rmul__ = __mul__

    def __matmul__(self, other) -> "Matrix":
        if isinstance(other, Matrix):
            return multiply(self, other)
        return NotImplemented


def _require_data(*mats: Matrix) -> None:
    for mat in mats:
        _require(not mat.is_null(), "Operation requires a non-empty Matrix")
    return None


###############################################################################
# Sums, measures and norms
###############################################################################


def column_sum(A: Matrix) -> Matrix:
    """Row Matrix of column sums"""
    return Matrix._wrap(A._data.sum(axis=0, keepdims=True))


def row_sum(A: Matrix) -> Matrix:
    """Column Matrix of row sums"""
    return Matrix._wrap(A._data.sum(axis=1, keepdims=True))


def length(A: Matrix) -> int:
    """max(nrows, ncols)"""
    return max(A.nrows, A.ncols)


def trace(A: Matrix) -> float:
    """
    Sum of the diagonal elements of a square Matrix. The trace is not defined
    for a non-square Matrix.
    """
    _require(is_square(A), "Trace is only defined for a square Matrix")
    return float(np.trace(A._data))


def total(A: Matrix) -> float:
    """Sum of all of the elements"""
    _require_data(A)
    return float(A._data.sum())


def sum_abs(A: Matrix) -> float:
    """Sum of the absolute values of all of the elements"""
    _require_data(A)
    return float(np.abs(A._data).sum())


def max_abs(A: Matrix) -> float:
    """Maximum absolute value"""
    _require_data(A)
    return float(np.abs(A._data).max())


def l1_norm(A: Matrix) -> float:
    """
    Maximum column sum of the absolute values of the elements.

    See Golub and Van Loan, 1996, p. 56, (2.3.9).
    """
    _require_data(A)
    return float(np.abs(A._data).sum(axis=0).max())


def linf_norm(A: Matrix) -> float:
    """
    Maximum row sum of the absolute values of the elements.

    See Golub and Van Loan, 1996, p. 56, (2.3.10).
    """
    _require_data(A)
    return float(np.abs(A._data).sum(axis=1).max())


def frobenius_norm(A: Matrix) -> float:
    """
    Square root of the sum of the squares of the elements.

    See Golub and Van Loan, 1996, p. 55, (2.3.1).
    """
    _require_data(A)
    return float(np.sqrt(np.square(A._data).sum()))


###############################################################################
# Unary operations and slicing
###############################################################################


def transpose(A: Matrix) -> Matrix:
    """C = A'"""
    _require_data(A)
    return Matrix._wrap(A._data.T)


def negative(A: Matrix) -> Matrix:
    """C = -A"""
    _require_data(A)
    return Matrix._wrap(-A._data)


def identity(n: int) -> Matrix:
    """n x n identity Matrix"""
    _require(n >= 0, "Dimensions must be non-negative")
    return Matrix._wrap(np.eye(n))


def _selector(flags: Selector, size: int, name: str) -> np.ndarray:
    mask = np.asarray(flags) != 0
    _require(
        mask.ndim == 1 and mask.size == size,
        f"{name} must have length {size}, got {mask.size}",
    )
    return mask


def slice_matrix(A: Matrix, row_flag: Selector, col_flag: Selector) -> Matrix:
    """
    Select the rows and columns of A with a non-zero flag. The selected
    elements keep their order in A. The selector lengths must match the
    number of rows and columns of A respectively.
    """
    rows = _selector(row_flag, A.nrows, "row_flag")
    cols = _selector(col_flag, A.ncols, "col_flag")
    out = A._data[np.ix_(rows, cols)]
    if out.size == 0:
        return Matrix()
    return Matrix._wrap(out)


def slice_rows(A: Matrix, row_flag: Selector) -> Matrix:
    """Select the rows of A with a non-zero flag, keeping all columns"""
    rows = _selector(row_flag, A.nrows, "row_flag")
    out = A._data[rows, :]
    if out.size == 0:
        return Matrix()
    return Matrix._wrap(out)


###############################################################################
# Arithmetic
###############################################################################


def add_scalar(a: float, A: Matrix) -> Matrix:
    """C = a + A (term-by-term)"""
    _require_data(A)
    return Matrix._wrap(a + A._data)


def subtract_from_scalar(a: float, A: Matrix) -> Matrix:
    """C = a - A (term-by-term)"""
    _require_data(A)
    return Matrix._wrap(a - A._data)


def scale(a: float, A: Matrix) -> Matrix:
    """C = a * A (term-by-term)"""
    _require_data(A)
    return Matrix._wrap(a * A._data)


def add(A: Matrix, B: Matrix) -> Matrix:
    """C = A + B"""
    _require_data(A, B)
    _require(is_congruent(A, B), "Matrices must have the same dimensions")
    return Matrix._wrap(A._data + B._data)


def subtract(A: Matrix, B: Matrix) -> Matrix:
    """C = A - B"""
    _require_data(A, B)
    _require(is_congruent(A, B), "Matrices must have the same dimensions")
    return Matrix._wrap(A._data - B._data)


def multiply(A: Matrix, B: Matrix) -> Matrix:
    """C = AB"""
    _require_data(A, B)
    _require(A.ncols == B.nrows, "A must have as many columns as B has rows")
    return Matrix._wrap(A._data @ B._data)


def multiply_tn(A: Matrix, B: Matrix) -> Matrix:
    """C = A'B"""
    _require_data(A, B)
    _require(A.nrows == B.nrows, "A and B must have the same number of rows")
    return Matrix._wrap(A._data.T @ B._data)


def multiply_nt(A: Matrix, B: Matrix) -> Matrix:
    """C = AB'"""
    _require_data(A, B)
    _require(A.ncols == B.ncols, "A and B must have the same number of columns")
    return Matrix._wrap(A._data @ B._data.T)


def multiply_tt(A: Matrix, B: Matrix) -> Matrix:
    """C = A'B'"""
    _require_data(A, B)
    _require(A.nrows == B.ncols, "A must have as many rows as B has columns")
    return Matrix._wrap(A._data.T @ B._data.T)


def dot_product(A: Matrix, B: Matrix) -> float:
    """
    Dot product between two vectors. Either may be a row or a column, but
    both must have the same number of elements.
    """
    _require(is_vector(A) and is_vector(B), "Arguments must be vectors")
    _require(length(A) == length(B), "Vectors must have the same length")
    return sum_product(length(A), A.base(readonly=True), B.base(readonly=True))


def quadratic_form_tnn(a: Matrix, B: Matrix, c: Matrix) -> float:
    """a'Bc for column vectors a and c"""
    _require(is_col(a) and is_col(c), "a and c must be column vectors")
    _require(a.nrows == B.nrows, "a and B are not compatible")
    _require(B.ncols == c.nrows, "B and c are not compatible")
    return multiply_tn(a, multiply(B, c))[0, 0]


def quadratic_form(a: Matrix, B: Matrix, c: Matrix) -> float:
    """aBc for a row vector a and a column vector c"""
    _require(is_row(a) and is_col(c), "a must be a row and c a column")
    _require(a.ncols == B.nrows, "a and B are not compatible")
    _require(B.ncols == c.nrows, "B and c are not compatible")
    return multiply(a, multiply(B, c))[0, 0]


###############################################################################
# Comparison
###############################################################################


def is_square(A: Matrix) -> bool:
    """Non-empty with equal number of rows and columns"""
    return A.nrows > 0 and A.nrows == A.ncols


def is_congruent(A: Matrix, B: Matrix) -> bool:
    """Same dimensions"""
    return A.shape == B.shape


def is_close(A: Matrix, B: Matrix, tol: float) -> bool:
    """Same dimensions and all elements within an absolute tolerance"""
    if not is_congruent(A, B):
        return False
    return bool(np.all(np.abs(A._data - B._data) <= tol))


def is_row(A: Matrix) -> bool:  # noqa: D103
    return A.nrows == 1 and A.ncols > 0


def is_col(A: Matrix) -> bool:  # noqa: D103
    return A.ncols == 1 and A.nrows > 0


def is_vector(A: Matrix) -> bool:  # noqa: D103
    return is_row(A) or is_col(A)
