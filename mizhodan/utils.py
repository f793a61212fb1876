r"""Utility functions for `mizhodan`"""

import logging
from warnings import warn
import numpy as np

from .constants import SMALL_NEGATIVE_TOL
from .matrix import Matrix

logger = logging.getLogger(__name__)


def parse_matrix(text: str) -> Matrix:
    """
    Build a Matrix from a delimited string.

    Columns are separated by commas, rows are separated by semicolons. Missing
    values, and any token that cannot be interpreted as a float, are set to
    zero. The number of columns is the longest row, shorter rows are padded
    with zeros. A trailing semicolon does not start a new row. This is a
    convenience for tests and debugging, it is not used by the engine.

    Parameters
    ----------
    text : str
        The matrix literal, for example "1,2,3;4,5,6".

    Returns
    -------
    Matrix
        The parsed Matrix, the null Matrix if the string is blank.

    Examples
    --------
    >>> parse_matrix("1,,;,,6")
    Matrix(2, 3, [[1.0, 0.0, 0.0], [0.0, 0.0, 6.0]])
    """
    if not text.strip():
        return Matrix()

    lines = text.split(";")
    if not lines[-1].strip():
        lines = lines[:-1]

    rows: list[list[float]] = []
    for line in lines:
        if not line.strip():
            rows.append([])
            continue
        rows.append([_parse_token(token) for token in line.split(",")])

    ncols = max(len(row) for row in rows)
    if ncols == 0:
        return Matrix()

    out = Matrix(len(rows), ncols)
    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            out[i, j] = value
    return out


def _parse_token(token: str) -> float:
    try:
        return float(token.strip(" \t"))
    except ValueError:
        return 0.0


def adjust_small_negative(
    mat: np.ndarray | float,
    tol: float = SMALL_NEGATIVE_TOL,
) -> np.ndarray | float:
    """
    Adjusts small negative values (with absolute value < tol) to 0.

    Raises a warning if any small negative values are detected. Larger
    negative values are left untouched.

    Parameters
    ----------
    mat : numpy.ndarray | float
        Squared uncertainty associated with the Kriging estimate.
    tol : float
        Absolute tolerance below which negative values are set to 0.

    Returns
    -------
    numpy.ndarray | float
        A copy of the input with small negative values set to 0.
    """
    arr = np.asarray(mat, dtype=float)
    small_negative_check = np.logical_and(
        np.isclose(arr, 0, atol=tol), arr < 0.0
    )
    ret = arr.copy()
    if small_negative_check.any():
        warn("Small negative vals are detected. Setting to 0.")
        logger.debug("Small negative values: %s", arr[small_negative_check])
        ret[small_negative_check] = 0.0
    if np.ndim(mat) == 0:
        return float(ret)
    return ret


def _get_logging_level(level: str) -> int:
    match level.lower():
        case "debug":
            level_i = 10
        case "info":
            level_i = 20
        case "warn" | "warning":
            level_i = 30
        case "error":
            level_i = 40
        case "critical":
            level_i = 50
        case _:
            raise ValueError(f"Unknown logging level: {level}")
    return level_i


def init_logging(
    file: str | None = None,
    level: str = "INFO",
) -> None:
    """
    Initialise the logger

    Parameters
    ----------
    file : str
        File to send log messages to. If set to None (default) then print log
        messages to STDerr
    level : str
        Level of logging, one of: "debug", "info", "warn", "error", "critical".

    Returns
    -------
    None
    """
    level_i: int = _get_logging_level(level)

    logging.basicConfig(
        filename=file,
        filemode="a",
        encoding="utf-8",
        format="%(levelname)s at %(asctime)s : %(message)s",
        level=level_i,
        force=True,
    )
    logging.captureWarnings(True)
    return None
