"""
Errors
------

Failure kinds reported by the Kriging engine and its file layer. All
recoverable failures are raised as a single exception type, `KrigingError`,
which carries an `ErrorKind` discriminant and a human-readable detail
message. Dimension mismatches and out-of-range indices are programmer errors
and are raised as `ValueError` or `IndexError` instead.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds"""

    NO_TARGETS = "no targets specified"
    TOO_FEW_OBSERVATIONS = "too few observations"
    TOO_MANY_OBSERVATIONS = "too many observations"
    DECOMPOSITION_FAILED = "decomposition failed"
    LEAST_SQUARES_FAILED = "least squares failed"

    INVALID_OBS_FILE = "invalid observation file"
    INVALID_OBS_RECORD = "invalid observation record"
    INVALID_TARGETS_FILE = "invalid targets file"
    INVALID_TARGET_RECORD = "invalid target record"
    INVALID_RESULTS_FILE = "invalid results file"


class KrigingError(Exception):
    """
    Error class for a failed Kriging call.

    Parameters
    ----------
    kind : ErrorKind
        The failure kind.
    detail : str
        Description of the failure, this is the string form of the error.
    """

    def __init__(self, kind: ErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    def __repr__(self) -> str:
        return f"KrigingError({self.kind.name}, {self.detail!r})"


def require(ok: bool, kind: ErrorKind, detail: str) -> None:
    """Raise a KrigingError of the given kind if `ok` is False"""
    if not ok:
        raise KrigingError(kind, detail)
    return None
