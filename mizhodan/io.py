"""
Functions for reading observation and target files, and writing Kriging
results.

Input files are comma separated text files with no header line. Blank lines
are ignored, as are comment lines whose first non-blank character is an
octothorpe (#) or an exclamation mark (!). Spaces and tabs around fields are
trimmed.
"""

from collections.abc import Sequence
import logging
import os
import polars as pl

from .errors import ErrorKind, KrigingError
from .records import Observation, Result, Target

logger = logging.getLogger(__name__)

COMMENT_CHARS: tuple[str, ...] = ("#", "!")
OBS_COLUMNS: list[str] = ["id", "x", "y", "z"]
TARGET_COLUMNS: list[str] = ["id", "x", "y"]
RESULT_COLUMNS: list[str] = ["ID", "X", "Y", "Zhat", "Kstd"]


def _read_lines(path: str | os.PathLike, kind: ErrorKind) -> list[str]:
    try:
        with open(path, "r", encoding="utf-8") as io:
            return io.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise KrigingError(kind, f"Could not open <{path}> for input.") from e


def _read_table(
    path: str | os.PathLike,
    columns: list[str],
    file_kind: ErrorKind,
    record_kind: ErrorKind,
    name: str,
) -> pl.DataFrame:
    """
    Read a delimited file into a DataFrame with a String "id" column, Float64
    columns for the remaining columns, and an Int64 "line" column holding
    the 1-based line number in the file.
    """
    lines = _read_lines(path, file_kind)

    def _fail(lineno: int) -> KrigingError:
        return KrigingError(
            record_kind,
            f"Reading the {name} data failed on line {lineno} of file {path}.",
        )

    rows: list[tuple] = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip() or line.lstrip(" \t").startswith(COMMENT_CHARS):
            continue
        fields = line.split(",")
        if len(fields) != len(columns):
            raise _fail(lineno)
        rows.append((lineno, *fields))

    float_cols = columns[1:]
    df = pl.DataFrame(
        rows,
        schema={"line": pl.Int64, **{c: pl.String for c in columns}},
        orient="row",
    )
    df = df.with_columns(pl.col(columns).str.strip_chars(" \t")).with_columns(
        pl.col(float_cols).cast(pl.Float64, strict=False)
    )

    invalid = df.filter(
        pl.any_horizontal(pl.col(float_cols).is_null())
        | (pl.col("id").str.len_chars() == 0)
    )
    if invalid.height > 0:
        raise _fail(invalid.item(0, "line"))

    logger.info(f"{df.height} {name} records read from <{path}>")
    return df


def read_obs(path: str | os.PathLike) -> list[Observation]:
    """
    Read observations from a file with four fields per line: id, x, y, z.

    Parameters
    ----------
    path : str
        Path to the observation file.

    Returns
    -------
    list[Observation]
        The observations in file order.

    Raises
    ------
    KrigingError
        INVALID_OBS_FILE if the file cannot be read, INVALID_OBS_RECORD if
        any line is malformed.
    """
    df = _read_table(
        path,
        OBS_COLUMNS,
        ErrorKind.INVALID_OBS_FILE,
        ErrorKind.INVALID_OBS_RECORD,
        "observation",
    )
    return [Observation(*row) for row in df.select(OBS_COLUMNS).iter_rows()]


def read_targets(path: str | os.PathLike) -> list[Target]:
    """
    Read targets from a file with three fields per line: id, x, y.

    Parameters
    ----------
    path : str
        Path to the targets file.

    Returns
    -------
    list[Target]
        The targets in file order.

    Raises
    ------
    KrigingError
        INVALID_TARGETS_FILE if the file cannot be read,
        INVALID_TARGET_RECORD if any line is malformed.
    """
    df = _read_table(
        path,
        TARGET_COLUMNS,
        ErrorKind.INVALID_TARGETS_FILE,
        ErrorKind.INVALID_TARGET_RECORD,
        "target",
    )
    return [Target(*row) for row in df.select(TARGET_COLUMNS).iter_rows()]


def results_to_frame(results: Sequence[Result]) -> pl.DataFrame:
    """Convert a list of results to a DataFrame with the output columns"""
    return pl.DataFrame(
        [(r.id, r.x, r.y, r.zhat, r.kstd) for r in results],
        schema=dict(zip(RESULT_COLUMNS, [pl.String] + [pl.Float64] * 4)),
        orient="row",
    )


def write_results(path: str | os.PathLike, results: Sequence[Result]) -> None:
    """
    Write the results to a comma separated file with a header line
    "ID,X,Y,Zhat,Kstd". Floats are written with full precision. An existing
    file is overwritten.

    Parameters
    ----------
    path : str
        Path to the output file.
    results : Sequence[Result]
        The Kriging results.

    Raises
    ------
    KrigingError
        INVALID_RESULTS_FILE if the file cannot be opened for output.
    """
    df = results_to_frame(results)
    try:
        with open(path, "wb") as io:
            df.write_csv(io)
    except OSError as e:
        raise KrigingError(
            ErrorKind.INVALID_RESULTS_FILE,
            f"Could not open <{path}> for output.",
        ) from e
    logger.info(f"Results file <{path}> created")
    return None
