"""
Command line driver.

    mizhodan <nugget> <sill> <range> <obs file> <targets file> <results file>
    mizhodan --help
    mizhodan --version

Values missing from the command line can be supplied by an INI configuration
file passed with `--config`:

    [variogram]
    nugget = 3
    sill = 25
    range = 3500

    [files]
    obs = obs.csv
    targets = targets.csv
    results = results.csv

    [logging]
    level = info
    file = mizhodan.log

Exit codes: 0 success, 1 usage error, 2 invalid variogram parameter,
3 unreadable input file, 4 Kriging failure, 5 unwritable results file.
"""

from collections.abc import Sequence
from configparser import ConfigParser
import argparse
import logging
import sys
import timeit

from . import __version__
from .constants import EPS
from .errors import ErrorKind, KrigingError
from .io import read_obs, read_targets, write_results
from .kriging import krige
from .utils import init_logging

logger = logging.getLogger(__name__)

EXIT_OK: int = 0
EXIT_USAGE: int = 1
EXIT_PARAMETER: int = 2
EXIT_INPUT: int = 3
EXIT_ENGINE: int = 4
EXIT_OUTPUT: int = 5

EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_OBS_FILE: EXIT_INPUT,
    ErrorKind.INVALID_OBS_RECORD: EXIT_INPUT,
    ErrorKind.INVALID_TARGETS_FILE: EXIT_INPUT,
    ErrorKind.INVALID_TARGET_RECORD: EXIT_INPUT,
    ErrorKind.NO_TARGETS: EXIT_ENGINE,
    ErrorKind.TOO_FEW_OBSERVATIONS: EXIT_ENGINE,
    ErrorKind.TOO_MANY_OBSERVATIONS: EXIT_ENGINE,
    ErrorKind.DECOMPOSITION_FAILED: EXIT_ENGINE,
    ErrorKind.LEAST_SQUARES_FAILED: EXIT_ENGINE,
    ErrorKind.INVALID_RESULTS_FILE: EXIT_OUTPUT,
}

PARAMETERS: tuple[str, ...] = ("nugget", "sill", "range")
FILES: tuple[str, ...] = ("obs", "targets", "results")

DESCRIPTION = """\
A basic two-dimensional Ordinary Kriging interpolator using an exponential
variogram model and all of the data.
"""

EPILOG = """\
arguments:
  nugget    The discontinuity in the variogram at a lag of 0. Quantifies the
            variance of the sampling and measurement errors and the
            hyper-local spatial variation, in units of the observed values
            squared. Must be strictly positive.
  sill      The value at which the variogram levels out, the variance of the
            underlying population, in units of the observed values squared.
            Must be strictly positive.
  range     The separation distance at which the variogram reaches 95% of
            the sill, in units of the observation locations. Must be
            strictly positive.

observation file:
  No header line, one observation per line with four comma separated
  fields: ID, x, y, z. Blank lines and lines starting with # or ! are
  ignored. Spaces and tabs around fields are trimmed.

targets file:
  As the observation file, with three fields per line: ID, x, y.

results file:
  A header line "ID,X,Y,Zhat,Kstd" followed by one line per target. Zhat is
  the interpolated value and Kstd is the square root of the Ordinary Kriging
  variance. An existing file is overwritten.

notes:
  The exponential variogram model is
    gamma(h) = nugget + (sill - nugget) * (1 - exp(-3h / range))

example:
  mizhodan 3 25 3500 obs.csv targets.csv results.csv
"""

BANNER = f"""\
--------------------------------------------
Mizhodan ({__version__})

Randal Barnes, University of Minnesota
William Olsen,  Dakota County, Minnesota
--------------------------------------------
"""


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the command line"""
    parser = argparse.ArgumentParser(
        prog="mizhodan",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("nugget", nargs="?", help="variogram nugget effect")
    parser.add_argument("sill", nargs="?", help="variogram sill")
    parser.add_argument("range", nargs="?", help="variogram range")
    parser.add_argument("obs", nargs="?", help="observation file (.csv)")
    parser.add_argument("targets", nargs="?", help="targets file (.csv)")
    parser.add_argument("results", nargs="?", help="results file (.csv)")
    parser.add_argument(
        "--config",
        dest="config",
        default=None,
        help="INI file containing configuration settings",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="one of debug, info, warn, error, critical",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="file to append log messages to (default: stderr)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def load_config(path: str | None) -> ConfigParser:
    """
    Load an INI configuration file. A missing path gives an empty
    configuration.
    """
    config = ConfigParser(strict=False, empty_lines_in_values=False)
    if path is not None and not config.read(path):
        raise FileNotFoundError(f"Configuration file: {path} not found")
    return config


def _resolve(
    args: argparse.Namespace,
    config: ConfigParser,
    section: str,
    names: Sequence[str],
) -> dict[str, str | None]:
    return {
        name: getattr(args, name)
        or config.get(section, name, fallback=None)
        for name in names
    }


def _parse_parameter(value: str) -> float | None:
    try:
        parsed = float(value)
    except ValueError:
        return None
    return parsed if parsed > EPS else None


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the command line interface.

    Parameters
    ----------
    argv : Sequence[str] | None
        Command line arguments, excluding the program name. Defaults to
        sys.argv[1:].

    Returns
    -------
    int
        The process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    raw_params = _resolve(args, config, "variogram", PARAMETERS)
    files = _resolve(args, config, "files", FILES)

    supplied = [v for v in (*raw_params.values(), *files.values()) if v]
    if not supplied:
        parser.print_usage()
        return EXIT_OK
    if len(supplied) != len(PARAMETERS) + len(FILES):
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    try:
        init_logging(
            file=args.log_file or config.get("logging", "file", fallback=None),
            level=args.log_level
            or config.get("logging", "level", fallback="info"),
        )
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE
    print(BANNER)
    start = timeit.default_timer()

    params: dict[str, float] = {}
    for name, raw in raw_params.items():
        value = _parse_parameter(raw)  # type: ignore
        if value is None:
            print(
                f"ERROR: {name} = {raw} is not valid;  0 < {name}.",
                file=sys.stderr,
            )
            parser.print_usage(sys.stderr)
            return EXIT_PARAMETER
        params[name] = value

    try:
        obs = read_obs(files["obs"])  # type: ignore
        print(f"{len(obs)} data records read from <{files['obs']}>.")
        targets = read_targets(files["targets"])  # type: ignore
        print(
            f"{len(targets)} target locations read from <{files['targets']}>."
        )

        results = krige(
            params["nugget"], params["sill"], params["range"], obs, targets
        )

        write_results(files["results"], results)  # type: ignore
        print(f"Results file <{files['results']}> created.")
    except KrigingError as e:
        logger.error(f"{e.kind.name}: {e.detail}")
        print(e.detail, file=sys.stderr)
        return EXIT_CODES[e.kind]

    elapsed = timeit.default_timer() - start
    print(f"elapsed time: {elapsed:.6f} seconds.")
    return EXIT_OK
