"""
Grid
----

Kriging over a regular 2-d grid. The grid is supplied by the caller as an
`xarray.DataArray` with dimensions (y, x); each grid point becomes a target
and the results are mapped back onto the grid as an `xarray.Dataset`.
"""

from collections.abc import Sequence
import numpy as np
import xarray as xr

from .kriging import krige
from .records import Observation, Result, Target

RESULT_VARIABLES: tuple[str, str] = ("zhat", "kstd")


def _check_grid(grid: xr.DataArray, x_coord: str, y_coord: str) -> None:
    if grid.dims != (y_coord, x_coord):
        raise ValueError(
            f"Grid must have dimensions ({y_coord}, {x_coord}), "
            + f"got {grid.dims}"
        )
    return None


def grid_to_targets(
    grid: xr.DataArray,
    x_coord: str = "x",
    y_coord: str = "y",
) -> list[Target]:
    """
    Get a target for each point in a 2-d grid.

    Targets are ordered row-major ("C" ordering), with identifiers
    "<row>_<col>" giving the position of the point in the grid.

    Parameters
    ----------
    grid : xarray.DataArray
        A 2-d grid with dimensions (y_coord, x_coord).
    x_coord : str
        Name of the x coordinate in the grid.
    y_coord : str
        Name of the y coordinate in the grid.

    Returns
    -------
    list[Target]
    """
    _check_grid(grid, x_coord, y_coord)
    xx, yy = np.meshgrid(
        grid.coords[x_coord].values.astype(float),
        grid.coords[y_coord].values.astype(float),
    )
    rows, cols = np.indices(grid.shape)
    return [
        Target(id=f"{i}_{j}", x=float(x), y=float(y))
        for i, j, x, y in zip(
            rows.ravel(), cols.ravel(), xx.ravel(), yy.ravel()
        )
    ]


def results_to_grid(
    results: Sequence[Result],
    grid: xr.DataArray,
    x_coord: str = "x",
    y_coord: str = "y",
) -> xr.Dataset:
    """
    Assign Kriging results computed for `grid_to_targets(grid)` back to the
    grid.

    Parameters
    ----------
    results : Sequence[Result]
        Results in the order of the targets returned by `grid_to_targets`.
    grid : xarray.DataArray
        The grid used to create the targets.
    x_coord : str
        Name of the x coordinate in the grid.
    y_coord : str
        Name of the y coordinate in the grid.

    Returns
    -------
    xarray.Dataset
        Containing "zhat" and "kstd" variables on the grid.
    """
    _check_grid(grid, x_coord, y_coord)
    if len(results) != grid.size:
        raise ValueError(
            f"Expected {grid.size} results for the grid, got {len(results)}"
        )
    return xr.Dataset(
        {
            name: (
                grid.dims,
                np.reshape([getattr(r, name) for r in results], grid.shape),
            )
            for name in RESULT_VARIABLES
        },
        coords=grid.coords,
    )


def krige_grid(
    nugget: float,
    sill: float,
    range: float,
    observations: Sequence[Observation],
    grid: xr.DataArray,
    x_coord: str = "x",
    y_coord: str = "y",
) -> xr.Dataset:
    """
    Ordinary Kriging at every point of a 2-d grid.

    Parameters
    ----------
    nugget : float
        Variogram nugget effect.
    sill : float
        Variogram sill.
    range : float
        Variogram (practical) range.
    observations : Sequence[Observation]
        The measured values.
    grid : xarray.DataArray
        A 2-d grid with dimensions (y_coord, x_coord).
    x_coord : str
        Name of the x coordinate in the grid.
    y_coord : str
        Name of the y coordinate in the grid.

    Returns
    -------
    xarray.Dataset
        Containing "zhat" and "kstd" variables on the grid.
    """
    targets = grid_to_targets(grid, x_coord, y_coord)
    results = krige(nugget, sill, range, observations, targets)
    return results_to_grid(results, grid, x_coord, y_coord)
