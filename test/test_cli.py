import pytest  # noqa: F401
import numpy as np
import polars as pl

from mizhodan import __version__
from mizhodan.cli import (
    EXIT_ENGINE,
    EXIT_INPUT,
    EXIT_OK,
    EXIT_OUTPUT,
    EXIT_PARAMETER,
    EXIT_USAGE,
    main,
)


def _write_inputs(tmp_path, n_obs: int = 20, n_targets: int = 5):
    rng = np.random.default_rng(8675309)
    obs = tmp_path / "obs.csv"
    targets = tmp_path / "targets.csv"
    obs.write_text(
        "# id, x, y, z\n"
        + "\n".join(
            f"o{i},{x},{y},{z}"
            for i, (x, y, z) in enumerate(
                rng.uniform(0, 10_000, (n_obs, 3))
            )
        )
        + "\n"
    )
    targets.write_text(
        "\n".join(
            f"t{i},{x},{y}"
            for i, (x, y) in enumerate(rng.uniform(0, 10_000, (n_targets, 2)))
        )
        + "\n"
    )
    return obs, targets, tmp_path / "results.csv"


def _args(obs, targets, results, nugget="3", sill="25", range="3500"):
    return [nugget, sill, range, str(obs), str(targets), str(results)]


def test_cli_success(tmp_path, capsys) -> None:
    obs, targets, results = _write_inputs(tmp_path)

    code = main(_args(obs, targets, results))

    assert code == EXIT_OK
    df = pl.read_csv(results)
    assert df.columns == ["ID", "X", "Y", "Zhat", "Kstd"]
    assert df.height == 5

    out = capsys.readouterr().out
    assert __version__ in out
    assert "20 data records read" in out
    assert "5 target locations read" in out
    assert "elapsed time" in out
    return None


def test_cli_config(tmp_path) -> None:
    obs, targets, results = _write_inputs(tmp_path)
    config = tmp_path / "config.ini"
    config.write_text(
        "[variogram]\nnugget = 3\nsill = 25\nrange = 3500\n\n"
        + f"[files]\nobs = {obs}\ntargets = {targets}\nresults = {results}\n"
        + f"\n[logging]\nlevel = warn\nfile = {tmp_path / 'log.txt'}\n"
    )

    assert main(["--config", str(config)]) == EXIT_OK
    assert results.exists()
    return None


def test_cli_arguments_override_config(tmp_path) -> None:
    obs, targets, results = _write_inputs(tmp_path)
    config = tmp_path / "config.ini"
    config.write_text("[variogram]\nnugget = 0\nsill = 25\nrange = 3500\n")

    code = main(
        ["--config", str(config), *_args(obs, targets, results, nugget="2")]
    )
    assert code == EXIT_OK
    return None


def test_cli_no_arguments(capsys) -> None:
    assert main([]) == EXIT_OK
    assert "usage" in capsys.readouterr().out
    return None


@pytest.mark.parametrize("flag", ["--help", "--version"])
def test_cli_help_version(flag, capsys) -> None:
    with pytest.raises(SystemExit) as err:
        main([flag])

    assert err.value.code == 0
    assert capsys.readouterr().out
    return None


def test_cli_usage_errors(tmp_path) -> None:
    assert main(["3", "25", "3500"]) == EXIT_USAGE
    assert (
        main(["--config", str(tmp_path / "missing.ini")]) == EXIT_USAGE
    )

    obs, targets, results = _write_inputs(tmp_path)
    assert (
        main(["--log-level", "loud", *_args(obs, targets, results)])
        == EXIT_USAGE
    )
    return None


@pytest.mark.parametrize(
    "nugget, sill, range",
    [
        ("0", "25", "3500"),
        ("3", "1e-20", "3500"),
        ("3", "25", "abc"),
        ("3", "25", "nan"),
    ],
)
def test_cli_bad_parameter(tmp_path, nugget, sill, range) -> None:
    obs, targets, results = _write_inputs(tmp_path)

    code = main(_args(obs, targets, results, nugget, sill, range))

    assert code == EXIT_PARAMETER
    assert not results.exists()
    return None


def test_cli_bad_input(tmp_path) -> None:
    obs, targets, results = _write_inputs(tmp_path)

    assert (
        main(_args(tmp_path / "missing.csv", targets, results)) == EXIT_INPUT
    )

    targets.write_text("t1,1,2\nt2,1\n")
    assert main(_args(obs, targets, results)) == EXIT_INPUT
    return None


def test_cli_engine_failure(tmp_path, capsys) -> None:
    obs, targets, results = _write_inputs(tmp_path, n_obs=5)

    assert main(_args(obs, targets, results)) == EXIT_ENGINE
    assert "at least 10" in capsys.readouterr().err
    assert not results.exists()

    obs, targets, results = _write_inputs(tmp_path, n_targets=0)
    assert main(_args(obs, targets, results)) == EXIT_ENGINE
    return None


def test_cli_bad_output(tmp_path) -> None:
    obs, targets, _ = _write_inputs(tmp_path)
    results = tmp_path / "no_such_dir" / "results.csv"

    assert main(_args(obs, targets, results)) == EXIT_OUTPUT
    return None
