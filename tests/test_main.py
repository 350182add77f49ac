from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from data_dictionary import wiedemann74_column_order
from main import load_leader, main, parse_overrides


def _write_leader(path: Path, n: int = 30, with_time: bool = True) -> Path:
    df = pd.DataFrame({"xn1": 50.0 + 10.0 * np.arange(n) * 0.1, "vn1": np.full(n, 10.0)})
    if with_time:
        df.insert(0, "Time", 100.0 + np.arange(n) * 0.1)
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def restore_log_levels():
    names = ["main", "models.idm", "models.gipps", "models.wiedemann74"]
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


def _gipps_args(tmp_path: Path, log_level: str) -> list:
    leader_csv = tmp_path / "stopped.csv"
    pd.DataFrame({"xn1": np.full(10, 5.0), "vn1": np.zeros(10)}).to_csv(leader_csv, index=False)
    return [
        "--model",
        "gipps",
        "--leader",
        str(leader_csv),
        "--xn0",
        "0",
        "--vn0",
        "10",
        "--output",
        str(tmp_path / "gipps.csv"),
        "--log-level",
        log_level,
    ]


def test_parse_overrides():
    assert parse_overrides(["v_0=25", " a = 1.2"]) == {"v_0": 25.0, "a": 1.2}
    assert parse_overrides(None) == {}
    with pytest.raises(ValueError):
        parse_overrides(["v_0"])


def test_load_leader_requires_columns(tmp_path: Path):
    bad = tmp_path / "bad.csv"
    pd.DataFrame({"x": [0.0]}).to_csv(bad, index=False)
    with pytest.raises(ValueError):
        load_leader(bad)

    leader = load_leader(_write_leader(tmp_path / "leader.csv"))
    assert len(leader) == 30
    assert leader.bn1 is None
    assert leader.time[0] == pytest.approx(100.0)


def test_main_writes_table(tmp_path: Path):
    leader_csv = _write_leader(tmp_path / "leader.csv")
    out = tmp_path / "out" / "w74.csv"

    main(
        [
            "--model",
            "wiedemann74",
            "--leader",
            str(leader_csv),
            "--xn0",
            "0",
            "--vn0",
            "12",
            "--param",
            "BMIN=-6",
            "--output",
            str(out),
        ]
    )

    df = pd.read_csv(out, keep_default_na=False)
    assert list(df.columns) == wiedemann74_column_order()
    assert len(df) == 30
    assert df["cf_state_sim"].iloc[-1] == ""


def test_main_writes_parquet(tmp_path: Path):
    leader_csv = _write_leader(tmp_path / "leader.csv")
    out = tmp_path / "out.parquet"

    main(["--model", "wiedemann74", "--leader", str(leader_csv), "--xn0", "0", "--vn0", "12", "--output", str(out)])

    df = pd.read_parquet(out)
    assert list(df.columns) == wiedemann74_column_order()
    assert len(df) == 30
    assert df["cf_state_sim"].iloc[-1] == ""
    assert set(df["cf_state_sim"].iloc[:-1]) <= {"free_driving", "approaching", "following", "emergency_braking"}


def test_log_level_error_silences_model_warnings(tmp_path: Path, caplog, restore_log_levels):
    with caplog.at_level(logging.DEBUG):
        main(_gipps_args(tmp_path, "ERROR"))

    assert logging.getLogger("models.gipps").level == logging.ERROR
    assert "non-finite" not in caplog.text
    assert (tmp_path / "gipps.csv").exists()


def test_log_level_debug_reaches_model_loggers(tmp_path: Path, caplog, restore_log_levels):
    with caplog.at_level(logging.DEBUG):
        main(_gipps_args(tmp_path, "DEBUG"))

    assert logging.getLogger("models.gipps").level == logging.DEBUG
    assert "Gipps run finished" in caplog.text
    assert "non-finite" in caplog.text
