from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from data_dictionary import idm_column_order
from models.buffers import FollowerSeed, LeaderTrajectory
from models.idm import IDM, IDMParams, simulate


@pytest.fixture
def params() -> IDMParams:
    return IDMParams(resolution=0.1, s_0=2.0, Tg=1.5, a=1.0, b=1.5, v_0=30.0, small_delta=4.0, ln1=0.0)


def _stationary_leader(n: int, position: float) -> LeaderTrajectory:
    return LeaderTrajectory(xn1=np.full(n, position), vn1=np.zeros(n))


def test_accelerates_from_rest_behind_far_stationary_leader(params):
    df = simulate(params, _stationary_leader(51, 100.0), FollowerSeed(xn=0.0, vn=0.0))

    assert df["sn"].iloc[0] == 100.0
    assert df["v_dot"].iloc[0] == pytest.approx(1.0 - (2.0 / 100.0) ** 2)
    assert np.all(np.diff(df["vn"].to_numpy()) > 0)
    assert df["vn"].max() < 30.0


def test_deceleration_is_bounded_by_b(params):
    df = simulate(params, _stationary_leader(300, 10.0), FollowerSeed(xn=0.0, vn=20.0))
    v_dot = df["v_dot"].to_numpy()[:-1]

    assert np.all(v_dot >= -params.b)
    assert v_dot.min() == -params.b
    assert (df["vn"] >= 0).all()


def test_desired_gap_floors_at_jam_spacing_when_closing_fast(params):
    n = 5
    leader = LeaderTrajectory(xn1=np.linspace(50.0, 54.0, n), vn1=np.full(n, 40.0))
    df = simulate(params, leader, FollowerSeed(xn=0.0, vn=10.0))

    assert df["deltav"].iloc[0] == -30.0
    assert df["sn_star"].iloc[0] == params.s_0


def test_missing_leader_speed_uses_free_road_term(params):
    leader = LeaderTrajectory(xn1=np.full(3, 80.0), vn1=np.array([np.nan, 10.0, 10.0]))
    df = simulate(params, leader, FollowerSeed(xn=0.0, vn=15.0))

    assert np.isnan(df["sn_star"].iloc[0])
    assert df["v_dot"].iloc[0] == pytest.approx(1.0 - 0.5**4)
    assert np.isfinite(df["sn_star"].iloc[1])


def test_spacing_uses_absolute_gap_minus_leader_length():
    params = IDMParams(resolution=0.1, s_0=2.0, Tg=1.2, a=1.2, b=2.0, v_0=25.0, ln1=4.5)
    n = 200
    leader = LeaderTrajectory(xn1=30.0 + 15.0 * np.arange(n) * 0.1, vn1=np.full(n, 15.0))
    df = simulate(params, leader, FollowerSeed(xn=0.0, vn=12.0))

    expected = (df["xn1"] - df["xn"]).abs() - 4.5
    np.testing.assert_array_equal(df["sn"].to_numpy(), expected.to_numpy())
    np.testing.assert_array_equal(
        df["deltav"].to_numpy()[1:], (df["vn"] - df["vn1"]).to_numpy()[1:]
    )


def test_columns_and_trailing_row(params):
    df = simulate(params, _stationary_leader(10, 100.0), FollowerSeed(xn=0.0, vn=5.0, fvn=7))

    assert list(df.columns) == idm_column_order()
    assert len(df) == 10
    assert (df["fvn"] == 7).all()
    assert (df["ln1"] == 0.0).all()
    assert np.allclose(df["Time"], np.arange(10) * 0.1)
    assert np.isnan(df["sn_star"].iloc[-1]) and np.isnan(df["v_dot"].iloc[-1])
    assert np.isfinite(df["vn"]).all()


def test_runs_are_deterministic_and_leave_inputs_untouched(params):
    xn1 = np.full(100, 60.0)
    vn1 = np.zeros(100)
    leader = LeaderTrajectory(xn1=xn1, vn1=vn1)

    first = simulate(params, leader, FollowerSeed(xn=0.0, vn=8.0))
    second = IDM(params).simulate(leader, FollowerSeed(xn=0.0, vn=8.0))

    pd.testing.assert_frame_equal(first, second)
    assert (xn1 == 60.0).all() and (vn1 == 0.0).all()


def test_acceleration_matches_closed_form(params):
    sn_star, v_dot = IDM(params).acceleration(vn=10.0, deltav=2.0, sn=40.0)

    expected_star = 2.0 + 10.0 * 1.5 + 10.0 * 2.0 / (2 * np.sqrt(1.5))
    assert sn_star == pytest.approx(expected_star)
    assert v_dot == pytest.approx(1.0 - (10.0 / 30.0) ** 4 - (expected_star / 40.0) ** 2)
