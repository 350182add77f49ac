"""Gipps (1981) car-following simulation.

Each step picks the lesser of a free-flow speed and a safe car-following speed,
both computed from the previous step's state. The update therefore starts at
``t = 1`` and the last index of the run is never written. The acceleration
column ``bn`` is derived from the realised speed change after each step.

Two properties of this formulation are kept on purpose and covered by tests:

- The car-following radicand is not guarded. A negative value yields NaN,
  which then propagates through speed, position and spacing.
- Spacing is the signed position difference ``xn1 - xn`` without the leader
  length, unlike IDM and Wiedemann74.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from data_dictionary import Columns, gipps_column_order
from models.buffers import FollowerSeed, KinematicBuffers, LeaderTrajectory
from models.params import ModelParams
from utils.logging_utils import get_logger, warn_non_finite

C = Columns()
logger = get_logger(__name__)


@dataclass(frozen=True)
class GippsParams(ModelParams):
    """Gipps parameter set.

    ``bn_const`` and ``bcap`` are decelerations and are expected negative.
    """

    resolution: float
    tau: float
    an: float
    bn_const: float
    Vn: float
    bcap: float
    ln1: float = 0.0


def free_flow_speed(params: GippsParams, vn_prev: float) -> float:
    """Speed reachable after one reaction time when accelerating towards ``Vn``."""
    p = params
    return vn_prev + (2.5 * p.an * p.tau * (1 - vn_prev / p.Vn)) * (0.025 + np.sqrt(vn_prev / p.Vn))


def car_following_speed(params: GippsParams, vn_prev: float, xn_prev: float, xn1_prev: float, vn1_prev: float) -> float:
    """Largest speed that still lets the follower stop behind a braking leader."""
    p = params
    radicand = (p.bn_const**2 * p.tau**2) - (
        p.bn_const * (2 * (xn1_prev - p.ln1 - xn_prev) - (vn_prev * p.tau) - (vn1_prev**2 / p.bcap))
    )
    return p.bn_const * p.tau + np.sqrt(radicand)


def _spacing(xn1: float, xn: float) -> float:
    return xn1 - xn


def simulate(params: GippsParams, leader: LeaderTrajectory, seed: FollowerSeed) -> pd.DataFrame:
    """
    Simulate one Gipps follower/leader pair.

    A missing leader speed at ``t - 1`` is read as zero. The substitution is
    made on the run's own copy of ``vn1`` and shows up in the returned ``vn1``
    column; the caller's array is left untouched.

    Args:
        params: Gipps parameters.
        leader: Leader arrays; defines ``time_length``.
        seed: Follower state at index 0.

    Returns:
        DataFrame in :func:`gipps_column_order`.
    """
    p = params
    dt = p.resolution
    buf = KinematicBuffers.allocate(leader, seed, dt, _spacing, extra=[C.vn_ff, C.vn_cf])
    vn, xn, sn, deltav, bn = buf.vn, buf.xn, buf.sn, buf.deltav, buf.accel
    xn1, vn1 = buf.xn1, buf.vn1
    vn_ff, vn_cf = buf.extra[C.vn_ff], buf.extra[C.vn_cf]

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for t in range(1, buf.time_length - 1):
            vn_ff[t] = free_flow_speed(p, vn[t - 1])

            if np.isnan(vn1[t - 1]):
                vn1[t - 1] = 0.0

            vn_cf[t] = car_following_speed(p, vn[t - 1], xn[t - 1], xn1[t - 1], vn1[t - 1])

            if vn_ff[t] < vn_cf[t]:
                vn[t] = vn_ff[t]
            else:
                vn[t] = vn_cf[t]

            if vn[t] < 0:
                vn[t] = 0

            bn[t - 1] = (vn[t] - vn[t - 1]) / dt

            xn[t] = xn[t - 1] + (vn[t - 1] * dt) + (0.5 * bn[t - 1] * dt**2)
            sn[t] = _spacing(xn1[t], xn[t])
            deltav[t] = vn[t] - vn1[t]

    df = buf.to_frame(
        {
            C.follower_id: np.nan if seed.fvn is None else seed.fvn,
            C.time: buf.time,
            C.xn1: xn1,
            C.vn1: vn1,
            C.ln1: p.ln1,
            C.bn: bn,
            C.xn: xn,
            C.vn: vn,
            C.sn: sn,
            C.deltav: deltav,
            C.vn_ff: vn_ff,
            C.vn_cf: vn_cf,
        },
        gipps_column_order(),
    )
    logger.debug("Gipps run finished: %d steps", buf.time_length)
    warn_non_finite(logger, "Gipps", df.iloc[: max(buf.time_length - 1, 0)], [C.xn, C.vn, C.sn])
    return df


__all__ = ["GippsParams", "car_following_speed", "free_flow_speed", "simulate"]
