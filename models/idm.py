"""Intelligent Driver Model (IDM) car-following simulation.

The follower is advanced with a semi-implicit Euler step that carries a
quadratic position term. Desired spacing and acceleration are recorded for
every step that was used to move the follower.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from data_dictionary import Columns, idm_column_order
from models.buffers import FollowerSeed, KinematicBuffers, LeaderTrajectory
from models.params import ModelParams
from utils.logging_utils import get_logger, warn_non_finite

C = Columns()
logger = get_logger(__name__)


@dataclass(frozen=True)
class IDMParams(ModelParams):
    """IDM parameter set.

    Attributes:
        resolution: Timestep (s).
        s_0: Jam spacing (m).
        Tg: Desired time gap (s).
        a: Comfortable acceleration (m/s^2).
        b: Comfortable deceleration (m/s^2), positive.
        v_0: Desired speed (m/s).
        small_delta: Acceleration exponent, typically 4.
        ln1: Leader length (m).
    """

    resolution: float
    s_0: float
    Tg: float
    a: float
    b: float
    v_0: float
    small_delta: float = 4.0
    ln1: float = 0.0


class IDM:
    """Intelligent Driver Model for longitudinal motion simulation."""

    def __init__(self, params: IDMParams) -> None:
        self.params = params

    def _desired_gap(self, vn: float, deltav: float) -> float:
        """Compute dynamic desired gap s*.

        The dynamic term is dropped when it would be negative (strong closing
        in), leaving the jam spacing. Missing inputs give NaN.
        """
        p = self.params
        dynamic = vn * p.Tg + (vn * deltav) / (2 * np.sqrt(p.a * p.b))
        if dynamic < 0:
            return p.s_0
        return p.s_0 + dynamic

    def acceleration(self, vn: float, deltav: float, sn: float) -> tuple[float, float]:
        """Return ``(sn_star, v_dot)`` for one timestep.

        Args:
            vn: Follower speed.
            deltav: Speed difference (follower minus leader).
            sn: Spacing net of leader length.
        """
        p = self.params
        sn_star = self._desired_gap(vn, deltav)
        free_road = 1 - (vn / p.v_0) ** p.small_delta
        if np.isnan(sn_star):
            v_dot = p.a * free_road
        else:
            v_dot = p.a * (free_road - (sn_star / sn) ** 2)

        if v_dot < -p.b:
            v_dot = -p.b
        return sn_star, v_dot

    def _spacing(self, xn1: float, xn: float) -> float:
        return abs(xn1 - xn) - self.params.ln1

    def simulate(self, leader: LeaderTrajectory, seed: FollowerSeed) -> pd.DataFrame:
        """
        Simulate the follower over the leader's full time grid.

        Args:
            leader: Leader position/speed arrays; defines ``time_length``.
            seed: Follower state at index 0.

        Returns:
            DataFrame with one row per timestep in :func:`idm_column_order`.
            ``sn_star`` and ``v_dot`` of the last row stay NaN.
        """
        p = self.params
        dt = p.resolution
        buf = KinematicBuffers.allocate(leader, seed, dt, self._spacing, extra=[C.sn_star])
        vn, xn, sn, deltav, v_dot = buf.vn, buf.xn, buf.sn, buf.deltav, buf.accel
        sn_star = buf.extra[C.sn_star]

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            for t in range(buf.time_length - 1):
                sn_star[t], v_dot[t] = self.acceleration(vn[t], deltav[t], sn[t])

                vn[t + 1] = vn[t] + v_dot[t] * dt
                if vn[t + 1] < 0:
                    vn[t + 1] = 0

                xn[t + 1] = xn[t] + vn[t] * dt + 0.5 * v_dot[t] * dt**2
                sn[t + 1] = self._spacing(buf.xn1[t + 1], xn[t + 1])
                deltav[t + 1] = vn[t + 1] - buf.vn1[t + 1]

        df = buf.to_frame(
            {
                C.follower_id: np.nan if seed.fvn is None else seed.fvn,
                C.time: buf.time,
                C.xn1: buf.xn1,
                C.vn1: buf.vn1,
                C.ln1: p.ln1,
                C.sn_star: sn_star,
                C.v_dot: v_dot,
                C.xn: xn,
                C.vn: vn,
                C.sn: sn,
                C.deltav: deltav,
            },
            idm_column_order(),
        )
        logger.debug("IDM run finished: %d steps", buf.time_length)
        warn_non_finite(logger, "IDM", df, [C.xn, C.vn, C.sn, C.deltav])
        return df


def simulate(params: IDMParams, leader: LeaderTrajectory, seed: FollowerSeed) -> pd.DataFrame:
    """Run one IDM follower/leader pair."""
    return IDM(params).simulate(leader, seed)


__all__ = ["IDM", "IDMParams", "simulate"]
