"""Wiedemann (1974) psycho-physical car-following simulation.

Every step computes the perception thresholds from the current spacing and
speeds, classifies the interaction into a :class:`Regime`, and integrates the
acceleration that regime prescribes. Thresholds and the per-branch scratch
accelerations (``BMAX``, ``B_App``, ``B_Emg``) are emitted alongside the
kinematics; fields not computed on a given step stay NaN.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional

import numpy as np
import pandas as pd

from data_dictionary import Columns, wiedemann74_column_order
from models.buffers import FollowerSeed, KinematicBuffers, LeaderTrajectory
from models.params import ModelParams
from utils.logging_utils import get_logger, warn_non_finite

C = Columns()
logger = get_logger(__name__)


class Regime(str, Enum):
    """Driving regime assigned to each step."""

    FREE_DRIVING = "free_driving"
    APPROACHING = "approaching"
    FOLLOWING = "following"
    EMERGENCY_BRAKING = "emergency_braking"


@dataclass(frozen=True)
class Wiedemann74Params(ModelParams):
    """Wiedemann74 parameter set.

    Attributes:
        D_MAX: Upper spacing bound of the perception range (m).
        BXadd: Multiplier of sqrt(speed) in the minimum following distance.
        AX: Standstill spacing (m).
        CX: Perception constant for speed differences.
        EX: Following-distance multiplier.
        OPDVadd: Opening-speed-difference multiplier.
        BMAXmult: Free-driving acceleration multiplier.
        V_MAX: Maximum speed term of the free-driving profile (m/s).
        FaktorV: Speed weight of the free-driving profile.
        BMIN: Maximum deceleration (m/s^2), negative.
        BNULL: Magnitude of the following-regime acceleration (m/s^2).
        resolution: Timestep (s).
    """

    D_MAX: float
    BXadd: float
    AX: float
    CX: float
    EX: float
    OPDVadd: float
    BMAXmult: float
    V_MAX: float
    FaktorV: float
    BMIN: float
    BNULL: float
    resolution: float


class Thresholds(NamedTuple):
    """Perception thresholds of one step."""

    BX: float
    ABX: float
    SDV: float
    SDX: float
    CLDV: float
    OPDV: float


def thresholds(params: Wiedemann74Params, vn: float, vn1: float, sn: float) -> Thresholds:
    """Compute the perception thresholds for one step.

    ``BX`` uses the slower vehicle's speed. A missing leader speed counts as
    the follower being slower; equal speeds leave ``BX`` undefined.
    """
    p = params
    BX = np.nan
    if vn < vn1 or np.isnan(vn1):
        BX = p.BXadd * np.sqrt(vn)
    elif vn > vn1:
        BX = p.BXadd * np.sqrt(vn1)

    ABX = p.AX + BX
    SDV = ((sn - p.AX) / p.CX) ** 2
    SDX = p.AX + (p.EX * BX)
    CLDV = SDV * p.EX**2
    OPDV = CLDV * (-1 * p.OPDVadd)
    return Thresholds(BX=BX, ABX=ABX, SDV=SDV, SDX=SDX, CLDV=CLDV, OPDV=OPDV)


def classify(params: Wiedemann74Params, sn: float, deltav: float, th: Thresholds) -> Regime:
    """Select the driving regime; the first matching branch wins."""
    if np.isnan(sn) or np.isnan(deltav):
        return Regime.FREE_DRIVING
    if sn <= th.ABX:
        return Regime.EMERGENCY_BRAKING
    if sn < th.SDX:
        if deltav > th.CLDV:
            return Regime.APPROACHING
        if deltav > th.OPDV:
            return Regime.FOLLOWING
        return Regime.FREE_DRIVING
    if deltav > th.SDV and sn < params.D_MAX:
        return Regime.APPROACHING
    return Regime.FREE_DRIVING


def free_driving_accel(params: Wiedemann74Params, vn: float) -> float:
    """Free-driving acceleration towards ``V_MAX``."""
    return params.BMAXmult * (params.V_MAX - (vn * params.FaktorV))


def approaching_accel(sn: float, deltav: float, bn1: float, th: Thresholds) -> float:
    """Deceleration that brings the follower to the action point ``ABX``."""
    return 0.5 * (deltav**2 / (th.ABX - sn)) + bn1


def emergency_accel(params: Wiedemann74Params, sn: float, deltav: float, bn1: float, th: Thresholds) -> float:
    """Emergency deceleration inside the action point envelope."""
    p = params
    return 0.5 * (deltav**2 / (p.AX - sn)) + bn1 + (p.BMIN * ((th.ABX - sn) / (th.ABX - p.AX)))


def _spacing(xn1: float, xn: float) -> float:
    return abs(xn1 - xn)


def simulate(params: Wiedemann74Params, leader: LeaderTrajectory, seed: FollowerSeed) -> pd.DataFrame:
    """
    Simulate one Wiedemann74 follower/leader pair.

    Args:
        params: Wiedemann74 parameters.
        leader: Leader arrays; ``bn1`` feeds the braking regimes.
        seed: Follower state at index 0.

    Returns:
        DataFrame in :func:`wiedemann74_column_order`. ``cf_state_sim`` holds
        the regime label of each step and ``""`` on the last row, which is
        never classified.
    """
    p = params
    dt = p.resolution
    names = [C.BX, C.ABX, C.SDV, C.SDX, C.CLDV, C.OPDV, C.BMAX, C.B_App, C.B_Emg]
    buf = KinematicBuffers.allocate(leader, seed, dt, _spacing, extra=names)
    vn, xn, sn, deltav, bn = buf.vn, buf.xn, buf.sn, buf.deltav, buf.accel
    xn1, vn1, bn1 = buf.xn1, buf.vn1, buf.bn1
    scratch = buf.extra
    regimes: List[Optional[Regime]] = [None] * buf.time_length

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for t in range(buf.time_length - 1):
            th = thresholds(p, vn[t], vn1[t], sn[t])
            for name, value in th._asdict().items():
                scratch[name][t] = value

            regime = classify(p, sn[t], deltav[t], th)
            if regime is Regime.FREE_DRIVING:
                scratch[C.BMAX][t] = free_driving_accel(p, vn[t])
                bn[t] = scratch[C.BMAX][t]
            elif regime is Regime.EMERGENCY_BRAKING:
                scratch[C.B_Emg][t] = emergency_accel(p, sn[t], deltav[t], bn1[t], th)
                if scratch[C.B_Emg][t] < p.BMIN or scratch[C.B_Emg][t] > 0:
                    bn[t] = p.BMIN
                else:
                    bn[t] = scratch[C.B_Emg][t]
            elif regime is Regime.APPROACHING:
                scratch[C.B_App][t] = approaching_accel(sn[t], deltav[t], bn1[t], th)
                if scratch[C.B_App][t] < p.BMIN:
                    bn[t] = p.BMIN
                else:
                    bn[t] = scratch[C.B_App][t]
            else:
                bn[t] = p.BNULL if deltav[t] < 0 else -p.BNULL
            regimes[t] = regime

            vn[t + 1] = vn[t] + (bn[t] * dt)
            if vn[t + 1] < 0:
                vn[t + 1] = 0

            xn[t + 1] = xn[t] + (vn[t] * dt) + (0.5 * bn[t] * dt**2)
            sn[t + 1] = _spacing(xn1[t + 1], xn[t + 1])
            deltav[t + 1] = vn[t + 1] - vn1[t + 1]

    columns = {
        C.xn1: xn1,
        C.vn1: vn1,
        C.bn: bn,
        C.xn: xn,
        C.vn: vn,
        C.sn: sn,
        C.deltav: deltav,
        C.AX: p.AX,
        C.CX: p.CX,
        C.BNULL: p.BNULL,
        C.cf_state_sim: [r.value if r is not None else "" for r in regimes],
    }
    columns.update(scratch)
    df = buf.to_frame(columns, wiedemann74_column_order())
    logger.debug("Wiedemann74 run finished: %d steps", buf.time_length)
    warn_non_finite(logger, "Wiedemann74", df, [C.xn, C.vn, C.sn])
    return df


__all__ = [
    "Regime",
    "Thresholds",
    "Wiedemann74Params",
    "approaching_accel",
    "classify",
    "emergency_accel",
    "free_driving_accel",
    "simulate",
    "thresholds",
]
