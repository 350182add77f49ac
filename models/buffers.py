"""Fixed-length kinematic buffers shared by the car-following models.

A run owns one :class:`KinematicBuffers` instance: every array is allocated at
``time_length`` before the scan starts, filled with NaN, seeded at index 0 and
then written in place by exactly one sequential pass of a model.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

ArrayLike = Union[Sequence[float], np.ndarray, pd.Series]
SpacingFn = Callable[[float, float], float]


def nan_array(n: int) -> np.ndarray:
    """Return a float64 array of length ``n`` filled with NaN."""
    return np.full(n, np.nan, dtype=float)


def _as_float_copy(values: ArrayLike) -> np.ndarray:
    return np.array(values, dtype=float, copy=True)


@dataclass(frozen=True)
class LeaderTrajectory:
    """Externally supplied leader history, aligned on the simulation time grid.

    Args:
        xn1: Leader position [m].
        vn1: Leader speed [m/s]. Missing samples are NaN.
        bn1: Leader acceleration [m/s^2]. Only Wiedemann74 reads it; zeros
            when omitted.
        time: Time stamps emitted as the ``Time`` column. Built from the
            resolution when omitted.
    """

    xn1: ArrayLike
    vn1: ArrayLike
    bn1: Optional[ArrayLike] = None
    time: Optional[ArrayLike] = None

    def __len__(self) -> int:
        return len(self.xn1)


@dataclass(frozen=True)
class FollowerSeed:
    """Follower state at index 0.

    ``sn`` and ``deltav`` are derived from the seed positions and speeds with
    the model's own spacing rule unless given explicitly.
    """

    xn: float
    vn: float
    sn: Optional[float] = None
    deltav: Optional[float] = None
    fvn: Optional[float] = None


@dataclass
class KinematicBuffers:
    """Per-timestep state of one follower/leader pair."""

    time_length: int
    time: np.ndarray
    xn1: np.ndarray
    vn1: np.ndarray
    bn1: np.ndarray
    xn: np.ndarray
    vn: np.ndarray
    sn: np.ndarray
    deltav: np.ndarray
    accel: np.ndarray
    extra: Dict[str, np.ndarray] = field(default_factory=dict)

    @classmethod
    def allocate(
        cls,
        leader: LeaderTrajectory,
        seed: FollowerSeed,
        resolution: float,
        spacing: SpacingFn,
        extra: Sequence[str] = (),
    ) -> "KinematicBuffers":
        """Allocate NaN-filled buffers and write the seed at index 0.

        Leader arrays are copied so the caller's data is never touched by the
        scan.
        """
        n = len(leader)
        xn1 = _as_float_copy(leader.xn1)
        vn1 = _as_float_copy(leader.vn1)
        bn1 = np.zeros(n, dtype=float) if leader.bn1 is None else _as_float_copy(leader.bn1)
        if leader.time is None:
            time = np.arange(n, dtype=float) * resolution
        else:
            time = _as_float_copy(leader.time)

        buffers = cls(
            time_length=n,
            time=time,
            xn1=xn1,
            vn1=vn1,
            bn1=bn1,
            xn=nan_array(n),
            vn=nan_array(n),
            sn=nan_array(n),
            deltav=nan_array(n),
            accel=nan_array(n),
            extra={name: nan_array(n) for name in extra},
        )
        if n == 0:
            return buffers

        buffers.xn[0] = float(seed.xn)
        buffers.vn[0] = float(seed.vn)
        buffers.sn[0] = spacing(xn1[0], buffers.xn[0]) if seed.sn is None else float(seed.sn)
        buffers.deltav[0] = buffers.vn[0] - vn1[0] if seed.deltav is None else float(seed.deltav)
        return buffers

    def to_frame(self, columns: Mapping[str, object], order: List[str]) -> pd.DataFrame:
        """Assemble the trajectory record with a fixed column order.

        Scalars in ``columns`` are broadcast to every row.
        """
        return pd.DataFrame({name: columns[name] for name in order}, index=pd.RangeIndex(self.time_length))


__all__ = ["FollowerSeed", "KinematicBuffers", "LeaderTrajectory", "nan_array"]
