"""Column name constants and per-model column order for simulated trajectory tables."""
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Columns:
    """Namespace for commonly used column names to avoid typos."""

    # Index
    follower_id: str = "fvn"
    time: str = "Time"

    # Leader
    xn1: str = "xn1"
    vn1: str = "vn1"
    ln1: str = "ln1"

    # Follower kinematics
    xn: str = "xn"
    vn: str = "vn"
    sn: str = "sn"
    deltav: str = "deltav"
    bn: str = "bn"

    # IDM
    sn_star: str = "sn_star"
    v_dot: str = "v_dot"

    # Gipps
    vn_ff: str = "vn_ff"
    vn_cf: str = "vn_cf"

    # Wiedemann74 thresholds and scratch fields
    AX: str = "AX"
    BX: str = "BX"
    ABX: str = "ABX"
    CX: str = "CX"
    SDX: str = "SDX"
    SDV: str = "SDV"
    CLDV: str = "CLDV"
    OPDV: str = "OPDV"
    BMAX: str = "BMAX"
    B_App: str = "B_App"
    B_Emg: str = "B_Emg"
    BNULL: str = "BNULL"
    cf_state_sim: str = "cf_state_sim"


def idm_column_order() -> List[str]:
    """Return the canonical column order for an IDM run."""

    c = Columns()
    return [c.follower_id, c.time, c.xn1, c.vn1, c.ln1, c.sn_star, c.v_dot, c.xn, c.vn, c.sn, c.deltav]


def gipps_column_order() -> List[str]:
    """Return the canonical column order for a Gipps run."""

    c = Columns()
    return [
        c.follower_id,
        c.time,
        c.xn1,
        c.vn1,
        c.ln1,
        c.bn,
        c.xn,
        c.vn,
        c.sn,
        c.deltav,
        c.vn_ff,
        c.vn_cf,
    ]


def wiedemann74_column_order() -> List[str]:
    """Return the canonical column order for a Wiedemann74 run."""

    c = Columns()
    return [
        # A. Kinematics
        c.xn1,
        c.vn1,
        c.bn,
        c.xn,
        c.vn,
        c.sn,
        c.deltav,
        # B. Thresholds
        c.AX,
        c.BX,
        c.ABX,
        c.CX,
        c.SDX,
        c.SDV,
        c.CLDV,
        c.OPDV,
        # C. Regime accelerations
        c.BMAX,
        c.B_App,
        c.B_Emg,
        c.BNULL,
        c.cf_state_sim,
    ]


__all__ = ["Columns", "gipps_column_order", "idm_column_order", "wiedemann74_column_order"]
