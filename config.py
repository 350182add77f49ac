"""Global configuration for the car-following simulator."""
from pathlib import Path
from typing import Dict, FrozenSet

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
OUTPUT_DIR: Path = Path("output/simulations")

# ---------------------------------------------------------------------------
# Simulation options
# ---------------------------------------------------------------------------
RESOLUTION_DEFAULT: float = 0.1  # [s], fixed timestep for a whole run
MODEL_CHOICES: FrozenSet[str] = frozenset({"idm", "gipps", "wiedemann74"})
LOG_LEVEL: str = "INFO"

# ---------------------------------------------------------------------------
# Behavioral parameters (placeholder values, not calibrated)
# ---------------------------------------------------------------------------
IDM_DEFAULTS: Dict[str, float] = {
    "resolution": RESOLUTION_DEFAULT,
    "s_0": 2.0,  # jam spacing [m]
    "Tg": 1.5,  # desired time gap [s]
    "a": 1.0,  # comfortable acceleration [m/s^2]
    "b": 1.5,  # comfortable deceleration [m/s^2]
    "v_0": 30.0,  # desired speed [m/s]
    "small_delta": 4.0,
    "ln1": 5.0,  # leader length [m]
}

GIPPS_DEFAULTS: Dict[str, float] = {
    "resolution": RESOLUTION_DEFAULT,
    "tau": 1.0,  # reaction time [s]
    "an": 1.5,  # max acceleration [m/s^2]
    "bn_const": -2.0,  # apparent deceleration [m/s^2], negative
    "Vn": 30.0,  # desired speed [m/s]
    "bcap": -3.0,  # assumed leader deceleration [m/s^2], negative
    "ln1": 5.0,
}

WIEDEMANN74_DEFAULTS: Dict[str, float] = {
    "resolution": RESOLUTION_DEFAULT,
    "D_MAX": 150.0,  # perception range [m]
    "BXadd": 2.0,
    "AX": 5.0,  # standstill spacing incl. leader length [m]
    "CX": 40.0,
    "EX": 1.5,
    "OPDVadd": 1.5,
    "BMAXmult": 0.086,
    "V_MAX": 33.3,
    "FaktorV": 1.0,
    "BMIN": -8.0,
    "BNULL": 0.1,
}

DEFAULTS_BY_MODEL: Dict[str, Dict[str, float]] = {
    "idm": IDM_DEFAULTS,
    "gipps": GIPPS_DEFAULTS,
    "wiedemann74": WIEDEMANN74_DEFAULTS,
}
