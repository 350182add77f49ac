"""Command-line entrypoint: simulate one follower behind a recorded leader."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

import config
from data_dictionary import Columns
from models import FollowerSeed, LeaderTrajectory, build_params, simulate
from utils.logging_utils import get_logger, set_level

C = Columns()
logger = get_logger(__name__)


def parse_overrides(items: Optional[List[str]]) -> Dict[str, float]:
    """Parse repeated ``key=value`` CLI entries into parameter overrides."""
    overrides: Dict[str, float] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Malformed --param '{item}', expected key=value")
        overrides[key.strip()] = float(value)
    return overrides


def load_leader(path: Path) -> LeaderTrajectory:
    """Load a leader trajectory CSV with ``xn1``/``vn1`` and optional ``bn1``/``Time``."""
    df = pd.read_csv(path)
    missing = {C.xn1, C.vn1}.difference(df.columns)
    if missing:
        raise ValueError(f"Leader file {path} is missing column(s): {', '.join(sorted(missing))}")
    return LeaderTrajectory(
        xn1=df[C.xn1].to_numpy(dtype=float),
        vn1=df[C.vn1].to_numpy(dtype=float),
        bn1=df["bn1"].to_numpy(dtype=float) if "bn1" in df.columns else None,
        time=df[C.time].to_numpy(dtype=float) if C.time in df.columns else None,
    )


def write_table(df: pd.DataFrame, path: Path) -> None:
    """Write the simulated table as CSV or parquet depending on the suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".parquet":
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Car-following simulation for one follower/leader pair")
    parser.add_argument("--model", type=str, required=True, choices=sorted(config.MODEL_CHOICES))
    parser.add_argument("--leader", type=Path, required=True, help="CSV with xn1, vn1 and optional bn1, Time.")
    parser.add_argument("--xn0", type=float, required=True, help="Follower position at index 0.")
    parser.add_argument("--vn0", type=float, required=True, help="Follower speed at index 0.")
    parser.add_argument("--sn0", type=float, default=None, help="Spacing at index 0 (derived when omitted).")
    parser.add_argument("--deltav0", type=float, default=None, help="Speed difference at index 0.")
    parser.add_argument("--fvn", type=float, default=None, help="Follower vehicle id written to the fvn column.")
    parser.add_argument(
        "--param",
        action="append",
        default=None,
        help="Parameter override key=value, repeatable (e.g. --param v_0=25).",
    )
    parser.add_argument("--output", type=Path, default=None, help="Output .csv or .parquet file.")
    parser.add_argument("--log-level", type=str, default=config.LOG_LEVEL)
    args = parser.parse_args(argv)

    set_level(getattr(logging, args.log_level.upper()), [__name__, "models"])

    params = build_params(args.model, parse_overrides(args.param))
    leader = load_leader(args.leader)
    seed = FollowerSeed(xn=args.xn0, vn=args.vn0, sn=args.sn0, deltav=args.deltav0, fvn=args.fvn)

    logger.info("Simulating %s over %d steps (resolution %.3f s)", args.model, len(leader), params.resolution)
    df = simulate(args.model, params, leader, seed)

    output = args.output or config.OUTPUT_DIR / f"{args.leader.stem}_{args.model}.csv"
    write_table(df, output)
    logger.info("Simulated trajectory saved to: %s", output)


if __name__ == "__main__":
    main()
