"""Car-following models: IDM, Gipps and Wiedemann74."""
from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional, Tuple, Type

import pandas as pd

import config
from models import gipps, idm, wiedemann74
from models.buffers import FollowerSeed, KinematicBuffers, LeaderTrajectory
from models.gipps import GippsParams
from models.idm import IDM, IDMParams
from models.params import ModelParams
from models.wiedemann74 import Regime, Wiedemann74Params

SimulateFn = Callable[..., pd.DataFrame]

MODELS: Dict[str, Tuple[Type[ModelParams], SimulateFn]] = {
    "idm": (IDMParams, idm.simulate),
    "gipps": (GippsParams, gipps.simulate),
    "wiedemann74": (Wiedemann74Params, wiedemann74.simulate),
}


def _lookup(model: str) -> Tuple[Type[ModelParams], SimulateFn]:
    key = model.strip().lower()
    if key not in MODELS:
        raise ValueError(f"Unknown model '{model}'. Choose from {', '.join(sorted(MODELS))}.")
    return MODELS[key]


def build_params(model: str, overrides: Optional[Mapping[str, float]] = None) -> ModelParams:
    """Merge ``overrides`` into the model's defaults from :mod:`config`."""
    params_cls, _ = _lookup(model)
    values = dict(config.DEFAULTS_BY_MODEL[model.strip().lower()])
    values.update(overrides or {})
    return params_cls.from_dict(values)


def simulate(model: str, params: ModelParams, leader: LeaderTrajectory, seed: FollowerSeed) -> pd.DataFrame:
    """Run one follower/leader pair with the model named ``model``."""
    params_cls, simulate_fn = _lookup(model)
    if not isinstance(params, params_cls):
        raise TypeError(f"Model '{model}' expects {params_cls.__name__}, got {type(params).__name__}")
    return simulate_fn(params, leader, seed)


__all__ = [
    "FollowerSeed",
    "GippsParams",
    "IDM",
    "IDMParams",
    "KinematicBuffers",
    "LeaderTrajectory",
    "MODELS",
    "Regime",
    "Wiedemann74Params",
    "build_params",
    "simulate",
]
