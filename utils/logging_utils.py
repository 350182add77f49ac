"""Lightweight logging helpers."""
import logging
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

_DEF_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str, level: int = logging.INFO, fmt: Optional[str] = None) -> logging.Logger:
    """Create and configure a logger with stream handler."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or _DEF_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def set_level(level: int, prefixes: Iterable[str]) -> None:
    """Apply ``level`` to every existing logger whose name starts with one of ``prefixes``."""
    prefixes = tuple(prefixes)
    for name in list(logging.root.manager.loggerDict):
        if any(name == p or name.startswith(p + ".") for p in prefixes):
            logging.getLogger(name).setLevel(level)


def non_finite_columns(df: pd.DataFrame, columns: Iterable[str]) -> List[str]:
    """Return the numeric columns of ``df`` holding NaN or inf in any computed row."""
    found: List[str] = []
    for col in columns:
        if col not in df.columns or not pd.api.types.is_numeric_dtype(df[col]):
            continue
        if not np.isfinite(df[col].to_numpy(dtype=float)).all():
            found.append(col)
    return found


def warn_non_finite(logger: logging.Logger, model: str, df: pd.DataFrame, columns: Iterable[str]) -> None:
    """Log a warning when a run produced non-finite values in the given columns."""
    bad = non_finite_columns(df, columns)
    if bad:
        logger.warning("%s run produced non-finite values in: %s", model, ", ".join(bad))


__all__ = ["get_logger", "non_finite_columns", "set_level", "warn_non_finite"]
