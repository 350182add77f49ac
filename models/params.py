"""Parameter containers shared by the car-following models."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Mapping, Type, TypeVar

P = TypeVar("P", bound="ModelParams")


@dataclass(frozen=True)
class ModelParams:
    """Base class for the frozen per-model parameter sets."""

    @classmethod
    def from_dict(cls: Type[P], values: Mapping[str, float]) -> P:
        """Build a parameter set from a flat mapping, e.g. ``config.IDM_DEFAULTS``.

        Raises:
            KeyError: If ``values`` holds a name the model does not know.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values).difference(known)
        if unknown:
            raise KeyError(f"Unknown {cls.__name__} parameter(s): {', '.join(sorted(unknown))}")
        return cls(**{name: float(value) for name, value in values.items()})


__all__ = ["ModelParams"]
