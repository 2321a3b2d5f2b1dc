"""
Plot parameters for a divergence map.

A config file is YAML with the five scalars either at top level or under `plot:`:

    plot:
      center_x: -1.0
      center_y: -0.3
      radius: 0.01
      size: 1500
      max_iterations: 1000
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml


@dataclass(frozen=True)
class PlotConfig:
    center_x: float = 0.0
    center_y: float = 0.0
    radius: float = 2.0  # half-width of the square window
    size: int = 1500  # output is size x size pixels
    max_iterations: int = 1000

    @property
    def delta(self) -> float:
        """Distance between neighbouring pixels in the complex plane."""
        return (2 * self.radius) / self.size

    def validate(self) -> "PlotConfig":
        for name in ("center_x", "center_y", "radius"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite, got {getattr(self, name)!r}")
        if self.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.radius}")
        if self.size < 1:
            raise ValueError(f"size must be at least 1, got {self.size}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        return self

    def with_overrides(self, **overrides) -> "PlotConfig":
        """Copy with every non-None override applied, validated."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return _coerce(replace(self, **changes)).validate()


def _coerce(cfg: PlotConfig) -> PlotConfig:
    try:
        return PlotConfig(
            center_x=float(cfg.center_x),
            center_y=float(cfg.center_y),
            radius=float(cfg.radius),
            size=int(cfg.size),
            max_iterations=int(cfg.max_iterations),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid plot parameter: {e}") from e


def config_from_dict(data: dict) -> PlotConfig:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping, got {type(data).__name__}")

    if "plot" in data:
        extra = set(data) - {"plot"}
        if extra:
            raise ValueError(f"Unknown config keys next to `plot`: {sorted(extra)}")
        data = data["plot"]
    if not isinstance(data, dict):
        raise ValueError("`plot` section must be a mapping")
    known = {f.name for f in fields(PlotConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")

    return _coerce(PlotConfig(**data)).validate()


def load_config(path: str | Path) -> PlotConfig:
    with open(path, "r") as f:
        cfg = yaml.safe_load(f)
    return config_from_dict(cfg)
