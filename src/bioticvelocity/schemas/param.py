"""ParamConfig: Expert defaults for velocity runs.

This module defines the complete default configuration. ALL run parameters
must have defaults here. No runtime code should define fallback values -
this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal
from pydantic import Field, field_validator
from bioticvelocity.schemas.base import VelocityBaseModel


ALL_METRICS = (
    "summary",
    "centroid",
    "nsCentroid",
    "ewCentroid",
    "nCentroid",
    "sCentroid",
    "eCentroid",
    "wCentroid",
    "nsQuants",
    "ewQuants",
    "similarity",
    "elevCentroid",
    "elevQuants",
)

DEFAULT_QUANTILES = (0.05, 0.10, 0.5, 0.9, 0.95)


def normalize_metric_names(v):
    """Accept 'all', a single name, or a list; match names case-insensitively."""
    if v is None:
        return v
    if isinstance(v, str):
        v = [v]
    by_lower = {m.lower(): m for m in ALL_METRICS}
    names = []
    for name in v:
        key = str(name).strip().lower()
        if key == "all":
            return list(ALL_METRICS)
        if key not in by_lower:
            raise ValueError(f"Unknown metric '{name}'; expected one of {list(ALL_METRICS)}")
        if by_lower[key] not in names:
            names.append(by_lower[key])
    if not names:
        raise ValueError("At least one metric must be requested")
    return names


def normalize_quantiles(v):
    """Sort and de-duplicate quantile levels; every level must lie in [0, 1]."""
    if v is None:
        return v
    if isinstance(v, (int, float)):
        v = [v]
    levels = sorted({float(q) for q in v})
    if not levels:
        raise ValueError("At least one quantile level is required")
    bad = [q for q in levels if not 0.0 <= q <= 1.0]
    if bad:
        raise ValueError(f"Quantile levels must be in [0, 1], got {bad}")
    return levels


# =============================================================================
# Nested Configuration Models
# =============================================================================

class MetricsConfig(VelocityBaseModel):
    """Which metrics to compute and their ancillary parameters."""
    names: list[str] = Field(default_factory=lambda: list(ALL_METRICS))
    quantiles: list[float] = Field(default_factory=lambda: list(DEFAULT_QUANTILES))
    only_in_shared_cells: bool = False

    @field_validator("names", mode="before")
    @classmethod
    def coerce_metric_names(cls, v):
        return normalize_metric_names(v)

    @field_validator("quantiles", mode="before")
    @classmethod
    def coerce_quantiles(cls, v):
        return normalize_quantiles(v)


class ExecutionConfig(VelocityBaseModel):
    """Worker pool configuration."""
    workers: int = Field(1, ge=1, description="Number of workers evaluating time-step pairs")
    backend: Literal["process", "thread"] = "process"


class DistanceConfig(VelocityBaseModel):
    """Distance function used for positional velocities."""
    method: Literal["planar", "great_circle"] = "planar"

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method_name(cls, v):
        """Normalize method names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip().replace("-", "_")
        return v


class LoggingConfig(VelocityBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    warn: bool = Field(True, description="Emit advisory warnings (degenerate quantiles, poles, ...)")


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(VelocityBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all run parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg)

    Runtime code only sees InternalConfig.
    """

    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    distance: DistanceConfig = Field(default_factory=DistanceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
