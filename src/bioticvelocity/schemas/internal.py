"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.
"""

from typing import Literal
from pydantic import ConfigDict, Field
from bioticvelocity.schemas.base import VelocityBaseModel


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalMetricsConfig(VelocityBaseModel):
    """Runtime metric request."""
    names: tuple[str, ...]
    quantiles: tuple[float, ...]
    only_in_shared_cells: bool

    model_config = ConfigDict(extra='forbid', frozen=True)


class InternalExecutionConfig(VelocityBaseModel):
    """Runtime worker pool configuration."""
    workers: int = Field(ge=1)
    backend: Literal["process", "thread"]

    model_config = ConfigDict(extra='forbid', frozen=True)


class InternalDistanceConfig(VelocityBaseModel):
    """Runtime distance configuration."""
    method: Literal["planar", "great_circle"]

    model_config = ConfigDict(extra='forbid', frozen=True)


class InternalLoggingConfig(VelocityBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    warn: bool

    model_config = ConfigDict(extra='forbid', frozen=True)


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(VelocityBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.quantiles = config.metrics.quantiles  # NOT .get()
            self.workers = config.execution.workers

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation

    All of that happens during config resolution, not in runtime code.
    The model is frozen, so it can be shipped to worker processes as is.
    """

    metrics: InternalMetricsConfig
    execution: InternalExecutionConfig
    distance: InternalDistanceConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
