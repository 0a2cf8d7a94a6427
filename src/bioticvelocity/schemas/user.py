"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases for
the camelCase argument names users of biotic velocity tools know (e.g.,
quants → quantiles, onlyInSharedCells → only_in_shared_cells,
cores → workers).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Literal, Optional, Any
from pydantic import Field, field_validator
from bioticvelocity.schemas.base import VelocityBaseModel
from bioticvelocity.schemas.param import normalize_metric_names, normalize_quantiles


class UserConfig(VelocityBaseModel):
    """User-facing configuration schema.

    Flat, forgiving, and uses common aliases. Converted to nested internal
    overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(
            metrics=["centroid", "nsQuants"],
            quants=[0.1, 0.5, 0.9],
            onlyInSharedCells=True,
            cores=4,
        )

        internal = resolve_config(param_cfg, user_cfg)
    """

    metrics: Optional[list[str]] = None
    quantiles: Optional[list[float]] = Field(None, alias="quants")
    only_in_shared_cells: Optional[bool] = Field(None, alias="onlyInSharedCells")
    workers: Optional[int] = Field(None, alias="cores", ge=1)
    backend: Optional[Literal["process", "thread"]] = None
    distance: Optional[str] = None
    warn: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    model_config = VelocityBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("metrics", mode="before")
    @classmethod
    def coerce_metrics(cls, v: Any):
        """Accept 'all', a single metric name, or a list of names."""
        return normalize_metric_names(v)

    @field_validator("quantiles", mode="before")
    @classmethod
    def coerce_quantiles(cls, v: Any):
        """Accept a single level or any iterable of levels."""
        return normalize_quantiles(v)

    @field_validator("backend", "log_level", mode="before")
    @classmethod
    def normalize_case(cls, v):
        if not isinstance(v, str):
            return v
        v = v.strip()
        return v.upper() if v.lower() in ("debug", "info", "warning", "error", "critical") else v.lower()

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        metrics = {}
        if self.metrics is not None:
            metrics["names"] = self.metrics
        if self.quantiles is not None:
            metrics["quantiles"] = self.quantiles
        if self.only_in_shared_cells is not None:
            metrics["only_in_shared_cells"] = self.only_in_shared_cells
        if metrics:
            overrides["metrics"] = metrics

        execution = {}
        if self.workers is not None:
            execution["workers"] = self.workers
        if self.backend is not None:
            execution["backend"] = self.backend
        if execution:
            overrides["execution"] = execution

        if self.distance is not None:
            overrides["distance"] = {"method": self.distance}

        logging_cfg = {}
        if self.log_level is not None:
            logging_cfg["level"] = self.log_level
        if self.warn is not None:
            logging_cfg["warn"] = self.warn
        if logging_cfg:
            overrides["logging"] = logging_cfg

        return overrides
