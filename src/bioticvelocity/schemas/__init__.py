"""Pydantic configuration schemas for velocity runs.

All configuration validation, coercion, and normalization happens at schema
validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
ALL_METRICS : tuple
    Every metric identifier the orchestrator understands
"""

from bioticvelocity.schemas.resolve import resolve_config
from bioticvelocity.schemas.internal import InternalConfig
from bioticvelocity.schemas.param import ParamConfig, ALL_METRICS, DEFAULT_QUANTILES
from bioticvelocity.schemas.user import UserConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'ALL_METRICS',
    'DEFAULT_QUANTILES',
]
