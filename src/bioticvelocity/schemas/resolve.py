"""Resolution of expert defaults and caller overrides into InternalConfig.

UserConfig values win over ParamConfig defaults, section by section.
"""

from typing import Union, Optional
from bioticvelocity.schemas.param import ParamConfig
from bioticvelocity.schemas.user import UserConfig
from bioticvelocity.schemas.internal import InternalConfig


def deep_merge(base: dict, override: dict) -> dict:
    """Copy of ``base`` with ``override`` applied; config sections merge key by key.

    >>> deep_merge({"metrics": {"names": ["summary"], "quantiles": [0.5]}},
    ...            {"metrics": {"quantiles": [0.1]}})
    {'metrics': {'names': ['summary'], 'quantiles': [0.1]}}
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            value = deep_merge(merged[key], value)
        merged[key] = value
    return merged


def resolve_config(
    param_cfg: Optional[Union[dict, ParamConfig]] = None,
    user_cfg: Optional[Union[dict, UserConfig]] = None,
) -> InternalConfig:
    """Merge caller overrides onto the expert defaults and freeze the result.

    The merged dict is validated by ParamConfig again, so overrides get the
    same metric and quantile normalisation as defaults.

    Parameters
    ----------
    param_cfg : dict or ParamConfig, optional
        Expert configuration with complete defaults. ParamConfig() if None.
    user_cfg : dict or UserConfig, optional
        User configuration with overrides. If None or empty, uses only param defaults.

    Returns
    -------
    InternalConfig
        Fully validated, immutable runtime configuration

    Raises
    ------
    ValidationError
        If any config fails Pydantic validation

    Examples
    --------
    >>> from bioticvelocity.schemas import resolve_config, ParamConfig, UserConfig
    >>> config = resolve_config(ParamConfig(), UserConfig(quants=[0.5], cores=2))
    >>> config.metrics.quantiles
    (0.5,)
    >>> config.execution.workers
    2
    """
    param = ParamConfig.model_validate(param_cfg if param_cfg is not None else {})
    user = UserConfig.model_validate(user_cfg if user_cfg is not None else {})

    merged = deep_merge(param.model_dump(), user.to_internal_overrides())
    merged = ParamConfig.model_validate(merged).model_dump()

    return InternalConfig.model_validate(merged)
