"""Shared pydantic base for the parameter, user and internal config models."""

from pydantic import BaseModel, ConfigDict


class VelocityBaseModel(BaseModel):
    """Rejects unknown keys and re-validates on assignment.

    UserConfig relaxes ``extra`` to accept keyword dictionaries from callers;
    InternalConfig adds ``frozen``.
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )
