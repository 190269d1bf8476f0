"""
Shared pydantic base model and numpy type handling.

Node ids and boundary values often come straight out of numpy arrays; the
helpers here turn numpy scalars into Python natives before pydantic
validates them.
"""

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, model_validator


def to_python_type(value: Any) -> Any:
    """Convert numpy types to Python native types."""
    if isinstance(value, np.bool_):
        return bool(value)
    elif isinstance(value, np.integer):
        return int(value)
    elif isinstance(value, np.floating):
        return float(value)
    elif isinstance(value, np.ndarray):
        if value.ndim == 0:
            return to_python_type(value.item())
        return value.tolist()
    elif isinstance(value, (list, tuple)):
        return [to_python_type(x) for x in value]
    elif isinstance(value, dict):
        return {to_python_type(k): to_python_type(v) for k, v in value.items()}
    return value


class BctidesBaseModel(BaseModel):
    """Base model for all schism_bctides configuration objects.

    Models are frozen, and model instances passed in as field values are
    validated again so every container holds its own copy.
    """

    model_config = ConfigDict(
        extra="forbid",
        arbitrary_types_allowed=True,
        frozen=True,
        revalidate_instances="always",
    )

    @model_validator(mode="before")
    @classmethod
    def convert_numpy_types(cls, data):
        """Convert any numpy values to Python native types"""
        if not isinstance(data, dict):
            return data
        return {key: to_python_type(value) for key, value in data.items()}
