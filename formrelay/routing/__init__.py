"""Control-field routing.

The ParamRegistry names the reserved control fields; the ControlFieldRouter
moves their values into named slots and everything else into the params
bags.
"""

from formrelay.routing.params import (
    DEFAULT_OUTPUT_KEYS,
    DEFAULT_PARAM_NAMES,
    PARAM_SYMBOLS,
    ManifestValidationError,
    ParamRegistry,
    UnknownParamError,
)
from formrelay.routing.router import ControlFieldRouter, is_truthy

__all__ = [
    "DEFAULT_OUTPUT_KEYS",
    "DEFAULT_PARAM_NAMES",
    "PARAM_SYMBOLS",
    "ControlFieldRouter",
    "ManifestValidationError",
    "ParamRegistry",
    "UnknownParamError",
    "is_truthy",
]
