from adapters.param_lists.loader import ParamFormat, load_parameters, parse_parameters
from adapters.param_lists.models import ParameterList

__all__ = [
    "ParamFormat",
    "ParameterList",
    "load_parameters",
    "parse_parameters",
]
