"""
Benchmark parameters and parameter sweeps.

Parameter values travel as strings; a registered ParamType knows how to
parse them, step them by addition or multiplication, and format them back.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from .config import Configuration
from .errors import InvalidParamRunSpec, InvalidParameterValue, UnknownParameter

logger = logging.getLogger(__name__)


class Parameters(Mapping):
    """
    One point in a parameter sweep: an ordered, read-only mapping of
    parameter name to string value.
    """

    def __init__(self, values: Optional[Mapping] = None):
        self._values: Dict[str, str] = dict(values or {})

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def merged(self, other: Mapping) -> "Parameters":
        """Return new Parameters with `other` taking precedence."""
        values = dict(self._values)
        values.update(other)
        return Parameters(values)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"Parameters({self._values!r})"


def format_float(value: float) -> str:
    """
    String form of a float parameter, with binary rounding noise removed.

    Example:
        format_float(0.1 + 0.2)   # -> "0.3"
    """
    return repr(round(value, 12))


@dataclass(frozen=True)
class ParamType:
    """
    Value type of a declared parameter.

    Attributes:
        name: Parameter name
        default: Default value (string form)
        parse: Converts the string form to a typed value
        format: Converts a typed value back to its string form
    """
    name: str
    default: str
    parse: Callable[[str], Any]
    format: Callable[[Any], str] = str

    def add(self, value: str, step: str) -> str:
        """Named-parameter addition."""
        return self.format(self.parse(value) + self.parse(step))

    def multiply(self, value: str, step: str) -> str:
        """Named-parameter multiplication."""
        return self.format(self.parse(value) * self.parse(step))


class ParameterRegistry:
    """
    Registry of declared benchmark parameters.

    Example:
        registry = ParameterRegistry()
        registry.declare("size", 100)
        registry.add("size", "100", "50")   # -> "150"
    """

    def __init__(self):
        self._types: Dict[str, ParamType] = {}

    def declare(self, name: str, default: Any) -> ParamType:
        """
        Declare a parameter, inferring its type from the default value.

        Args:
            name: Parameter name
            default: Default value; int and float are supported

        Returns:
            The registered ParamType
        """
        if isinstance(default, bool) or not isinstance(default, (int, float)):
            raise TypeError(
                f"Parameter {name!r} must have an int or float default, "
                f"got {type(default).__name__}"
            )
        if isinstance(default, float):
            param_type = ParamType(
                name=name, default=format_float(default), parse=float, format=format_float,
            )
        else:
            param_type = ParamType(name=name, default=str(default), parse=int)
        return self.register(param_type)

    def register(self, param_type: ParamType) -> ParamType:
        self._types[param_type.name] = param_type
        return param_type

    def get(self, name: str) -> ParamType:
        """
        Get the type of a parameter by name.

        Raises:
            UnknownParameter: If the parameter was never declared
        """
        param_type = self._types.get(name)
        if param_type is None:
            raise UnknownParameter(name)
        return param_type

    def add(self, name: str, value: str, step: str) -> str:
        return self.get(name).add(value, step)

    def multiply(self, name: str, value: str, step: str) -> str:
        return self.get(name).multiply(value, step)

    def defaults(self) -> Parameters:
        """Default value of every declared parameter."""
        return Parameters({name: t.default for name, t in self._types.items()})

    def names(self) -> List[str]:
        return list(self._types.keys())

    def clear(self) -> None:
        self._types.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


# Default registry used by the declare_param() API and the CLI
default_params = ParameterRegistry()


def declare_param(name: str, default: Any) -> ParamType:
    """Declare a parameter on the default registry."""
    return default_params.declare(name, default)


def generate_params(cfg: Configuration, registry: ParameterRegistry) -> List[Parameters]:
    """
    Expand the configured sweep into an ordered list of parameter sets.

    Without a sweep this is a single empty Parameters. With a sweep of
    count n it is exactly n single-entry Parameters, value i being the
    step function applied i times to the initial value.

    Raises:
        UnknownParameter: If the swept parameter was never declared
    """
    run = cfg.params
    if run is None:
        return [Parameters()]

    param_type = registry.get(run.name)
    step_fn = param_type.add if run.operator == "+" else param_type.multiply

    result: List[Parameters] = []
    current = run.init
    try:
        for _ in range(run.count):
            run.current_map[run.name] = current
            result.append(Parameters({run.name: current}))
            current = step_fn(current, run.step)
    except ValueError as e:
        raise InvalidParamRunSpec(f"Cannot step parameter '{run.name}': {e}") from e

    logger.debug(f"Generated {len(result)} parameter sets for '{run.name}'")
    return result


def validate_overrides(cfg: Configuration, registry: ParameterRegistry) -> None:
    """
    Check every fixed parameter value in cfg.param_overrides against its
    declared type.

    Raises:
        UnknownParameter: If an override names an undeclared parameter
        InvalidParameterValue: If an override value does not parse
    """
    for name, value in cfg.param_overrides.items():
        param_type = registry.get(name)
        try:
            param_type.parse(value)
        except ValueError as e:
            raise InvalidParameterValue(name, value, str(e)) from e


def resolve_params(
    params: Parameters,
    cfg: Configuration,
    registry: ParameterRegistry,
) -> Parameters:
    """
    Resolve the full parameter view seen by a benchmark: registered
    defaults, overridden by cfg.param_overrides, overridden by `params`.

    Raises:
        UnknownParameter: If an override names an undeclared parameter
        InvalidParameterValue: If an override value does not parse
    """
    validate_overrides(cfg, registry)
    return registry.defaults().merged(cfg.param_overrides).merged(params)
