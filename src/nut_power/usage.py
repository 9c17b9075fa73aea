"""Usage type resolution and usage reporting."""

from enum import Enum
from typing import Callable, Dict, Iterable, Optional

import click

from .client import UPSConnection
from .exceptions import InvalidUsageTypeError, VariableNotFoundError, VariableParseError


class UsageType(Enum):
    """Kinds of electrical measurement that can be reported."""

    VOLTAGE_IN = "voltage_in"
    VOLTAGE_OUT = "voltage_out"
    CURRENT_OUT = "current_out"
    POWER = "power"


USAGE_TYPE_ALIASES: Dict[str, UsageType] = {
    "vin": UsageType.VOLTAGE_IN,
    "volt_in": UsageType.VOLTAGE_IN,
    "voltage_in": UsageType.VOLTAGE_IN,
    "vout": UsageType.VOLTAGE_OUT,
    "volt_out": UsageType.VOLTAGE_OUT,
    "voltage_out": UsageType.VOLTAGE_OUT,
    "cout": UsageType.CURRENT_OUT,
    "cur_out": UsageType.CURRENT_OUT,
    "current_out": UsageType.CURRENT_OUT,
    "pwr": UsageType.POWER,
    "power": UsageType.POWER,
}

# Power is derived from output voltage and current, so it has no variable.
VARIABLE_NAMES: Dict[UsageType, str] = {
    UsageType.VOLTAGE_IN: "input.voltage",
    UsageType.VOLTAGE_OUT: "output.voltage",
    UsageType.CURRENT_OUT: "output.current",
}

VALUE_SEPARATOR = ": "


def parse_usage_type(token: str) -> UsageType:
    """
    Resolve a command line token to a usage type.

    Tokens are matched literally, without case folding or trimming.

    Raises:
        InvalidUsageTypeError: Token is not a known synonym
    """
    try:
        return USAGE_TYPE_ALIASES[token]
    except KeyError:
        raise InvalidUsageTypeError(token) from None


def variable_name(usage_type: UsageType) -> str:
    """Return the NUT variable backing a directly readable usage type."""
    if usage_type not in VARIABLE_NAMES:
        raise ValueError(f"{usage_type.name} is not backed by a single NUT variable")
    return VARIABLE_NAMES[usage_type]


class UsageTypeParam(click.ParamType):
    """Click parameter type accepting usage type synonyms."""

    name = "usage_type"

    def convert(self, value, param, ctx):
        if isinstance(value, UsageType):
            return value
        try:
            return parse_usage_type(value)
        except InvalidUsageTypeError as e:
            self.fail(str(e), param, ctx)


def parse_value(variable: str, text: str) -> float:
    """
    Extract the numeric value from '<name>: <value>' text.

    Raises:
        VariableNotFoundError: No value follows the name
        VariableParseError: The value is not a number
    """
    parts = text.split(VALUE_SEPARATOR, 1)
    if len(parts) < 2:
        raise VariableNotFoundError(variable)
    value = parts[1]
    # float() tolerates padding and digit separators; server values carry neither.
    if value != value.strip() or "_" in value:
        raise VariableParseError(variable, value)
    try:
        return float(value)
    except ValueError:
        raise VariableParseError(variable, value) from None


def read_number(connection: UPSConnection, ups_name: str, usage_type: UsageType) -> float:
    """Fetch a usage type's variable and parse it as a float."""
    name = variable_name(usage_type)
    return parse_value(name, connection.get_var(ups_name, name))


def format_power(watts: float) -> str:
    return f"power: {watts:.2f} W"


def usage_line(connection: UPSConnection, ups_name: str, usage_type: UsageType) -> str:
    """
    Build the output line for one usage type.

    Power is computed from output voltage times output current; every other
    type is the variable text exactly as the server returned it.
    """
    if usage_type is UsageType.POWER:
        voltage_out = read_number(connection, ups_name, UsageType.VOLTAGE_OUT)
        current_out = read_number(connection, ups_name, UsageType.CURRENT_OUT)
        return format_power(voltage_out * current_out)

    return connection.get_var(ups_name, variable_name(usage_type))


def report_usage(
    connection: UPSConnection,
    ups_name: str,
    usage_types: Iterable[UsageType],
    echo: Optional[Callable[[str], None]] = None,
) -> None:
    """
    Print one line per usage type, in the order given.

    Each line is printed before the next type is fetched, so a failure
    leaves earlier lines on screen.
    """
    echo = echo or click.echo
    for usage_type in usage_types:
        echo(usage_line(connection, ups_name, usage_type))
