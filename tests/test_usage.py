"""Tests for usage type resolution and usage reporting."""

import pytest
from nut_power.exceptions import (
    InvalidUsageTypeError,
    NUTVariableError,
    VariableError,
    VariableNotFoundError,
    VariableParseError,
)
from nut_power.usage import (
    UsageType,
    VARIABLE_NAMES,
    parse_usage_type,
    parse_value,
    report_usage,
    usage_line,
    variable_name,
)

from conftest import FakeConnection


@pytest.mark.parametrize(
    "token,expected",
    [
        ("vin", UsageType.VOLTAGE_IN),
        ("volt_in", UsageType.VOLTAGE_IN),
        ("voltage_in", UsageType.VOLTAGE_IN),
        ("vout", UsageType.VOLTAGE_OUT),
        ("volt_out", UsageType.VOLTAGE_OUT),
        ("voltage_out", UsageType.VOLTAGE_OUT),
        ("cout", UsageType.CURRENT_OUT),
        ("cur_out", UsageType.CURRENT_OUT),
        ("current_out", UsageType.CURRENT_OUT),
        ("pwr", UsageType.POWER),
        ("power", UsageType.POWER),
    ],
)
def test_parse_usage_type_synonyms(token, expected):
    """Test every synonym resolves to its usage type."""
    assert parse_usage_type(token) is expected


@pytest.mark.parametrize("token", ["", "POWER", "Vin", " vin", "vin ", "watts", "current_in"])
def test_parse_usage_type_rejects_unknown(token):
    """Test unknown, wrongly cased or padded tokens are rejected."""
    with pytest.raises(InvalidUsageTypeError) as exc_info:
        parse_usage_type(token)

    assert exc_info.value.token == token
    assert repr(token) in str(exc_info.value)
    assert isinstance(exc_info.value, ValueError)


def test_variable_names_are_distinct():
    """Test each directly readable type maps to its own variable."""
    assert variable_name(UsageType.VOLTAGE_IN) == "input.voltage"
    assert variable_name(UsageType.VOLTAGE_OUT) == "output.voltage"
    assert variable_name(UsageType.CURRENT_OUT) == "output.current"
    assert len(set(VARIABLE_NAMES.values())) == len(VARIABLE_NAMES)


def test_power_has_no_variable():
    """Test power is not backed by a single variable."""
    assert UsageType.POWER not in VARIABLE_NAMES
    with pytest.raises(ValueError):
        variable_name(UsageType.POWER)


def test_parse_value():
    """Test numeric value extraction from variable text."""
    assert parse_value("output.voltage", "output.voltage: 120.0") == 120.0
    assert parse_value("output.current", "output.current: 2") == 2.0


def test_parse_value_without_separator():
    """Test a value without the name prefix is reported as not found."""
    with pytest.raises(VariableNotFoundError) as exc_info:
        parse_value("output.voltage", "120.0")

    assert exc_info.value.variable == "output.voltage"
    assert "output.voltage" in str(exc_info.value)


def test_parse_value_not_a_number():
    """Test a non-numeric value is reported as unparseable."""
    with pytest.raises(VariableParseError) as exc_info:
        parse_value("output.current", "output.current: n/a")

    assert isinstance(exc_info.value, VariableError)
    assert exc_info.value.value == "n/a"
    assert "output.current" in str(exc_info.value)


def test_power_line(connection):
    """Test power is output voltage times output current."""
    assert usage_line(connection, "ups", UsageType.POWER) == "power: 240.00 W"
    assert connection.fetched == [("ups", "output.voltage"), ("ups", "output.current")]


def test_power_line_rounds_to_two_decimals():
    """Test power is formatted with exactly two decimals."""
    conn = FakeConnection({
        "output.voltage": "output.voltage: 229.7",
        "output.current": "output.current: 0.33",
    })

    assert usage_line(conn, "ups", UsageType.POWER) == "power: 75.80 W"


def test_direct_line_is_verbatim():
    """Test non-power values are printed exactly as returned."""
    conn = FakeConnection({"input.voltage": "input.voltage: 118.50"})

    assert usage_line(conn, "ups", UsageType.VOLTAGE_IN) == "input.voltage: 118.50"


def test_report_usage_keeps_order_and_duplicates(connection):
    """Test lines follow the requested order, duplicates included."""
    lines = []
    report_usage(
        connection,
        "ups",
        [UsageType.VOLTAGE_IN, UsageType.POWER, UsageType.VOLTAGE_IN],
        echo=lines.append,
    )

    assert lines == [
        "input.voltage: 118.5",
        "power: 240.00 W",
        "input.voltage: 118.5",
    ]


def test_report_usage_empty(connection):
    """Test an empty request prints nothing and fetches nothing."""
    lines = []
    report_usage(connection, "ups", [], echo=lines.append)

    assert lines == []
    assert connection.fetched == []


def test_report_usage_stops_at_first_failure():
    """Test a failed power fetch aborts before later lines."""
    conn = FakeConnection({
        "input.voltage": "input.voltage: 118.5",
        "output.current": "output.current: 2.0",
    })
    lines = []

    with pytest.raises(NUTVariableError):
        report_usage(conn, "ups", [UsageType.POWER, UsageType.VOLTAGE_IN], echo=lines.append)

    assert lines == []
    assert ("ups", "input.voltage") not in conn.fetched


def test_report_usage_keeps_earlier_lines(connection):
    """Test lines printed before a failure stay printed."""
    connection.variables["output.current"] = "garbage"
    lines = []

    with pytest.raises(VariableNotFoundError):
        report_usage(connection, "ups", [UsageType.VOLTAGE_OUT, UsageType.POWER], echo=lines.append)

    assert lines == ["output.voltage: 120.0"]


@pytest.mark.parametrize(
    "text",
    ["output.voltage:  120", "output.voltage: 120.0 ", "output.voltage: 120.0\n", "output.voltage: 1_000"],
)
def test_parse_value_rejects_loose_numbers(text):
    """Test padded values and digit separators are not accepted as numbers."""
    with pytest.raises(VariableParseError) as exc_info:
        parse_value("output.voltage", text)

    assert exc_info.value.variable == "output.voltage"
