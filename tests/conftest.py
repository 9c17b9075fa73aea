"""Shared fixtures."""

from typing import Dict, List, Tuple

import pytest

from nut_power.exceptions import NUTVariableError


class FakeConnection:
    """In-memory stand-in for a NUT server connection."""

    def __init__(self, variables: Dict[str, str] = None) -> None:
        self.variables = dict(variables or {})
        self.commands: List[Tuple[str, str]] = []
        self.fetched: List[Tuple[str, str]] = []

    def run_command(self, ups_name: str, command: str) -> None:
        self.commands.append((ups_name, command))

    def get_var(self, ups_name: str, variable: str) -> str:
        self.fetched.append((ups_name, variable))
        if variable not in self.variables:
            raise NUTVariableError(ups_name, variable, "variable not supported")
        return self.variables[variable]


@pytest.fixture
def connection():
    return FakeConnection({
        "input.voltage": "input.voltage: 118.5",
        "output.voltage": "output.voltage: 120.0",
        "output.current": "output.current: 2.0",
    })
