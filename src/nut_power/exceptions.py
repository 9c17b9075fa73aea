"""Exceptions raised by nut-power."""


class NUTPowerError(Exception):
    """Base class for all nut-power errors."""


class NUTConnectionError(NUTPowerError):
    """The NUT server could not be reached or refused the login."""


class NUTCommandError(NUTPowerError):
    """An instant command was rejected by the NUT server."""

    def __init__(self, ups_name: str, command: str, reason: str) -> None:
        self.ups_name = ups_name
        self.command = command
        super().__init__(f"Command {command} on UPS {ups_name} failed: {reason}")


class NUTVariableError(NUTPowerError):
    """A variable could not be fetched from the NUT server."""

    def __init__(self, ups_name: str, variable: str, reason: str) -> None:
        self.ups_name = ups_name
        self.variable = variable
        super().__init__(f"Cannot read {variable} from UPS {ups_name}: {reason}")


class InvalidUsageTypeError(NUTPowerError, ValueError):
    """A usage type token is not one of the known synonyms."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Invalid usage type value: {token!r}")


class VariableError(NUTPowerError):
    """A fetched variable has no usable numeric value."""

    def __init__(self, variable: str, message: str) -> None:
        self.variable = variable
        super().__init__(message)


class VariableNotFoundError(VariableError):
    """The fetched text carries no value after the name."""

    def __init__(self, variable: str) -> None:
        super().__init__(variable, f"Variable {variable} not found")


class VariableParseError(VariableError):
    """The value of a variable is not a number."""

    def __init__(self, variable: str, value: str) -> None:
        self.value = value
        super().__init__(variable, f"Variable {variable} is not a number: {value!r}")
