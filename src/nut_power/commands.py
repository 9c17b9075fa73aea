"""UPS load switching via NUT instant commands."""

from .client import UPSConnection

LOAD_ON = "load.on"
LOAD_OFF = "load.off"


def load_on(connection: UPSConnection, ups_name: str) -> None:
    """Turn the UPS output load on."""
    connection.run_command(ups_name, LOAD_ON)


def load_off(connection: UPSConnection, ups_name: str) -> None:
    """Turn the UPS output load off."""
    connection.run_command(ups_name, LOAD_OFF)
