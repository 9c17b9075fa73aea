"""NUT Power - CLI tool for UPS load control and usage via Network UPS Tools."""

__version__ = "0.1.0"

from .client import NUTClient, UPSConnection
from .usage import UsageType, parse_usage_type, report_usage

__all__ = ["NUTClient", "UPSConnection", "UsageType", "parse_usage_type", "report_usage"]
