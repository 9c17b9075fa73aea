"""NUT client wrapper around PyNUTClient."""

import logging
import sys
from contextlib import nullcontext, redirect_stdout
from typing import Any, Dict, Optional, Protocol

from PyNUTClient import PyNUT

from .exceptions import NUTCommandError, NUTConnectionError, NUTVariableError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3493
DEFAULT_TIMEOUT = 5


class UPSConnection(Protocol):
    """Operations nut-power needs from a NUT server connection."""

    def run_command(self, ups_name: str, command: str) -> None:
        ...

    def get_var(self, ups_name: str, variable: str) -> str:
        ...


def _decode(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class NUTClient:
    """Client for talking to a NUT upsd server."""

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        username: Optional[str] = None,
        password: Optional[str] = None,
        debug: bool = False,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize NUT client.

        Args:
            host: NUT server hostname or IP address (or localhost if tunneled)
            port: NUT server TCP port (default: 3493)
            username: NUT user allowed to run instant commands (optional)
            password: Password for the NUT user (optional)
            debug: Let PyNUTClient trace raw network traffic
            timeout: Seconds to wait for a server response
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.debug = debug
        self.timeout = timeout
        self._client: Optional[PyNUT.PyNUTClient] = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _trace(self):
        # PyNUTClient prints its debug trace; keep it off stdout.
        if self.debug:
            return redirect_stdout(sys.stderr)
        return nullcontext()

    def connect(self) -> None:
        """
        Open the connection and log in when credentials were given.

        Raises:
            NUTConnectionError: Server unreachable or login rejected
        """
        logger.debug("Connecting to NUT server %s:%s", self.host, self.port)
        try:
            with self._trace():
                self._client = PyNUT.PyNUTClient(
                    host=self.host,
                    port=self.port,
                    login=self.username,
                    password=self.password,
                    debug=self.debug,
                    timeout=self.timeout,
                )
        except PyNUT.PyNUTError as e:
            raise NUTConnectionError(
                f"NUT server {self.host}:{self.port} rejected the connection: {e}"
            ) from e
        except OSError as e:
            raise NUTConnectionError(
                f"Cannot connect to NUT server {self.host}:{self.port}: {e}"
            ) from e

    def _require_client(self) -> PyNUT.PyNUTClient:
        if self._client is None:
            self.connect()
        return self._client

    def run_command(self, ups_name: str, command: str) -> None:
        """
        Run an instant command (e.g. 'load.off') on a UPS.

        Raises:
            NUTCommandError: Unknown UPS or command, or the server refused it
        """
        client = self._require_client()
        logger.debug("Running instant command %s on %s", command, ups_name)
        try:
            with self._trace():
                client.RunUPSCommand(ups_name, command)
        except (PyNUT.PyNUTError, OSError) as e:
            raise NUTCommandError(ups_name, command, str(e)) from e

    def _fetch_vars(self, ups_name: str) -> Dict[str, str]:
        client = self._require_client()
        with self._trace():
            ups_vars = client.GetUPSVars(ups_name)
        return {_decode(k): _decode(v) for k, v in ups_vars.items()}

    def get_var(self, ups_name: str, variable: str) -> str:
        """
        Fetch a single variable.

        Returns:
            The variable as '<name>: <value>' text, e.g. 'input.voltage: 230.0'

        Raises:
            NUTVariableError: Unknown UPS or variable
        """
        try:
            ups_vars = self._fetch_vars(ups_name)
        except (PyNUT.PyNUTError, OSError) as e:
            raise NUTVariableError(ups_name, variable, str(e)) from e
        if variable not in ups_vars:
            raise NUTVariableError(ups_name, variable, "variable not supported")
        value = ups_vars[variable]
        logger.debug("Fetched %s from %s: %s", variable, ups_name, value)
        return f"{variable}: {value}"

    def close(self) -> None:
        """Drop the server connection."""
        if self._client is not None:
            logger.debug("Closing connection to %s:%s", self.host, self.port)
        self._client = None

    def __enter__(self) -> "NUTClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
