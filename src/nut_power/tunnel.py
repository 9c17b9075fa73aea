"""SSH tunnel to a NUT server behind a jumphost."""

import logging
from typing import Optional
from sshtunnel import BaseSSHTunnelForwarderError, SSHTunnelForwarder
import paramiko

from .client import DEFAULT_PORT
from .exceptions import NUTConnectionError


logger = logging.getLogger(__name__)


class SSHTunnel:
    """Forwards a local port to a NUT server through a jumphost."""

    def __init__(
        self,
        jumphost: str,
        nut_host: str,
        nut_port: int = DEFAULT_PORT,
        jumphost_port: int = 22,
        jumphost_username: Optional[str] = None,
        ssh_key_path: Optional[str] = None,
        ssh_password: Optional[str] = None,
    ) -> None:
        """
        Initialize SSH tunnel configuration.

        Args:
            jumphost: Jumphost hostname (e.g., bastion.example.com)
            nut_host: NUT server IP or hostname as seen from the jumphost
            nut_port: NUT server port (default: 3493)
            jumphost_port: SSH port on jumphost (default: 22)
            jumphost_username: SSH username for jumphost
            ssh_key_path: Path to SSH private key
            ssh_password: SSH password (if not using key)
        """
        self.jumphost = jumphost
        self.nut_host = nut_host
        self.nut_port = nut_port
        self.jumphost_port = jumphost_port
        self.jumphost_username = jumphost_username
        self.ssh_key_path = ssh_key_path
        self.ssh_password = ssh_password
        self.tunnel: Optional[SSHTunnelForwarder] = None
        self.local_bind_port: Optional[int] = None

    def start(self) -> int:
        """
        Start the SSH tunnel.

        Returns:
            Local port number where the tunnel is listening

        Raises:
            NUTConnectionError: If the jumphost cannot be reached or refuses login
        """
        ssh_kwargs = {}
        if self.ssh_key_path:
            ssh_kwargs["ssh_pkey"] = self.ssh_key_path
        elif self.ssh_password:
            ssh_kwargs["ssh_password"] = self.ssh_password
        # else: paramiko falls back to the SSH agent and ~/.ssh/id_*

        self.tunnel = SSHTunnelForwarder(
            ssh_address_or_host=(self.jumphost, self.jumphost_port),
            ssh_username=self.jumphost_username,
            remote_bind_address=(self.nut_host, self.nut_port),
            local_bind_address=("127.0.0.1", 0),
            **ssh_kwargs,
        )

        try:
            self.tunnel.start()
        except (BaseSSHTunnelForwarderError, paramiko.SSHException) as e:
            raise NUTConnectionError(
                f"Cannot open SSH tunnel via {self.jumphost} to "
                f"{self.nut_host}:{self.nut_port}: {e}"
            ) from e
        self.local_bind_port = self.tunnel.local_bind_port

        logger.info(
            "SSH tunnel established: localhost:%s -> %s -> %s:%s",
            self.local_bind_port, self.jumphost, self.nut_host, self.nut_port,
        )

        return self.local_bind_port

    def stop(self) -> None:
        """Stop the SSH tunnel."""
        if self.tunnel:
            self.tunnel.stop()
            logger.info("SSH tunnel closed")

    def __enter__(self) -> "SSHTunnel":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.stop()
