"""CLI interface for NUT UPS load control and usage reporting."""

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import click

from . import __version__
from .client import DEFAULT_TIMEOUT, NUTClient
from .commands import load_off, load_on
from .tunnel import SSHTunnel
from .usage import UsageType, UsageTypeParam, report_usage


@dataclass
class ServerSettings:
    """Connection settings shared by every subcommand."""

    server: str
    port: int
    ups_name: str
    username: Optional[str] = None
    password: Optional[str] = None
    debug: bool = False
    timeout: int = DEFAULT_TIMEOUT
    jumphost: Optional[str] = None
    jumphost_user: Optional[str] = None
    ssh_key: Optional[str] = None
    ssh_password: Optional[str] = None


@contextmanager
def open_connection(settings: ServerSettings) -> Iterator[NUTClient]:
    """Connect to the NUT server, through an SSH tunnel when a jumphost is set."""
    tunnel = None
    host = settings.server
    port = settings.port

    if settings.jumphost:
        tunnel = SSHTunnel(
            jumphost=settings.jumphost,
            nut_host=settings.server,
            nut_port=settings.port,
            jumphost_username=settings.jumphost_user,
            ssh_key_path=settings.ssh_key,
            ssh_password=settings.ssh_password,
        )
        port = tunnel.start()
        host = "127.0.0.1"
        click.echo(
            f"SSH tunnel: localhost:{port} -> {settings.jumphost} -> "
            f"{settings.server}:{settings.port}",
            err=True,
        )

    try:
        client = NUTClient(
            host=host,
            port=port,
            username=settings.username,
            password=settings.password,
            debug=settings.debug,
            timeout=settings.timeout,
        )
        with client as connection:
            yield connection
    finally:
        if tunnel:
            tunnel.stop()


@contextmanager
def fail_on_error() -> Iterator[None]:
    """Report any failure on stderr and exit with status 1."""
    try:
        yield
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option(
    "--server",
    "-s",
    required=True,
    envvar="NUT_SERVER",
    help="NUT UPS server host name",
)
@click.option(
    "--port",
    "-p",
    required=True,
    type=click.IntRange(1, 65535),
    envvar="NUT_PORT",
    help="NUT UPS server TCP port",
)
@click.option(
    "--ups-name",
    "-u",
    required=True,
    envvar="NUT_UPS_NAME",
    help="Name of the UPS",
)
@click.option(
    "--username",
    "-n",
    envvar="NUT_USERNAME",
    help="NUT server user name that has the permission to run INSTCMD",
)
@click.option(
    "--password",
    "-w",
    envvar="NUT_PASSWORD",
    help="NUT server password",
)
@click.option(
    "--debug",
    "-d",
    is_flag=True,
    help="Enable debug output of network traffic",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=DEFAULT_TIMEOUT,
    envvar="NUT_TIMEOUT",
    help=f"Seconds to wait for a server response (default: {DEFAULT_TIMEOUT})",
)
@click.option(
    "--jumphost",
    envvar="NUT_JUMPHOST",
    help="SSH jumphost to tunnel through (optional)",
)
@click.option(
    "--jumphost-user",
    envvar="NUT_JUMPHOST_USER",
    help="SSH username for jumphost (defaults to current user)",
)
@click.option(
    "--ssh-key",
    envvar="NUT_JUMPHOST_SSH_KEY",
    help="Path to SSH private key for jumphost (optional, uses SSH agent/default keys if not specified)",
)
@click.option(
    "--ssh-password",
    envvar="NUT_JUMPHOST_SSH_PASSWORD",
    help="SSH password for jumphost (only needed if not using SSH keys)",
)
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    server: str,
    port: int,
    ups_name: str,
    username: Optional[str],
    password: Optional[str],
    debug: bool,
    timeout: int,
    jumphost: Optional[str],
    jumphost_user: Optional[str],
    ssh_key: Optional[str],
    ssh_password: Optional[str],
) -> None:
    """Control UPS load and read usage data from a NUT server."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = ServerSettings(
        server=server,
        port=port,
        ups_name=ups_name,
        username=username,
        password=password,
        debug=debug,
        timeout=timeout,
        jumphost=jumphost,
        jumphost_user=jumphost_user,
        ssh_key=ssh_key,
        ssh_password=ssh_password,
    )


@main.command("load-off")
@click.pass_obj
def load_off_command(settings: ServerSettings) -> None:
    """Turn load off on UPS"""
    with fail_on_error(), open_connection(settings) as client:
        load_off(client, settings.ups_name)


@main.command("load-on")
@click.pass_obj
def load_on_command(settings: ServerSettings) -> None:
    """Turn load on on UPS"""
    with fail_on_error(), open_connection(settings) as client:
        load_on(client, settings.ups_name)


@main.command("usage")
@click.argument("usage_types", nargs=-1, type=UsageTypeParam())
@click.pass_obj
def usage_command(settings: ServerSettings, usage_types: Tuple[UsageType, ...]) -> None:
    """Fetch usage data.

    Allowed values: voltage_in, voltage_out, current_out, power
    (or vin, vout, cout, pwr and volt_in, volt_out, cur_out).
    """
    with fail_on_error(), open_connection(settings) as client:
        report_usage(client, settings.ups_name, usage_types)


if __name__ == "__main__":
    main()
