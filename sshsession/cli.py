"""
sshsession/cli.py

Command-line interface for one-off sessions.

Usage:
    sshsession -u admin run 10.0.0.5 "uname -a" uptime
    sshsession -u deploy -k ~/.ssh/id_ed25519 send web1 app.tar.gz /tmp/app.tar.gz --mode 600
    sshsession -u deploy -k ~/.ssh/id_ed25519 receive web1 /var/log/syslog ./syslog
"""

import sys
import json
import dataclasses
import getpass
import logging
from typing import Optional

import click

from .config import get_settings
from .connection.profile import AuthConfig
from .session.client import SSHClient
from .session.errors import SSHSessionError


def build_auth(opts: dict) -> AuthConfig:
    """Turn CLI options into an AuthConfig, prompting for a password if needed."""
    if opts["key"]:
        return AuthConfig.key_file_auth(
            opts["user"],
            opts["key"],
            public_key_path=opts["public_key"],
            passphrase=opts["passphrase"],
        )

    password = opts["password"]
    if password is None:
        password = getpass.getpass(f"Password for {opts['user']}: ")
    return AuthConfig.password_auth(opts["user"], password)


def open_client(ctx, host: str) -> SSHClient:
    """Create and authenticate a client for host, exiting 1 on failure."""
    opts = ctx.obj
    settings = get_settings()
    if opts["port"]:
        settings = dataclasses.replace(settings, port=opts["port"])

    client = SSHClient(host, auth=build_auth(opts), settings=settings)
    try:
        client.authenticate()
    except SSHSessionError as e:
        fail(ctx, host, e)
    return client


def fail(ctx, host: str, error: SSHSessionError) -> None:
    if ctx.obj["json"]:
        click.echo(json.dumps({
            "host": host,
            "error": error.kind.name.lower(),
            "message": error.message,
        }))
    else:
        click.echo(f"{host}: {error.message}", err=True)
    sys.exit(1)


@click.group()
@click.option("-u", "--user", required=True, help="Login username")
@click.option("-p", "--password", default=None, help="Login password (prompted if no key given)")
@click.option("-k", "--key", default=None, help="Private key file")
@click.option("--public-key", default=None, help="Public key file (defaults to KEY.pub)")
@click.option("--passphrase", default=None, help="Private key passphrase")
@click.option("-P", "--port", type=int, default=None, help="SSH port")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, user, password, key, public_key, passphrase, port, output_json, verbose):
    """Run commands and copy files over a single SSH session."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj.update(
        user=user,
        password=password,
        key=key,
        public_key=public_key,
        passphrase=passphrase,
        port=port,
        json=output_json,
    )


@cli.command("run")
@click.argument("host")
@click.argument("commands", nargs=-1, required=True)
@click.pass_context
def run_commands(ctx, host, commands):
    """Run one or more commands in order."""
    results = []

    with open_client(ctx, host) as client:
        for command in commands:
            try:
                client.run_command(command)
            except SSHSessionError as e:
                fail(ctx, host, e)
            results.append({"command": command, "output": client.last_output})
            if not ctx.obj["json"]:
                click.echo(client.last_output, nl=False)

    if ctx.obj["json"]:
        click.echo(json.dumps({"host": host, "results": results}, indent=2))


@cli.command("send")
@click.argument("host")
@click.argument("local_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("remote_path")
@click.option("-m", "--mode", default=None, help="Remote file mode in octal, e.g. 600")
@click.pass_context
def send_file(ctx, host, local_path, remote_path, mode):
    """Copy a local file to the host."""
    permissions: Optional[int] = int(mode, 8) if mode else None

    with open_client(ctx, host) as client:
        try:
            client.send_file(local_path, remote_path, permissions)
        except SSHSessionError as e:
            fail(ctx, host, e)

    if ctx.obj["json"]:
        click.echo(json.dumps({"host": host, "sent": local_path, "to": remote_path}))
    else:
        click.echo(f"{local_path} -> {host}:{remote_path}")


@cli.command("receive")
@click.argument("host")
@click.argument("remote_path")
@click.argument("local_path", type=click.Path(dir_okay=False))
@click.pass_context
def receive_file(ctx, host, remote_path, local_path):
    """Copy a file from the host."""
    with open_client(ctx, host) as client:
        try:
            client.receive_file(remote_path, local_path)
        except SSHSessionError as e:
            fail(ctx, host, e)

    if ctx.obj["json"]:
        click.echo(json.dumps({"host": host, "received": remote_path, "to": local_path}))
    else:
        click.echo(f"{host}:{remote_path} -> {local_path}")


def main():
    """Entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
