"""CLI entry point for docker-machine-env.

Resolves a Docker connection and prints the host IP and the variables a
docker-compose process would be launched with.
"""

import logging
import shlex
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from .config import EnvironmentVariables, load_environment_file, load_settings
from .exceptions import DockerMachineError
from .machine import ConnectionConfig, local_machine, remote_machine
from .models import DockerType

app = typer.Typer(
    name="docker-machine-env",
    help="Resolve the environment used to reach a Docker daemon",
    no_args_is_help=True,
)

console = Console()

EnvOption = Annotated[
    list[str] | None,
    typer.Option("--env", "-e", help="Additional variable as KEY=VALUE (repeatable)"),
]
EnvFileOption = Annotated[
    Path | None,
    typer.Option("--env-file", help="YAML file of additional variables"),
]
ExportOption = Annotated[
    bool,
    typer.Option("--export", help="Print shell export statements instead of a table"),
]


@app.callback()
def main() -> None:
    """Configure logging from DOCKER_MACHINE_LOG_LEVEL."""
    try:
        settings = load_settings()
    except DockerMachineError as e:
        rprint(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from None
    logging.basicConfig(level=settings.logging.log_level)


def parse_assignments(assignments: list[str] | None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings into a dict; later keys win."""
    environment: dict[str, str] = {}
    for assignment in assignments or []:
        key, sep, value = assignment.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got: {assignment}")
        environment[key] = value
    return environment


def _additional_environment(env: list[str] | None, env_file: Path | None) -> dict[str, str]:
    additions = load_environment_file(env_file) if env_file else {}
    additions.update(parse_assignments(env))
    return additions


def _show(config: ConnectionConfig, additions: dict[str, str], export: bool) -> None:
    names = [n for n in EnvironmentVariables.reserved() if n in config.environment]
    names += sorted(k for k in additions if k not in names)

    if export:
        for name in names:
            typer.echo(f"export {name}={shlex.quote(config.environment[name])}")
        return

    rprint(f"[bold]Host IP:[/bold] {config.ip}")
    table = Table(title="Environment")
    table.add_column("Variable", style="cyan")
    table.add_column("Value")
    for name in names:
        table.add_row(name, config.environment[name])
    console.print(table)


@app.command("local")
def cmd_local(
    docker_type: Annotated[
        DockerType | None,
        typer.Option("--docker-type", "-t", help="Docker type of this machine"),
    ] = None,
    env: EnvOption = None,
    env_file: EnvFileOption = None,
    export: ExportOption = False,
) -> None:
    """Resolve the docker engine configured for this machine."""
    try:
        additions = _additional_environment(env, env_file)
        config = local_machine(docker_type).with_environment(additions).build()
    except DockerMachineError as e:
        rprint(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from None
    _show(config, additions, export)


@app.command("remote")
def cmd_remote(
    host: Annotated[str, typer.Option("--host", "-H", help="Daemon address, e.g. tcp://10.0.0.5:2376")],
    tls_cert_path: Annotated[
        str | None,
        typer.Option("--tls-cert-path", help="Directory holding the TLS client certificates"),
    ] = None,
    env: EnvOption = None,
    env_file: EnvFileOption = None,
    export: ExportOption = False,
) -> None:
    """Resolve a docker engine reachable over the network."""
    try:
        additions = _additional_environment(env, env_file)
        builder = remote_machine().host(host).with_environment(additions)
        if tls_cert_path:
            builder.with_tls(tls_cert_path)
        config = builder.build()
    except DockerMachineError as e:
        rprint(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from None
    _show(config, additions, export)


# Entry point for the CLI
if __name__ == "__main__":
    app()
