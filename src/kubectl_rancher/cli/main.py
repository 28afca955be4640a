"""Main CLI entry point using Typer."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from kubectl_rancher import __version__
from kubectl_rancher.cli.commands import clusters, login
from kubectl_rancher.cli.commands.base import GlobalOptions
from kubectl_rancher.core.config import ensure_config_file
from kubectl_rancher.logging.config import configure_logging, get_logger

app = typer.Typer(
    name="kubectl-rancher",
    help=(
        "kubectl plugin to interact with the Rancher API: list clusters, "
        "generate kubeconfig files and log in with a Rancher token."
    ),
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"kubectl-rancher version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    url: Annotated[
        str | None,
        typer.Option(
            "--url",
            envvar="RANCHER_URL",
            help="Rancher server url to connect to. Should be of the form http/https.",
        ),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            envvar="RANCHER_TOKEN",
            help="Rancher server api token to use.",
        ),
    ] = None,
    ca: Annotated[
        str | None,
        typer.Option(
            "--ca",
            envvar="RANCHER_CA",
            help="Rancher server ca cert location.",
        ),
    ] = None,
    insecure: Annotated[
        bool | None,
        typer.Option(
            "--insecure/--no-insecure",
            envvar="RANCHER_INSECURE",
            help="Ignore tls check when connecting to rancher server. Defaults to the stored value.",
            show_default=False,
        ),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug mode."),
    ] = False,
) -> None:
    """kubectl-rancher - fetch kubeconfigs for Rancher managed clusters."""
    configure_logging(verbose=verbose, debug=debug)
    logger = get_logger(__name__)

    try:
        ensure_config_file()
    except OSError as e:
        logger.error("Failed to create settings file", error=str(e))
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    ctx.obj = GlobalOptions(url=url, token=token, ca=ca, insecure=insecure)


app.command("list")(clusters.list_clusters)
app.command("config")(clusters.fetch_config)
app.command("login")(login.login)


if __name__ == "__main__":
    app()
