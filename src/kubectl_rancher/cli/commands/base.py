"""Shared options, context and error handling for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from kubectl_rancher.core.config import RancherSettings
from kubectl_rancher.integrations.rancher import (
    ConnectionParameters,
    RancherAPIError,
    RancherAuthError,
    RancherClient,
    RancherError,
    RancherTransportError,
)

console = Console()


class OutputFormat(StrEnum):
    """Supported output formats for CLI commands."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


OutputOption = Annotated[
    OutputFormat,
    typer.Option(
        "--output",
        "-o",
        help="Output format: table, json, or yaml",
        case_sensitive=False,
    ),
]


@dataclass(frozen=True)
class GlobalOptions:
    """Connection values given on the command line or through RANCHER_* env vars."""

    url: str | None = None
    token: str | None = None
    ca: str | None = None
    insecure: bool | None = None

    def connection_parameters(self, settings: RancherSettings) -> ConnectionParameters:
        """Resolve against the stored settings; explicit values win."""
        return settings.connection_parameters(
            url=self.url,
            token=self.token,
            ca=self.ca,
            insecure=self.insecure,
        )


def get_options(ctx: typer.Context) -> GlobalOptions:
    """Return the global options stored by the root callback."""
    if isinstance(ctx.obj, GlobalOptions):
        return ctx.obj
    return GlobalOptions()


def build_client(ctx: typer.Context) -> RancherClient:
    """Create a RancherClient from global options and stored settings.

    Kubeconfigs are written next to the settings file.
    """
    settings = RancherSettings.load()
    params = get_options(ctx).connection_parameters(settings)
    return RancherClient(params, kube_dir=RancherSettings.get_config_path().parent)


def handle_rancher_error(error: RancherError) -> NoReturn:
    """Print a Rancher error and exit.

    Args:
        error: The error to report.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, RancherTransportError):
        console.print("[red]Error:[/red] Cannot connect to Rancher server")
        console.print(f"  {escape(error.message)}")
        console.print(
            "\n[dim]Hint: Check --url, and --ca or --insecure for self-signed certificates.[/dim]"
        )
    elif isinstance(error, RancherAuthError):
        console.print("[red]Error:[/red] Authentication/authorization failed")
        console.print(f"  {escape(str(error))}")
        console.print("\n[dim]Hint: Run 'kubectl-rancher login' to get a new token.[/dim]")
    elif isinstance(error, RancherAPIError):
        console.print(f"[red]Error:[/red] {escape(str(error))}")
    else:
        console.print(f"[red]Error:[/red] {escape(error.message)}")
        if error.details:
            console.print(f"[dim]{escape(error.details)}[/dim]")

    raise typer.Exit(1)
