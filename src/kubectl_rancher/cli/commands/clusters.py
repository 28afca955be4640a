"""Cluster listing and kubeconfig commands."""

from __future__ import annotations

import json
from typing import Annotated

import structlog
import typer
import yaml
from rich.markup import escape
from rich.table import Table

from kubectl_rancher.cli.commands.base import (
    OutputFormat,
    OutputOption,
    build_client,
    console,
    handle_rancher_error,
)
from kubectl_rancher.integrations.rancher import RancherError

logger = structlog.get_logger()


def list_clusters(
    ctx: typer.Context,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """List all the clusters the token has access to via the Rancher server."""
    try:
        with build_client(ctx) as client:
            clusters = client.list_clusters()
    except RancherError as e:
        handle_rancher_error(e)

    if output == OutputFormat.JSON:
        console.print_json(json.dumps(clusters))
        return
    if output == OutputFormat.YAML:
        console.print(
            yaml.safe_dump(clusters, default_flow_style=False),
            end="",
            markup=False,
            highlight=False,
        )
        return

    table = Table(title="Rancher Clusters")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("NAME")
    for name, cluster_id in clusters.items():
        table.add_row(escape(cluster_id), escape(name))
    console.print(table)


def fetch_config(
    ctx: typer.Context,
    cluster_name: Annotated[str, typer.Argument(help="Name of the cluster to fetch")],
) -> None:
    """Fetch the kubeconfig file for the specified cluster.

    The file is written to ~/.kube/<cluster>.yaml. Point KUBECONFIG at it
    to use the cluster.
    """
    try:
        with build_client(ctx) as client:
            cluster_id = client.find_cluster_id(cluster_name)
            path = client.fetch_kubeconfig(cluster_id, cluster_name)
    except RancherError as e:
        handle_rancher_error(e)
    except OSError as e:
        logger.error("Failed to write kubeconfig", cluster=cluster_name, error=str(e))
        console.print(f"[red]Error:[/red] Could not write kubeconfig: {escape(str(e))}")
        raise typer.Exit(1) from None

    console.print(f"Cluster config stored in {escape(str(path))}")
    console.print(f"[dim]export KUBECONFIG={escape(str(path))}[/dim]")
