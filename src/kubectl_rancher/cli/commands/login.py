"""Login command."""

from __future__ import annotations

from typing import Annotated

import structlog
import typer
from rich.markup import escape

from kubectl_rancher.cli.commands.base import console, get_options, handle_rancher_error
from kubectl_rancher.core.config import RancherSettings
from kubectl_rancher.integrations.rancher import RancherConfigError, RancherError, TrustPolicy
from kubectl_rancher.integrations.rancher import login as rancher_login

logger = structlog.get_logger()


def login(
    ctx: typer.Context,
    user: Annotated[
        str | None,
        typer.Option(
            "--user",
            envvar="RANCHER_USER",
            help="User name to log in with (prompted if not provided)",
        ),
    ] = None,
    password: Annotated[
        str | None,
        typer.Option(
            "--password",
            envvar="RANCHER_PASSWORD",
            help="Password to log in with (prompted if not provided)",
        ),
    ] = None,
    login_method: Annotated[
        str | None,
        typer.Option(
            "--login-method",
            envvar="RANCHER_LOGIN_METHOD",
            help="Login method: local or ldap (prompted if not provided)",
        ),
    ] = None,
) -> None:
    """Log in to Rancher with credentials and store the resulting API token.

    The token is used for all subsequent commands. The password is never
    written to disk.
    """
    options = get_options(ctx)
    try:
        settings = RancherSettings.load()
        url = options.url or settings.url
        if not url:
            raise RancherConfigError(
                "Rancher server url is not set",
                details="Pass --url or set RANCHER_URL",
            )
        trust_policy = TrustPolicy(
            skip_verify=settings.insecure if options.insecure is None else options.insecure,
            ca_path=options.ca or settings.ca,
        )
        result = rancher_login(
            url,
            username=user,
            password=password,
            method=login_method,
            trust_policy=trust_policy,
        )
    except RancherError as e:
        handle_rancher_error(e)
    except (EOFError, KeyboardInterrupt):
        # prompt interrupted or stdin closed
        console.print("\n[red]Error:[/red] Login aborted, no token saved")
        raise typer.Exit(1) from None

    updated = settings.model_copy(
        update={
            "url": url,
            "token": result.token,
            "insecure": trust_policy.skip_verify,
            "ca": trust_policy.ca_path,
        }
    )
    try:
        updated.save()
    except OSError as e:
        logger.error("Failed to save settings", error=str(e))
        console.print(f"[red]Error:[/red] Could not save token: {escape(str(e))}")
        raise typer.Exit(1) from None

    console.print(
        f"[green]✓ Logged in. Token saved to {escape(str(RancherSettings.get_config_path()))}[/green]"
    )
