"""Credential login flow."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog
from rich.prompt import Prompt

from kubectl_rancher.integrations.rancher.client import RancherClient
from kubectl_rancher.integrations.rancher.exceptions import UnsupportedLoginMethodError
from kubectl_rancher.integrations.rancher.models import (
    ConnectionParameters,
    LoginMethod,
    TrustPolicy,
)

if TYPE_CHECKING:
    import httpx

    from kubectl_rancher.integrations.rancher.models import LoginResult

logger = structlog.get_logger()


class CredentialResolver(Protocol):
    """Supplies a value for a credential field that was not given."""

    def __call__(self, field: str, secret: bool) -> str: ...


def prompt_credential(field: str, secret: bool) -> str:
    """Ask the operator for a credential on the terminal.

    Secret fields are read without echo.
    """
    return Prompt.ask(f"Enter {field}", password=secret)


def parse_login_method(method: str) -> LoginMethod:
    """Convert a user-supplied method name to a LoginMethod.

    Raises:
        UnsupportedLoginMethodError: If the name is not ``local`` or ``ldap``.
    """
    try:
        return LoginMethod(method)
    except ValueError:
        raise UnsupportedLoginMethodError(
            f"Invalid login method type: {method!r}",
            details=f"Must be one of: {', '.join(m.value for m in LoginMethod)}",
        ) from None


def _resolve(value: str | None, field: str, secret: bool, resolver: CredentialResolver) -> str:
    if value:
        return value
    return resolver(field, secret).strip()


def login(
    base_url: str,
    username: str | None = None,
    password: str | None = None,
    method: str | None = None,
    trust_policy: TrustPolicy | None = None,
    resolver: CredentialResolver = prompt_credential,
    transport: httpx.BaseTransport | None = None,
) -> LoginResult:
    """Log in with a username and password and return a new API token.

    Any empty field is requested through ``resolver``. The token is not
    persisted here.

    Args:
        base_url: Rancher server origin.
        username: User name, prompted for when empty.
        password: Password, prompted for without echo when empty.
        method: ``local`` or ``ldap``, prompted for when empty.
        trust_policy: TLS trust settings.
        resolver: Source for missing fields.
        transport: Optional httpx transport, mainly for tests.

    Returns:
        Login result holding the token.

    Raises:
        UnsupportedLoginMethodError: Before any request, for an unknown method.
    """
    username = _resolve(username, "RANCHER_USER", False, resolver)
    password = _resolve(password, "RANCHER_PASSWORD", True, resolver)
    login_method = parse_login_method(_resolve(method, "RANCHER_LOGIN_METHOD", False, resolver))

    params = ConnectionParameters(
        base_url=base_url,
        trust_policy=trust_policy or TrustPolicy(),
    )
    logger.debug("Starting login", base_url=base_url, method=login_method.value)
    with RancherClient(params, transport=transport) as client:
        return client.login(username, password, login_method)
