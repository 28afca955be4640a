"""HTTP client construction for a given TLS trust policy."""

from __future__ import annotations

import ssl
from typing import TYPE_CHECKING, Any

import httpx
import structlog
import truststore

if TYPE_CHECKING:
    from kubectl_rancher.integrations.rancher.models import TrustPolicy

logger = structlog.get_logger()


def build_ssl_context(trust_policy: TrustPolicy) -> ssl.SSLContext:
    """Build an SSL context trusting the OS certificate store.

    A custom CA bundle, when configured, is added on top of the system
    store. If it cannot be read or parsed a warning is logged and only the
    system store is trusted.

    Args:
        trust_policy: Trust settings.

    Returns:
        Configured SSL context.
    """
    context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    if trust_policy.ca_path:
        try:
            context.load_verify_locations(cafile=trust_policy.ca_path)
            logger.debug("Loaded custom CA bundle", ca_path=trust_policy.ca_path)
        except (OSError, ssl.SSLError, ValueError) as e:
            logger.warning(
                "Unable to load CA cert file, no custom CAs will be added",
                ca_path=trust_policy.ca_path,
                error=str(e),
            )

    return context


def build_http_client(trust_policy: TrustPolicy, **client_kwargs: Any) -> httpx.Client:
    """Create an httpx client bound to the trust policy.

    ``skip_verify`` wins over ``ca_path``: when set, certificates are not
    validated at all.

    Args:
        trust_policy: Trust settings.
        **client_kwargs: Passed through to ``httpx.Client``.

    Returns:
        A reusable HTTP client.
    """
    verify: ssl.SSLContext | bool
    if trust_policy.skip_verify:
        logger.debug("TLS verification disabled")
        verify = False
    else:
        verify = build_ssl_context(trust_policy)

    # http:// origins commonly redirect to https://
    client_kwargs.setdefault("follow_redirects", True)
    return httpx.Client(verify=verify, **client_kwargs)
