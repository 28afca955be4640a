"""Rancher API integration."""

from kubectl_rancher.integrations.rancher.client import RancherClient
from kubectl_rancher.integrations.rancher.exceptions import (
    EmptyResultError,
    InvalidCredentialFormatError,
    RancherAPIError,
    RancherAuthError,
    RancherConfigError,
    RancherDecodeError,
    RancherError,
    RancherTransportError,
    UnknownClusterError,
    UnsupportedLoginMethodError,
)
from kubectl_rancher.integrations.rancher.login import login
from kubectl_rancher.integrations.rancher.models import (
    ClusterSummary,
    ConnectionParameters,
    LoginMethod,
    LoginResult,
    TrustPolicy,
)

__all__ = [
    "ClusterSummary",
    "ConnectionParameters",
    "EmptyResultError",
    "InvalidCredentialFormatError",
    "LoginMethod",
    "LoginResult",
    "RancherAPIError",
    "RancherAuthError",
    "RancherClient",
    "RancherConfigError",
    "RancherDecodeError",
    "RancherError",
    "RancherTransportError",
    "TrustPolicy",
    "UnknownClusterError",
    "UnsupportedLoginMethodError",
    "login",
]
