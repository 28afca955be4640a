"""Rancher API exceptions."""

from __future__ import annotations


class RancherError(Exception):
    """Base exception for Rancher errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            details: Additional details.
        """
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidCredentialFormatError(RancherError):
    """Raised when the stored token is not of the form ``username:password``."""

    def __init__(
        self,
        message: str = "Token looks invalid",
        details: str | None = "Expected a token of the form 'username:password'",
    ) -> None:
        super().__init__(message, details)


class RancherTransportError(RancherError):
    """Raised when the Rancher server cannot be reached.

    Covers DNS failures, refused connections, TLS handshake failures and
    timeouts.
    """

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize RancherTransportError.

        Args:
            message: Error message.
            endpoint: The API endpoint that was attempted.
            original_error: The underlying transport exception.
        """
        super().__init__(message, details=str(original_error) if original_error else None)
        self.endpoint = endpoint
        self.original_error = original_error


class RancherAPIError(RancherError):
    """Raised when the Rancher API answers with a status code of 400 or above."""

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: str | None = None,
        details: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            status_code: HTTP status code.
            endpoint: The API endpoint that was called.
            details: Additional details.
        """
        super().__init__(message, details)
        self.status_code = status_code
        self.endpoint = endpoint

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message, f"(status: {self.status_code})"]
        if self.endpoint:
            parts.append(f"[endpoint: {self.endpoint}]")
        return " ".join(parts)


class RancherAuthError(RancherAPIError):
    """Raised on 401 and 403 responses."""


class RancherDecodeError(RancherError):
    """Raised when a response body is not the JSON shape we expect."""


class EmptyResultError(RancherError):
    """Raised when a successful response carries no body where one is required."""


class UnsupportedLoginMethodError(RancherError):
    """Raised when the login method is neither ``local`` nor ``ldap``."""


class UnknownClusterError(RancherError):
    """Raised when a cluster name is not present in the cluster list."""

    def __init__(self, cluster_name: str) -> None:
        """Initialize UnknownClusterError.

        Args:
            cluster_name: The cluster name that was looked up.
        """
        super().__init__(
            f"Invalid cluster name specified: {cluster_name}",
            details="Run 'kubectl-rancher list' to see available clusters",
        )
        self.cluster_name = cluster_name


class RancherConfigError(RancherError):
    """Raised when the persisted configuration is invalid."""
