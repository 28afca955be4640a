"""Rancher API client."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from kubectl_rancher.integrations.rancher.exceptions import (
    EmptyResultError,
    InvalidCredentialFormatError,
    RancherAPIError,
    RancherAuthError,
    RancherDecodeError,
    RancherTransportError,
    UnknownClusterError,
)
from kubectl_rancher.integrations.rancher.models import (
    ClusterListResponse,
    ClusterSummary,
    KubeconfigDocument,
    LoginMethod,
    LoginResult,
)
from kubectl_rancher.integrations.rancher.transport import build_http_client

if TYPE_CHECKING:
    from kubectl_rancher.integrations.rancher.models import ConnectionParameters

logger = structlog.get_logger()

DEFAULT_KUBE_DIR = Path.home() / ".kube"


def split_token(token: str) -> tuple[str, str]:
    """Split a ``username:password`` token into its two parts.

    Args:
        token: Composite API token.

    Returns:
        Tuple of (username, password).

    Raises:
        InvalidCredentialFormatError: Unless the token holds exactly one
            colon with text on both sides.
    """
    parts = token.split(":")
    if len(parts) != 2 or not all(parts):
        raise InvalidCredentialFormatError()
    return parts[0], parts[1]


class RancherClient:
    """HTTP client for the Rancher v3 API.

    Each operation issues a single blocking request. An instance is not
    meant to be shared between threads.

    Example:
        ```python
        from kubectl_rancher.integrations.rancher import (
            ConnectionParameters,
            RancherClient,
        )

        params = ConnectionParameters(base_url="https://rancher.example.com", token=token)
        with RancherClient(params) as client:
            for name, cluster_id in client.list_clusters().items():
                print(cluster_id, name)
        ```
    """

    def __init__(
        self,
        params: ConnectionParameters,
        kube_dir: Path | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Rancher client.

        Args:
            params: Connection parameters (URL, token, trust policy).
            kube_dir: Directory kubeconfig files are written to.
                Defaults to ``~/.kube``.
            transport: Optional httpx transport, mainly for tests.
        """
        self.params = params
        self.kube_dir = kube_dir or DEFAULT_KUBE_DIR
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> RancherClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _http(self) -> httpx.Client:
        if self._client is None:
            kwargs: dict[str, Any] = {"base_url": self.params.base_url}
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = build_http_client(self.params.trust_policy, **kwargs)
            logger.debug("Rancher HTTP client initialized", base_url=self.params.base_url)
        return self._client

    def _auth(self) -> httpx.BasicAuth | None:
        token = self.params.token.get_secret_value()
        if not token:
            return None
        username, password = split_token(token)
        return httpx.BasicAuth(username, password)

    def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> bytes:
        """Make an HTTP request to the Rancher API.

        Args:
            method: HTTP method.
            endpoint: API endpoint relative to the base URL.
            **kwargs: Additional arguments for httpx.

        Returns:
            Raw response body.

        Raises:
            InvalidCredentialFormatError: If the token cannot be split.
            RancherTransportError: On connection, TLS or timeout failure.
            RancherAuthError: On 401/403 responses.
            RancherAPIError: On any other status code of 400 or above.
        """
        auth = self._auth()
        log = logger.bind(method=method, endpoint=endpoint)

        try:
            log.debug("Rancher API request")
            response = self._http().request(
                method,
                endpoint,
                auth=auth,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                **kwargs,
            )
        except httpx.TransportError as e:
            log.error("Rancher connection error", error=str(e))
            raise RancherTransportError(
                f"Error during api call: {e}",
                endpoint=endpoint,
                original_error=e,
            ) from e

        status = response.status_code
        log.debug("Rancher API response", status=status)

        if status in (401, 403):
            raise RancherAuthError(
                "Access denied" if status == 403 else "Invalid Rancher API token",
                status_code=status,
                endpoint=endpoint,
            )
        if status >= 400:
            raise RancherAPIError(
                "Rancher API error",
                status_code=status,
                endpoint=endpoint,
            )

        return response.content

    @staticmethod
    def _decode(data: bytes, endpoint: str) -> Any:
        try:
            return json.loads(data)
        except ValueError as e:
            raise RancherDecodeError(
                f"Invalid JSON in response from {endpoint}",
                details=str(e),
            ) from e

    def list_cluster_summaries(self) -> list[ClusterSummary]:
        """List all clusters the token has access to.

        Returns:
            Clusters in server order.

        Raises:
            RancherDecodeError: If the body is not a cluster list.
        """
        endpoint = "/v3/clusters"
        logger.debug("Listing clusters")
        payload = self._decode(self._request("GET", endpoint), endpoint)
        try:
            response = ClusterListResponse.from_api_response(payload)
        except ValueError as e:
            raise RancherDecodeError("Unexpected cluster list response", details=str(e)) from e
        logger.info("Listed clusters", count=len(response.data))
        return response.data

    def list_clusters(self) -> dict[str, str]:
        """List clusters as a mapping of display name to cluster ID.

        The management cluster is always listed as ``local``. Duplicate
        display names keep the last ID returned by the server.
        """
        return ClusterListResponse(data=self.list_cluster_summaries()).as_mapping()

    def find_cluster_id(self, cluster_name: str) -> str:
        """Resolve a cluster display name to its ID.

        Raises:
            UnknownClusterError: If no cluster has that name.
        """
        clusters = self.list_clusters()
        if cluster_name not in clusters:
            raise UnknownClusterError(cluster_name)
        return clusters[cluster_name]

    def kubeconfig_path(self, cluster_name: str) -> Path:
        """Path the kubeconfig for ``cluster_name`` is written to."""
        return self.kube_dir / f"{cluster_name}.yaml"

    def fetch_kubeconfig(self, cluster_id: str, cluster_name: str) -> Path:
        """Generate a kubeconfig for a cluster and write it to disk.

        An existing file for the same cluster name is overwritten.

        Args:
            cluster_id: Cluster ID as returned by ``list_clusters``.
            cluster_name: Name used for the output file.

        Returns:
            Path of the written kubeconfig.

        Raises:
            EmptyResultError: If the server returned an empty body or config.
            RancherDecodeError: If the body has no ``config`` string.
            OSError: If the directory or file cannot be written.
        """
        endpoint = f"/v3/clusters/{cluster_id}"
        logger.debug("Generating kubeconfig", cluster_id=cluster_id)
        data = self._request("POST", endpoint, params={"action": "generateKubeconfig"})

        if not data:
            raise EmptyResultError(
                "Kubeconfig file looks empty",
                details=f"Server returned no content for cluster {cluster_id}",
            )

        payload = self._decode(data, endpoint)
        try:
            document = KubeconfigDocument.from_api_response(payload)
        except ValueError as e:
            raise RancherDecodeError("Unexpected kubeconfig response", details=str(e)) from e
        if not document.config:
            raise EmptyResultError(
                "Kubeconfig file looks empty",
                details=f"Server returned an empty config for cluster {cluster_id}",
            )

        path = self.kubeconfig_path(cluster_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(document.config.encode("utf-8"))

        logger.info("Wrote kubeconfig", cluster=cluster_name, path=str(path))
        return path

    def login(self, username: str, password: str, method: LoginMethod) -> LoginResult:
        """Exchange a username and password for an API token.

        The client should be built with an empty token; the login call is
        unauthenticated.

        Args:
            username: Rancher user name.
            password: Rancher password.
            method: Authentication provider.

        Returns:
            The minted token.

        Raises:
            RancherDecodeError: If the response has no string ``token``.
        """
        endpoint = method.endpoint
        logger.debug("Logging in", method=method.value, username=username)
        data = self._request(
            "POST",
            endpoint,
            params={"action": "login"},
            json={"username": username, "password": password},
        )
        payload = self._decode(data, endpoint)
        try:
            result = LoginResult.from_api_response(payload)
        except ValueError as e:
            raise RancherDecodeError("Unexpected login response", details=str(e)) from e
        logger.info("Login succeeded", method=method.value, username=username)
        return result
