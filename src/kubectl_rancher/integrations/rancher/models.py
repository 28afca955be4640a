"""Rancher API data models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, StrictStr

LOCAL_CLUSTER_ID = "local"

# Known server schemas expose the cluster display name in different places.
# Probed in order; the first non-empty string wins.
DISPLAY_NAME_FIELDS: tuple[tuple[str, ...], ...] = (
    ("name",),
    ("appliedSpec", "displayName"),
    ("spec", "displayName"),
)


class LoginMethod(StrEnum):
    """Supported Rancher authentication providers."""

    LOCAL = "local"
    LDAP = "ldap"

    @property
    def endpoint(self) -> str:
        """Get the public login endpoint for this provider."""
        suffixes = {
            LoginMethod.LOCAL: "/localProviders/local",
            LoginMethod.LDAP: "/openLdapProviders/openldap",
        }
        return f"/v3-public{suffixes[self]}"


class TrustPolicy(BaseModel):
    """TLS trust settings for talking to the Rancher server."""

    model_config = ConfigDict(frozen=True)

    skip_verify: bool = Field(default=False, description="Accept any server certificate")
    ca_path: str | None = Field(default=None, description="Extra PEM CA bundle to trust")


class ConnectionParameters(BaseModel):
    """Everything a RancherClient needs to reach the server.

    Values are stored as given; a malformed token only surfaces when a
    request is made.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="Rancher server origin, http:// or https://")
    trust_policy: TrustPolicy = Field(default_factory=TrustPolicy)
    token: SecretStr = Field(default=SecretStr(""), description="username:password API token")


def _probe(data: dict[str, Any], path: tuple[str, ...]) -> str | None:
    value: Any = data
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def display_name(data: dict[str, Any]) -> str | None:
    """Return the display name of a raw cluster entry, whatever schema it uses."""
    for path in DISPLAY_NAME_FIELDS:
        name = _probe(data, path)
        if name:
            return name
    return None


class ClusterSummary(BaseModel):
    """A cluster as returned by ``GET /v3/clusters``."""

    id: StrictStr = Field(..., description="Cluster ID")
    name: StrictStr = Field(..., description="Cluster display name")
    actions: dict[str, Any] = Field(default_factory=dict, description="Available actions")

    @classmethod
    def from_api_response(cls, data: Any) -> ClusterSummary:
        """Create from a Rancher API cluster entry.

        The management cluster (id ``local``) is always reported as
        ``local``/``local`` regardless of its display name.

        Args:
            data: One element of the ``data`` array.

        Returns:
            ClusterSummary instance.

        Raises:
            ValueError: If the entry is not an object or has no string id.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Cluster entry is not an object: {data!r}")

        cluster_id = data.get("id")
        actions = data.get("actions") or {}
        if cluster_id == LOCAL_CLUSTER_ID:
            return cls(id=LOCAL_CLUSTER_ID, name=LOCAL_CLUSTER_ID, actions=actions)

        return cls.model_validate(
            {
                "id": cluster_id,
                "name": display_name(data) or cluster_id,
                "actions": actions,
            }
        )


class ClusterListResponse(BaseModel):
    """Response for listing clusters."""

    data: list[ClusterSummary] = Field(default_factory=list)

    @classmethod
    def from_api_response(cls, payload: Any) -> ClusterListResponse:
        """Create from Rancher API response.

        Args:
            payload: Decoded JSON body.

        Returns:
            ClusterListResponse instance.

        Raises:
            ValueError: If the body is not ``{"data": [...]}``.
        """
        if not isinstance(payload, dict):
            raise ValueError("Cluster list response is not an object")
        entries = payload.get("data", [])
        if not isinstance(entries, list):
            raise ValueError("Cluster list 'data' field is not an array")
        return cls(data=[ClusterSummary.from_api_response(entry) for entry in entries])

    def as_mapping(self) -> dict[str, str]:
        """Map display name to cluster ID.

        Names are not unique on the server; a later entry overwrites an
        earlier one with the same name.
        """
        return {cluster.name: cluster.id for cluster in self.data}


class KubeconfigDocument(BaseModel):
    """Kubeconfig generated for a single cluster."""

    config: StrictStr = Field(..., description="Raw kubeconfig YAML")

    @classmethod
    def from_api_response(cls, payload: Any) -> KubeconfigDocument:
        """Create from a ``generateKubeconfig`` action response.

        Raises:
            ValueError: If ``config`` is missing or not a string.
        """
        if not isinstance(payload, dict):
            raise ValueError("Kubeconfig response is not an object")
        return cls.model_validate({"config": payload.get("config")})


class LoginResult(BaseModel):
    """Token minted by a successful login."""

    token: SecretStr = Field(..., description="username:password API token")

    @classmethod
    def from_api_response(cls, payload: Any) -> LoginResult:
        """Create from a login action response.

        Raises:
            ValueError: If ``token`` is missing or not a string.
        """
        if not isinstance(payload, dict):
            raise ValueError("Login response is not an object")
        token = payload.get("token")
        if not isinstance(token, str):
            raise ValueError("Login response has no string 'token' field")
        return cls(token=SecretStr(token))
