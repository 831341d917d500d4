"""Pydantic models for the reconcile config file.

Structure::

    cluster_name: my-cluster
    region: us-west-2
    identity_provider:
      identity_provider_config_name: corp-oidc
      issuer_url: https://idp.example.com
      client_id: kubernetes
      tags: {team: platform}

A missing or ``null`` ``identity_provider`` means no provider should be
associated with the cluster.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eks_idp.identityprovider.models import OidcIdentityProviderConfig


def _stringify_map(value: Any) -> Any:
    """YAML turns ``1``/``true`` into int/bool; EKS wants strings."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return {
            str(k): ("true" if v is True else "false" if v is False else str(v))
            for k, v in value.items()
        }
    return value


class IdentityProviderSpec(BaseModel):
    """Desired OIDC identity provider, as written by the user."""

    model_config = ConfigDict(extra="forbid")

    identity_provider_config_name: str = Field(min_length=1)
    issuer_url: str
    client_id: str = Field(min_length=1)
    username_claim: Optional[str] = None
    username_prefix: Optional[str] = None
    groups_claim: Optional[str] = None
    groups_prefix: Optional[str] = None
    required_claims: Dict[str, str] = Field(default_factory=dict)
    tags: Dict[str, str] = Field(default_factory=dict)

    @field_validator("issuer_url")
    @classmethod
    def _https_only(cls, value: str) -> str:
        if not value.startswith("https://"):
            raise ValueError("issuer_url must start with https://")
        return value

    @field_validator("required_claims", "tags", mode="before")
    @classmethod
    def _coerce_maps(cls, value: Any) -> Any:
        return _stringify_map(value)

    def to_config(self) -> OidcIdentityProviderConfig:
        """Return the desired snapshot (no status, no ARN)."""
        return OidcIdentityProviderConfig.model_validate(self.model_dump())


class ReconcileConfig(BaseModel):
    """Root of the config file."""

    model_config = ConfigDict(extra="forbid")

    cluster_name: str = Field(min_length=1)
    region: Optional[str] = None
    identity_provider: Optional[IdentityProviderSpec] = None
