"""Current/desired snapshots of an EKS OIDC identity provider association.

Both snapshots are read-only inputs to the planner.  ``None`` stands for
"no association": on the desired side that means the provider must not
exist, on the current side that nothing is associated yet.

Field names follow the EKS ``DescribeIdentityProviderConfig`` ``oidc`` block
(snake_cased).  :meth:`OidcIdentityProviderConfig.from_api` and
:meth:`OidcIdentityProviderConfig.to_associate_request` convert to and from
the camelCase wire shape used by boto3.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# ConfigStatus
# ---------------------------------------------------------------------------


class ConfigStatus(str, Enum):
    """Lifecycle phase reported by EKS for an identity provider config.

    ``UNKNOWN`` absorbs any value EKS may add later; the planner treats it
    like any other "not active, not creating" phase.
    """

    ACTIVE = "ACTIVE"
    CREATING = "CREATING"
    DELETING = "DELETING"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "ConfigStatus":
        """Return the member for *value*, falling back to ``UNKNOWN``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.UNKNOWN


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


class Tags(dict):
    """String key/value metadata attached to the association."""

    def difference(self, other: Optional[Dict[str, str]]) -> "Tags":
        """Entries of ``self`` that are missing from, or differ in, *other*.

        Keys present only in *other* are not reported.
        """
        other = other or {}
        return Tags(
            (key, value)
            for key, value in self.items()
            if key not in other or other[key] != value
        )


def tags_difference(
    desired: Optional[Dict[str, str]],
    current: Optional[Dict[str, str]],
) -> Tags:
    """Tags that must be added or changed to move *current* to *desired*."""
    return Tags(desired or {}).difference(current)


# ---------------------------------------------------------------------------
# OidcIdentityProviderConfig
# ---------------------------------------------------------------------------

#: (snake_case field, camelCase API key) for the configuration-defining fields.
_API_FIELDS = (
    ("identity_provider_config_name", "identityProviderConfigName"),
    ("issuer_url", "issuerUrl"),
    ("client_id", "clientId"),
    ("username_claim", "usernameClaim"),
    ("username_prefix", "usernamePrefix"),
    ("groups_claim", "groupsClaim"),
    ("groups_prefix", "groupsPrefix"),
    ("required_claims", "requiredClaims"),
)


class OidcIdentityProviderConfig(BaseModel):
    """Snapshot of one OIDC identity provider association.

    Attributes:
        identity_provider_config_name: Name of the association on the cluster.
        issuer_url: OIDC issuer URL.
        client_id: OIDC client (audience) id.
        username_claim: JWT claim used as the Kubernetes username.
        username_prefix: Prefix prepended to username claims.
        groups_claim: JWT claim holding the user's groups.
        groups_prefix: Prefix prepended to group claims.
        required_claims: Claims that must be present with the given values.
        identity_provider_config_arn: ARN of the association (observed only).
        status: Lifecycle phase (observed only; ``None`` on desired state).
        tags: Tags on the association.  Managed by their own procedures.
    """

    model_config = ConfigDict(frozen=True)

    identity_provider_config_name: str
    issuer_url: str
    client_id: str
    username_claim: Optional[str] = None
    username_prefix: Optional[str] = None
    groups_claim: Optional[str] = None
    groups_prefix: Optional[str] = None
    required_claims: Dict[str, str] = Field(default_factory=dict)
    identity_provider_config_arn: Optional[str] = None
    status: Optional[ConfigStatus] = None
    tags: Dict[str, str] = Field(default_factory=Tags)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> Optional[ConfigStatus]:
        if value is None or value == "":
            return None
        return ConfigStatus.parse(value)

    @field_validator(
        "username_claim", "username_prefix", "groups_claim", "groups_prefix",
        mode="before",
    )
    @classmethod
    def _empty_as_unset(cls, value: Any) -> Any:
        # EKS never returns "" for these; it omits them.
        return None if value == "" else value

    @field_validator("tags", mode="after")
    @classmethod
    def _as_tags(cls, value: Dict[str, str]) -> Tags:
        return Tags(value)

    @field_validator("required_claims", "tags", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    # -- comparison -------------------------------------------------------

    def _identity(self) -> tuple:
        return tuple(getattr(self, name) for name, _ in _API_FIELDS)

    def is_equal(self, other: Optional["OidcIdentityProviderConfig"]) -> bool:
        """Compare configuration-defining fields only.

        ``status``, ``tags`` and the ARN are ignored: status is lifecycle
        metadata and tags are reconciled separately.
        """
        if other is None:
            return False
        if other is self:
            return True
        return self._identity() == other._identity()

    # -- API conversion ---------------------------------------------------

    @classmethod
    def from_api(cls, oidc: Dict[str, Any]) -> "OidcIdentityProviderConfig":
        """Build a snapshot from the ``oidc`` block of a describe response."""
        data: Dict[str, Any] = {
            name: oidc.get(key) for name, key in _API_FIELDS
        }
        data["identity_provider_config_arn"] = oidc.get("identityProviderConfigArn")
        data["status"] = oidc.get("status")
        data["tags"] = oidc.get("tags")
        return cls.model_validate(data)

    def to_associate_request(self) -> Dict[str, Any]:
        """Return the ``oidc`` argument for ``associate_identity_provider_config``.

        Unset optional fields are omitted; EKS rejects empty strings.
        """
        request: Dict[str, Any] = {}
        for name, key in _API_FIELDS:
            value = getattr(self, name)
            if value is None or value == "" or value == {}:
                continue
            request[key] = dict(value) if isinstance(value, dict) else value
        return request
