"""AWS service interactions (STS identity, EKS identity providers)."""

from eks_idp.aws.context import (
    AWSContext,
    resolve_profile,
    resolve_region,
)
from eks_idp.aws.eks import (
    describe_identity_provider_config,
    get_associated_identity_provider,
    get_identity_provider_status,
    list_identity_provider_configs,
)

__all__ = [
    "AWSContext",
    "describe_identity_provider_config",
    "get_associated_identity_provider",
    "get_identity_provider_status",
    "list_identity_provider_configs",
    "resolve_profile",
    "resolve_region",
]
