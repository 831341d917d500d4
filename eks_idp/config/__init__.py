"""Reconcile config loading and validation."""

from eks_idp.config.loader import (
    CLUSTER_NAME_ENV,
    desired_identity_provider,
    load_config,
)
from eks_idp.config.models import (
    IdentityProviderSpec,
    ReconcileConfig,
)

__all__ = [
    "CLUSTER_NAME_ENV",
    "IdentityProviderSpec",
    "ReconcileConfig",
    "desired_identity_provider",
    "load_config",
]
