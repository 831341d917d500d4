"""Read side of the EKS identity provider API.

Fetches the association currently attached to a cluster and converts it to
an :class:`~eks_idp.identityprovider.models.OidcIdentityProviderConfig`
snapshot for the planner.  Write calls live with the procedures that issue
them (:mod:`eks_idp.identityprovider.procedures`).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from eks_idp.identityprovider.errors import client_error_code
from eks_idp.identityprovider.models import ConfigStatus, OidcIdentityProviderConfig
from eks_idp.identityprovider.procedures import IDENTITY_PROVIDER_TYPE

logger = logging.getLogger(__name__)


def list_identity_provider_configs(
    eks_client: Any,
    cluster_name: str,
) -> List[Dict[str, str]]:
    """Return every ``{"type": ..., "name": ...}`` entry on *cluster_name*."""
    configs: List[Dict[str, str]] = []
    paginator = eks_client.get_paginator("list_identity_provider_configs")
    for page in paginator.paginate(clusterName=cluster_name):
        configs.extend(page.get("identityProviderConfigs", []))
    return configs


def describe_identity_provider_config(
    eks_client: Any,
    cluster_name: str,
    name: str,
) -> Optional[Dict[str, Any]]:
    """Return the ``oidc`` block for *name*, or ``None`` if it does not exist.

    Any error other than ``ResourceNotFoundException`` propagates.
    """
    try:
        resp = eks_client.describe_identity_provider_config(
            clusterName=cluster_name,
            identityProviderConfig={"type": IDENTITY_PROVIDER_TYPE, "name": name},
        )
    except ClientError as exc:
        if client_error_code(exc) == "ResourceNotFoundException":
            logger.debug("Identity provider %s not found on %s", name, cluster_name)
            return None
        raise
    return resp.get("identityProviderConfig", {}).get("oidc")


def get_associated_identity_provider(
    eks_client: Any,
    cluster_name: str,
) -> Optional[OidcIdentityProviderConfig]:
    """Return the OIDC provider associated with *cluster_name*, or ``None``.

    EKS allows a single OIDC association per cluster, so the first OIDC
    entry is the one that matters.
    """
    oidc_configs = [
        c for c in list_identity_provider_configs(eks_client, cluster_name)
        if c.get("type") == IDENTITY_PROVIDER_TYPE
    ]
    if not oidc_configs:
        return None
    if len(oidc_configs) > 1:
        logger.warning(
            "Cluster %s has %d OIDC identity providers; using %s",
            cluster_name,
            len(oidc_configs),
            oidc_configs[0].get("name"),
        )

    oidc = describe_identity_provider_config(
        eks_client, cluster_name, oidc_configs[0]["name"],
    )
    if oidc is None:
        return None
    return OidcIdentityProviderConfig.from_api(oidc)


def get_identity_provider_status(
    eks_client: Any,
    cluster_name: str,
    name: str,
) -> Optional[ConfigStatus]:
    """Return the lifecycle status of *name*, or ``None`` if it is gone."""
    oidc = describe_identity_provider_config(eks_client, cluster_name, name)
    if oidc is None:
        return None
    return ConfigStatus.parse(oidc.get("status"))
