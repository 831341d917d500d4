"""Config file loading.

- :func:`load_config`: parse a reconcile config YAML into a :class:`ReconcileConfig`
- :func:`desired_identity_provider`: the desired snapshot handed to the planner
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from eks_idp.config.models import ReconcileConfig
from eks_idp.identityprovider.models import OidcIdentityProviderConfig

logger = logging.getLogger(__name__)

#: Environment variable overriding ``cluster_name`` from the file.
CLUSTER_NAME_ENV = "EKS_IDP_CLUSTER_NAME"


def load_config(path: str | Path) -> ReconcileConfig:
    """Load and validate a reconcile config YAML file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the document is not a mapping.
        pydantic.ValidationError: If the mapping does not match the schema.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}

    if not isinstance(raw, dict):
        raise ValueError(
            f"Config file {path} must contain a mapping, got {type(raw).__name__}"
        )

    data: Dict[str, Any] = dict(raw)
    override = os.environ.get(CLUSTER_NAME_ENV, "")
    if override:
        logger.debug("cluster_name overridden by %s=%s", CLUSTER_NAME_ENV, override)
        data["cluster_name"] = override

    return ReconcileConfig.model_validate(data)


def desired_identity_provider(
    cfg: ReconcileConfig,
) -> Optional[OidcIdentityProviderConfig]:
    """Return the desired snapshot, or ``None`` when no provider is wanted."""
    if cfg.identity_provider is None:
        return None
    return cfg.identity_provider.to_config()
