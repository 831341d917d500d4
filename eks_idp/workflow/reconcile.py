"""One reconcile pass for a cluster's OIDC identity provider.

1. **Observe**: read the association currently attached to the cluster.
2. **Plan**: hand current + desired to the planner.
3. **Execute**: run procedures in order, stopping at the first failure.
4. **Report**: re-read the association and record its ARN and status.

Each pass starts from fresh snapshots, so a failed or partially executed
pass is simply picked up by the next one.  Callers must not run two passes
against the same cluster concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from eks_idp.aws.eks import get_associated_identity_provider
from eks_idp.identityprovider.errors import ProcedureError
from eks_idp.identityprovider.models import OidcIdentityProviderConfig
from eks_idp.identityprovider.plan import IdentityProviderPlan, PlanContext
from eks_idp.identityprovider.procedures import WaitOptions

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILURE = 1
EXIT_AWS_FAILURE = 2
EXIT_CHANGES_PENDING = 3


class ReconcileError(RuntimeError):
    """Raised when a reconcile pass cannot complete.

    Carries the partial :class:`ReconcileResult` so callers can see which
    procedures ran before the failure.
    """

    def __init__(self, message: str, result: "ReconcileResult") -> None:
        super().__init__(message)
        self.result = result


@dataclass
class ReconcileResult:
    """Outcome of :func:`reconcile_identity_provider`."""

    cluster_name: str
    planned: List[str] = field(default_factory=list)
    executed: List[str] = field(default_factory=list)
    arn: Optional[str] = None
    status: Optional[str] = None
    dry_run: bool = False
    error: str = ""

    @property
    def has_changes(self) -> bool:
        return bool(self.planned)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dict (sorted for determinism)."""
        return {
            "arn": self.arn,
            "cluster_name": self.cluster_name,
            "dry_run": self.dry_run,
            "error": self.error,
            "executed": list(self.executed),
            "planned": list(self.planned),
            "status": self.status,
        }


def _observe(
    eks_client: Any,
    cluster_name: str,
    result: ReconcileResult,
) -> Optional[OidcIdentityProviderConfig]:
    try:
        return get_associated_identity_provider(eks_client, cluster_name)
    except (BotoCoreError, ClientError) as exc:
        result.error = str(exc)
        raise ReconcileError(
            f"unable to list associated identity providers: {exc}", result,
        ) from exc


def reconcile_identity_provider(
    eks_client: Any,
    cluster_name: str,
    desired: Optional[OidcIdentityProviderConfig],
    *,
    log: Optional[Any] = None,
    dry_run: bool = False,
    wait: Optional[WaitOptions] = None,
) -> ReconcileResult:
    """Converge the cluster's identity provider toward *desired*.

    With *dry_run* the plan is computed and recorded but nothing executes.

    Raises:
        ReconcileError: If current state cannot be read or a procedure fails.
    """
    log = log or logging.LoggerAdapter(logger, {"cluster_name": cluster_name})
    result = ReconcileResult(cluster_name=cluster_name, dry_run=dry_run)

    log.info("Reconciling OIDC identity provider for cluster %s", cluster_name)
    current = _observe(eks_client, cluster_name, result)

    if desired is None and current is None:
        log.info("No identity provider required or installed for cluster %s", cluster_name)
        return result

    ctx = PlanContext.build(
        cluster_name, current, desired, eks_client, log, wait=wait,
    )
    procedures = IdentityProviderPlan(ctx).create()
    result.planned = [p.name for p in procedures]
    log.debug("Computed identity provider plan with %d procedures", len(procedures))

    if dry_run:
        _record_status(result, current)
        return result

    for procedure in procedures:
        try:
            procedure.execute()
        except ProcedureError as exc:
            log.error("Failed executing identity provider procedure %s: %s", procedure.name, exc)
            result.error = str(exc)
            raise ReconcileError(str(exc), result) from exc
        result.executed.append(procedure.name)

    if procedures:
        _record_status(result, _observe(eks_client, cluster_name, result))
    else:
        _record_status(result, current)
    return result


def _record_status(
    result: ReconcileResult,
    latest: Optional[OidcIdentityProviderConfig],
) -> None:
    if latest is None:
        result.arn = None
        result.status = None
        return
    result.arn = latest.identity_provider_config_arn
    result.status = latest.status.value if latest.status else None
