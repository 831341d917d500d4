"""Remediation procedures emitted by the identity provider planner.

A :class:`Procedure` is an inert descriptor: its kind plus a reference to the
shared :class:`~eks_idp.identityprovider.plan.PlanContext`.  Nothing talks
to EKS until :meth:`Procedure.execute` is called, which looks the kind up in
:data:`EXECUTORS` and runs the matching function.

Every executor is idempotent with respect to a fresh plan: if one fails, the
next reconcile pass re-reads current state and plans again from scratch.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from eks_idp.identityprovider.errors import (
    ProcedureError,
    WaitTimeoutError,
    client_error_code,
)
from eks_idp.identityprovider.models import ConfigStatus

if TYPE_CHECKING:
    from eks_idp.identityprovider.plan import PlanContext

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: EKS identity provider type; OIDC is the only one EKS supports.
IDENTITY_PROVIDER_TYPE = "oidc"

#: Default seconds between association status polls.
DEFAULT_POLL_INTERVAL: float = 10.0

#: Default number of status polls before giving up.
DEFAULT_MAX_ATTEMPTS: int = 60

#: Maximum consecutive describe failures tolerated while waiting.
MAX_CONSECUTIVE_FAILURES: int = 5


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------


class ProcedureKind(str, Enum):
    """The five remediation steps the planner can emit.

    Values double as the procedure names used in logs and reports.
    """

    ASSOCIATE = "associate-identity-provider"
    DISASSOCIATE = "disassociate-identity-provider"
    UPDATE_TAGS = "update-identity-provider-tags"
    REMOVE_TAGS = "remove-identity-provider-tags"
    WAIT_ASSOCIATED = "wait-identity-provider-association"


@dataclass(frozen=True)
class WaitOptions:
    """Polling knobs for :attr:`ProcedureKind.WAIT_ASSOCIATED`.

    *sleep_fn* is for test injection (avoids real sleeps).
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_failures: int = MAX_CONSECUTIVE_FAILURES
    sleep_fn: Optional[Callable[[float], None]] = field(default=None, compare=False)


@dataclass(frozen=True)
class Procedure:
    """One unit of remediation work.

    Only the kind takes part in equality, so two plans computed from the
    same snapshots compare equal.
    """

    kind: ProcedureKind
    plan: "PlanContext" = field(repr=False, compare=False)

    @property
    def name(self) -> str:
        return self.kind.value

    def execute(self) -> None:
        """Run this procedure against EKS.

        Raises:
            ProcedureError: If the remote call fails.
        """
        self.plan.log.debug("Executing identity provider procedure %s", self.name)
        EXECUTORS[self.kind](self.plan)


# ---------------------------------------------------------------------------
# Executors
# ---------------------------------------------------------------------------


def _call(kind: ProcedureKind, fn: Callable[..., Any], **kwargs: Any) -> Any:
    try:
        return fn(**kwargs)
    except (BotoCoreError, ClientError) as exc:
        raise ProcedureError(kind.value, str(exc)) from exc


def _associate(plan: "PlanContext") -> None:
    desired = plan.desired
    kwargs: Dict[str, Any] = {
        "clusterName": plan.cluster_name,
        "oidc": desired.to_associate_request(),
    }
    if desired.tags:
        kwargs["tags"] = dict(desired.tags)

    plan.log.info(
        "Associating identity provider %s with cluster %s",
        desired.identity_provider_config_name,
        plan.cluster_name,
    )
    _call(
        ProcedureKind.ASSOCIATE,
        plan.eks_client.associate_identity_provider_config,
        **kwargs,
    )


def _disassociate(plan: "PlanContext") -> None:
    name = plan.current.identity_provider_config_name
    plan.log.info(
        "Disassociating identity provider %s from cluster %s",
        name,
        plan.cluster_name,
    )
    _call(
        ProcedureKind.DISASSOCIATE,
        plan.eks_client.disassociate_identity_provider_config,
        clusterName=plan.cluster_name,
        identityProviderConfig={"type": IDENTITY_PROVIDER_TYPE, "name": name},
    )


def _update_tags(plan: "PlanContext") -> None:
    arn = plan.current.identity_provider_config_arn
    plan.log.info("Updating tags on identity provider %s", arn)
    _call(
        ProcedureKind.UPDATE_TAGS,
        plan.eks_client.tag_resource,
        resourceArn=arn,
        tags=dict(plan.desired.tags),
    )


def _remove_tags(plan: "PlanContext") -> None:
    arn = plan.current.identity_provider_config_arn
    keys = sorted(plan.current.tags)
    plan.log.info("Removing tags %s from identity provider %s", keys, arn)
    _call(
        ProcedureKind.REMOVE_TAGS,
        plan.eks_client.untag_resource,
        resourceArn=arn,
        tagKeys=keys,
    )


def _wait_associated(plan: "PlanContext") -> None:
    """Poll until the association reports ``ACTIVE``.

    * ``ACTIVE`` returns.
    * ``DELETING`` or a vanished config is a terminal failure.
    * Transient describe failures are retried up to ``max_failures`` in a row.
    * Anything else keeps polling until ``max_attempts`` is exhausted.
    """
    kind = ProcedureKind.WAIT_ASSOCIATED
    opts = plan.wait
    sleep = opts.sleep_fn or time.sleep
    name = plan.current.identity_provider_config_name
    consecutive_failures = 0
    last_status = "unknown"

    for attempt in range(1, opts.max_attempts + 1):
        try:
            resp = plan.eks_client.describe_identity_provider_config(
                clusterName=plan.cluster_name,
                identityProviderConfig={"type": IDENTITY_PROVIDER_TYPE, "name": name},
            )
        except (BotoCoreError, ClientError) as exc:
            if client_error_code(exc) == "ResourceNotFoundException":
                raise ProcedureError(
                    kind.value, f"identity provider {name} no longer exists"
                ) from exc
            consecutive_failures += 1
            if consecutive_failures >= opts.max_failures:
                raise ProcedureError(
                    kind.value,
                    f"describe failed {consecutive_failures} consecutive times: {exc}",
                ) from exc
            plan.log.warning(
                "Identity provider status poll failed (%d/%d): %s",
                consecutive_failures,
                opts.max_failures,
                exc,
            )
        else:
            consecutive_failures = 0
            oidc = resp.get("identityProviderConfig", {}).get("oidc", {})
            status = ConfigStatus.parse(oidc.get("status"))
            last_status = status.value

            if status == ConfigStatus.ACTIVE:
                plan.log.info("Identity provider %s is active", name)
                return
            if status == ConfigStatus.DELETING:
                raise ProcedureError(
                    kind.value, f"identity provider {name} is being deleted"
                )
            plan.log.info(
                "Identity provider %s still %s (poll %d/%d)",
                name,
                last_status,
                attempt,
                opts.max_attempts,
            )

        if attempt < opts.max_attempts:
            sleep(opts.poll_interval)

    raise WaitTimeoutError(kind.value, opts.max_attempts, last_status)


#: Dispatch table: one executor per procedure kind.
EXECUTORS: Dict[ProcedureKind, Callable[["PlanContext"], None]] = {
    ProcedureKind.ASSOCIATE: _associate,
    ProcedureKind.DISASSOCIATE: _disassociate,
    ProcedureKind.UPDATE_TAGS: _update_tags,
    ProcedureKind.REMOVE_TAGS: _remove_tags,
    ProcedureKind.WAIT_ASSOCIATED: _wait_associated,
}
