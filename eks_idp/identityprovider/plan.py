"""Identity provider planner.

Compares the observed association on a cluster against the desired one and
returns the ordered procedures that converge them.  Planning is a pure
decision tree: it never calls EKS, never sleeps and never mutates its
inputs.  The returned procedures are inert until the caller executes them.

Decision order (first match wins)::

    desired None,    current None     -> []
    desired None,    current ACTIVE   -> [disassociate]
    desired None,    current other    -> []             (in flight, revisit later)
    desired present, current None     -> [associate]
    equal config                      -> [update-tags?] [remove-tags?] [wait?]
    config differs                    -> [disassociate] (re-associate next pass)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from eks_idp.identityprovider.errors import PlanError
from eks_idp.identityprovider.models import (
    ConfigStatus,
    OidcIdentityProviderConfig,
    tags_difference,
)
from eks_idp.identityprovider.procedures import Procedure, ProcedureKind, WaitOptions

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# PlanContext
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlanContext:
    """Shared, read-only context every procedure of a plan points back to.

    Attributes:
        cluster_name: EKS cluster the association belongs to.
        current: Observed association, or ``None``.
        desired: Desired association, or ``None``.
        eks_client: boto3 EKS client used when procedures execute.
        log: Logger (usually a :class:`logging.LoggerAdapter` carrying the
            cluster name).
        wait: Polling options for the wait procedure.
    """

    cluster_name: str
    current: Optional[OidcIdentityProviderConfig]
    desired: Optional[OidcIdentityProviderConfig]
    eks_client: Any = field(default=None, repr=False, compare=False)
    log: Any = field(default=None, repr=False, compare=False)
    wait: WaitOptions = field(default_factory=WaitOptions)

    @classmethod
    def build(
        cls,
        cluster_name: str,
        current: Optional[OidcIdentityProviderConfig],
        desired: Optional[OidcIdentityProviderConfig],
        eks_client: Any,
        log: Optional[Any] = None,
        *,
        wait: Optional[WaitOptions] = None,
    ) -> "PlanContext":
        """Construct a context, defaulting *log* to a cluster-scoped adapter."""
        if log is None:
            log = logging.LoggerAdapter(logger, {"cluster_name": cluster_name})
        return cls(
            cluster_name=cluster_name,
            current=current,
            desired=desired,
            eks_client=eks_client,
            log=log,
            wait=wait or WaitOptions(),
        )


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------


def _check_snapshot(value: Any, label: str) -> None:
    if value is not None and not isinstance(value, OidcIdentityProviderConfig):
        raise PlanError(
            f"{label} identity provider must be an OidcIdentityProviderConfig "
            f"or None, got {type(value).__name__}"
        )


def create_plan(ctx: PlanContext) -> List[Procedure]:
    """Return the ordered procedures that move *ctx.current* to *ctx.desired*.

    Raises:
        PlanError: If the context is malformed (missing cluster name or a
            snapshot of the wrong type).
    """
    if not ctx.cluster_name:
        raise PlanError("cluster_name must not be empty")
    _check_snapshot(ctx.current, "current")
    _check_snapshot(ctx.desired, "desired")

    current = ctx.current
    desired = ctx.desired
    procedures: List[Procedure] = []

    if desired is None and current is None:
        return procedures

    if desired is None:
        # CREATING and DELETING configs are revisited on a later pass.
        if current.status == ConfigStatus.ACTIVE:
            procedures.append(Procedure(ProcedureKind.DISASSOCIATE, ctx))
        return procedures

    if current is None:
        procedures.append(Procedure(ProcedureKind.ASSOCIATE, ctx))
        return procedures

    if not current.is_equal(desired):
        # OIDC settings are immutable in place; re-association happens on a
        # later pass once the old config is gone.
        procedures.append(Procedure(ProcedureKind.DISASSOCIATE, ctx))
        return procedures

    if tags_difference(desired.tags, current.tags):
        procedures.append(Procedure(ProcedureKind.UPDATE_TAGS, ctx))

    if not desired.tags and current.tags:
        procedures.append(Procedure(ProcedureKind.REMOVE_TAGS, ctx))

    if current.status == ConfigStatus.CREATING:
        procedures.append(Procedure(ProcedureKind.WAIT_ASSOCIATED, ctx))

    return procedures


class IdentityProviderPlan:
    """Object wrapper around :func:`create_plan` for callers that pass plans around."""

    def __init__(self, ctx: PlanContext) -> None:
        self.ctx = ctx

    def create(self) -> List[Procedure]:
        procedures = create_plan(self.ctx)
        self.ctx.log.debug(
            "Computed identity provider plan: %s",
            [p.name for p in procedures] or "no changes",
        )
        return procedures
