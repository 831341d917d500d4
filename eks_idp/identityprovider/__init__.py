"""EKS OIDC identity provider state model, planner and procedures."""

from eks_idp.identityprovider.errors import (
    IdentityProviderError,
    PlanError,
    ProcedureError,
    WaitTimeoutError,
)
from eks_idp.identityprovider.models import (
    ConfigStatus,
    OidcIdentityProviderConfig,
    Tags,
    tags_difference,
)
from eks_idp.identityprovider.plan import (
    IdentityProviderPlan,
    PlanContext,
    create_plan,
)
from eks_idp.identityprovider.procedures import (
    EXECUTORS,
    IDENTITY_PROVIDER_TYPE,
    Procedure,
    ProcedureKind,
    WaitOptions,
)

__all__ = [
    "ConfigStatus",
    "EXECUTORS",
    "IDENTITY_PROVIDER_TYPE",
    "IdentityProviderError",
    "IdentityProviderPlan",
    "OidcIdentityProviderConfig",
    "PlanContext",
    "PlanError",
    "Procedure",
    "ProcedureError",
    "ProcedureKind",
    "Tags",
    "WaitOptions",
    "WaitTimeoutError",
    "create_plan",
    "tags_difference",
]
