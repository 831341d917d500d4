"""Reconcile workflow."""

from eks_idp.workflow.reconcile import (
    EXIT_AWS_FAILURE,
    EXIT_CHANGES_PENDING,
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILURE,
    ReconcileError,
    ReconcileResult,
    reconcile_identity_provider,
)

__all__ = [
    "EXIT_AWS_FAILURE",
    "EXIT_CHANGES_PENDING",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_FAILURE",
    "ReconcileError",
    "ReconcileResult",
    "reconcile_identity_provider",
]
