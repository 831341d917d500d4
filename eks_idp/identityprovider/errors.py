"""Identity provider planning and execution errors."""

from __future__ import annotations


class IdentityProviderError(RuntimeError):
    """Base exception for identity provider planning/execution."""


class PlanError(IdentityProviderError):
    """Raised when the planner is handed inputs it cannot reason about."""


class ProcedureError(IdentityProviderError):
    """Raised when a procedure fails to execute.

    The underlying AWS error, if any, is chained via ``__cause__``.
    """

    def __init__(self, procedure: str, message: str) -> None:
        super().__init__(f"{procedure}: {message}")
        self.procedure = procedure


class WaitTimeoutError(ProcedureError):
    """Raised when the association never reaches ``ACTIVE``."""

    def __init__(self, procedure: str, attempts: int, last_status: str) -> None:
        super().__init__(
            procedure,
            f"identity provider not active after {attempts} polls "
            f"(last status: {last_status})",
        )
        self.attempts = attempts
        self.last_status = last_status


def client_error_code(exc: BaseException) -> str:
    """Return the AWS error code of a botocore ``ClientError`` (or ``""``)."""
    response = getattr(exc, "response", None) or {}
    return response.get("Error", {}).get("Code", "")
