"""AWS context: session, identity, and region resolution.

Wraps boto3 session creation and STS ``get-caller-identity`` into a single
:class:`AWSContext` that the reconcile workflow hands EKS clients out of.

Region resolution precedence:
1. Explicit ``--region`` CLI flag (or ``region:`` in the config file)
2. ``AWS_DEFAULT_REGION`` / ``AWS_REGION`` env vars
3. Hardcoded fallback (``us-east-1``)

Profile resolution precedence:
1. Explicit ``--profile`` CLI flag
2. ``AWS_PROFILE`` env var
3. ``None``: boto3's default credential chain (instance role, env keys, ...)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

_DEFAULT_REGION = "us-east-1"


# ---------------------------------------------------------------------------
# Region / profile helpers
# ---------------------------------------------------------------------------


def resolve_region(region: Optional[str] = None) -> str:
    """Return the AWS region string.

    Precedence: *region* → ``AWS_DEFAULT_REGION`` → ``AWS_REGION`` → fallback.
    """
    if region:
        return region
    return (
        os.environ.get("AWS_DEFAULT_REGION")
        or os.environ.get("AWS_REGION")
        or _DEFAULT_REGION
    )


def resolve_profile(profile: Optional[str] = None) -> Optional[str]:
    """Return the AWS profile name, or ``None`` for the default chain."""
    return profile or os.environ.get("AWS_PROFILE") or None


# ---------------------------------------------------------------------------
# AWSContext
# ---------------------------------------------------------------------------


@dataclass
class AWSContext:
    """Bag of AWS identity + session factory.

    Attributes:
        profile: Resolved AWS profile name (``None`` = default chain).
        region: AWS region (e.g. ``us-west-2``).
        account_id: 12-digit AWS account ID.
        caller_arn: Full ARN from ``sts:GetCallerIdentity``.
    """

    profile: Optional[str]
    region: str
    account_id: str = ""
    caller_arn: str = ""
    _session: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def build(
        cls,
        region: Optional[str] = None,
        profile: Optional[str] = None,
    ) -> "AWSContext":
        """Construct an :class:`AWSContext` by calling STS.

        Raises :class:`RuntimeError` on credential / network failures.
        """
        resolved_profile = resolve_profile(profile)
        resolved_region = resolve_region(region)

        session = boto3.Session(
            profile_name=resolved_profile, region_name=resolved_region
        )

        try:
            identity = session.client("sts").get_caller_identity()
        except (BotoCoreError, ClientError) as exc:
            raise RuntimeError(
                f"AWS credentials invalid or inaccessible in region "
                f"{resolved_region}: {exc}"
            ) from exc

        logger.debug(
            "Resolved AWS identity %s in %s", identity["Arn"], resolved_region
        )
        return cls(
            profile=resolved_profile,
            region=resolved_region,
            account_id=identity["Account"],
            caller_arn=identity["Arn"],
            _session=session,
        )

    @property
    def session(self) -> boto3.Session:
        """Return the cached :class:`boto3.Session`."""
        if self._session is None:
            self._session = boto3.Session(
                profile_name=self.profile, region_name=self.region
            )
        return self._session

    def client(self, service: str, **kwargs: Any) -> Any:
        """Create a boto3 client for *service*."""
        return self.session.client(service, **kwargs)

    def eks(self) -> Any:
        """Shortcut for ``client("eks")``."""
        return self.client("eks")
