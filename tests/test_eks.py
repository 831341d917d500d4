"""Tests for eks_idp.aws.eks — reading the current association."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from eks_idp.aws.eks import (
    describe_identity_provider_config,
    get_associated_identity_provider,
    get_identity_provider_status,
    list_identity_provider_configs,
)
from eks_idp.identityprovider.models import ConfigStatus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


_OIDC = {
    "identityProviderConfigName": "corp-oidc",
    "identityProviderConfigArn": "arn:aws:eks:us-west-2:123456789012:identityproviderconfig/prod/oidc/corp-oidc/1",
    "clusterName": "prod",
    "issuerUrl": "https://idp.example.com",
    "clientId": "kubernetes",
    "tags": {"team": "platform"},
    "status": "ACTIVE",
}


def _eks_client(*, configs=None, pages=None, oidc=_OIDC, describe_error=None):
    """Build a mock EKS client with configurable responses."""
    client = MagicMock()
    if pages is None:
        pages = [{"identityProviderConfigs": configs or []}]
    client.get_paginator.return_value.paginate.return_value = pages
    if describe_error is not None:
        client.describe_identity_provider_config.side_effect = describe_error
    else:
        client.describe_identity_provider_config.return_value = {
            "identityProviderConfig": {"oidc": oidc},
        }
    return client


def _not_found() -> ClientError:
    return ClientError(
        {"Error": {"Code": "ResourceNotFoundException", "Message": "nope"}},
        "DescribeIdentityProviderConfig",
    )


# ===========================================================================
# list_identity_provider_configs
# ===========================================================================


class TestListConfigs:
    def test_single_page(self):
        client = _eks_client(configs=[{"type": "oidc", "name": "corp-oidc"}])
        assert list_identity_provider_configs(client, "prod") == [
            {"type": "oidc", "name": "corp-oidc"},
        ]
        client.get_paginator.assert_called_once_with("list_identity_provider_configs")
        client.get_paginator.return_value.paginate.assert_called_once_with(clusterName="prod")

    def test_paginated(self):
        client = _eks_client(pages=[
            {"identityProviderConfigs": [{"type": "oidc", "name": "a"}], "nextToken": "t1"},
            {"identityProviderConfigs": [{"type": "oidc", "name": "b"}]},
        ])
        names = [c["name"] for c in list_identity_provider_configs(client, "prod")]
        assert names == ["a", "b"]

    def test_empty(self):
        assert list_identity_provider_configs(_eks_client(), "prod") == []


# ===========================================================================
# describe_identity_provider_config
# ===========================================================================


class TestDescribeConfig:
    def test_returns_oidc_block(self):
        client = _eks_client()
        assert describe_identity_provider_config(client, "prod", "corp-oidc") == _OIDC
        client.describe_identity_provider_config.assert_called_once_with(
            clusterName="prod",
            identityProviderConfig={"type": "oidc", "name": "corp-oidc"},
        )

    def test_not_found_returns_none(self):
        client = _eks_client(describe_error=_not_found())
        assert describe_identity_provider_config(client, "prod", "gone") is None

    def test_other_errors_propagate(self):
        err = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "no"}},
            "DescribeIdentityProviderConfig",
        )
        client = _eks_client(describe_error=err)
        with pytest.raises(ClientError):
            describe_identity_provider_config(client, "prod", "corp-oidc")


# ===========================================================================
# get_associated_identity_provider
# ===========================================================================


class TestGetAssociated:
    def test_none_associated(self):
        client = _eks_client()
        assert get_associated_identity_provider(client, "prod") is None
        client.describe_identity_provider_config.assert_not_called()

    def test_converts_snapshot(self):
        client = _eks_client(configs=[{"type": "oidc", "name": "corp-oidc"}])
        idp = get_associated_identity_provider(client, "prod")
        assert idp is not None
        assert idp.identity_provider_config_name == "corp-oidc"
        assert idp.status is ConfigStatus.ACTIVE
        assert idp.tags == {"team": "platform"}
        assert idp.identity_provider_config_arn == _OIDC["identityProviderConfigArn"]

    def test_first_oidc_entry_used(self):
        client = _eks_client(configs=[
            {"type": "oidc", "name": "corp-oidc"},
            {"type": "oidc", "name": "second"},
        ])
        get_associated_identity_provider(client, "prod")
        kwargs = client.describe_identity_provider_config.call_args.kwargs
        assert kwargs["identityProviderConfig"]["name"] == "corp-oidc"

    def test_non_oidc_entries_skipped(self):
        client = _eks_client(configs=[{"type": "saml", "name": "x"}])
        assert get_associated_identity_provider(client, "prod") is None

    def test_vanished_between_list_and_describe(self):
        client = _eks_client(
            configs=[{"type": "oidc", "name": "corp-oidc"}],
            describe_error=_not_found(),
        )
        assert get_associated_identity_provider(client, "prod") is None


# ===========================================================================
# get_identity_provider_status
# ===========================================================================


class TestGetStatus:
    def test_status(self):
        client = _eks_client(oidc={**_OIDC, "status": "CREATING"})
        assert get_identity_provider_status(client, "prod", "corp-oidc") is ConfigStatus.CREATING

    def test_gone(self):
        client = _eks_client(describe_error=_not_found())
        assert get_identity_provider_status(client, "prod", "corp-oidc") is None
