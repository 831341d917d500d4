"""Tests for eks_idp.identityprovider.models — snapshots, status, tag diff."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from eks_idp.identityprovider.models import (
    ConfigStatus,
    OidcIdentityProviderConfig,
    Tags,
    tags_difference,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config(**kw) -> OidcIdentityProviderConfig:
    base = {
        "identity_provider_config_name": "corp-oidc",
        "issuer_url": "https://idp.example.com",
        "client_id": "kubernetes",
    }
    base.update(kw)
    return OidcIdentityProviderConfig(**base)


# ---------------------------------------------------------------------------
# ConfigStatus
# ---------------------------------------------------------------------------


class TestConfigStatus:
    def test_known_values(self):
        assert ConfigStatus.parse("ACTIVE") is ConfigStatus.ACTIVE
        assert ConfigStatus.parse("CREATING") is ConfigStatus.CREATING
        assert ConfigStatus.parse("DELETING") is ConfigStatus.DELETING

    def test_case_insensitive(self):
        assert ConfigStatus.parse("Active") is ConfigStatus.ACTIVE

    def test_unknown_value(self):
        assert ConfigStatus.parse("UPDATING") is ConfigStatus.UNKNOWN

    def test_member_passthrough(self):
        assert ConfigStatus.parse(ConfigStatus.DELETING) is ConfigStatus.DELETING

    def test_string_enum(self):
        assert ConfigStatus.ACTIVE == "ACTIVE"


# ---------------------------------------------------------------------------
# Tags / tags_difference
# ---------------------------------------------------------------------------


class TestTagsDifference:
    def test_added_key(self):
        diff = tags_difference({"a": "1", "b": "2"}, {"a": "1"})
        assert diff == {"b": "2"}

    def test_changed_value(self):
        diff = tags_difference({"a": "2"}, {"a": "1"})
        assert diff == {"a": "2"}

    def test_keys_only_in_current_ignored(self):
        diff = tags_difference({"a": "1"}, {"a": "1", "z": "9"})
        assert diff == {}

    def test_identical(self):
        assert tags_difference({"a": "1"}, {"a": "1"}) == {}

    def test_empty_desired(self):
        assert tags_difference({}, {"a": "1"}) == {}

    def test_none_inputs(self):
        assert tags_difference(None, None) == {}
        assert tags_difference({"a": "1"}, None) == {"a": "1"}

    def test_returns_tags(self):
        assert isinstance(Tags({"a": "1"}).difference({}), Tags)

    def test_does_not_mutate_inputs(self):
        desired = {"a": "1", "b": "2"}
        current = {"a": "1"}
        tags_difference(desired, current)
        assert desired == {"a": "1", "b": "2"}
        assert current == {"a": "1"}


# ---------------------------------------------------------------------------
# OidcIdentityProviderConfig
# ---------------------------------------------------------------------------


class TestConfigModel:
    def test_defaults(self):
        c = _config()
        assert c.status is None
        assert c.tags == {}
        assert c.required_claims == {}
        assert c.identity_provider_config_arn is None

    def test_tags_become_tags_type(self):
        c = _config(tags={"a": "1"})
        assert isinstance(c.tags, Tags)

    def test_status_parsed(self):
        assert _config(status="CREATING").status is ConfigStatus.CREATING

    def test_status_unknown(self):
        assert _config(status="SOMETHING_NEW").status is ConfigStatus.UNKNOWN

    def test_frozen(self):
        c = _config()
        with pytest.raises(ValidationError):
            c.client_id = "other"

    def test_required_fields(self):
        with pytest.raises(ValidationError):
            OidcIdentityProviderConfig(issuer_url="https://x", client_id="c")

    @pytest.mark.parametrize(
        "field", ["username_claim", "username_prefix", "groups_claim", "groups_prefix"],
    )
    def test_empty_optional_string_is_unset(self, field):
        assert getattr(_config(**{field: ""}), field) is None

    def test_empty_string_equals_omitted(self):
        assert _config(username_prefix="", groups_prefix="").is_equal(_config())


class TestIsEqual:
    def test_reflexive(self):
        c = _config()
        assert c.is_equal(c)

    def test_symmetric(self):
        a = _config(username_claim="email")
        b = _config(username_claim="email")
        assert a.is_equal(b) and b.is_equal(a)

    def test_ignores_status(self):
        assert _config(status="ACTIVE").is_equal(_config())

    def test_ignores_tags(self):
        assert _config(tags={"a": "1"}).is_equal(_config(tags={"b": "2"}))

    def test_ignores_arn(self):
        arn = "arn:aws:eks:us-west-2:123456789012:identityproviderconfig/c/oidc/corp-oidc/x"
        assert _config(identity_provider_config_arn=arn).is_equal(_config())

    @pytest.mark.parametrize(
        "field,value",
        [
            ("identity_provider_config_name", "other"),
            ("issuer_url", "https://other.example.com"),
            ("client_id", "other"),
            ("username_claim", "sub"),
            ("username_prefix", "oidc:"),
            ("groups_claim", "roles"),
            ("groups_prefix", "oidc:"),
            ("required_claims", {"aud": "x"}),
        ],
    )
    def test_config_fields_compared(self, field, value):
        a = _config()
        b = _config(**{field: value})
        assert not a.is_equal(b)
        assert not b.is_equal(a)

    def test_none(self):
        assert not _config().is_equal(None)


class TestApiConversion:
    def test_from_api(self):
        c = OidcIdentityProviderConfig.from_api({
            "identityProviderConfigName": "corp-oidc",
            "identityProviderConfigArn": "arn:aws:eks:...:x",
            "clusterName": "prod",
            "issuerUrl": "https://idp.example.com",
            "clientId": "kubernetes",
            "usernameClaim": "email",
            "groupsClaim": "groups",
            "requiredClaims": {"aud": "kubernetes"},
            "tags": {"team": "platform"},
            "status": "ACTIVE",
        })
        assert c.identity_provider_config_name == "corp-oidc"
        assert c.identity_provider_config_arn == "arn:aws:eks:...:x"
        assert c.username_claim == "email"
        assert c.groups_claim == "groups"
        assert c.required_claims == {"aud": "kubernetes"}
        assert c.tags == {"team": "platform"}
        assert c.status is ConfigStatus.ACTIVE

    def test_from_api_missing_optional(self):
        c = OidcIdentityProviderConfig.from_api({
            "identityProviderConfigName": "corp-oidc",
            "issuerUrl": "https://idp.example.com",
            "clientId": "kubernetes",
        })
        assert c.tags == {}
        assert c.required_claims == {}
        assert c.status is None

    def test_to_associate_request_omits_unset(self):
        req = _config().to_associate_request()
        assert req == {
            "identityProviderConfigName": "corp-oidc",
            "issuerUrl": "https://idp.example.com",
            "clientId": "kubernetes",
        }

    def test_to_associate_request_full(self):
        req = _config(
            username_claim="email",
            username_prefix="oidc:",
            groups_claim="groups",
            groups_prefix="oidc:",
            required_claims={"aud": "kubernetes"},
            tags={"team": "platform"},
            status="ACTIVE",
        ).to_associate_request()
        assert req["usernameClaim"] == "email"
        assert req["usernamePrefix"] == "oidc:"
        assert req["groupsClaim"] == "groups"
        assert req["groupsPrefix"] == "oidc:"
        assert req["requiredClaims"] == {"aud": "kubernetes"}
        assert "tags" not in req
        assert "status" not in req
