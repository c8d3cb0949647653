from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from sysdig_provisioner.core import ResourceInstance, SysdigProvider
from sysdig_provisioner.engine.cloud_account_handler import CloudAccountHandler
from sysdig_provisioner.engine.handlers import EngineContext
from sysdig_provisioner.resources.cloud_account import CloudAccountResource

if TYPE_CHECKING:
    from collections.abc import Callable
    from unittest.mock import MagicMock

    from sysdig_provisioner.client import SecureClient


@pytest.fixture
def ctx(secure: SecureClient) -> EngineContext:
    return EngineContext(provider=SysdigProvider.from_clients(secure=secure))


def _aws(**overrides) -> CloudAccountResource:
    fields = {
        "name": "prod",
        "provider_id": "123456789012",
        "provider_type": "PROVIDER_AWS",
        "components": [
            {
                "type": "COMPONENT_TRUSTED_ROLE",
                "instance": "secure-posture",
                "metadata": {"trustedRole": {"aws": {"roleName": "sysdig-secure"}}},
            }
        ],
        "feature": {"secure_config_posture": {"enabled": True}},
    }
    fields.update(overrides)
    return CloudAccountResource(**fields)


class TestParseId:
    def test_keeps_opaque_string(self) -> None:
        assert CloudAccountHandler().parse_id(" 8b2a-acc ") == "8b2a-acc"

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            CloudAccountHandler().parse_id("  ")


def test_duplicate_components_rejected(ctx: EngineContext) -> None:
    component = {"type": "COMPONENT_TRUSTED_ROLE", "instance": "secure-posture"}
    desired = _aws(components=[component, component])

    errors = CloudAccountHandler().validate(ctx, desired)

    assert errors == [
        "sysdig_secure_cloud_auth_account.prod: duplicate component "
        "COMPONENT_TRUSTED_ROLE instance 'secure-posture'"
    ]
    assert CloudAccountHandler().validate(ctx, _aws()) == []


def test_create_request_and_attrs(
    ctx: EngineContext, requester: MagicMock, echo: Callable[..., object]
) -> None:
    requester.request.side_effect = echo(
        201, id="acc-1", customerId="42", createdAt="2024-01-01T00:00:00Z"
    )

    attrs = CloudAccountHandler().create(ctx, _aws())

    method, url, payload = requester.request.call_args.args
    body = json.loads(payload)
    assert (method, url) == ("POST", "https://secure.test/api/cloudauth/v1/accounts")
    assert body["provider"] == "PROVIDER_AWS"
    assert body["providerId"] == "123456789012"
    assert body["components"][0]["type"] == "COMPONENT_TRUSTED_ROLE"
    assert "id" not in body
    assert attrs["id"] == "acc-1"
    assert attrs["provider_type"] == "PROVIDER_AWS"
    assert attrs["components"][0]["instance"] == "secure-posture"
    assert "customer_id" not in attrs


def test_update_uses_account_id(
    ctx: EngineContext, requester: MagicMock, echo: Callable[..., object]
) -> None:
    requester.request.side_effect = echo(200)
    prior = ResourceInstance(
        address="sysdig_secure_cloud_auth_account.prod",
        resource_type="sysdig_secure_cloud_auth_account",
        name="prod",
        attributes={"id": "acc-1"},
    )

    attrs = CloudAccountHandler().update(ctx, _aws(enabled=False), prior)

    method, url, payload = requester.request.call_args.args
    assert (method, url) == ("PUT", "https://secure.test/api/cloudauth/v1/accounts/acc-1")
    assert json.loads(payload)["enabled"] is False
    assert attrs["enabled"] is False
