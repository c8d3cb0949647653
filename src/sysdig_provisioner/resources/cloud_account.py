"""Secure cloud account resource model."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import Field

from sysdig_provisioner.resources.base import Resource
from sysdig_provisioner.resources.fields import ApiField, Block, Compare


class CloudAccountComponent(Block):
    """An onboarding component (e.g. a trusted role or a service principal)."""

    type: Annotated[str, ApiField("type")] = Field(pattern=r"^COMPONENT_[A-Z_]+$")
    instance: Annotated[str, ApiField("instance")] = Field(min_length=1)
    version: Annotated[str | None, ApiField("version")] = None
    metadata: Annotated[dict[str, Any] | None, ApiField("metadata")] = None


class CloudAccountResource(Resource):
    """A cloud provider account onboarded to Sysdig Secure (cloudauth)."""

    resource_type: ClassVar[str] = "sysdig_secure_cloud_auth_account"
    namespace: ClassVar[str] = "cloud_account"

    enabled: Annotated[bool, ApiField("enabled")] = True
    provider_id: Annotated[str, ApiField("providerId")] = Field(min_length=1)
    provider_type: Annotated[
        Literal["PROVIDER_AWS", "PROVIDER_GCP", "PROVIDER_AZURE"], ApiField("provider")
    ]
    provider_alias: Annotated[str | None, ApiField("providerAlias")] = None
    provider_tenant_id: Annotated[str | None, ApiField("providerTenantId")] = None
    organization_id: Annotated[str | None, ApiField("organizationId")] = None
    components: Annotated[list[CloudAccountComponent], ApiField("components")] = Field(
        default_factory=list
    )
    feature: Annotated[dict[str, Any], ApiField("feature"), Compare("partial")] = Field(
        default_factory=dict
    )
