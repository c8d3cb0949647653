"""Plan and apply engine for Sysdig resources."""

from sysdig_provisioner.engine.engine import SysdigEngine
from sysdig_provisioner.engine.errors import (
    ApplyCanceled,
    ApplyError,
    DependencyCycleError,
    DuplicateAddressError,
    EngineError,
    ResourceImportError,
    StalePlanError,
    StateLockError,
    UnknownResourceTypeError,
    UnresolvedReferenceError,
    ValidationError,
)
from sysdig_provisioner.engine.handlers import EngineContext, PlanContext, ResourceHandler
from sysdig_provisioner.engine.registry import ResourceTypeRegistration, ResourceTypeRegistry
from sysdig_provisioner.engine.types import Action, ApplyResult, Plan, PlanMetadata, ResourceChange

__all__ = [
    "Action",
    "ApplyCanceled",
    "ApplyError",
    "ApplyResult",
    "DependencyCycleError",
    "DuplicateAddressError",
    "EngineContext",
    "EngineError",
    "Plan",
    "PlanContext",
    "PlanMetadata",
    "ResourceChange",
    "ResourceHandler",
    "ResourceImportError",
    "ResourceTypeRegistration",
    "ResourceTypeRegistry",
    "StalePlanError",
    "StateLockError",
    "SysdigEngine",
    "UnknownResourceTypeError",
    "UnresolvedReferenceError",
    "ValidationError",
]
