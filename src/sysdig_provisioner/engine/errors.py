"""Exceptions raised by the plan/apply engine."""

from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Root of every error the engine raises on purpose."""


class StalePlanError(EngineError):
    """The state changed between ``plan`` and ``apply``."""


class StateLockError(EngineError):
    """The state lock could not be taken or released."""


class ResourceImportError(EngineError):
    """An existing object could not be adopted into state."""


class ApplyCanceled(EngineError):
    """Apply was interrupted (Ctrl-C); completed operations are kept in state."""


class UnknownResourceTypeError(EngineError):
    def __init__(self, resource_type: str) -> None:
        self.resource_type = resource_type
        super().__init__(f"Unknown resource type: {resource_type}")


class DependencyCycleError(EngineError):
    def __init__(self, addresses: list[str]) -> None:
        self.addresses = addresses
        members = f": {', '.join(addresses)}" if addresses else ""
        super().__init__(f"Dependency cycle detected{members}")


class ValidationError(EngineError):
    """Collects every validation problem found while planning."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("\n  - ".join(["Validation failed:", *errors]))


class AddressedError(EngineError):
    """An error tied to one resource address."""

    def __init__(self, address: str, message: str) -> None:
        self.address = address
        super().__init__(message)


class DuplicateAddressError(AddressedError):
    def __init__(self, address: str) -> None:
        super().__init__(address, f"Duplicate resource address: {address}")


class UnresolvedReferenceError(AddressedError):
    """A ``${type.name.attr}`` reference still has no value when the change is applied."""

    def __init__(self, address: str, references: list[str]) -> None:
        self.references = references
        super().__init__(address, f"Unresolved references in {address}: {', '.join(references)}")


class ApplyError(AddressedError):
    """Apply stopped at ``address``.

    ``result`` holds the changes that went through before the failure. They
    stay in state; nothing is rolled back. The underlying error is the
    ``__cause__``.
    """

    def __init__(self, *, applied: list[Any], address: str, message: str) -> None:
        from sysdig_provisioner.engine.types import ApplyResult

        self.result = ApplyResult(applied=applied)
        super().__init__(address, f"Apply failed on {address}: {message}")
