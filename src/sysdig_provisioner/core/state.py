"""Local state: what has been provisioned and the IDs Sysdig assigned to it."""

import hashlib
import json
import logging
import os
import shutil
import tempfile
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def canonical_json(obj: Any) -> str:
    """Compact JSON with sorted keys, so equal data always hashes the same."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)


def _sha256(obj: Any) -> str:
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


def compute_attributes_hash(attrs: Mapping[str, Any]) -> str:
    return _sha256(attrs)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ResourceInstance(BaseModel):
    """One provisioned object.

    ``attributes`` hold the object as last read back from the API, in the
    same shape as the resource's configuration plus the server-assigned
    ``id``. ``dependencies`` are the addresses it depended on when last
    applied; they order deletes once the configuration no longer says.
    """

    address: str
    resource_type: str
    name: str
    attributes: dict[str, Any] = Field(default_factory=dict)
    attributes_hash: str = ""
    dependencies: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def remote_id(self) -> Any:
        return self.attributes.get("id")

    def record(self, attrs: dict[str, Any]) -> bool:
        """Store freshly read *attrs*; returns whether anything changed."""
        digest = compute_attributes_hash(attrs)
        if attrs == self.attributes and digest == self.attributes_hash:
            return False
        self.attributes = attrs
        self.attributes_hash = digest
        self.updated_at = _utcnow()
        return True


class State(BaseModel):
    """Terraform-style state file.

    ``serial`` goes up by one on every write. ``lineage`` is fixed when the
    file is first created, so a plan made against one state history is never
    applied to another.
    """

    version: int = 1
    serial: int = 0
    lineage: str = Field(default_factory=lambda: str(uuid.uuid4()))
    resources: dict[str, ResourceInstance] = Field(default_factory=dict)

    def attributes_by_address(self) -> dict[str, dict[str, Any]]:
        return {address: inst.attributes for address, inst in self.resources.items()}

    def commit(self, path: Path) -> None:
        """Bump ``serial`` and write."""
        self.serial += 1
        self.save(path)

    def save(self, path: Path) -> None:
        """Replace *path* atomically; the previous file is kept as ``<name>.backup``."""
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists():
            shutil.copyfile(path, path.with_name(f"{path.name}.backup"))

        payload = json.dumps(self.model_dump(mode="json"), indent=2, sort_keys=True) + "\n"
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
        ) as tmp:
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        try:
            os.replace(tmp.name, path)
        except OSError:
            Path(tmp.name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote state serial %d to %s", self.serial, path)

    @classmethod
    def load(cls, path: Path) -> "State":
        return cls.model_validate_json(path.read_text(encoding="utf-8"))

    @classmethod
    def load_or_create(cls, path: Path) -> "State":
        if not path.exists():
            logger.debug("%s does not exist yet; starting from empty state", path)
            return cls()
        return cls.load(path)


def compute_state_digest(state: State) -> str:
    """Fingerprint of everything a plan depends on. Timestamps are left out."""
    return _sha256(
        {
            "version": state.version,
            "lineage": state.lineage,
            "serial": state.serial,
            "resources": [
                [address, inst.resource_type, inst.attributes_hash, sorted(inst.dependencies)]
                for address, inst in sorted(state.resources.items())
            ],
        }
    )
