"""Read ``sysdig-provisioner.yaml`` into a validated :class:`Config`."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor
from ruamel.yaml.error import YAMLError

from sysdig_provisioner.config.schema import Config

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sysdig_provisioner.resources.base import Resource

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """The configuration file cannot be read or is invalid."""


class _ProviderField:
    def __init__(self, env: str, *, secret: bool = False, boolean: bool = False) -> None:
        self.env = env
        self.secret = secret
        self.boolean = boolean

    def coerce(self, value: Any) -> Any:
        if not (self.boolean and isinstance(value, str)):
            return value
        parsed = SafeConstructor.bool_values.get(value.lower())
        if parsed is None:
            raise ConfigError(f"Invalid boolean for {self.env}: {value!r}")
        return parsed


_PROVIDER_FIELDS: dict[str, _ProviderField] = {
    "monitor_url": _ProviderField("SYSDIG_MONITOR_URL"),
    "monitor_api_token": _ProviderField("SYSDIG_MONITOR_API_TOKEN", secret=True),
    "secure_url": _ProviderField("SYSDIG_SECURE_URL"),
    "secure_api_token": _ProviderField("SYSDIG_SECURE_API_TOKEN", secret=True),
    "insecure_tls": _ProviderField("SYSDIG_INSECURE_TLS", boolean=True),
}


def _resolve_provider(raw_provider: dict[str, Any], config_dir: Path) -> dict[str, Any]:
    """Fill provider settings from, in order of precedence, YAML, the environment and ``.env``."""
    env_file = config_dir / ".env"
    dotenv: Mapping[str, str | None] = (
        dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}
    )

    # Unknown keys pass through so the schema can reject them.
    resolved = {
        k: v for k, v in raw_provider.items() if k not in _PROVIDER_FIELDS and v is not None
    }
    for name, field in _PROVIDER_FIELDS.items():
        if field.secret and raw_provider.get(name) is not None:
            logger.warning("provider.%s is set in YAML; prefer %s", name, field.env)
        candidates = (raw_provider.get(name), os.environ.get(field.env), dotenv.get(field.env))
        value = next((c for c in candidates if c is not None), None)
        if value is not None:
            resolved[name] = field.coerce(value)
    return resolved


def _duplicate_names(resources: Iterable[Resource]) -> list[str]:
    """Names must be unique per namespace, since they become the remote display names."""
    first_seen: dict[tuple[str, str], str] = {}
    problems = []
    for r in resources:
        key = (r.namespace, r.name)
        if key in first_seen:
            problems.append(
                f"Duplicate {r.namespace} name '{r.name}': "
                f"found in both {first_seen[key]} and {r.address}"
            )
        else:
            first_seen[key] = r.address
    return problems


def load_config(path: Path | str) -> Config:
    """Parse and validate the configuration at *path*.

    A relative ``state_path`` is taken relative to the file's directory.

    Raises:
        ConfigError: The file is unreadable, is not YAML, or fails validation.
    """
    path = Path(path)
    try:
        raw = YAML(typ="safe").load(path) or {}
    except (OSError, YAMLError) as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    raw["provider"] = _resolve_provider(raw.get("provider") or {}, path.parent)
    try:
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    config.config_dir = path.parent
    if not config.state_path.is_absolute():
        config.state_path = path.parent / config.state_path

    if problems := _duplicate_names(config.resources):
        raise ConfigError("\n".join(problems))

    logger.info("Loaded config from %s (%d resources)", path, len(config.resources))
    return config
