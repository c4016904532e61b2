"""
Package manifest model and composition

Every generated ``package.json`` is composed from the project's base manifest
through a named ``ManifestProfile``: base fields, then overrides, then the
profile's removed keys dropped. The key set of each output type is therefore
declared in one place instead of being an ad-hoc sequence of deletions.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ManifestError

logger = logging.getLogger(__name__)

Manifest = Dict[str, Any]

# Keys that only make sense for the native-binding library package.
LIBRARY_KEYS: FrozenSet[str] = frozenset(
    {"main", "napi", "types", "targets", "devDependencies"}
)


class PackageDescriptor(BaseModel):
    """Validated view of the project's ``package.json``."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)


@dataclass(frozen=True)
class ManifestProfile:
    """Named key set for one kind of generated manifest."""

    name: str
    removed: FrozenSet[str] = frozenset()
    fixed: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def compose(
        self, base: Mapping[str, Any], overrides: Optional[Mapping[str, Any]] = None
    ) -> Manifest:
        """Return a new manifest built from ``base`` for this profile.

        Keys already present in ``base`` keep their position when overridden;
        new keys are appended in order, fixed profile values last. Removed
        keys are dropped at the end and cannot be reintroduced by an override.
        """
        merged: Manifest = copy.deepcopy(dict(base))
        for key, value in {**(overrides or {}), **self.fixed}.items():
            merged[key] = copy.deepcopy(value)
        for key in self.removed:
            merged.pop(key, None)
        return merged


ROOT_PROFILE = ManifestProfile(name="root")

PLATFORM_PROFILE = ManifestProfile(
    name="platform",
    removed=LIBRARY_KEYS
    | {"dependencies", "optionalDependencies", "scripts"},
)

CLI_PROFILE = ManifestProfile(
    name="cli",
    removed=LIBRARY_KEYS,
    fixed=MappingProxyType({"scripts": {"postinstall": "node postinstall.js"}}),
)


def load_base_manifest(path: Path) -> Manifest:
    """Load and validate the project descriptor.

    Raises ManifestError for a missing file, invalid JSON or a descriptor
    without a usable name and version.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ManifestError(f"Project descriptor not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"Project descriptor is not valid JSON: {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Project descriptor must be a JSON object: {path}")

    try:
        PackageDescriptor.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid project descriptor {path}: {e}") from e

    logger.debug("Loaded base manifest %s@%s", data["name"], data["version"])
    return data


def dump_manifest(manifest: Mapping[str, Any]) -> str:
    return json.dumps(manifest, ensure_ascii=False, indent=2) + "\n"


def write_manifest(path: Path, manifest: Mapping[str, Any]) -> None:
    path.write_text(dump_manifest(manifest), encoding="utf-8")
