"""
Configuration for the npm distribution generator.

Paths default to the layout of the srdn repository; the set of target triples
defaults to the supported list and can be narrowed or widened from a YAML
file, environment variables or the command line.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError
from .platforms import SUPPORTED_TRIPLES

LOG_FORMATS = ("json", "text")


@dataclass
class GeneratorConfig:
    """srdn-dist generator configuration."""

    # Repository layout
    root: Path = field(default_factory=Path.cwd)
    artifacts_dir: str = "artifacts"
    npm_dir: str = "npm"
    cli_dir: str = "cli"
    manifest_file: str = "package.json"
    readme_file: str = "README.md"

    # Distribution identity
    binary_stem: str = "srdn"
    command: str = "srdn"
    repository: str = "https://github.com/sardinedev/srdn"

    triples: list[str] = field(default_factory=lambda: list(SUPPORTED_TRIPLES))

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    @property
    def manifest_path(self) -> Path:
        return self.root / self.manifest_file

    @property
    def readme_path(self) -> Path:
        return self.root / self.readme_file

    @property
    def npm_path(self) -> Path:
        return self.root / self.npm_dir

    @property
    def cli_path(self) -> Path:
        return self.root / self.cli_dir

    def artifact_path(self, triple: str, binary: str) -> Path:
        return self.root / self.artifacts_dir / f"bindings-{triple}" / binary

    @classmethod
    def from_env(cls, prefix: str = "SRDN_DIST_") -> "GeneratorConfig":
        """Create config from environment variables."""
        return cls(**cls._env_overrides(prefix))

    @staticmethod
    def _env_overrides(prefix: str) -> dict[str, Any]:
        known = {f.name for f in fields(GeneratorConfig)}
        config_data: dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            config_key = key[len(prefix) :].lower()
            if config_key not in known:
                continue
            if config_key == "triples":
                config_data[config_key] = [t for t in value.replace(",", " ").split() if t]
            else:
                config_data[config_key] = value

        return config_data

    @classmethod
    def from_file(cls, config_path: Path) -> "GeneratorConfig":
        """Load configuration from a YAML file."""
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

        for key, value in config_data.items():
            if key == "triples":
                if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
                    raise ConfigurationError(f"'triples' in {config_path} must be a list of strings")
            elif not isinstance(value, str):
                raise ConfigurationError(f"'{key}' in {config_path} must be a string")

        return cls(**config_data)

    @classmethod
    def load(cls, config_path: Path | None = None, prefix: str = "SRDN_DIST_") -> "GeneratorConfig":
        """File values first, environment variables on top."""
        base = cls.from_file(config_path) if config_path else cls()
        return base.merged(**cls._env_overrides(prefix))

    def merged(self, **overrides: Any) -> "GeneratorConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.root.is_dir():
            errors.append(f"Repository root not found: {self.root}")

        if not self.triples:
            errors.append("At least one target triple is required")

        duplicates = sorted({t for t in self.triples if self.triples.count(t) > 1})
        if duplicates:
            errors.append(f"Duplicate target triples: {', '.join(duplicates)}")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            errors.append(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            errors.append(f"Log format must be one of {', '.join(LOG_FORMATS)}")

        return errors

