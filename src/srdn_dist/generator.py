#!/usr/bin/env python3
"""
npm Manifest Generator

Builds the npm distribution of the srdn binary in one deterministic pass:

    load base manifest
    -> for each target triple: translate, emit ``npm/cli-{tag}``
    -> emit the root and CLI umbrella manifests

Each per-triple step returns its optional-dependency entry instead of writing
into a shared table, so the step can be exercised on its own. Outputs are
regenerated from scratch on every run; re-running with unchanged inputs yields
byte-identical files.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import GeneratorConfig
from .errors import ConfigurationError, ManifestError, MissingArtifactError
from .manifest import (
    CLI_PROFILE,
    PLATFORM_PROFILE,
    ROOT_PROFILE,
    Manifest,
    load_base_manifest,
    write_manifest,
)
from .platforms import PlatformTarget, translate_triple
from .utils.json_logger import log_with_context

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755
POSTINSTALL_SCRIPT = "postinstall.js"


@dataclass(frozen=True)
class PlatformPackage:
    """One generated platform package; doubles as its optional-dependency entry."""

    target: PlatformTarget
    name: str
    version: str
    directory: Path
    binary: str


@dataclass
class UmbrellaManifests:
    root: Manifest
    cli: Manifest


@dataclass
class GenerationReport:
    """Outcome of a generator run (or a dry-run plan)."""

    packages: List[PlatformPackage] = field(default_factory=list)
    optional_dependencies: Dict[str, str] = field(default_factory=dict)
    umbrella: Optional[UmbrellaManifests] = None
    dry_run: bool = False


def collect_optional_dependencies(packages: List[PlatformPackage]) -> Dict[str, str]:
    return {package.name: package.version for package in packages}


class ManifestGenerator:
    """Generates platform packages and umbrella manifests for npm."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def platform_package_name(self, base: Mapping[str, Any], target: PlatformTarget) -> str:
        return f"{base['name']}-cli-{target.tag}"

    def platform_directory(self, target: PlatformTarget) -> Path:
        return self.config.npm_path / f"cli-{target.tag}"

    def platform_manifest(self, base: Mapping[str, Any], target: PlatformTarget) -> Manifest:
        binary = target.binary_name(self.config.binary_stem)
        return PLATFORM_PROFILE.compose(
            base,
            {
                "name": self.platform_package_name(base, target),
                "os": [target.os],
                "cpu": [target.cpu],
                "files": [binary],
            },
        )

    def platform_readme(self, base: Mapping[str, Any], target: PlatformTarget) -> str:
        return (
            f"This is the {target.triple} build of {base['name']}. "
            f"See {self.config.repository} for details."
        )

    def emit_platform_package(
        self, target: PlatformTarget, base: Mapping[str, Any]
    ) -> PlatformPackage:
        """Write ``npm/cli-{tag}``: manifest, executable binary and README.

        Raises MissingArtifactError when the prebuilt binary is absent. Files
        already written for this target are left in place.
        """
        binary = target.binary_name(self.config.binary_stem)
        directory = self.platform_directory(target)
        source = self.config.artifact_path(target.triple, binary)
        manifest = self.platform_manifest(base, target)

        directory.mkdir(parents=True, exist_ok=True)
        write_manifest(directory / "package.json", manifest)

        if not source.is_file():
            raise MissingArtifactError(target.triple, source)
        destination = directory / binary
        shutil.copyfile(source, destination)
        destination.chmod(EXECUTABLE_MODE)

        (directory / "README.md").write_text(
            self.platform_readme(base, target), encoding="utf-8"
        )

        log_with_context(
            logger,
            logging.INFO,
            "Emitted platform package",
            triple=target.triple,
            tag=target.tag,
            package=manifest["name"],
            path=str(directory),
        )
        return PlatformPackage(
            target=target,
            name=manifest["name"],
            version=str(base["version"]),
            directory=directory,
            binary=binary,
        )

    def umbrella_manifests(
        self, base: Mapping[str, Any], optional_dependencies: Mapping[str, str]
    ) -> UmbrellaManifests:
        root = ROOT_PROFILE.compose(
            base, {"optionalDependencies": dict(optional_dependencies)}
        )
        command = self.config.command
        cli = CLI_PROFILE.compose(
            root,
            {
                "bin": {command: command},
                "files": [command, POSTINSTALL_SCRIPT],
                "optionalDependencies": dict(optional_dependencies),
            },
        )
        return UmbrellaManifests(root=root, cli=cli)

    def emit_umbrella_manifests(
        self, base: Mapping[str, Any], optional_dependencies: Mapping[str, str]
    ) -> UmbrellaManifests:
        """Rewrite the root manifest and write the CLI distribution manifest."""
        self._check_readme()
        umbrella = self.umbrella_manifests(base, optional_dependencies)

        write_manifest(self.config.manifest_path, umbrella.root)
        logger.info("Rewrote root manifest", extra={"path": str(self.config.manifest_path)})

        cli_dir = self.config.cli_path
        cli_dir.mkdir(parents=True, exist_ok=True)
        write_manifest(cli_dir / "package.json", umbrella.cli)
        shutil.copyfile(self.config.readme_path, cli_dir / "README.md")
        logger.info("Wrote CLI manifest", extra={"path": str(cli_dir)})

        return umbrella

    def targets(self) -> List[PlatformTarget]:
        return [translate_triple(triple) for triple in self.config.triples]

    def _check_config(self) -> None:
        errors = self.config.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))

    def _check_readme(self) -> None:
        if not self.config.readme_path.is_file():
            raise ManifestError(f"Project README not found: {self.config.readme_path}")

    def _load_inputs(self) -> Manifest:
        """Validate config and every repository input before any output is written."""
        self._check_config()
        base = load_base_manifest(self.config.manifest_path)
        self._check_readme()
        return base

    def plan(self) -> GenerationReport:
        """Compute what a run would produce without touching the filesystem."""
        base = self._load_inputs()
        packages = [
            PlatformPackage(
                target=target,
                name=self.platform_package_name(base, target),
                version=str(base["version"]),
                directory=self.platform_directory(target),
                binary=target.binary_name(self.config.binary_stem),
            )
            for target in self.targets()
        ]
        optional_dependencies = collect_optional_dependencies(packages)
        return GenerationReport(
            packages=packages,
            optional_dependencies=optional_dependencies,
            umbrella=self.umbrella_manifests(base, optional_dependencies),
            dry_run=True,
        )

    def run(self) -> GenerationReport:
        """Generate every platform package and both umbrella manifests.

        The base manifest is validated before anything is written. A failure
        part-way leaves earlier outputs on disk; the next run overwrites them.
        """
        base = self._load_inputs()
        targets = self.targets()
        logger.info(
            "Generating %d platform package(s) for %s@%s",
            len(targets),
            base["name"],
            base["version"],
        )

        packages = [self.emit_platform_package(target, base) for target in targets]
        optional_dependencies = collect_optional_dependencies(packages)
        umbrella = self.emit_umbrella_manifests(base, optional_dependencies)

        return GenerationReport(
            packages=packages,
            optional_dependencies=optional_dependencies,
            umbrella=umbrella,
        )
