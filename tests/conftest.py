"""
Shared fixtures for srdn-dist tests.

Builds a throwaway srdn repository layout: package.json with the library-only
fields the generator has to strip, a README, and prebuilt binaries under
artifacts/bindings-{triple}/.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict

import pytest

from srdn_dist.config import GeneratorConfig
from srdn_dist.platforms import SUPPORTED_TRIPLES, translate_triple

BASE_MANIFEST: Dict[str, Any] = {
    "name": "@sardine/srdn",
    "version": "0.2.1",
    "description": "4 in 5 sardines recommend this CLI",
    "main": "index.js",
    "types": "index.d.ts",
    "files": ["index.js", "index.d.ts"],
    "napi": {"name": "srdn", "triples": {}},
    "targets": {"main": False, "types": False},
    "license": "MIT",
    "dependencies": {"detect-libc": "^2.0.1"},
    "devDependencies": {"@napi-rs/cli": "^2.4.2"},
    "scripts": {"build": "napi build --platform --release"},
}


def add_artifact(root: Path, triple: str, content: bytes = b"\x7fELF srdn") -> Path:
    binary = translate_triple(triple).binary_name()
    path = root / "artifacts" / f"bindings-{triple}" / binary
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content + triple.encode())
    return path


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Repository root with manifest, README and artifacts for the supported triples."""
    (tmp_path / "package.json").write_text(
        json.dumps(BASE_MANIFEST, indent=2) + "\n", encoding="utf-8"
    )
    (tmp_path / "README.md").write_text("# srdn\n\nCSS bundler.\n", encoding="utf-8")
    for triple in SUPPORTED_TRIPLES:
        add_artifact(tmp_path, triple)
    return tmp_path


@pytest.fixture
def config(repo: Path) -> GeneratorConfig:
    return GeneratorConfig(root=repo)


@pytest.fixture
def artifact_factory(repo: Path):
    def _add(triple: str, content: bytes = b"\x7fELF srdn") -> Path:
        return add_artifact(repo, triple, content)

    return _add


@pytest.fixture
def base_manifest() -> Dict[str, Any]:
    return copy.deepcopy(BASE_MANIFEST)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI runs reconfigure the root logger; put it back after each test."""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
