"""Pytest configuration and fixtures for j-notice tests."""
from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep JNOTICE_* settings from the developer's shell out of the tests.

    The local repository points at an empty directory so nothing from
    ~/.m2 leaks into resolution.
    """
    for name in list(os.environ):
        if name.startswith("JNOTICE_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("JNOTICE_LOCAL_REPOSITORY", str(tmp_path_factory.mktemp("m2")))


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo `configure_logging` from CLI tests so caplog sees package records."""
    yield
    logger = logging.getLogger("j_notice")
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def pom_xml(
    group_id: str,
    artifact_id: str,
    version: str,
    *,
    dependencies: list[tuple] = (),
    modules: list[str] = (),
    licenses: list[str] = (),
    name: str | None = None,
) -> str:
    """Render a small pom.xml.

    Each dependency is `(groupId, artifactId, version[, scope[, optional]])`.
    """
    deps = []
    for dep in dependencies:
        group, artifact, dep_version, *rest = dep
        scope = f"<scope>{rest[0]}</scope>" if rest and rest[0] else ""
        optional = "<optional>true</optional>" if len(rest) > 1 and rest[1] else ""
        deps.append(
            f"<dependency><groupId>{group}</groupId><artifactId>{artifact}</artifactId>"
            f"<version>{dep_version}</version>{scope}{optional}</dependency>"
        )
    module_xml = "".join(f"<module>{m}</module>" for m in modules)
    license_xml = "".join(f"<license><name>{lic}</name></license>" for lic in licenses)
    name_xml = f"<name>{name}</name>" if name else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>{group_id}</groupId>
  <artifactId>{artifact_id}</artifactId>
  <version>{version}</version>
  {name_xml}
  <licenses>{license_xml}</licenses>
  <modules>{module_xml}</modules>
  <dependencies>{"".join(deps)}</dependencies>
</project>
"""


@pytest.fixture
def write_pom():
    """Write a pom.xml into a directory and return its path."""

    def _write_pom(directory: Path, group_id: str, artifact_id: str, version: str = "1.0.0", **kwargs) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "pom.xml"
        path.write_text(pom_xml(group_id, artifact_id, version, **kwargs), encoding="utf-8")
        return path

    return _write_pom


@pytest.fixture
def m2(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty local repository; also exported as JNOTICE_LOCAL_REPOSITORY."""
    root = tmp_path / "m2"
    root.mkdir()
    monkeypatch.setenv("JNOTICE_LOCAL_REPOSITORY", str(root))
    return root


@pytest.fixture
def install_pom(m2: Path):
    """Place a POM into the local repository layout."""

    def _install(group_id: str, artifact_id: str, version: str, **kwargs) -> Path:
        path = m2.joinpath(*group_id.split(".")) / artifact_id / version / f"{artifact_id}-{version}.pom"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(pom_xml(group_id, artifact_id, version, **kwargs), encoding="utf-8")
        return path

    return _install
