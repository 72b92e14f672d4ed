"""Pydantic models for Maven artifacts, projects and license lookups."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


UNKNOWN_VERSION = "Unknown"


class GAV(BaseModel):
    """Maven coordinates (GroupId, ArtifactId, Version)."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str = Field(default=UNKNOWN_VERSION, min_length=1)

    def compact(self) -> str:
        """Return a compact string representation.

        Returns:
            A string like `groupId:artifactId:version`.
        """
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def key(self) -> tuple[str, str]:
        """Return the version-less lookup key `(groupId, artifactId)`."""
        return (self.group_id, self.artifact_id)

    def __str__(self) -> str:
        return self.compact()


class Dependency(BaseModel):
    """A Maven dependency entry."""

    gav: GAV
    scope: str | None = None
    optional: bool | None = None


class License(BaseModel):
    """A `<license>` declared in a POM."""

    name: str


class MavenProject(BaseModel):
    """A parsed Maven project model."""

    project: GAV
    name: str | None = None
    parent: GAV | None = None
    dependencies: list[Dependency] = Field(default_factory=list)
    modules: list[str] = Field(default_factory=list)
    licenses: list[License] = Field(default_factory=list)

    def display_name(self) -> str:
        return self.name or self.project.compact()


class Project(BaseModel):
    """A project of the reactor together with its loaded sub-projects."""

    model: MavenProject
    pom_path: Path
    execution_root: bool = False
    modules: list[Project] = Field(default_factory=list)

    @property
    def basedir(self) -> Path:
        return self.pom_path.parent

    @property
    def build_dir(self) -> Path:
        return self.basedir / "target"

    @property
    def gav(self) -> GAV:
        return self.model.project

    def __str__(self) -> str:
        return self.model.display_name()


class DependencyNode(BaseModel):
    """One artifact occurrence in a resolved dependency tree."""

    gav: GAV
    scope: str | None = None
    optional: bool | None = None
    children: list[DependencyNode] = Field(default_factory=list)


class VersionSpec(BaseModel):
    """A version value (or pattern) refining a lookup entry."""

    value: str = Field(..., min_length=1)
    license: str | None = None
    type: Literal["exact", "regex"] = "exact"


class LicenseLookupEntry(BaseModel):
    """Maps a `(groupId, artifactId)` coordinate to a license label."""

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    name: str | None = None
    license: str | None = None
    versions: list[VersionSpec] = Field(default_factory=list)

    def key(self) -> tuple[str, str]:
        return (self.group_id, self.artifact_id)


class LicenseLookupDocument(BaseModel):
    """A parsed license lookup source, also used for the stub mapping file."""

    entries: list[LicenseLookupEntry] = Field(default_factory=list)
    source: str | None = None


class ResolvedLicense(BaseModel):
    """The outcome of a successful license lookup."""

    license: str
    name: str | None = None


Project.model_rebuild()
DependencyNode.model_rebuild()
