"""Read-only access to a Maven local repository (`~/.m2/repository` layout)."""

from __future__ import annotations

import os
from pathlib import Path

from j_notice.exceptions import NoticeError
from j_notice.log import get_logger
from j_notice.models import GAV, MavenProject, UNKNOWN_VERSION
from j_notice.parser import parse_pom

log = get_logger(__name__)


def default_repository_root() -> Path:
    configured = os.getenv("JNOTICE_LOCAL_REPOSITORY")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".m2" / "repository"


class LocalRepository:
    """POM lookups against a local repository directory.

    Parsed POMs are cached per coordinate; artifacts that are missing or whose
    POM cannot be parsed yield None.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root if root is not None else default_repository_root()
        self._cache: dict[GAV, MavenProject | None] = {}

    def pom_path(self, gav: GAV) -> Path:
        """Return where the POM of `gav` lives in the repository layout."""
        return (
            self.root.joinpath(*gav.group_id.split("."))
            / gav.artifact_id
            / gav.version
            / f"{gav.artifact_id}-{gav.version}.pom"
        )

    def metadata(self, gav: GAV) -> MavenProject | None:
        """Return the parsed POM of an artifact, or None when it is not available."""
        if gav.version == UNKNOWN_VERSION:
            return None
        if gav in self._cache:
            return self._cache[gav]

        path = self.pom_path(gav)
        model: MavenProject | None = None
        if path.is_file():
            try:
                model = parse_pom(path)
            except NoticeError as exc:
                log.warning("Ignoring unreadable POM for %s: %s", gav.compact(), exc)
        else:
            log.debug("No POM for %s at %s", gav.compact(), path)

        self._cache[gav] = model
        return model
