from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from j_notice.log import get_logger
from j_notice.lookup import LicenseLookup
from j_notice.models import GAV, DependencyNode, MavenProject, ResolvedLicense

log = get_logger(__name__)


class ArtifactMetadataProvider(Protocol):
    def metadata(self, gav: GAV) -> MavenProject | None: ...


def display_key(gav: GAV, name: str | None = None) -> str:
    """Return the NOTICE label of an artifact.

    Returns:
        `name (group:artifact:version)` when a name is known, otherwise
        `group:artifact:version`.
    """
    if name:
        return f"{name} ({gav.compact()})"
    return gav.compact()


class LicenseResolvingVisitor:
    """Resolves the license of every visited dependency node.

    Licenses come from the lookup index first and, when a metadata provider is
    given, from the single `<license>` an artifact's own POM declares.
    Results accumulate across every graph the visitor is run over:

    - `resolved_licenses`: display key -> license label, in first-visit order.
    - `unresolved_artifacts`: coordinates with no license, in first-visit order.

    Each coordinate ends up in exactly one of the two.
    """

    def __init__(
        self,
        lookup: LicenseLookup,
        metadata: ArtifactMetadataProvider | None = None,
        skip: Iterable[GAV] = (),
    ) -> None:
        self.lookup = lookup
        self.metadata = metadata
        self._skip = {gav.key() for gav in skip}
        self._resolved: dict[str, str] = {}
        self._keys: dict[GAV, str] = {}
        self._unresolved: dict[GAV, None] = {}
        self._roots: set[GAV] = set()

    @property
    def resolved_licenses(self) -> dict[str, str]:
        return dict(self._resolved)

    @property
    def unresolved_artifacts(self) -> list[GAV]:
        return list(self._unresolved)

    def start(self, root: DependencyNode) -> None:
        """Mark the root of the next graph; the project itself is not a dependency."""
        self._roots.add(root.gav)

    def visit(self, node: DependencyNode) -> bool:
        gav = node.gav
        if gav in self._roots or gav.key() in self._skip:
            return True

        resolved = self.resolve(gav)
        if resolved is None:
            log.debug("No license found for %s", gav.compact())
            self._mark_unresolved(gav)
        else:
            self._mark_resolved(gav, display_key(gav, resolved.name), resolved.license)
        return True

    def resolve(self, gav: GAV) -> ResolvedLicense | None:
        found = self.lookup.resolve(gav)
        if found is not None and found.name:
            return found

        model = self.metadata.metadata(gav) if self.metadata is not None else None
        if found is not None:
            return ResolvedLicense(license=found.license, name=model.name if model else None)
        if model is None:
            return None

        if len(model.licenses) == 1:
            return ResolvedLicense(license=model.licenses[0].name, name=model.name)
        if model.licenses:
            log.debug(
                "%s declares %d licenses, a lookup mapping must pick one",
                gav.compact(),
                len(model.licenses),
            )
        return None

    def _mark_resolved(self, gav: GAV, key: str, license_label: str) -> None:
        self._unresolved.pop(gav, None)
        previous = self._keys.get(gav)
        if previous is not None and previous != key:
            del self._resolved[previous]
        self._keys[gav] = key
        self._resolved[key] = license_label

    def _mark_unresolved(self, gav: GAV) -> None:
        previous = self._keys.pop(gav, None)
        if previous is not None:
            del self._resolved[previous]
        self._unresolved[gav] = None
