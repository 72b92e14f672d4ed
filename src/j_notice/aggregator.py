from __future__ import annotations

from collections.abc import Collection
from pathlib import PurePosixPath

from j_notice.graph import DependencyGraphProvider, walk
from j_notice.log import get_logger
from j_notice.models import GAV, Project
from j_notice.scanner import iter_projects
from j_notice.visitor import LicenseResolvingVisitor

log = get_logger(__name__)


def _module_path(module: Project, root: Project) -> str:
    try:
        relative = module.basedir.relative_to(root.basedir)
    except ValueError:
        return module.basedir.as_posix()
    return relative.as_posix()


def _normalize_module_path(path: str) -> str:
    normalized = PurePosixPath(path.replace("\\", "/")).as_posix()
    return normalized.rstrip("/") or "."


def is_excluded(module: Project, root: Project, excluded_module_paths: Collection[str]) -> bool:
    """Return True when a module's path (relative to the root project) is excluded.

    Entries may name the module directory or its pom.xml.
    """
    if not excluded_module_paths:
        return False
    path = _module_path(module, root)
    excluded = {_normalize_module_path(p) for p in excluded_module_paths}
    return path in excluded or f"{path}/{module.pom_path.name}" in excluded


def reactor_coordinates(project: Project) -> list[GAV]:
    """Coordinates of a project and every sub-project it declares."""
    return [p.gav for p in iter_projects(project)]


def process_project(
    project: Project,
    visitor: LicenseResolvingVisitor,
    provider: DependencyGraphProvider,
    *,
    aggregating: bool,
    excluded_module_paths: Collection[str] = (),
    root: Project | None = None,
) -> None:
    """Resolve the licenses of a project's dependencies into `visitor`.

    With `aggregating` enabled the declared sub-projects are processed
    recursively with the same visitor, so one NOTICE covers the whole reactor.

    Raises:
        DependencyGraphError: If the dependency tree of any project cannot be built.
    """
    root = root or project
    log.info("Parsing Dependencies for: %s", project)

    graph = provider.build(project)
    visitor.start(graph)
    walk(graph, visitor.visit)

    if not aggregating:
        return

    for module in project.modules:
        if is_excluded(module, root, excluded_module_paths):
            log.info("Skipping excluded module: %s", _module_path(module, root))
            continue
        process_project(
            module,
            visitor,
            provider,
            aggregating=aggregating,
            excluded_module_paths=excluded_module_paths,
            root=root,
        )

