from __future__ import annotations

from pathlib import Path

from j_notice.exceptions import PomNotFoundError
from j_notice.log import get_logger
from j_notice.models import Project
from j_notice.parser import parse_pom

log = get_logger(__name__)


def locate_pom(path: Path) -> Path:
    """Return the POM for a project directory or POM file.

    Args:
        path: A project directory containing pom.xml, or a POM file.

    Raises:
        PomNotFoundError: If no POM exists at that location.
    """
    if path.is_dir():
        path = path / "pom.xml"
    if not path.is_file():
        raise PomNotFoundError(f"pom.xml not found: {path}")
    return path


def load_project(path: Path, *, execution_root: bool = True) -> Project:
    """Load a project and, recursively, the modules it declares.

    Module entries are paths relative to the declaring project's directory and
    may point at a directory or directly at a POM file.
    """
    pom_path = locate_pom(path).resolve()
    model = parse_pom(pom_path)
    log.debug("Loaded %s from %s", model.project.compact(), pom_path)

    modules = [
        load_project(pom_path.parent / module, execution_root=False)
        for module in model.modules
    ]
    return Project(model=model, pom_path=pom_path, execution_root=execution_root, modules=modules)


def iter_projects(project: Project):
    """Yield a project followed by all of its sub-projects, depth first."""
    yield project
    for module in project.modules:
        yield from iter_projects(module)
