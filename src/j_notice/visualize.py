"""Rich rendering utilities for license resolution results."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich.table import Table
from rich.tree import Tree

from j_notice.models import GAV, Project


def build_license_table(resolved: Mapping[str, str]) -> Table:
    """Build a table of resolved artifacts in NOTICE order."""
    table = Table(title="Resolved licenses")
    table.add_column("#", style="dim", width=6)
    table.add_column("Artifact")
    table.add_column("License", style="green")
    for i, (key, license_label) in enumerate(resolved.items(), start=1):
        table.add_row(str(i), key, license_label)
    return table


def build_unresolved_table(unresolved: Sequence[GAV]) -> Table:
    table = Table(title="Unresolved artifacts", title_style="bold red")
    table.add_column("#", style="dim", width=6)
    table.add_column("Group")
    table.add_column("Artifact")
    table.add_column("Version")
    for i, gav in enumerate(unresolved, start=1):
        table.add_row(str(i), gav.group_id, gav.artifact_id, gav.version)
    return table


def build_module_tree(project: Project) -> Tree:
    """Build a Rich Tree of the project and the modules it aggregates."""

    def add(branch: Tree, p: Project) -> None:
        for module in p.modules:
            add(branch.add(f"{module} [dim]{module.gav.compact()}[/dim]"), module)

    root = Tree(f"[bold]{project}[/bold] [dim]{project.gav.compact()}[/dim]")
    add(root, project)
    return root
