from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
from typing import Protocol

import networkx as nx

from j_notice.exceptions import DependencyGraphError, NoticeError
from j_notice.log import get_logger
from j_notice.models import GAV, Dependency, DependencyNode, MavenProject, Project
from j_notice.repository import LocalRepository

log = get_logger(__name__)

DEFAULT_SCOPES = frozenset({"compile", "runtime"})

# Scopes Maven propagates from a dependency's own dependencies.
TRANSITIVE_SCOPES = frozenset({"compile", "runtime"})


class DependencyGraphProvider(Protocol):
    def build(self, project: Project) -> DependencyNode:
        """Return the dependency tree rooted at the project itself."""
        ...


def _effective_scope(scope: str | None) -> str:
    return scope or "compile"


def build_graph(projects: Iterable[MavenProject], scopes: Iterable[str] = DEFAULT_SCOPES) -> nx.DiGraph:
    """Build a directed graph where A -> B means A depends on B.

    Nodes are `GAV` objects; edges carry `scope` and `optional`. Dependencies
    whose scope is not in `scopes` are left out.
    """
    wanted = frozenset(scopes)
    g = nx.DiGraph()
    for proj in projects:
        a = proj.project
        g.add_node(a)
        for dep in proj.dependencies:
            if _effective_scope(dep.scope) not in wanted:
                continue
            b = dep.gav
            if b == a:
                continue
            g.add_node(b)
            g.add_edge(a, b, scope=dep.scope, optional=dep.optional)
    return g


def graph_to_tree(g: nx.DiGraph, root: GAV) -> DependencyNode:
    """Unfold a dependency graph into a tree rooted at `root`, mediated like Maven.

    Each `(groupId, artifactId)` appears once, at the shallowest position
    reached breadth-first (ties go to the earlier declaration). Later
    occurrences are omitted, including other versions of the same artifact,
    so diamonds and cycles never repeat a subtree.
    """
    top = DependencyNode(gav=root)
    placed = {root.key()}
    queue: deque[DependencyNode] = deque([top])
    while queue:
        node = queue.popleft()
        for child in g.successors(node.gav):
            if child.key() in placed:
                continue
            placed.add(child.key())
            data = g.edges[node.gav, child]
            child_node = DependencyNode(gav=child, scope=data.get("scope"), optional=data.get("optional"))
            node.children.append(child_node)
            queue.append(child_node)
    return top


def walk(node: DependencyNode, callback: Callable[[DependencyNode], bool]) -> None:
    """Pre-order traversal: parent before children.

    The callback returns False to skip the children of a node.
    """
    if callback(node):
        for child in node.children:
            walk(child, callback)


class RepositoryGraphProvider:
    """Dependency trees from a project's POM plus the POMs in a local repository.

    Direct dependencies are kept when their scope is one of `scopes`.
    Dependencies of dependencies are followed through the repository when
    their POM is present there; optional and non-transitive scopes are not
    propagated, mirroring Maven.
    """

    def __init__(self, repository: LocalRepository | None = None, scopes: Iterable[str] = DEFAULT_SCOPES) -> None:
        self.repository = repository
        self.scopes = frozenset(scopes)

    def collect(self, model: MavenProject) -> nx.DiGraph:
        """Return the mediated dependency graph of a project.

        The graph is walked breadth-first, so the version nearest to the
        project wins for each `(groupId, artifactId)`; an artifact reached
        again (same or another version) is omitted and not followed further.
        """
        root = model.project
        g = nx.DiGraph()
        g.add_node(root)
        chosen: dict[tuple[str, str], GAV] = {root.key(): root}
        transitive = self.scopes & TRANSITIVE_SCOPES

        queue: deque[tuple[GAV, list[Dependency]]] = deque([(root, model.dependencies)])
        while queue:
            gav, dependencies = queue.popleft()
            direct = gav == root
            for dep in dependencies:
                if not direct and dep.optional:
                    continue
                if _effective_scope(dep.scope) not in (self.scopes if direct else transitive):
                    continue
                winner = chosen.get(dep.gav.key())
                if winner is not None:
                    if winner != dep.gav:
                        log.debug("Omitting %s (conflicts with %s)", dep.gav.compact(), winner.compact())
                    continue
                chosen[dep.gav.key()] = dep.gav
                g.add_edge(gav, dep.gav, scope=dep.scope, optional=dep.optional)

                if self.repository is None:
                    continue
                dep_model = self.repository.metadata(dep.gav)
                if dep_model is not None:
                    queue.append((dep.gav, dep_model.dependencies))
        return g

    def build(self, project: Project) -> DependencyNode:
        try:
            g = self.collect(project.model)
            return graph_to_tree(g, project.gav)
        except (NoticeError, nx.NetworkXError) as exc:
            raise DependencyGraphError(
                f"Cannot build project dependency tree for project: {project}"
            ) from exc
