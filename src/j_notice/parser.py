"""Parse Maven POM files using lxml."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping

from lxml import etree

from j_notice.exceptions import PomModelError, PomNotFoundError, PomParseError
from j_notice.models import GAV, Dependency, License, MavenProject, UNKNOWN_VERSION


_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_PROJECT = "/*[local-name()='project']"


def _child(name: str) -> str:
    return f"/*[local-name()='{name}']"


def _text_first(node: etree._Element, xpath_expr: str) -> str | None:
    """Get text of the first matching element using namespace-agnostic XPath.

    Args:
        node: Element to query under.
        xpath_expr: XPath expression (should use local-name()).

    Returns:
        Text content if found and non-empty, otherwise None.
    """
    found = node.xpath(xpath_expr)
    if not found:
        return None
    first = found[0]
    if isinstance(first, etree._Element):
        text = (first.text or "").strip()
    elif isinstance(first, str):
        text = first.strip()
    else:
        return None
    return text or None


def _bool_text(value: str | None) -> bool | None:
    """Convert Maven boolean-ish text to bool.

    Args:
        value: String like 'true'/'false' or None.

    Returns:
        True/False for recognized values, otherwise None.
    """
    if value is None:
        return None
    return {"true": True, "false": False}.get(value.strip().lower())


def _xml_parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, recover=False)


def _parse_xml(path: Path) -> etree._Element:
    """Parse an XML file and return its root element.

    Args:
        path: Path to the pom.xml file.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If XML cannot be parsed.

    Returns:
        Root XML element.
    """
    if not path.exists():
        raise PomNotFoundError(f"pom.xml not found: {path}")
    try:
        return etree.parse(str(path), parser=_xml_parser()).getroot()
    except (OSError, etree.XMLSyntaxError) as exc:
        raise PomParseError(f"Failed to parse pom.xml: {path}") from exc


def _resolve_placeholders(value: str, props: Mapping[str, str]) -> str:
    """Resolve ${...} placeholders using provided properties.

    Unknown placeholders are preserved as-is. Nested references are followed
    a bounded number of times.
    """
    current = value
    for _ in range(5):
        nxt = _PLACEHOLDER_RE.sub(lambda m: props.get(m.group(1)) or m.group(0), current)
        if nxt == current:
            break
        current = nxt
    return current


def _normalize_version(value: str | None, props: Mapping[str, str]) -> str:
    """Resolve and normalize a Maven version string.

    Rules:
      - Missing version => "Unknown"
      - If placeholders remain after resolution (e.g. "${x.y}"), treat as unresolved => "Unknown"
    """
    if value is None:
        return UNKNOWN_VERSION

    resolved = _resolve_placeholders(value, props).strip()
    if not resolved or _PLACEHOLDER_RE.search(resolved):
        return UNKNOWN_VERSION
    return resolved


def _parse_properties(root: etree._Element) -> dict[str, str]:
    props: dict[str, str] = {}
    for n in root.xpath(_PROJECT + _child("properties") + "/*"):
        if not isinstance(n, etree._Element):
            continue
        key = etree.QName(n).localname
        val = (n.text or "").strip()
        if key and val:
            props[key] = val
    return props


def _parse_managed_versions(root: etree._Element, props: Mapping[str, str]) -> dict[tuple[str, str], str]:
    """Versions declared in `<dependencyManagement>`, keyed by (groupId, artifactId)."""
    managed: dict[tuple[str, str], str] = {}
    nodes = root.xpath(
        _PROJECT + _child("dependencyManagement") + _child("dependencies") + _child("dependency")
    )
    for dep in nodes:
        group_id = _text_first(dep, "./*[local-name()='groupId']")
        artifact_id = _text_first(dep, "./*[local-name()='artifactId']")
        version = _text_first(dep, "./*[local-name()='version']")
        if group_id and artifact_id and version:
            key = (_resolve_placeholders(group_id, props), artifact_id)
            managed[key] = _normalize_version(version, props)
    return managed


def _parse_licenses(root: etree._Element) -> list[License]:
    licenses: list[License] = []
    for node in root.xpath(_PROJECT + _child("licenses") + _child("license")):
        name = _text_first(node, "./*[local-name()='name']")
        if name is None:
            continue
        licenses.append(License(name=name))
    return licenses


def _build_model(root: etree._Element, source: str) -> MavenProject:
    raw_group_id = _text_first(root, _PROJECT + _child("groupId"))
    raw_artifact_id = _text_first(root, _PROJECT + _child("artifactId"))
    raw_version = _text_first(root, _PROJECT + _child("version"))

    parent_path = _PROJECT + _child("parent")
    parent_group_id = _text_first(root, parent_path + _child("groupId"))
    parent_artifact_id = _text_first(root, parent_path + _child("artifactId"))
    parent_version = _text_first(root, parent_path + _child("version"))

    if raw_artifact_id is None:
        raise PomModelError(f"Missing required <artifactId> in {source}")

    raw_group_id = raw_group_id or parent_group_id
    raw_version = raw_version or parent_version

    if raw_group_id is None:
        raise PomModelError(f"Missing required <groupId> (or parent <groupId>) in {source}")

    props = _parse_properties(root)
    effective_version = raw_version or UNKNOWN_VERSION
    builtins: dict[str, str] = {}
    for prefix in ("project.", "pom.", ""):
        builtins[prefix + "groupId"] = raw_group_id
        builtins[prefix + "artifactId"] = raw_artifact_id
        builtins[prefix + "version"] = effective_version
    if parent_version:
        builtins["project.parent.version"] = parent_version
    if parent_group_id:
        builtins["project.parent.groupId"] = parent_group_id
    merged_props = {**props, **builtins}

    project_gav = GAV(
        group_id=_resolve_placeholders(raw_group_id, merged_props),
        artifact_id=raw_artifact_id,
        version=_normalize_version(effective_version, merged_props),
    )

    parent: GAV | None = None
    if parent_group_id and parent_artifact_id:
        parent = GAV(
            group_id=parent_group_id,
            artifact_id=parent_artifact_id,
            version=_normalize_version(parent_version, merged_props),
        )

    managed = _parse_managed_versions(root, merged_props)

    deps: list[Dependency] = []
    for dep in root.xpath(_PROJECT + _child("dependencies") + _child("dependency")):
        dep_group_id = _text_first(dep, "./*[local-name()='groupId']")
        dep_artifact_id = _text_first(dep, "./*[local-name()='artifactId']")
        if dep_group_id is None or dep_artifact_id is None:
            continue

        dep_group_id = _resolve_placeholders(dep_group_id, merged_props)
        dep_version = _text_first(dep, "./*[local-name()='version']")
        if dep_version is None:
            version = managed.get((dep_group_id, dep_artifact_id), UNKNOWN_VERSION)
        else:
            version = _normalize_version(dep_version, merged_props)

        deps.append(
            Dependency(
                gav=GAV(group_id=dep_group_id, artifact_id=dep_artifact_id, version=version),
                scope=_text_first(dep, "./*[local-name()='scope']"),
                optional=_bool_text(_text_first(dep, "./*[local-name()='optional']")),
            )
        )

    modules = [
        m for m in (
            (n.text or "").strip()
            for n in root.xpath(_PROJECT + _child("modules") + _child("module"))
        ) if m
    ]

    name = _text_first(root, _PROJECT + _child("name"))
    if name is not None:
        name = _resolve_placeholders(name, merged_props)

    return MavenProject(
        project=project_gav,
        name=name,
        parent=parent,
        dependencies=deps,
        modules=modules,
        licenses=_parse_licenses(root),
    )


def parse_pom(path: str | Path) -> MavenProject:
    """Parse a Maven pom.xml.

    Notes:
        - Namespace handling: uses `local-name()` XPath so it works with or without XML namespaces.
        - Property placeholders like `${...}` are resolved when possible.
          If a version cannot be resolved, it is stored as "Unknown".
        - Dependencies without a version take it from `<dependencyManagement>` when declared there.

    Args:
        path: Path to a pom.xml.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If the XML is malformed.
        PomModelError: If required fields are missing.

    Returns:
        A `MavenProject` with coordinates, direct dependencies, modules and licenses.
    """
    pom_path = Path(path)
    return _build_model(_parse_xml(pom_path), str(pom_path))


def parse_pom_string(content: str | bytes, source: str = "<string>") -> MavenProject:
    """Parse POM content that is already in memory.

    Args:
        content: The POM document.
        source: Name used in error messages.

    Raises:
        PomParseError: If the XML is malformed.
        PomModelError: If required fields are missing.

    Returns:
        A `MavenProject`, as for `parse_pom`.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    try:
        root = etree.fromstring(content, parser=_xml_parser())
    except etree.XMLSyntaxError as exc:
        raise PomParseError(f"Failed to parse pom.xml: {source}") from exc
    return _build_model(root, source)
