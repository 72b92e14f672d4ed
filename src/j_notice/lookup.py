"""License lookup documents and the merged lookup index.

A lookup document maps artifacts to license labels::

    <license-lookup>
      <artifact>
        <groupId>org.slf4j</groupId>
        <artifactId>slf4j-api</artifactId>
        <name>SLF4J API</name>
        <license>MIT License</license>
        <version license="Apache License 2.0">2.0</version>
        <version type="regex">1\\..*</version>
      </artifact>
    </license-lookup>

Elements are matched by local name, so the document may or may not declare a
namespace. The same schema is used for the stub mapping file written for
unresolved artifacts.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import lru_cache

from lxml import etree
from pydantic import ValidationError

from j_notice.exceptions import LookupSourceError
from j_notice.models import GAV, LicenseLookupDocument, LicenseLookupEntry, ResolvedLicense, VersionSpec

ROOT_ELEMENT = "license-lookup"
NAMESPACE = "https://j-notice.dev/license-lookup"

VERSION_TYPES = ("exact", "regex")


def _local(node: etree._Element) -> str:
    return etree.QName(node).localname


def _text(node: etree._Element) -> str | None:
    text = (node.text or "").strip()
    return text or None


def _parse_entry(node: etree._Element, source: str) -> LicenseLookupEntry:
    fields: dict[str, str | None] = {}
    versions: list[VersionSpec] = []

    for child in node:
        if not isinstance(child.tag, str):
            continue
        tag = _local(child)
        if tag in ("groupId", "artifactId", "name", "license"):
            fields[tag] = _text(child)
        elif tag == "version":
            value = _text(child)
            if value is None:
                continue
            version_type = child.get("type", "exact").strip().lower()
            if version_type not in VERSION_TYPES:
                raise LookupSourceError(f"Unsupported version type '{version_type}' in {source}")
            if version_type == "regex":
                try:
                    re.compile(value)
                except re.error as exc:
                    raise LookupSourceError(f"Invalid version pattern '{value}' in {source}") from exc
            license_label = (child.get("license") or "").strip() or None
            versions.append(VersionSpec(value=value, license=license_label, type=version_type))

    group_id = fields.get("groupId")
    artifact_id = fields.get("artifactId")
    if group_id is None or artifact_id is None:
        raise LookupSourceError(
            f"Lookup entry on line {node.sourceline} is missing <groupId> or <artifactId> in {source}"
        )

    try:
        return LicenseLookupEntry(
            group_id=group_id,
            artifact_id=artifact_id,
            name=fields.get("name"),
            license=fields.get("license"),
            versions=versions,
        )
    except ValidationError as exc:
        raise LookupSourceError(f"Invalid lookup entry in {source}: {exc}") from exc


def parse_lookup_document(content: str | bytes, source: str = "<string>") -> LicenseLookupDocument:
    """Parse one license lookup source.

    Raises:
        LookupSourceError: If the content is not a well-formed lookup document.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
    try:
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise LookupSourceError(f"Failed to parse license lookup: {source}") from exc

    if _local(root) != ROOT_ELEMENT:
        raise LookupSourceError(
            f"Expected <{ROOT_ELEMENT}> root element but found <{_local(root)}> in {source}"
        )

    entries = [
        _parse_entry(node, source)
        for node in root
        if isinstance(node.tag, str) and _local(node) == "artifact"
    ]
    return LicenseLookupDocument(entries=entries, source=source)


@lru_cache(maxsize=256)
def _pattern(value: str) -> re.Pattern[str]:
    return re.compile(value)


def _version_matches(spec: VersionSpec, version: str) -> bool:
    if spec.type == "regex":
        return _pattern(spec.value).fullmatch(version) is not None
    return spec.value == version


def _entry_label(entry: LicenseLookupEntry, version: str) -> str | None:
    for spec in entry.versions:
        if _version_matches(spec, version):
            return spec.license or entry.license
    return entry.license


class LicenseLookup:
    """Ordered, read-only index over one or more lookup documents.

    Entries are grouped by `(groupId, artifactId)` in the order their
    documents were given. When several entries match a coordinate, the last
    one that yields a label wins, so later sources override earlier ones.
    """

    def __init__(self, entries: Iterable[LicenseLookupEntry] = ()) -> None:
        index: dict[tuple[str, str], list[LicenseLookupEntry]] = {}
        for entry in entries:
            index.setdefault(entry.key(), []).append(entry)
        self._index = {key: tuple(found) for key, found in index.items()}

    @classmethod
    def build(cls, documents: Sequence[LicenseLookupDocument]) -> LicenseLookup:
        return cls(entry for document in documents for entry in document.entries)

    def __len__(self) -> int:
        return sum(len(found) for found in self._index.values())

    def __contains__(self, gav: GAV) -> bool:
        return gav.key() in self._index

    def resolve(self, gav: GAV) -> ResolvedLicense | None:
        """Return the license for a coordinate, or None if no entry yields one."""
        for entry in reversed(self._index.get(gav.key(), ())):
            label = _entry_label(entry, gav.version)
            if label is not None:
                return ResolvedLicense(license=label, name=entry.name)
        return None
