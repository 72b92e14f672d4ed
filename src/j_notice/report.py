from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from lxml import etree

from j_notice.exceptions import UnresolvedLicenseError
from j_notice.log import get_logger
from j_notice.lookup import NAMESPACE, ROOT_ELEMENT
from j_notice.models import GAV, LicenseLookupDocument, LicenseLookupEntry, VersionSpec

log = get_logger(__name__)

STUB_FILE_NAME = "license-mappings.xml"

LookupDocumentWriter = Callable[[LicenseLookupDocument, Path], None]


def build_stub_document(unresolved: Iterable[GAV]) -> LicenseLookupDocument:
    """Create a lookup document with a blank license for each artifact.

    Each entry pins the artifact's actual version so that filling in the
    license is enough to make the coordinate resolve.
    """
    return LicenseLookupDocument(
        entries=[
            LicenseLookupEntry(
                group_id=gav.group_id,
                artifact_id=gav.artifact_id,
                versions=[VersionSpec(value=gav.version)],
            )
            for gav in unresolved
        ]
    )


def lookup_document_to_xml(document: LicenseLookupDocument) -> bytes:
    """Serialize a lookup document; a missing license becomes an empty `<license/>`."""
    ns = f"{{{NAMESPACE}}}"
    root = etree.Element(ns + ROOT_ELEMENT, nsmap={None: NAMESPACE})
    for entry in document.entries:
        artifact = etree.SubElement(root, ns + "artifact")
        etree.SubElement(artifact, ns + "groupId").text = entry.group_id
        etree.SubElement(artifact, ns + "artifactId").text = entry.artifact_id
        if entry.name:
            etree.SubElement(artifact, ns + "name").text = entry.name
        etree.SubElement(artifact, ns + "license").text = entry.license
        for spec in entry.versions:
            version = etree.SubElement(artifact, ns + "version")
            version.text = spec.value
            if spec.type != "exact":
                version.set("type", spec.type)
            if spec.license:
                version.set("license", spec.license)
    return etree.tostring(root, pretty_print=True, xml_declaration=True, encoding="UTF-8")


def write_lookup_document(document: LicenseLookupDocument, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(lookup_document_to_xml(document))


def check_unresolved(
    unresolved: Iterable[GAV],
    build_dir: Path,
    writer: LookupDocumentWriter = write_lookup_document,
) -> None:
    """Fail when any artifact is left without a license.

    A stub mapping file listing the artifacts is written to
    `build_dir/license-mappings.xml` first; a failure to write it is only
    logged.

    Raises:
        UnresolvedLicenseError: If `unresolved` is not empty.
    """
    artifacts = list(unresolved)
    if not artifacts:
        return

    log.error("Failed to find Licenses for the following dependencies: ")
    for gav in artifacts:
        log.error("\t%s", gav.compact())
    log.error("Try adding them to a 'licenseLookup' file.")

    stub_path = build_dir / STUB_FILE_NAME
    written: Path | None = None
    try:
        writer(build_stub_document(artifacts), stub_path)
    except OSError as exc:
        log.warning("Failed to write stub %s file to: %s (%s)", STUB_FILE_NAME, stub_path, exc)
    else:
        written = stub_path
        log.error("A stub license mapping file has been written to: %s", stub_path)

    raise UnresolvedLicenseError(len(artifacts), written)
