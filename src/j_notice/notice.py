"""Generate the NOTICE content for a Maven project."""

from __future__ import annotations

from j_notice.aggregator import process_project, reactor_coordinates
from j_notice.config import NoticeConfig
from j_notice.exceptions import ResourceNotFoundError
from j_notice.graph import DependencyGraphProvider
from j_notice.log import get_logger
from j_notice.lookup import LicenseLookup
from j_notice.models import Project
from j_notice.render import generate_notice_lines, render_notice
from j_notice.report import LookupDocumentWriter, check_unresolved, write_lookup_document
from j_notice.resources import ResourceFinder
from j_notice.sinks import NoticeSink
from j_notice.visitor import ArtifactMetadataProvider, LicenseResolvingVisitor

log = get_logger(__name__)


class NoticeGenerator:
    """Runs one NOTICE generation.

    Collaborators are passed in explicitly:
        provider: builds the dependency tree of each project
        finder: loads lookup sources and the NOTICE template
        sink: receives the rendered NOTICE (write it, or compare it)
        metadata: optional source of POM-declared licenses and names
        stub_writer: persists the stub mapping file for unresolved artifacts
    """

    def __init__(
        self,
        config: NoticeConfig,
        provider: DependencyGraphProvider,
        finder: ResourceFinder,
        sink: NoticeSink,
        metadata: ArtifactMetadataProvider | None = None,
        stub_writer: LookupDocumentWriter = write_lookup_document,
    ) -> None:
        self.config = config
        self.provider = provider
        self.finder = finder
        self.sink = sink
        self.metadata = metadata
        self.stub_writer = stub_writer

    def load_lookup(self) -> LicenseLookup:
        documents = [self.finder.load_lookup(ref) for ref in self.config.license_lookup]
        lookup = LicenseLookup.build(documents)
        log.debug("Loaded %d license mapping(s) from %d source(s)", len(lookup), len(documents))
        return lookup

    def resolve(self, project: Project) -> LicenseResolvingVisitor:
        """Resolve the licenses of every dependency of the project (and its modules)."""
        skip = reactor_coordinates(project) if self.config.aggregating else [project.gav]
        visitor = LicenseResolvingVisitor(self.load_lookup(), metadata=self.metadata, skip=skip)
        process_project(
            project,
            visitor,
            self.provider,
            aggregating=self.config.aggregating,
            excluded_module_paths=self.config.excluded_module_paths,
        )
        return visitor

    def read_template(self) -> str:
        try:
            return self.finder.read_text(self.config.notice_template, self.config.encoding)
        except ResourceNotFoundError as exc:
            raise ResourceNotFoundError(
                f"Failed to open NOTICE Template File '{self.config.notice_template}': {exc}"
            ) from exc

    def render(self, resolved: dict[str, str]) -> str:
        lines = generate_notice_lines(resolved, self.config.notice_message, self.config.indent)
        return render_notice(self.read_template(), self.config.placeholder, lines)

    def run(self, project: Project) -> str | None:
        """Generate the NOTICE for `project` and hand it to the sink.

        Returns:
            The NOTICE content, or None when the project is a module of an
            aggregating build (the execution root covers it).

        Raises:
            UnresolvedLicenseError: If any dependency has no resolvable license.
            NoticeError: For configuration, lookup, template and graph failures.
        """
        self.config.validate()

        if self.config.aggregating and not project.execution_root:
            log.info("Skipping %s: NOTICE is generated by the execution root", project)
            return None

        visitor = self.resolve(project)
        check_unresolved(visitor.unresolved_artifacts, project.build_dir, self.stub_writer)

        content = self.render(visitor.resolved_licenses)
        self.sink.write(content, self.config.output_file(project))
        return content
