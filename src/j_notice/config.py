"""NOTICE generation configuration.

Defaults can be overridden with environment variables; the CLI applies its
options on top via `with_overrides`.
"""
from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from j_notice.exceptions import NoticeConfigError
from j_notice.graph import DEFAULT_SCOPES
from j_notice.models import Project
from j_notice.render import DEFAULT_MESSAGE

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise NoticeConfigError(f"{name} must be a boolean, got {raw!r}")


def _env_number(name: str, default: int | float, kind: type) -> int | float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return kind(raw)
    except ValueError as exc:
        raise NoticeConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass
class NoticeConfig:
    """NOTICE generation settings.

    Attributes:
        license_lookup: Lookup sources (files, URLs, bundled resources), lowest precedence first
        notice_template: Template resource for the NOTICE file
        placeholder: Token in the template replaced by the generated lines
        output_dir: Output directory; relative paths are resolved against the project directory
        file_name: Output file name
        indent: Number of spaces substituted for {0} in `notice_message`
        encoding: Encoding of the template and the NOTICE file
        aggregating: Combine the dependencies of all modules into one NOTICE
        notice_message: Line format: {0} indent, {1} artifact name, {2} license name
        excluded_module_paths: Module paths (relative to the root project) skipped when aggregating
        include_scopes: Dependency scopes included in the NOTICE
        use_pom_licenses: Fall back to the license declared in an artifact's own POM
        local_repository: Maven local repository used for transitive dependencies
        http_timeout: Timeout in seconds for lookup sources fetched over HTTP
    """

    license_lookup: list[str] = field(default_factory=list)
    notice_template: str = "NOTICE.template"
    placeholder: str = "#GENERATED_NOTICES#"
    output_dir: str = ""
    file_name: str = "NOTICE"
    indent: int = 2
    encoding: str = "UTF-8"
    aggregating: bool = True
    notice_message: str = DEFAULT_MESSAGE
    excluded_module_paths: list[str] = field(default_factory=list)
    include_scopes: list[str] = field(default_factory=lambda: sorted(DEFAULT_SCOPES))
    use_pom_licenses: bool = True
    local_repository: Path | None = None
    http_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "NoticeConfig":
        """Create configuration from environment variables.

        Environment variables:
            JNOTICE_LICENSE_LOOKUP: Comma separated lookup sources
            JNOTICE_TEMPLATE: NOTICE template (default: "NOTICE.template")
            JNOTICE_PLACEHOLDER: Template placeholder (default: "#GENERATED_NOTICES#")
            JNOTICE_OUTPUT_DIR: Output directory (default: project directory)
            JNOTICE_FILE_NAME: Output file name (default: "NOTICE")
            JNOTICE_INDENT: Indentation width (default: 2)
            JNOTICE_ENCODING: Character encoding (default: "UTF-8")
            JNOTICE_AGGREGATING: "true"/"false" (default: "true")
            JNOTICE_MESSAGE: Line format (default: "{0}{1} under {2}")
            JNOTICE_EXCLUDED_MODULES: Comma separated module paths
            JNOTICE_SCOPES: Comma separated scopes (default: "compile,runtime")
            JNOTICE_USE_POM_LICENSES: "true"/"false" (default: "true")
            JNOTICE_LOCAL_REPOSITORY: Maven local repository (default: ~/.m2/repository)
            JNOTICE_HTTP_TIMEOUT: Seconds (default: 30)
        """
        defaults = cls()
        repository = os.getenv("JNOTICE_LOCAL_REPOSITORY")
        return cls(
            license_lookup=_env_list("JNOTICE_LICENSE_LOOKUP", defaults.license_lookup),
            notice_template=os.getenv("JNOTICE_TEMPLATE", defaults.notice_template),
            placeholder=os.getenv("JNOTICE_PLACEHOLDER", defaults.placeholder),
            output_dir=os.getenv("JNOTICE_OUTPUT_DIR", defaults.output_dir),
            file_name=os.getenv("JNOTICE_FILE_NAME", defaults.file_name),
            indent=int(_env_number("JNOTICE_INDENT", defaults.indent, int)),
            encoding=os.getenv("JNOTICE_ENCODING", defaults.encoding),
            aggregating=_env_bool("JNOTICE_AGGREGATING", defaults.aggregating),
            notice_message=os.getenv("JNOTICE_MESSAGE", defaults.notice_message),
            excluded_module_paths=_env_list("JNOTICE_EXCLUDED_MODULES", defaults.excluded_module_paths),
            include_scopes=_env_list("JNOTICE_SCOPES", defaults.include_scopes),
            use_pom_licenses=_env_bool("JNOTICE_USE_POM_LICENSES", defaults.use_pom_licenses),
            local_repository=Path(repository).expanduser() if repository else None,
            http_timeout=float(_env_number("JNOTICE_HTTP_TIMEOUT", defaults.http_timeout, float)),
        )

    def with_overrides(self, **values: object) -> "NoticeConfig":
        """Return a copy with the given fields replaced; None values are ignored.

        Raises:
            NoticeConfigError: If a name is not a configuration field.
        """
        known = {f.name for f in fields(self)}
        unknown = set(values) - known
        if unknown:
            raise NoticeConfigError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in values.items() if v is not None}
        return replace(self, **changes)

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            NoticeConfigError: If a setting cannot be used.
        """
        if self.indent < 0:
            raise NoticeConfigError("indent must not be negative")
        if not self.placeholder:
            raise NoticeConfigError("placeholder must not be empty")
        if not self.file_name:
            raise NoticeConfigError("file_name must not be empty")
        if not self.notice_template:
            raise NoticeConfigError("notice_template must not be empty")
        if "{1}" not in self.notice_message or "{2}" not in self.notice_message:
            raise NoticeConfigError("notice_message must reference {1} (artifact) and {2} (license)")
        if not self.include_scopes:
            raise NoticeConfigError("include_scopes must name at least one scope")
        if self.http_timeout <= 0:
            raise NoticeConfigError("http_timeout must be positive")
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise NoticeConfigError(f"Unknown encoding: {self.encoding}") from exc

    def output_file(self, project: Project) -> Path:
        """Resolve the NOTICE file location for a project."""
        output_path = Path(self.output_dir or "").expanduser()
        if not output_path.is_absolute():
            output_path = project.basedir / output_path
        return output_path / self.file_name
