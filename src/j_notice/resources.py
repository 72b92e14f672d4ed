"""Locate and read NOTICE templates and license lookup sources."""

from __future__ import annotations

from pathlib import Path

import requests

from j_notice.exceptions import NoticeConfigError, ResourceNotFoundError
from j_notice.log import get_logger
from j_notice.lookup import parse_lookup_document
from j_notice.models import LicenseLookupDocument

log = get_logger(__name__)

PKG_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = PKG_DIR / "templates"


def is_url(ref: str) -> bool:
    return ref.startswith(("http://", "https://"))


class ResourceFinder:
    """Resolves resource references for one project.

    Search order for a reference:
        1. `http://` / `https://` URLs are fetched as-is.
        2. An absolute path, or a path relative to the project directory.
        3. A resource bundled with j-notice (e.g. the default `NOTICE.template`).
    """

    def __init__(
        self,
        basedir: Path | None = None,
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.basedir = basedir or Path.cwd()
        self.timeout = timeout
        self.session = session or requests.Session()

    def candidates(self, ref: str) -> list[Path]:
        path = Path(ref).expanduser()
        if path.is_absolute():
            return [path]
        return [self.basedir / path, TEMPLATES_DIR / path]

    def find(self, ref: str) -> str | Path:
        """Return the URL or file a reference resolves to.

        Raises:
            ResourceNotFoundError: If no candidate file exists.
        """
        if is_url(ref):
            return ref
        candidates = self.candidates(ref)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        searched = ", ".join(str(c) for c in candidates)
        raise ResourceNotFoundError(f"Could not find resource '{ref}' (searched: {searched})")

    def read_bytes(self, ref: str) -> bytes:
        location = self.find(ref)
        if isinstance(location, str):
            log.debug("Fetching %s", location)
            try:
                response = self.session.get(location, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as exc:
                raise ResourceNotFoundError(f"Failed to fetch resource '{ref}': {exc}") from exc
            return response.content

        log.debug("Reading %s", location)
        try:
            return location.read_bytes()
        except OSError as exc:
            raise ResourceNotFoundError(f"Failed to read resource '{ref}' from: {location}") from exc

    def read_text(self, ref: str, encoding: str = "UTF-8") -> str:
        """Read a text resource such as the NOTICE template.

        Raises:
            ResourceNotFoundError: If the resource is missing or cannot be decoded.
            NoticeConfigError: If `encoding` is not a known codec.
        """
        data = self.read_bytes(ref)
        try:
            return data.decode(encoding)
        except LookupError as exc:
            raise NoticeConfigError(f"Unknown encoding: {encoding}") from exc
        except UnicodeDecodeError as exc:
            raise ResourceNotFoundError(f"Failed to decode resource '{ref}' as {encoding}") from exc

    def load_lookup(self, ref: str) -> LicenseLookupDocument:
        """Read and parse one license lookup source.

        Raises:
            ResourceNotFoundError: If the source cannot be found or read.
            LookupSourceError: If the source is not a valid lookup document.
        """
        return parse_lookup_document(self.read_bytes(ref), source=str(self.find(ref)))
