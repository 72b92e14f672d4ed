"""Destinations for the rendered NOTICE content."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from j_notice.exceptions import NoticeMismatchError
from j_notice.log import get_logger

log = get_logger(__name__)


class NoticeSink(Protocol):
    def write(self, content: str, destination: Path) -> None: ...


class FileNoticeSink:
    """Writes the NOTICE file, replacing any existing one."""

    def __init__(self, encoding: str = "UTF-8") -> None:
        self.encoding = encoding

    def write(self, content: str, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(content.encode(self.encoding))
        log.info("Wrote NOTICE file to: %s", destination)


class CheckNoticeSink:
    """Verifies that the committed NOTICE file matches the generated content."""

    def __init__(self, encoding: str = "UTF-8") -> None:
        self.encoding = encoding

    def write(self, content: str, destination: Path) -> None:
        if not destination.is_file():
            raise NoticeMismatchError(
                f"No NOTICE file exists at: {destination}. Run 'j-notice generate' to create it."
            )

        if destination.read_bytes() != content.encode(self.encoding):
            raise NoticeMismatchError(
                f"NOTICE file is out of date: {destination}. Run 'j-notice generate' to update it."
            )
        log.info("NOTICE file is up to date: %s", destination)
