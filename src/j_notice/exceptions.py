"""Custom exceptions for j-notice."""

from __future__ import annotations

from pathlib import Path


class NoticeError(Exception):
    """Base exception for j-notice."""


class PomNotFoundError(NoticeError):
    """Raised when a pom.xml file cannot be found."""


class PomParseError(NoticeError):
    """Raised when a pom.xml file cannot be parsed."""


class PomModelError(NoticeError):
    """Raised when required Maven model fields are missing or invalid."""


class NoticeConfigError(NoticeError):
    """Raised when the notice configuration is invalid."""


class ResourceNotFoundError(NoticeError):
    """Raised when a template or lookup source cannot be located."""


class LookupSourceError(NoticeError):
    """Raised when a license lookup source cannot be read or parsed."""


class DependencyGraphError(NoticeError):
    """Raised when the dependency graph of a project cannot be built."""


class UnresolvedLicenseError(NoticeError):
    """Raised when one or more artifacts have no resolvable license."""

    def __init__(self, count: int, stub_path: Path | None = None) -> None:
        self.count = count
        self.stub_path = stub_path
        super().__init__(f"Failed to find Licenses for {count} artifacts")


class NoticeTemplateError(NoticeError):
    """Raised when the NOTICE template cannot be used."""


class NoticeMismatchError(NoticeError):
    """Raised when an existing NOTICE file does not match the generated one."""
