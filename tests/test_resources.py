from __future__ import annotations

from pathlib import Path

import pytest
import requests

from j_notice.exceptions import NoticeConfigError, NoticeMismatchError, ResourceNotFoundError
from j_notice.resources import TEMPLATES_DIR, ResourceFinder
from j_notice.sinks import CheckNoticeSink, FileNoticeSink

LOOKUP = (
    b"<license-lookup><artifact><groupId>g</groupId><artifactId>a</artifactId>"
    b"<license>MIT</license></artifact></license-lookup>"
)


class FakeResponse:
    def __init__(self, content: bytes, status: int = 200) -> None:
        self.content = content
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.requests: list[tuple[str, float]] = []

    def get(self, url: str, timeout: float) -> FakeResponse:
        self.requests.append((url, timeout))
        return self.response


def test_project_file_takes_precedence_over_bundled(tmp_path: Path) -> None:
    (tmp_path / "NOTICE.template").write_text("local #GENERATED_NOTICES#", encoding="utf-8")
    finder = ResourceFinder(tmp_path)

    assert finder.find("NOTICE.template") == tmp_path / "NOTICE.template"
    assert finder.read_text("NOTICE.template") == "local #GENERATED_NOTICES#"


def test_falls_back_to_bundled_resource(tmp_path: Path) -> None:
    finder = ResourceFinder(tmp_path)

    assert finder.find("NOTICE.template") == TEMPLATES_DIR / "NOTICE.template"


def test_absolute_path(tmp_path: Path) -> None:
    path = tmp_path / "elsewhere" / "lookup.xml"
    path.parent.mkdir()
    path.write_bytes(LOOKUP)

    document = ResourceFinder(tmp_path / "project").load_lookup(str(path))

    assert document.source == str(path)
    assert document.entries[0].license == "MIT"


def test_missing_resource_names_reference(tmp_path: Path) -> None:
    with pytest.raises(ResourceNotFoundError, match="nope.xml"):
        ResourceFinder(tmp_path).find("nope.xml")


def test_url_is_fetched_with_timeout(tmp_path: Path) -> None:
    session = FakeSession(FakeResponse(LOOKUP))
    finder = ResourceFinder(tmp_path, timeout=5, session=session)

    document = finder.load_lookup("https://example.org/licenses.xml")

    assert session.requests == [("https://example.org/licenses.xml", 5)]
    assert document.source == "https://example.org/licenses.xml"
    assert len(document.entries) == 1


def test_url_failure_is_fatal(tmp_path: Path) -> None:
    finder = ResourceFinder(tmp_path, session=FakeSession(FakeResponse(b"", status=404)))

    with pytest.raises(ResourceNotFoundError, match="example.org"):
        finder.read_bytes("http://example.org/missing.xml")


def test_read_text_uses_encoding(tmp_path: Path) -> None:
    (tmp_path / "t.txt").write_bytes("caf\xe9".encode("latin-1"))
    finder = ResourceFinder(tmp_path)

    assert finder.read_text("t.txt", "ISO-8859-1") == "caf\xe9"
    with pytest.raises(ResourceNotFoundError):
        finder.read_text("t.txt", "UTF-8")
    with pytest.raises(NoticeConfigError):
        finder.read_text("t.txt", "no-such-codec")


def test_file_sink_writes_and_creates_directories(tmp_path: Path) -> None:
    target = tmp_path / "out" / "NOTICE"

    FileNoticeSink().write("content\n", target)

    assert target.read_text(encoding="utf-8") == "content\n"


def test_check_sink_accepts_matching_file(tmp_path: Path) -> None:
    target = tmp_path / "NOTICE"
    target.write_text("same\n", encoding="utf-8")

    CheckNoticeSink().write("same\n", target)


def test_check_sink_rejects_stale_file(tmp_path: Path) -> None:
    target = tmp_path / "NOTICE"
    target.write_text("old\n", encoding="utf-8")

    with pytest.raises(NoticeMismatchError, match="out of date"):
        CheckNoticeSink().write("new\n", target)
    assert target.read_text(encoding="utf-8") == "old\n"


def test_check_sink_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(NoticeMismatchError, match="No NOTICE file"):
        CheckNoticeSink().write("new\n", tmp_path / "NOTICE")


def test_check_sink_compares_line_endings(tmp_path: Path) -> None:
    target = tmp_path / "NOTICE"
    target.write_bytes(b"line one\r\nline two\r\n")

    with pytest.raises(NoticeMismatchError, match="out of date"):
        CheckNoticeSink().write("line one\nline two\n", target)


def test_file_sink_keeps_line_endings_and_encoding(tmp_path: Path) -> None:
    target = tmp_path / "NOTICE"

    FileNoticeSink("ISO-8859-1").write("caf\xe9\n", target)

    assert target.read_bytes() == b"caf\xe9\n"
    CheckNoticeSink("ISO-8859-1").write("caf\xe9\n", target)
