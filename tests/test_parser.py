from __future__ import annotations

from pathlib import Path

import pytest

from j_notice.exceptions import PomModelError, PomNotFoundError, PomParseError
from j_notice.models import MavenProject
from j_notice.parser import parse_pom, parse_pom_string


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_pom_without_namespace(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>

  <dependencies>
    <dependency>
      <groupId>org.slf4j</groupId>
      <artifactId>slf4j-api</artifactId>
      <version>2.0.12</version>
      <scope>compile</scope>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert isinstance(model, MavenProject)
    assert model.project.compact() == "com.acme:demo:1.0.0"
    assert len(model.dependencies) == 1
    assert model.dependencies[0].gav.compact() == "org.slf4j:slf4j-api:2.0.12"
    assert model.dependencies[0].scope == "compile"


def test_parse_pom_with_namespace_name_and_licenses(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
  <name>Acme Demo ${project.version}</name>

  <licenses>
    <license>
      <name>The Apache Software License, Version 2.0</name>
      <url>https://www.apache.org/licenses/LICENSE-2.0.txt</url>
    </license>
  </licenses>

  <dependencies>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.2</version>
      <scope>test</scope>
      <optional>false</optional>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.name == "Acme Demo 1.0.0"
    assert [lic.name for lic in model.licenses] == ["The Apache Software License, Version 2.0"]
    dep = model.dependencies[0]
    assert dep.gav.compact() == "junit:junit:4.13.2"
    assert dep.scope == "test"
    assert dep.optional is False


def test_unresolved_placeholder_becomes_unknown(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>${lib.version}</version>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.project.version == "Unknown"
    assert model.dependencies[0].gav.version == "Unknown"


def test_resolve_properties_for_dependency_version(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
  <properties>
    <lib.version>2.3.4</lib.version>
  </properties>
  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>${lib.version}</version>
    </dependency>
    <dependency>
      <groupId>${project.groupId}</groupId>
      <artifactId>sibling</artifactId>
      <version>${project.version}</version>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert [d.gav.compact() for d in model.dependencies] == [
        "org.example:lib:2.3.4",
        "com.acme:sibling:1.0.0",
    ]


def test_inherit_coordinates_from_parent(tmp_path: Path) -> None:
    pom = """<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <parent>
    <groupId>com.acme</groupId>
    <artifactId>parent</artifactId>
    <version>9.9.9</version>
  </parent>
  <artifactId>child</artifactId>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.project.compact() == "com.acme:child:9.9.9"
    assert model.parent is not None
    assert model.parent.compact() == "com.acme:parent:9.9.9"


def test_modules(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>root</artifactId>
  <version>1</version>
  <packaging>pom</packaging>
  <modules>
    <module>core</module>
    <module> web </module>
    <module></module>
  </modules>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.modules == ["core", "web"]


def test_managed_version_fills_missing_dependency_version(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1</version>
  <properties><guava.version>33.0.0-jre</guava.version></properties>
  <dependencyManagement>
    <dependencies>
      <dependency>
        <groupId>com.google.guava</groupId>
        <artifactId>guava</artifactId>
        <version>${guava.version}</version>
      </dependency>
    </dependencies>
  </dependencyManagement>
  <dependencies>
    <dependency>
      <groupId>com.google.guava</groupId>
      <artifactId>guava</artifactId>
    </dependency>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>unmanaged</artifactId>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    versions = {d.gav.artifact_id: d.gav.version for d in model.dependencies}
    assert versions == {"guava": "33.0.0-jre", "unmanaged": "Unknown"}


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(PomNotFoundError):
        parse_pom(tmp_path / "pom.xml")


def test_malformed_xml_raises(tmp_path: Path) -> None:
    with pytest.raises(PomParseError):
        parse_pom(_write(tmp_path, "pom.xml", "<project><groupId>x</project>"))


def test_missing_artifact_id_raises() -> None:
    with pytest.raises(PomModelError):
        parse_pom_string("<project><groupId>com.acme</groupId></project>")


def test_parse_pom_string_with_declaration() -> None:
    model = parse_pom_string(
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<project><groupId>g</groupId><artifactId>a</artifactId><version>1</version></project>"
    )
    assert model.project.compact() == "g:a:1"
