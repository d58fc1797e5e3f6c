"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from projgen.core.models import (
    ActivationContext,
    Artifact,
    GenerationSettings,
    ProjectDefinition,
    ProjectStructure,
    QuarkusCliGenerate,
)

SAMPLE_POM = textwrap.dedent("""\
    <?xml version="1.0" encoding="UTF-8"?>
    <project xmlns="http://maven.apache.org/POM/4.0.0" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 https://maven.apache.org/xsd/maven-4.0.0.xsd">
      <modelVersion>4.0.0</modelVersion>
      <!-- generated by the quarkus cli -->
      <groupId>org.acme</groupId>
      <artifactId>demo</artifactId>
      <version>1.0.0-SNAPSHOT</version>
      <properties>
        <maven.compiler.release>17</maven.compiler.release>
        <quarkus.platform.version>3.0.0</quarkus.platform.version>
      </properties>
      <dependencies>
        <dependency>
          <groupId>io.quarkus</groupId>
          <artifactId>quarkus-arc</artifactId>
        </dependency>
      </dependencies>
      <build>
        <plugins>
          <plugin>
            <artifactId>maven-compiler-plugin</artifactId>
          </plugin>
        </plugins>
      </build>
    </project>
""")


def _write_pom(directory: Path, content: str = SAMPLE_POM) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    pom = directory / "pom.xml"
    pom.write_text(content, encoding="utf-8")
    return pom


@pytest.fixture
def sample_pom(tmp_path: Path) -> Path:
    """A generated-looking pom.xml in a temp directory."""
    return _write_pom(tmp_path / "demo")


@pytest.fixture
def demo_definition() -> ProjectDefinition:
    return ProjectDefinition(
        id="demo",
        group_id="org.acme",
        artifact_id="demo",
        package_name="org.acme.demo",
    )


@pytest.fixture
def cli_structure() -> ProjectStructure:
    return ProjectStructure(
        id="quarkus-cli",
        generate=QuarkusCliGenerate(quarkus_extensions="resteasy,jdbc-postgresql"),
    )


@pytest.fixture
def platform_gav() -> Artifact:
    return Artifact(
        group_id="io.quarkus.platform",
        artifact_id="quarkus-bom",
        version="3.0.0",
    )


@pytest.fixture
def settings(tmp_path: Path) -> GenerationSettings:
    return GenerationSettings(output_directory=tmp_path / "out")


@pytest.fixture
def empty_context() -> ActivationContext:
    return ActivationContext()


@pytest.fixture
def pom_text() -> str:
    return SAMPLE_POM


@pytest.fixture
def write_pom(tmp_path: Path):
    """Write a pom.xml into a directory (created if needed)."""

    def _write(content: str = SAMPLE_POM, directory: Path | None = None) -> Path:
        return _write_pom(directory if directory is not None else tmp_path / "demo", content)

    return _write
