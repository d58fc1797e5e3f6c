"""
Manifest service — load, patch, and save a generated project's pom.xml.

The generated pom.xml is edited in place with ElementTree. Everything
the patch does not touch (comments, also those around <project>,
ordering, whitespace, the default POM namespace) is kept, and new
elements are indented to match their siblings.

Usage::

    mutate_manifest(pom_path, add_dependencies(config_sets))

    with open_manifest(pom_path) as pom:
        pom.set_property("maven.compiler.release", "17")

The file is only rewritten when the mutation completes, and the new
content replaces the old file atomically.
"""

from __future__ import annotations

import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from projgen.core.errors import ManifestError
from projgen.core.models.descriptor import ConfigSet, Dependency

logger = logging.getLogger(__name__)

POM_FILE = "pom.xml"
POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"

_DEFAULT_INDENT = "    "
_XML_DECLARATION = b"<?xml version='1.0' encoding='UTF-8'?>\n"

Transform = Callable[["PomModel"], None]


class PomModel:
    """In-memory view of a pom.xml document."""

    def __init__(
        self,
        tree: ET.ElementTree,
        path: Path,
        prolog: Iterable[str] = (),
        epilog: Iterable[str] = (),
    ):
        self.tree = tree
        self.path = path
        # Comments before and after <project>, e.g. a license header
        self.prolog = list(prolog)
        self.epilog = list(epilog)
        self.root = tree.getroot()
        if self.root.tag.startswith("{"):
            self.namespace = self.root.tag[1:].split("}", 1)[0]
        else:
            self.namespace = ""
        self._indent = _detect_indent(self.root)

    # ── Queries ─────────────────────────────────────────────────

    def _q(self, name: str) -> str:
        return f"{{{self.namespace}}}{name}" if self.namespace else name

    def find(self, *path: str) -> ET.Element | None:
        """Find a child element by its path of local names."""
        element: ET.Element | None = self.root
        for name in path:
            if element is None:
                return None
            element = self._find_child(element, name)
        return element

    def text(self, *path: str) -> str | None:
        element = self.find(*path)
        if element is None or element.text is None:
            return None
        return element.text.strip()

    @property
    def final_name(self) -> str | None:
        return self.text("build", "finalName")

    @property
    def properties(self) -> dict[str, str]:
        props = self.find("properties")
        if props is None:
            return {}
        result: dict[str, str] = {}
        for child in props:
            if not isinstance(child.tag, str):
                continue  # comment
            result[self._local(child.tag)] = (child.text or "").strip()
        return result

    @property
    def dependencies(self) -> list[dict[str, str]]:
        """Project-level dependencies as flat dicts of their simple fields."""
        deps = self.find("dependencies")
        if deps is None:
            return []
        result = []
        for dep in deps:
            if dep.tag != self._q("dependency"):
                continue
            result.append({
                self._local(child.tag): (child.text or "").strip()
                for child in dep
                if isinstance(child.tag, str) and len(child) == 0
            })
        return result

    def _local(self, tag: str) -> str:
        return tag.split("}", 1)[1] if tag.startswith("{") else tag

    def _find_child(self, parent: ET.Element, name: str) -> ET.Element | None:
        # Direct lookup: property names such as "quarkus.platform.version"
        # are not safe ElementPath expressions.
        tag = self._q(name)
        for child in parent:
            if child.tag == tag:
                return child
        return None

    # ── Mutations ───────────────────────────────────────────────

    def add_dependency(self, dependency: Dependency) -> None:
        """Append a dependency to ``<project><dependencies>``."""
        deps = self._child(self.root, "dependencies", level=0)
        element = ET.Element(self._q("dependency"))
        self._sub(element, "groupId", dependency.group_id)
        self._sub(element, "artifactId", dependency.artifact_id)
        self._sub(element, "version", dependency.version)
        self._sub(element, "type", dependency.type)
        self._sub(element, "classifier", dependency.classifier)
        self._sub(element, "scope", dependency.scope)
        if dependency.exclusions:
            exclusions = ET.SubElement(element, self._q("exclusions"))
            for exclusion in dependency.exclusions:
                excl = ET.SubElement(exclusions, self._q("exclusion"))
                self._sub(excl, "groupId", exclusion.group_id)
                self._sub(excl, "artifactId", exclusion.artifact_id)
        if dependency.optional is not None:
            self._sub(element, "optional", str(dependency.optional).lower())
        self._append(deps, element, level=1)

    def set_final_name(self, final_name: str) -> None:
        """Set ``<build><finalName>``, creating the elements as needed."""
        build = self._child(self.root, "build", level=0)
        element = self._find_child(build, "finalName")
        if element is None:
            element = ET.Element(self._q("finalName"))
            self._insert_first(build, element, level=1)
        element.text = final_name

    def set_property(self, key: str, value: str) -> None:
        """Set (or overwrite) an entry of ``<properties>``."""
        props = self._child(self.root, "properties", level=0)
        element = self._find_child(props, key)
        if element is None:
            element = ET.Element(self._q(key))
            self._append(props, element, level=1)
        element.text = value

    # ── Tree helpers ────────────────────────────────────────────

    def _sub(self, parent: ET.Element, name: str, value: str | None) -> None:
        if value is not None:
            ET.SubElement(parent, self._q(name)).text = value

    def _child(self, parent: ET.Element, name: str, level: int) -> ET.Element:
        element = self._find_child(parent, name)
        if element is None:
            element = ET.Element(self._q(name))
            self._append(parent, element, level)
        return element

    def _append(self, parent: ET.Element, child: ET.Element, level: int) -> None:
        """Append ``child`` to ``parent`` (at depth ``level``) keeping indentation."""
        ET.indent(child, space=self._indent, level=level + 1)
        inner = "\n" + self._indent * (level + 1)
        if len(parent):
            last = parent[-1]
            child.tail = last.tail
            last.tail = inner
        else:
            parent.text = inner
            child.tail = "\n" + self._indent * level
        parent.append(child)

    def _insert_first(self, parent: ET.Element, child: ET.Element, level: int) -> None:
        if not len(parent):
            self._append(parent, child, level)
            return
        ET.indent(child, space=self._indent, level=level + 1)
        child.tail = parent.text
        parent.insert(0, child)


def _detect_indent(root: ET.Element) -> str:
    """Indentation unit used by the document, from the root's leading text."""
    text = root.text or ""
    if "\n" in text:
        unit = text.rsplit("\n", 1)[1]
        if unit and not unit.strip():
            return unit
    return _DEFAULT_INDENT


# ── Load / save ─────────────────────────────────────────────────


class _PomTreeBuilder:
    """Parser target that also collects comments outside the root element."""

    def __init__(self) -> None:
        self._builder = ET.TreeBuilder(insert_comments=True)
        self._depth = 0
        self._root_closed = False
        self.prolog: list[str] = []
        self.epilog: list[str] = []

    def start(self, tag: str, attrs: dict[str, str]) -> ET.Element:
        self._depth += 1
        return self._builder.start(tag, attrs)

    def end(self, tag: str) -> ET.Element:
        self._depth -= 1
        if self._depth == 0:
            self._root_closed = True
        return self._builder.end(tag)

    def data(self, data: str) -> None:
        if self._depth:
            self._builder.data(data)

    def comment(self, text: str) -> None:
        if self._depth:
            self._builder.comment(text)
        elif self._root_closed:
            self.epilog.append(text)
        else:
            self.prolog.append(text)

    def close(self) -> ET.Element:
        return self._builder.close()


def _comment_line(text: str) -> bytes:
    return f"<!--{text}-->\n".encode("utf-8")


def load_manifest(path: Path) -> PomModel:
    """Parse a pom.xml, keeping comments.

    Raises:
        ManifestError: If the file is missing or not well-formed XML.
    """
    target = _PomTreeBuilder()
    parser = ET.XMLParser(target=target)
    try:
        with open(path, "rb") as fh:
            tree = ET.parse(fh, parser=parser)
    except (OSError, ET.ParseError) as e:
        raise ManifestError(f"Error while opening generated pom: {path}: {e}") from e
    return PomModel(tree, Path(path), prolog=target.prolog, epilog=target.epilog)


def save_manifest(model: PomModel, path: Path | None = None) -> None:
    """Write the model back, replacing the file atomically.

    Raises:
        ManifestError: If the file cannot be written.
    """
    target = Path(path or model.path)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb", dir=target.parent, prefix=f".{target.name}.", delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(_XML_DECLARATION)
            fh.writelines(_comment_line(text) for text in model.prolog)
            model.tree.write(
                fh,
                encoding="UTF-8",
                xml_declaration=False,
                default_namespace=model.namespace or None,
            )
            fh.write(b"\n")
            fh.writelines(_comment_line(text) for text in model.epilog)
        os.replace(tmp_name, target)
    except (OSError, ValueError) as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ManifestError(f"Error while saving manipulated pom: {target}: {e}") from e


@contextmanager
def open_manifest(path: Path) -> Iterator[PomModel]:
    """Load a pom.xml for editing; save it when the block exits cleanly."""
    model = load_manifest(path)
    yield model
    save_manifest(model, path)


def mutate_manifest(path: Path, transform: Transform) -> None:
    """Load ``path``, apply ``transform`` once, and write it back."""
    with open_manifest(path) as model:
        transform(model)
    logger.debug("Updated %s", path)


# ── Transformations ─────────────────────────────────────────────


def add_dependencies(config_sets: list[ConfigSet]) -> Transform:
    """Append every dependency of every config set, in order."""

    def transform(model: PomModel) -> None:
        for config_set in config_sets:
            for dependency in config_set.dependencies:
                model.add_dependency(dependency)

    return transform


def set_final_name(final_name: str) -> Transform:
    def transform(model: PomModel) -> None:
        model.set_final_name(final_name)

    return transform


def merge_properties(config_sets: list[ConfigSet]) -> Transform:
    """Set every property of every config set; later sets win."""

    def transform(model: PomModel) -> None:
        for config_set in config_sets:
            for key, value in config_set.properties.items():
                model.set_property(key, value)

    return transform
