"""Maven project tree read from ``pom.xml`` files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from defusedxml import ElementTree
from defusedxml.ElementTree import ParseError as DefusedParseError

from jacoco_rollup.project.base import ProjectNode, TraversalError

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element as XmlElement

logger = logging.getLogger(__name__)

_POM_FILE = "pom.xml"
_AGGREGATOR_PACKAGING = "pom"
_DEFAULT_PACKAGING = "jar"


def _local_name(tag: str) -> str:
    # Strip the POM namespace: "{http://maven.apache.org/POM/4.0.0}artifactId" -> "artifactId"
    return tag.rsplit("}", 1)[-1]


def _child(element: XmlElement, name: str) -> XmlElement | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _child_text(element: XmlElement, name: str) -> str:
    child = _child(element, name)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _resolve_pom(path: Path) -> Path:
    """Accept either a module directory or a path to a POM file."""
    if path.is_file():
        return path
    return path / _POM_FILE


class MavenProject(ProjectNode):
    """One Maven module backed by its ``pom.xml``."""

    def __init__(self, pom_path: Path) -> None:
        self._pom_path = pom_path
        root = self._parse(pom_path)
        self._artifact_id = _child_text(root, "artifactId") or pom_path.parent.name
        self._name = _child_text(root, "name")
        self._packaging = (_child_text(root, "packaging") or _DEFAULT_PACKAGING).lower()
        modules = _child(root, "modules")
        self._modules = (
            [
                module.text.strip()
                for module in modules
                if _local_name(module.tag) == "module" and module.text and module.text.strip()
            ]
            if modules is not None
            else []
        )
        self._children: list[ProjectNode] | None = None

    @staticmethod
    def _parse(pom_path: Path) -> XmlElement:
        try:
            tree = ElementTree.parse(pom_path)
        except (DefusedParseError, OSError) as e:
            raise TraversalError(f"Failed to read Maven project {pom_path}: {e}") from e
        root = tree.getroot()
        if _local_name(root.tag) != "project":
            raise TraversalError(f"{pom_path} is not a Maven POM (root is <{root.tag}>)")
        return root

    @property
    def pom_path(self) -> Path:
        return self._pom_path

    @property
    def packaging(self) -> str:
        return self._packaging

    @property
    def modules(self) -> list[str]:
        """Module paths as declared in ``<modules>``."""
        return list(self._modules)

    @property
    def display_name(self) -> str:
        return self._name or self._artifact_id

    def is_aggregator(self) -> bool:
        return self._packaging == _AGGREGATOR_PACKAGING

    def base_directory(self) -> Path:
        return self._pom_path.parent

    def module_identifier(self) -> str:
        return self._artifact_id

    def child_projects(self) -> list[ProjectNode]:
        if self._children is None:
            self._children = self._load_children()
        return list(self._children)

    def _load_children(self) -> list[ProjectNode]:
        children: list[ProjectNode] = []
        for module in self._modules:
            pom = _resolve_pom(self.base_directory() / module)
            if not pom.is_file():
                logger.warning(
                    "Module %s declared in %s has no %s, skipping", module, self._pom_path, _POM_FILE
                )
                continue
            children.append(MavenProject(pom))
        return children

    def __repr__(self) -> str:
        return f"MavenProject({self._artifact_id!r}, packaging={self._packaging!r})"


def load_project(root: str | Path) -> MavenProject:
    """Load the Maven project rooted at ``root``.

    Raises:
        TraversalError: If ``root`` holds no readable ``pom.xml``.
    """
    root_path = Path(root).resolve()
    pom = _resolve_pom(root_path)
    if not pom.is_file():
        raise TraversalError(f"No {_POM_FILE} found in {root_path}")
    return MavenProject(pom)
