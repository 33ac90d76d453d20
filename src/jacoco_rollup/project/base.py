"""Project tree interface walked by the report collector."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class TraversalError(Exception):
    """Raised when the project tree cannot be enumerated."""


class ProjectNode(ABC):
    """A node of a multi-module build.

    Aggregator nodes only group children and produce no build output of
    their own; every other node is a leaf module that may hold coverage
    reports under its base directory.
    """

    @abstractmethod
    def is_aggregator(self) -> bool:
        """Return True for pure grouping nodes."""

    @abstractmethod
    def child_projects(self) -> list[ProjectNode]:
        """Return child modules in declared order.

        Raises:
            TraversalError: If the children cannot be enumerated.
        """

    @abstractmethod
    def base_directory(self) -> Path:
        """Directory the module is built from."""

    @abstractmethod
    def module_identifier(self) -> str:
        """Unique module name (e.g. the Maven artifactId)."""

    @property
    def display_name(self) -> str:
        """Human-readable project name, defaults to the identifier."""
        return self.module_identifier()
