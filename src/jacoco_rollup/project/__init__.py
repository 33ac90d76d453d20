"""Project tree collaborators."""

from jacoco_rollup.project.base import ProjectNode, TraversalError
from jacoco_rollup.project.maven import MavenProject, load_project

__all__ = [
    "MavenProject",
    "ProjectNode",
    "TraversalError",
    "load_project",
]
