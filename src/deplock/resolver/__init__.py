"""External dependency resolver interface and implementations."""

from .base import DependencyResolver
from .maven import MavenResolver, parse_classpath, parse_tree
from .recorded import RecordedResolver

__all__ = [
    "DependencyResolver",
    "MavenResolver",
    "RecordedResolver",
    "parse_classpath",
    "parse_tree",
]
