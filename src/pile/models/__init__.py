"""Core data models for Pile."""

from .base import PileBaseModel
from .project import Project, derive_path, join_tags, split_tags

__all__ = [
    "PileBaseModel",
    "Project",
    "derive_path",
    "join_tags",
    "split_tags",
]
