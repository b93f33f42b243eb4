"""Project model for Pile."""

import sqlite3
from pathlib import Path
from typing import Iterable, List, Union

from pydantic import Field, field_validator

from pile.utils.name_validator import normalize_name
from .base import PileBaseModel

TAG_DELIMITER = ","


def join_tags(tags: Iterable[str]) -> str:
    """Join tags into the single field stored in the catalog."""
    return TAG_DELIMITER.join(tag for tag in tags if tag)


def split_tags(value: Union[str, None]) -> List[str]:
    """Split a stored tag field back into tags, dropping empty segments."""
    if not value:
        return []
    return [tag for tag in value.split(TAG_DELIMITER) if tag]


def derive_path(workspace: Path, name: str) -> Path:
    """Return the directory of a project. Does not touch the filesystem."""
    return Path(workspace) / name


class Project(PileBaseModel):
    """Represents one project tracked in the catalog.

    The name is normalized on construction and on assignment, so every caller
    sees the same cleaned value. The directory path is never stored; it is
    derived from the workspace root and the current name.
    """

    name: str = Field(description="Project name, also its directory name")
    tags: List[str] = Field(default_factory=list, description="Subject tags")

    @field_validator("name", mode="before")
    @classmethod
    def normalize(cls, value):
        if isinstance(value, str):
            return normalize_name(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, value):
        # Tags go through the same split that reading from the catalog applies,
        # so what is held in memory is exactly what a reload returns
        if isinstance(value, str):
            return split_tags(value)
        if value is None:
            return []
        return [part for tag in value for part in split_tags(tag)]

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Project":
        """Build a project from a catalog row."""
        return cls(name=row["name"], tags=split_tags(row["tags"]))

    @property
    def tag_field(self) -> str:
        """Tags as stored in the catalog."""
        return join_tags(self.tags)

    def path_in(self, workspace: Path) -> Path:
        """Directory of this project under ``workspace``."""
        return derive_path(workspace, self.name)

    def renamed(self, new_name: str) -> "Project":
        """Return a copy of this project under a normalized new name."""
        return Project(name=new_name, tags=list(self.tags))

    def with_tags(self, tags: Iterable[str]) -> "Project":
        """Return a copy of this project with its tags replaced."""
        return Project(name=self.name, tags=list(tags))
