"""Project management for Pile - ties the catalog to the workspace directories."""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from pile.core.errors import (
    CollaboratorError,
    DirectoryConflict,
    NameTaken,
    PileError,
    PileIOError,
    ProjectNotFound,
)
from pile.managers.base import BaseManager, CatalogContext
from pile.models.project import Project, derive_path
from pile.utils.name_validator import clean_name, normalize_name

logger = logging.getLogger(__name__)

README_FILE = "README.md"


@dataclass
class AddResult:
    """Outcome of adding a project.

    Attributes:
        project: The project as stored in the catalog
        path: Directory created for the project
        warnings: Auxiliary steps (clone, readme) that failed without undoing the add
    """
    project: Project
    path: Path
    warnings: List[str] = field(default_factory=list)


@dataclass
class EditResult:
    """Outcome of editing a project. Rename and tag update report separately."""
    project: Project
    renamed_from: Optional[str] = None
    tags_updated: bool = False
    errors: List[Tuple[str, PileError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class ProjectManager(BaseManager):
    """Adds, removes, resolves, lists and edits projects in a workspace.

    This is the only place that changes both the catalog and the filesystem
    in one operation. Directories are never deleted by it.
    """

    def __init__(self, context: CatalogContext):
        """Initialize project manager.

        Args:
            context: CatalogContext for the workspace
        """
        super().__init__(context)

    def _get(self, name: str) -> Project:
        return self.catalog.get_project(normalize_name(name))

    def add_project(
        self,
        name: str,
        tags: Iterable[str] = (),
        clone: Optional[str] = None,
        readme: Optional[bool] = None,
    ) -> AddResult:
        """Create a project directory and its catalog row.

        The directory is created first with an atomic create-or-fail, then the
        row is inserted. If the insert fails the new directory is removed again.

        Args:
            name: Raw project name; normalized before use
            tags: Subject tags, empty ones are dropped
            clone: Optional repository to clone into the new directory
            readme: Write a README.md. None uses the workspace config

        Returns:
            AddResult with the stored project and its path

        Raises:
            InvalidName: If the normalized name cannot be a directory
            NameTaken: If the name is already in the catalog
            DirectoryConflict: If the directory already exists on disk
            PileIOError: If the directory cannot be created
            DatabaseError: If the catalog insert fails
        """
        project = Project(name=clean_name(name), tags=list(tags))

        if self.catalog.name_exists(project.name):
            raise NameTaken(f"Project '{project.name}' already exists")

        path = project.path_in(self.workspace)
        try:
            path.mkdir(exist_ok=False)
        except FileExistsError as e:
            raise DirectoryConflict(f"Directory {path} already exists") from e
        except OSError as e:
            raise PileIOError(f"Cannot create {path}: {e}") from e

        try:
            self.catalog.insert_project(project)
        except PileError:
            logger.warning(f"Catalog insert for '{project.name}' failed, removing {path}")
            try:
                path.rmdir()
            except OSError as e:
                logger.error(f"Could not remove {path}: {e}")
            raise

        result = AddResult(project=project, path=path)

        if clone:
            try:
                self.collaborators.clone(clone, path)
            except CollaboratorError as e:
                logger.warning(f"Clone into {path} failed: {e}")
                result.warnings.append(str(e))

        if readme is None:
            readme = self.config.readme
        if readme:
            readme_path = path / README_FILE
            try:
                # A cloned repository keeps its own readme
                with open(readme_path, "x") as f:
                    f.write(f"# {project.name}\n")
            except FileExistsError:
                logger.debug(f"{readme_path} already exists, not overwriting")
            except OSError as e:
                logger.warning(f"Could not write {readme_path}: {e}")
                result.warnings.append(f"Could not write {README_FILE}: {e}")

        logger.info(f"Added project '{project.name}' at {path}")
        return result

    def remove_project(self, name: str) -> Path:
        """Remove a project from the catalog.

        Only the catalog row is deleted. The directory stays on disk.

        Returns:
            The directory that was left in place

        Raises:
            ProjectNotFound: If the name is not in the catalog
            RemoveFailed: If the delete fails
        """
        name = normalize_name(name)
        if not self.catalog.name_exists(name):
            raise ProjectNotFound(f"Project '{name}' does not exist")

        self.catalog.delete_project(name)
        return derive_path(self.workspace, name)

    def resolve(self, name: str) -> Path:
        """Return the directory of a known project.

        Raises:
            ProjectNotFound: If the name is not in the catalog
        """
        return self._get(name).path_in(self.workspace)

    def list_projects(
        self, name: Optional[str] = None, tag: Optional[str] = None
    ) -> List[Project]:
        """List projects ordered by name, optionally filtered."""
        return self.catalog.query_projects(name=name, tag=tag)

    def edit_project(
        self,
        name: str,
        new_name: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> EditResult:
        """Rename a project and/or replace its tags.

        The rename runs first, then the tag update. A failure in one step is
        recorded in the result and does not stop the other.

        Raises:
            ProjectNotFound: If the name is not in the catalog
        """
        project = self._get(name)
        result = EditResult(project=project)

        if new_name is not None:
            try:
                renamed = self._rename(project, new_name)
                if renamed.name != project.name:
                    result.renamed_from = project.name
                result.project = project = renamed
            except PileError as e:
                logger.warning(f"Rename of '{project.name}' failed: {e}")
                result.errors.append(("rename", e))

        if tags is not None:
            try:
                updated = project.with_tags(tags)
                self.catalog.update_tags(updated.name, updated.tags)
                result.project = updated
                result.tags_updated = True
            except PileError as e:
                logger.warning(f"Tag update of '{project.name}' failed: {e}")
                result.errors.append(("tags", e))

        return result

    def _rename(self, project: Project, new_name: str) -> Project:
        """Rename the catalog row, then the directory.

        If the directory rename fails the row is renamed back.
        """
        renamed = project.renamed(clean_name(new_name))
        if renamed.name == project.name:
            return project

        if self.catalog.name_exists(renamed.name):
            raise NameTaken(f"Project '{renamed.name}' already exists")

        old_path = project.path_in(self.workspace)
        new_path = renamed.path_in(self.workspace)
        # Path.rename silently replaces an empty directory on POSIX
        if new_path.exists():
            raise DirectoryConflict(f"Directory {new_path} already exists")

        self.catalog.update_name(project.name, renamed.name)
        try:
            old_path.rename(new_path)
        except OSError as e:
            logger.warning(
                f"Directory rename {old_path} -> {new_path} failed, "
                f"restoring catalog name '{project.name}'"
            )
            self.catalog.update_name(renamed.name, project.name)
            if isinstance(e, FileExistsError):
                raise DirectoryConflict(f"Directory {new_path} already exists") from e
            raise PileIOError(f"Cannot rename {old_path}: {e}") from e

        logger.info(f"Renamed project '{project.name}' to '{renamed.name}'")
        return renamed

    def open_project(self, name: str) -> Path:
        """Open a project's directory in the file manager."""
        path = self.resolve(name)
        self.collaborators.open(path)
        return path

    def open_workspace(self) -> Path:
        """Open the workspace root in the file manager."""
        self.collaborators.open(self.workspace)
        return self.workspace

    def copy_path(self, name: str) -> Path:
        """Copy a project's directory path to the clipboard."""
        path = self.resolve(name)
        self.collaborators.copy(str(path))
        return path

    def run_in_project(
        self, name: str, command: Sequence[str]
    ) -> subprocess.CompletedProcess:
        """Run a command with the project directory as working directory."""
        path = self.resolve(name)
        return self.collaborators.run(list(command), path)
