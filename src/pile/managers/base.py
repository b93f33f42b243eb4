"""Base manager class and shared context for Pile managers."""

from dataclasses import dataclass, field
from pathlib import Path

from pile.config import PileConfig
from pile.core.collaborators import Collaborators, SystemCollaborators
from pile.infrastructure.catalog_db import CatalogDB


@dataclass
class CatalogContext:
    """Everything an operation needs for one workspace.

    The catalog handle is opened by the caller and passed in explicitly; the
    context never opens or closes it.

    Attributes:
        workspace: Workspace root holding the project directories
        catalog: Open catalog handle for this workspace
        config: Effective workspace configuration
        collaborators: OS side effects (open, copy, run, clone)
    """
    workspace: Path
    catalog: CatalogDB
    config: PileConfig = field(default_factory=PileConfig)
    collaborators: Collaborators = None

    def __post_init__(self):
        """Ensure workspace is a Path and collaborators are set."""
        if not isinstance(self.workspace, Path):
            self.workspace = Path(self.workspace)
        if self.collaborators is None:
            self.collaborators = SystemCollaborators(self.config.git_executable)

    @property
    def projects(self) -> "ProjectManager":
        """Access ProjectManager for this context."""
        from pile.managers.project import ProjectManager
        return ProjectManager(self)


class BaseManager:
    """Base class for Pile managers."""

    def __init__(self, context: CatalogContext):
        """Initialize base manager with catalog context.

        Args:
            context: CatalogContext for the workspace
        """
        self.context = context
        self.workspace = context.workspace
        self.catalog = context.catalog
        self.config = context.config
        self.collaborators = context.collaborators
