"""Core Pile functionality."""

from pile.core.collaborators import Collaborators, SystemCollaborators
from pile.core.errors import (
    PileError,
    DatabaseError,
    NameTaken,
    DirectoryConflict,
    ProjectNotFound,
    RemoveFailed,
    PileIOError,
    InvalidName,
    ConfigError,
    CollaboratorError,
)

__all__ = [
    "Collaborators",
    "SystemCollaborators",
    "PileError",
    "DatabaseError",
    "NameTaken",
    "DirectoryConflict",
    "ProjectNotFound",
    "RemoveFailed",
    "PileIOError",
    "InvalidName",
    "ConfigError",
    "CollaboratorError",
]
