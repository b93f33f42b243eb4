"""Error types raised by the Pile core.

Every failure the catalog can report is a subclass of ``PileError`` so the CLI
can map each kind to one user-facing message.
"""


class PileError(Exception):
    """Base class for all Pile errors."""

    message = "An error occurred"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or self.message)


class DatabaseError(PileError):
    """Raised when the catalog file cannot be opened, created or queried."""

    message = "A database error occurred"


class NameTaken(DatabaseError):
    """Raised when a project name is already present in the catalog."""

    message = "The project name is already in use"


class DirectoryConflict(PileError):
    """Raised when the project directory already exists on disk."""

    message = "A directory with that name already exists in the workspace"


class ProjectNotFound(PileError):
    """Raised when no project matches the given name."""

    message = "Such a project does not exist"


class RemoveFailed(PileError):
    """Raised when the catalog row could not be deleted."""

    message = "Could not remove the project from the catalog"


class PileIOError(PileError):
    """Raised for filesystem failures other than a directory conflict."""

    message = "An IO error occurred"


class InvalidName(PileError, ValueError):
    """Raised when a name cannot be used as a single directory entry."""

    message = "Invalid project name"


class CollaboratorError(PileError):
    """Raised when an external program (opener, clipboard, shell, git) fails."""

    message = "An external command failed"


class ConfigError(PileError):
    """Raised when the workspace config file cannot be parsed or validated."""

    message = "The workspace configuration is invalid"
