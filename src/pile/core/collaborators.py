"""Side effects the catalog delegates to the operating system.

The core never spawns processes or touches the clipboard itself; it calls an
object implementing ``Collaborators``. Tests pass a mock instead.
"""

import logging
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Protocol, Sequence, Union

import typer

from pile.core.errors import CollaboratorError

logger = logging.getLogger(__name__)

# Clipboard programs tried in order, with the arguments that make them read stdin
CLIPBOARD_COMMANDS: List[List[str]] = [
    ["pbcopy"],
    ["clip"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
]


class Collaborators(Protocol):
    """External capabilities used by the catalog operations."""

    def open(self, target: Union[str, Path]) -> None:
        """Open a URL or path with the system's default handler."""
        ...

    def copy(self, text: str) -> None:
        """Copy text to the system clipboard."""
        ...

    def run(self, args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess:
        """Run a command in ``cwd`` and capture its output."""
        ...

    def clone(self, source: str, destination: Path) -> None:
        """Populate ``destination`` from a version-control ``source``."""
        ...


class SystemCollaborators:
    """Collaborators backed by the real operating system."""

    def __init__(self, git_executable: str = "git", timeout: int = 600):
        self.git_executable = git_executable
        self.timeout = timeout

    def open(self, target: Union[str, Path]) -> None:
        exit_code = typer.launch(str(target))
        if exit_code != 0:
            raise CollaboratorError(f"Could not open {target} (exit status {exit_code})")

    def copy(self, text: str) -> None:
        command = self._clipboard_command()
        try:
            subprocess.run(command, input=text, text=True, check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise CollaboratorError(f"Clipboard copy failed: {e}") from e

    def _clipboard_command(self) -> List[str]:
        candidates = CLIPBOARD_COMMANDS
        if sys.platform == "darwin":
            candidates = [["pbcopy"]]
        elif sys.platform == "win32":
            candidates = [["clip"]]
        for command in candidates:
            if shutil.which(command[0]):
                return command
        raise CollaboratorError("No clipboard program found")

    def run(self, args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess:
        if not args:
            raise CollaboratorError("No command given")
        logger.debug(f"Running {list(args)} in {cwd}")
        try:
            return subprocess.run(
                list(args),
                cwd=cwd,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise CollaboratorError(f"Could not run '{args[0]}': {e}") from e

    def clone(self, source: str, destination: Path) -> None:
        logger.info(f"Cloning {source} into {destination}")
        try:
            subprocess.run(
                [self.git_executable, "clone", source, "."],
                cwd=destination,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except subprocess.TimeoutExpired as e:
            raise CollaboratorError(
                f"Clone of {source} timed out after {self.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            raise CollaboratorError(
                f"Clone of {source} failed: {e.stderr.strip()}"
            ) from e
        except OSError as e:
            raise CollaboratorError(
                f"Could not run '{self.git_executable}': {e}"
            ) from e
