"""SQLite-based catalog of the projects in a workspace."""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional

from pile.core.errors import DatabaseError, NameTaken, ProjectNotFound, RemoveFailed
from pile.models.project import Project, join_tags

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_FILE = "pile.db"


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the filter is matched literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _name_conflict(error: sqlite3.IntegrityError) -> bool:
    """True when the violated constraint is the uniqueness of projects.name."""
    return "projects.name" in str(error)


class CatalogDB:
    """Manages the SQLite catalog for one workspace.

    The handle owns a single connection. Open it with ``with CatalogDB(...)``
    so the connection is released on every path.
    """

    def __init__(self, workspace: Path, database_file: str = DEFAULT_DATABASE_FILE):
        """Open (or create) the catalog inside ``workspace``."""
        self.workspace = Path(workspace)
        self.db_path = self.workspace / database_file
        self.conn: Optional[sqlite3.Connection] = None
        self._connect()
        self._create_tables()

    def _connect(self):
        """Connect to the SQLite database."""
        try:
            self.conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise DatabaseError(f"Cannot open catalog at {self.db_path}: {e}") from e
        self.conn.row_factory = sqlite3.Row

    def _create_tables(self):
        """Create the projects table if it doesn't exist."""
        try:
            with self.conn:
                self.conn.execute("""
                    CREATE TABLE IF NOT EXISTS projects (
                        id INTEGER PRIMARY KEY,
                        name TEXT NOT NULL UNIQUE,
                        tags TEXT NOT NULL DEFAULT ''
                    )
                """)
        except sqlite3.Error as e:
            self.close()
            raise DatabaseError(f"Cannot create catalog schema: {e}") from e

    # Project operations
    def name_exists(self, name: str) -> bool:
        """Check whether a project with this name is in the catalog."""
        try:
            cursor = self.conn.execute(
                "SELECT 1 FROM projects WHERE name = ?", (name,)
            )
            return cursor.fetchone() is not None
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e

    def insert_project(self, project: Project) -> None:
        """Add a project row.

        Raises:
            NameTaken: If another row already holds this name
            DatabaseError: For any other failure
        """
        try:
            with self.conn:
                self.conn.execute("""
                    INSERT INTO projects (name, tags)
                    VALUES (?, ?)
                """, (project.name, project.tag_field))
        except sqlite3.IntegrityError as e:
            if _name_conflict(e):
                raise NameTaken(f"Project '{project.name}' already exists") from e
            raise DatabaseError(str(e)) from e
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e
        logger.info(f"Inserted project '{project.name}' into catalog")

    def get_project(self, name: str) -> Project:
        """Get a project by name.

        Raises:
            ProjectNotFound: If no row matches
            DatabaseError: If the query fails or more than one row matches
        """
        try:
            rows = self.conn.execute("""
                SELECT name, tags FROM projects WHERE name = ?
            """, (name,)).fetchall()
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e

        if not rows:
            raise ProjectNotFound(f"Project '{name}' does not exist")
        if len(rows) > 1:
            raise DatabaseError(f"Catalog holds {len(rows)} rows named '{name}'")
        return Project.from_row(rows[0])

    def delete_project(self, name: str) -> None:
        """Delete a project row. Deleting a missing name is a no-op."""
        try:
            with self.conn:
                cursor = self.conn.execute(
                    "DELETE FROM projects WHERE name = ?", (name,)
                )
        except sqlite3.Error as e:
            raise RemoveFailed(str(e)) from e
        logger.info(f"Deleted {cursor.rowcount} catalog row(s) named '{name}'")

    def update_name(self, old_name: str, new_name: str) -> None:
        """Rename a project row."""
        try:
            with self.conn:
                self.conn.execute("""
                    UPDATE projects SET name = ? WHERE name = ?
                """, (new_name, old_name))
        except sqlite3.IntegrityError as e:
            if _name_conflict(e):
                raise NameTaken(f"Project '{new_name}' already exists") from e
            raise DatabaseError(str(e)) from e
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e
        logger.info(f"Renamed catalog row '{old_name}' to '{new_name}'")

    def update_tags(self, name: str, tags: Iterable[str]) -> None:
        """Replace the tags of a project row."""
        try:
            with self.conn:
                self.conn.execute("""
                    UPDATE projects SET tags = ? WHERE name = ?
                """, (join_tags(tags), name))
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e
        logger.info(f"Updated tags of '{name}'")

    def query_projects(self, name: Optional[str] = None,
                       tag: Optional[str] = None) -> List[Project]:
        """List projects, optionally filtered by name and/or tag substring.

        Each filter that is given adds one WHERE clause; a filter that is None
        adds nothing. Both filters ignore ASCII case. The tag filter runs against
        the joined tag field, so it can match across the comma between two tags.

        Results are ordered by name, case-insensitively.
        """
        query = "SELECT name, tags FROM projects"
        clauses: List[str] = []
        params: List[str] = []
        if name is not None:
            clauses.append("name LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(name)}%")
        if tag is not None:
            clauses.append("tags LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(tag)}%")
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY name COLLATE NOCASE ASC"

        logger.debug(f"Catalog query: {query} {params}")
        try:
            cursor = self.conn.execute(query, params)
            return [Project.from_row(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e

    def close(self):
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False
