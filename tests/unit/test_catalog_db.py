"""Tests for the SQLite project catalog."""

import sqlite3
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pile.core.errors import DatabaseError, NameTaken, ProjectNotFound, RemoveFailed
from pile.infrastructure.catalog_db import CatalogDB
from pile.models import Project


def add(catalog, name, tags=()):
    catalog.insert_project(Project(name=name, tags=list(tags)))


class TestCatalogSchema:
    """Test opening and creating the catalog."""

    def test_creates_catalog_file(self, temp_workspace):
        """Test that the catalog file is created inside the workspace."""
        with CatalogDB(temp_workspace) as catalog:
            assert catalog.db_path == temp_workspace / "pile.db"
        assert (temp_workspace / "pile.db").exists()

    def test_schema_creation_is_idempotent(self, temp_workspace):
        """Test that reopening keeps existing rows."""
        with CatalogDB(temp_workspace) as catalog:
            add(catalog, "keep")

        with CatalogDB(temp_workspace) as catalog:
            assert catalog.name_exists("keep")

    def test_no_path_column(self, catalog):
        """Test that the schema derives paths instead of storing them."""
        columns = [row["name"] for row in catalog.conn.execute("PRAGMA table_info(projects)")]
        assert "path" not in columns
        assert "name" in columns and "tags" in columns

    def test_custom_database_file(self, temp_workspace):
        """Test that the catalog file name can be configured."""
        with CatalogDB(temp_workspace, "catalog.sqlite") as catalog:
            add(catalog, "p")
        assert (temp_workspace / "catalog.sqlite").exists()
        assert not (temp_workspace / "pile.db").exists()

    def test_missing_workspace(self):
        """Test that an unopenable catalog raises DatabaseError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = Path(tmpdir) / "does" / "not" / "exist"
            with pytest.raises(DatabaseError):
                CatalogDB(missing)

    def test_close_is_idempotent(self, temp_workspace):
        """Test that closing twice is harmless and clears the connection."""
        catalog = CatalogDB(temp_workspace)
        catalog.close()
        catalog.close()
        assert catalog.conn is None


class TestCatalogRows:
    """Test single-row catalog operations."""

    def test_insert_and_get(self, catalog):
        """Test inserting a project and reading it back."""
        add(catalog, "pile", ["rust", "cli"])

        project = catalog.get_project("pile")
        assert project.name == "pile"
        assert project.tags == ["rust", "cli"]
        assert catalog.name_exists("pile")
        assert not catalog.name_exists("Pile")

    def test_tags_round_trip(self, catalog):
        """Test that tag order survives and empty tags are dropped."""
        add(catalog, "p", ["x", "", "y", "z"])
        assert catalog.get_project("p").tags == ["x", "y", "z"]

    def test_empty_segments_dropped_on_read(self, catalog):
        """Test that a stored field with empty segments loads without them."""
        with catalog.conn:
            catalog.conn.execute(
                "INSERT INTO projects (name, tags) VALUES (?, ?)", ("raw", ",a,,b,")
            )
        assert catalog.get_project("raw").tags == ["a", "b"]

    def test_duplicate_insert(self, catalog):
        """Test that the unique constraint surfaces as NameTaken."""
        add(catalog, "dup")

        with pytest.raises(NameTaken) as exc_info:
            add(catalog, "dup", ["other"])
        assert isinstance(exc_info.value, DatabaseError)
        assert catalog.get_project("dup").tags == []

    def test_other_constraint_is_not_name_taken(self, temp_workspace):
        """Test that a constraint failure on another column is a plain DatabaseError."""
        conn = sqlite3.connect(str(temp_workspace / "pile.db"))
        conn.execute(
            "CREATE TABLE projects (id INTEGER PRIMARY KEY, name TEXT NOT NULL UNIQUE,"
            " path TEXT NOT NULL UNIQUE, tags TEXT)"
        )
        conn.close()

        with CatalogDB(temp_workspace) as catalog:
            with pytest.raises(DatabaseError) as exc_info:
                add(catalog, "foo")
            assert not isinstance(exc_info.value, NameTaken)
            assert "projects.path" in str(exc_info.value)
            assert not catalog.name_exists("foo")

    def test_get_missing(self, catalog):
        """Test that an unknown name raises ProjectNotFound."""
        with pytest.raises(ProjectNotFound):
            catalog.get_project("nope")

    def test_delete(self, catalog):
        """Test deleting a row, and deleting a missing row as a no-op."""
        add(catalog, "gone")
        catalog.delete_project("gone")
        assert not catalog.name_exists("gone")

        # Should not raise
        catalog.delete_project("gone")

    def test_delete_failure(self, catalog):
        """Test that a failing delete raises RemoveFailed."""
        catalog.conn = MagicMock(wraps=catalog.conn)
        catalog.conn.execute.side_effect = sqlite3.OperationalError("disk I/O error")

        with pytest.raises(RemoveFailed):
            catalog.delete_project("anything")

    def test_update_name(self, catalog):
        """Test renaming a row."""
        add(catalog, "foo", ["t"])
        catalog.update_name("foo", "bar")

        assert not catalog.name_exists("foo")
        assert catalog.get_project("bar").tags == ["t"]

    def test_update_name_taken(self, catalog):
        """Test that renaming onto an existing name raises NameTaken."""
        add(catalog, "a")
        add(catalog, "b")

        with pytest.raises(NameTaken):
            catalog.update_name("a", "b")
        assert catalog.name_exists("a")

    def test_update_tags(self, catalog):
        """Test replacing tags."""
        add(catalog, "p", ["old"])
        catalog.update_tags("p", ["new", "", "tags"])
        assert catalog.get_project("p").tags == ["new", "tags"]

        catalog.update_tags("p", [])
        assert catalog.get_project("p").tags == []


class TestCatalogQuery:
    """Test the filtered, ordered project query."""

    @pytest.fixture
    def filled(self, catalog):
        add(catalog, "banana", ["fruit", "yellow"])
        add(catalog, "Apple", ["fruit", "red"])
        add(catalog, "cherry", ["fruit", "red", "small"])
        add(catalog, "my_tool", ["ab", "cd"])
        add(catalog, "My-Project", ["python"])
        return catalog

    def names(self, projects):
        return [p.name for p in projects]

    def test_no_filter_orders_case_insensitively(self, catalog):
        """Test that all projects are returned ordered by name, ignoring case."""
        for name in ["banana", "Apple", "cherry"]:
            add(catalog, name)

        assert self.names(catalog.query_projects()) == ["Apple", "banana", "cherry"]

    def test_empty_catalog(self, catalog):
        """Test that an empty result is a list, not an error."""
        assert catalog.query_projects() == []
        assert catalog.query_projects(name="x", tag="y") == []

    def test_name_filter(self, filled):
        """Test substring filtering by name, ignoring ASCII case."""
        assert self.names(filled.query_projects(name="an")) == ["banana"]
        assert self.names(filled.query_projects(name="my")) == ["My-Project", "my_tool"]

    def test_name_filter_is_literal(self, filled):
        """Test that LIKE wildcards in the filter are matched literally."""
        assert self.names(filled.query_projects(name="_")) == ["my_tool"]
        assert filled.query_projects(name="%") == []

    def test_tag_filter(self, filled):
        """Test substring filtering by tag, ignoring ASCII case."""
        assert self.names(filled.query_projects(tag="red")) == ["Apple", "cherry"]
        assert self.names(filled.query_projects(tag="RED")) == ["Apple", "cherry"]
        assert self.names(filled.query_projects(tag="Python")) == ["My-Project"]
        assert self.names(filled.query_projects(tag="pyth")) == ["My-Project"]

    def test_tag_filter_is_literal(self, filled):
        """Test that LIKE wildcards in the tag filter are matched literally."""
        add(filled, "odd", ["100%"])
        assert self.names(filled.query_projects(tag="%")) == ["odd"]
        assert filled.query_projects(tag="_ed") == []

    def test_tag_filter_crosses_delimiter(self, filled):
        """Test that the tag filter runs on the joined field, comma included."""
        assert self.names(filled.query_projects(tag="b,c")) == ["my_tool"]

    def test_both_filters(self, filled):
        """Test that name and tag filters combine with AND."""
        assert self.names(filled.query_projects(name="a", tag="red")) == ["Apple"]
        assert filled.query_projects(name="banana", tag="red") == []

    def test_omitted_filter_adds_no_clause(self, catalog):
        """Test that a project with no tags is listed when no tag filter is given."""
        add(catalog, "untagged")
        assert self.names(catalog.query_projects()) == ["untagged"]
        assert self.names(catalog.query_projects(name="untag")) == ["untagged"]
