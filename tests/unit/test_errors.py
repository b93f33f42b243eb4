"""Tests for the Pile error types."""

import pytest

from pile.core.errors import (
    CollaboratorError,
    ConfigError,
    DatabaseError,
    DirectoryConflict,
    InvalidName,
    NameTaken,
    PileError,
    PileIOError,
    ProjectNotFound,
    RemoveFailed,
)

ALL_ERRORS = [
    NameTaken,
    DirectoryConflict,
    ProjectNotFound,
    RemoveFailed,
    DatabaseError,
    PileIOError,
    InvalidName,
    ConfigError,
    CollaboratorError,
]


class TestErrors:
    """Test the error hierarchy and messages."""

    def test_all_errors_are_pile_errors(self):
        """Test that the CLI can catch every error kind through PileError."""
        for error_type in ALL_ERRORS:
            assert issubclass(error_type, PileError)

    def test_one_message_per_kind(self):
        """Test that every error kind has its own user-facing message."""
        messages = [error_type.message for error_type in ALL_ERRORS]
        assert len(set(messages)) == len(messages)
        assert PileError.message not in messages

    def test_detail_and_default_text(self):
        """Test that str() shows the detail, or the message when there is none."""
        assert str(ProjectNotFound("Project 'x' does not exist")) == "Project 'x' does not exist"
        assert str(ConfigError()) == "The workspace configuration is invalid"
        assert ConfigError().detail == ""

    def test_name_taken_is_a_database_error(self):
        """Test that a uniqueness violation can be handled as a catalog error."""
        with pytest.raises(DatabaseError):
            raise NameTaken("dup")

    def test_invalid_name_is_a_value_error(self):
        """Test that InvalidName can be handled as a ValueError."""
        assert issubclass(InvalidName, ValueError)
