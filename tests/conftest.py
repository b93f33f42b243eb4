"""Pytest configuration and shared fixtures."""

import subprocess
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pile.config import PileConfig
from pile.infrastructure.catalog_db import CatalogDB
from pile.managers.base import CatalogContext


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's Pile environment out of the tests."""
    for name in ("PILE_WORKSPACE", "PILE_DATABASE_FILE", "PILE_GIT"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def temp_workspace():
    """Create a temporary workspace directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def catalog(temp_workspace):
    """Open a catalog in the temporary workspace."""
    db = CatalogDB(temp_workspace)
    yield db
    db.close()


@pytest.fixture
def collaborators():
    """Collaborators that record calls instead of touching the OS."""
    fake = MagicMock()
    fake.run.return_value = subprocess.CompletedProcess(
        args=["true"], returncode=0, stdout="", stderr=""
    )
    return fake


@pytest.fixture
def context(temp_workspace, catalog, collaborators):
    """Catalog context wired to the fake collaborators."""
    return CatalogContext(
        workspace=temp_workspace,
        catalog=catalog,
        config=PileConfig(),
        collaborators=collaborators,
    )


@pytest.fixture
def projects(context):
    """ProjectManager for the temporary workspace."""
    return context.projects
