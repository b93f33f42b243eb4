"""Pile - organize your projects from the command line."""

from pile.infrastructure.catalog_db import CatalogDB
from pile.managers import CatalogContext, ProjectManager
from pile.models import Project

try:
    from importlib.metadata import version
    __version__ = version("pile-projects")
except Exception:
    # Package metadata is not available when running from a source checkout
    __version__ = "0.1.0"

__all__ = ["CatalogDB", "CatalogContext", "ProjectManager", "Project"]
