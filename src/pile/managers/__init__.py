"""Pile managers."""

from pile.managers.base import BaseManager, CatalogContext
from pile.managers.project import ProjectManager, AddResult, EditResult

__all__ = [
    "BaseManager",
    "CatalogContext",
    "ProjectManager",
    "AddResult",
    "EditResult",
]
