"""
Permission Core - owner scopes and mentor assignments.
"""

from practicum.kernel.permissions.scope import OwnerScope, resolve_scope
from practicum.kernel.permissions.assignment_directory import AssignmentDirectory

__all__ = [
    "OwnerScope",
    "resolve_scope",
    "AssignmentDirectory",
]
