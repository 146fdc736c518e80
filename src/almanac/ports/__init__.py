"""Ports - interfaces/protocols for external dependencies."""

from .todo_store import TodoStore, TodoStoreError

__all__ = [
    "TodoStore",
    "TodoStoreError",
]
