"""Todo store interface."""

from typing import Protocol


class TodoStoreError(Exception):
    """Raised when the todo store rejects or fails a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TodoStore(Protocol):
    """Interface for persisting projects and todos in any backend."""

    def create_project(self, title: str) -> int:
        """Create a project and return its id."""
        ...

    def create_todo(self, payload: dict) -> dict:
        """Create a todo from a wire payload and return the stored record."""
        ...

    def update_todo(self, payload: dict) -> dict:
        """Update an existing todo (payload carries its id)."""
        ...
