"""Todo API adapter - HTTP client for the task store."""

import logging

import requests

from almanac.config import Config, load_config
from almanac.core.wire import normalize_due_date
from almanac.ports.todo_store import TodoStoreError

logger = logging.getLogger(__name__)


class TodoApiAdapter:
    """
    Todo API adapter.

    Implements TodoStore protocol over the JSON API. No business logic -
    just I/O. Requests carry no timeout and are never retried.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self.base_url = self.config.api_base_url.rstrip("/")
        self._session = session or requests.Session()

    def _api_request(self, method: str, endpoint: str, payload: dict | list) -> dict:
        """Make an API request, raising TodoStoreError on any failure."""
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self._session.request(method, url, json=payload)
        except requests.RequestException as e:
            raise TodoStoreError(f"{method} {endpoint} failed: {e}") from e

        if not resp.ok:
            raise TodoStoreError(
                f"{method} {endpoint} returned {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise TodoStoreError(f"{method} {endpoint} returned invalid JSON: {e}") from e

    def create_project(self, title: str) -> int:
        """Create a project, returning its id."""
        data = self._api_request("POST", "/api/projects", {"title": title})
        try:
            return int(data["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise TodoStoreError(f"Project response has no usable id: {data!r}") from e

    def create_todo(self, payload: dict) -> dict:
        """Create a todo."""
        return self._api_request("POST", "/api/todo", payload)

    def update_todo(self, payload: dict) -> dict:
        """Update a todo, re-normalising its stored due date first."""
        if payload.get("due_date"):
            payload = {
                **payload,
                "due_date": normalize_due_date(payload["due_date"], self.config.tzinfo()),
            }
        return self._api_request("PUT", "/api/todo", payload)
