"""Adapters - I/O implementations of ports."""

from .todo_api import TodoApiAdapter
from .feed_source import FeedFetchError, project_title_for, read_feed

__all__ = [
    "TodoApiAdapter",
    "FeedFetchError",
    "project_title_for",
    "read_feed",
]
