"""Feed source adapter - reads calendar feeds from disk or over HTTP."""

import logging
import re
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_TITLE = "Imported Calendar"
_FEED_SUFFIX = re.compile(r"\.(ics|calendar)$", re.IGNORECASE)


class FeedFetchError(Exception):
    """Raised when a feed cannot be read or downloaded."""

    pass


def is_url(source: str) -> bool:
    return urlparse(source).scheme.lower() in ("http", "https", "webcal")


def read_feed(source: str, session: requests.Session | None = None) -> str:
    """
    Return the text of a calendar feed.

    ``source`` is a local path or an http(s) URL; ``webcal://`` URLs are
    fetched over https.
    """
    if is_url(source):
        return _fetch(source, session or requests.Session())

    path = Path(source).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FeedFetchError(f"Cannot read feed {path}: {e}") from e


def _fetch(url: str, session: requests.Session) -> str:
    if url.lower().startswith("webcal://"):
        url = "https://" + url[len("webcal://"):]

    logger.info(f"Fetching calendar feed from {url}")
    try:
        resp = session.get(url)
    except requests.RequestException as e:
        raise FeedFetchError(f"Error fetching feed from {url}: {e}") from e

    if resp.status_code != 200:
        raise FeedFetchError(
            f"Error fetching feed from {url}: status code {resp.status_code}, body: {resp.text}"
        )

    # Feeds are UTF-8 whatever the server claims
    resp.encoding = "utf-8"
    return resp.text


def project_title_for(source: str) -> str:
    """Name the import project after the feed's file name."""
    if is_url(source):
        name = unquote(Path(urlparse(source).path).name)
    else:
        name = Path(source).name
    return _FEED_SUFFIX.sub("", name) or DEFAULT_PROJECT_TITLE
