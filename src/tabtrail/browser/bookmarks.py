"""Chrome ``Bookmarks`` file parsing and traversal.

The raw JSON is converted at the boundary into a typed tree of
``BookmarkFolder`` and ``BookmarkUrl`` nodes; traversal only ever sees the
typed form.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, TypeAlias

from tabtrail.browser.errors import BookmarksNotFoundError, BookmarksParseError, BrowserDataError
from tabtrail.browser.timestamps import chrome_time_to_datetime
from tabtrail.browser.types import Bookmark

ROOT_FOLDER = "Root"

logger = logging.getLogger("tabtrail.browser.bookmarks")


@dataclass(frozen=True, slots=True)
class BookmarkUrl:
    name: str
    url: str
    date_added: datetime | None = None


@dataclass(frozen=True, slots=True)
class BookmarkFolder:
    name: str
    children: tuple[BookmarkNode, ...] = ()


BookmarkNode: TypeAlias = BookmarkFolder | BookmarkUrl


@dataclass(frozen=True, slots=True)
class BookmarkTree:
    """Top-level containers keyed by their Chrome root name (``bookmark_bar``, ``other``...)."""

    roots: dict[str, BookmarkFolder] = field(default_factory=dict)


def read_bookmark_tree(path: Path) -> BookmarkTree:
    """Read and parse the Bookmarks file at ``path``."""

    try:
        raw_text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise BookmarksNotFoundError(
            "Chrome Bookmarks file not found. Make sure Chrome has been run at least once."
        ) from exc
    except OSError as exc:
        raise BrowserDataError(f"Failed to read Chrome Bookmarks: {exc}") from exc

    try:
        raw = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise BookmarksParseError("Failed to parse Chrome Bookmarks file. The file may be corrupted.") from exc

    return parse_bookmark_tree(raw)


def parse_bookmark_tree(raw: Any) -> BookmarkTree:
    """Build a typed tree from the decoded Bookmarks JSON."""

    if not isinstance(raw, Mapping):
        raise BookmarksParseError("Bookmarks file must contain a JSON object")
    roots_raw = raw.get("roots", {})
    if not isinstance(roots_raw, Mapping):
        raise BookmarksParseError("Bookmarks 'roots' must be an object")

    roots: dict[str, BookmarkFolder] = {}
    for root_name, root_node in roots_raw.items():
        # Chrome also stores non-folder metadata (e.g. sync_transaction_version) under roots
        if not isinstance(root_node, Mapping) or not isinstance(root_node.get("children"), list):
            continue
        roots[str(root_name)] = BookmarkFolder(
            name=str(root_node.get("name") or root_name),
            children=_parse_children(root_node["children"]),
        )
    return BookmarkTree(roots=roots)


def _parse_children(children: list[Any]) -> tuple[BookmarkNode, ...]:
    nodes: list[BookmarkNode] = []
    for child in children:
        node = _parse_node(child)
        if node is not None:
            nodes.append(node)
    return tuple(nodes)


def _parse_node(raw: Any) -> BookmarkNode | None:
    if not isinstance(raw, Mapping):
        return None
    kind = raw.get("type")
    name = str(raw.get("name") or "")
    if kind == "url":
        url = raw.get("url")
        if not isinstance(url, str):
            return None
        return BookmarkUrl(name=name, url=url, date_added=_parse_date_added(raw.get("date_added")))
    if kind == "folder":
        children = raw.get("children")
        return BookmarkFolder(name=name, children=_parse_children(children if isinstance(children, list) else []))
    logger.debug("skipping bookmark node of type %r", kind)
    return None


def _parse_date_added(value: Any) -> datetime | None:
    try:
        return chrome_time_to_datetime(value)
    except (TypeError, ValueError, OverflowError):
        return None


def flatten(node: BookmarkFolder, path_prefix: str = "") -> list[Bookmark]:
    """Depth-first flattening of ``node``'s children in stored order."""

    bookmarks: list[Bookmark] = []
    for child in node.children:
        if isinstance(child, BookmarkUrl):
            bookmarks.append(
                Bookmark(
                    title=child.name,
                    url=child.url,
                    date_added=child.date_added,
                    folder=path_prefix or ROOT_FOLDER,
                )
            )
        else:
            child_path = f"{path_prefix}/{child.name}" if path_prefix else child.name
            bookmarks.extend(flatten(child, child_path))
    return bookmarks


def flatten_tree(tree: BookmarkTree, folder: str | None = None) -> list[Bookmark]:
    """Flatten every root, optionally keeping folders whose path contains ``folder``."""

    bookmarks: list[Bookmark] = []
    for root_name, root in tree.roots.items():
        bookmarks.extend(flatten(root, root_name))

    if folder:
        needle = folder.lower()
        bookmarks = [bookmark for bookmark in bookmarks if needle in bookmark.folder.lower()]
    return bookmarks


__all__ = [
    "ROOT_FOLDER",
    "BookmarkFolder",
    "BookmarkNode",
    "BookmarkTree",
    "BookmarkUrl",
    "flatten",
    "flatten_tree",
    "parse_bookmark_tree",
    "read_bookmark_tree",
]
