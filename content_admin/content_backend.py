"""Record backend used by the forms, the category list and the manage panel.

The admin surface talks to a :class:`ContentBackend`. Transport and storage
are outside this package; :class:`InMemoryContentBackend` keeps records in
dictionaries and is what notebooks and tests use.

Record shapes
-------------
- category: ``{"id", "name"}``
- module: ``{"id", "title", "category_id", "is_public"}``
- video: ``{"id", "module_id", "title", "description", "video_url", "order"}``
- article: ``{"id", "module_id", "title", "url", "order"}``

:meth:`ContentBackend.get_module` returns the module plus its ``category``
record and ordered ``videos``/``articles`` lists. Deleting a video or article
renumbers the remaining ``order`` values of its module to ``1..n``; deleting a
module removes its videos and articles.
"""

from __future__ import annotations

import copy
import logging
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Record = Dict[str, Any]


class BackendError(RuntimeError):
    """Base class for backend failures surfaced to the operator."""


class RecordNotFoundError(BackendError):
    """Raised when a referenced record id does not exist."""


@runtime_checkable
class ContentBackend(Protocol):
    def list_categories(self) -> List[Record]: ...
    def create_category(self, name: str) -> Record: ...
    def update_category(self, category_id: int, name: str) -> Record: ...
    def list_modules(self) -> List[Record]: ...
    def create_module(self, title: str, category_id: int, is_public: bool = False) -> Record: ...
    def update_module(self, module_id: int, **fields: Any) -> Record: ...
    def get_module(self, module_id: int) -> Record: ...
    def create_video(self, module_id: int, title: str, video_url: str, description: str = "") -> Record: ...
    def update_video(self, video_id: int, **fields: Any) -> Record: ...
    def create_article(self, module_id: int, url: str, title: Optional[str] = None) -> Record: ...
    def update_article(self, article_id: int, **fields: Any) -> Record: ...
    def delete_module(self, module_id: int) -> Record: ...
    def delete_video(self, video_id: int) -> Record: ...
    def delete_article(self, article_id: int) -> Record: ...


def title_from_url(url: str) -> str:
    """Derive an article title from the document name at the end of ``url``.

    >>> title_from_url("https://s3.example.com/Artikel/1.1%20Installation.docx")
    '1.1 Installation'
    """
    name = PurePosixPath(unquote(urlparse(url).path)).name
    stem = name.rsplit(".", 1)[0] if "." in name else name
    return stem or url


class InMemoryContentBackend:
    """Dictionary-backed :class:`ContentBackend` with per-type integer ids."""

    _UPDATABLE = {
        "module": {"title", "category_id", "is_public"},
        "video": {"title", "description", "video_url", "order"},
        "article": {"title", "url", "order"},
    }

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[int, Record]] = {
            "category": {},
            "module": {},
            "video": {},
            "article": {},
        }
        self._next_ids: Dict[str, int] = {name: 1 for name in self._tables}

    # --- Categories -------------------------------------------------------------

    def list_categories(self) -> List[Record]:
        return self._list("category")

    def create_category(self, name: str) -> Record:
        return self._insert("category", {"name": str(name)})

    def update_category(self, category_id: int, name: str) -> Record:
        record = self._require("category", category_id)
        record["name"] = str(name)
        return copy.deepcopy(record)

    # --- Modules ----------------------------------------------------------------

    def list_modules(self) -> List[Record]:
        return self._list("module")

    def create_module(self, title: str, category_id: int, is_public: bool = False) -> Record:
        self._require("category", category_id)
        return self._insert(
            "module",
            {"title": str(title), "category_id": int(category_id), "is_public": bool(is_public)},
        )

    def update_module(self, module_id: int, **fields: Any) -> Record:
        if "category_id" in fields:
            self._require("category", fields["category_id"])
        return self._update("module", module_id, fields)

    def delete_module(self, module_id: int) -> Record:
        """Delete a module together with its videos and articles."""
        module = self._require("module", module_id)
        for table in ("video", "article"):
            for child in self._children(table, module["id"]):
                del self._tables[table][child["id"]]
        del self._tables["module"][module["id"]]
        logger.debug("deleted module#%s", module["id"])
        return copy.deepcopy(module)

    def get_module(self, module_id: int) -> Record:
        module = copy.deepcopy(self._require("module", module_id))
        module["category"] = copy.deepcopy(self._tables["category"].get(module["category_id"]))
        module["videos"] = self._children("video", module_id)
        module["articles"] = self._children("article", module_id)
        return module

    # --- Videos / articles ------------------------------------------------------

    def create_video(self, module_id: int, title: str, video_url: str, description: str = "") -> Record:
        self._require("module", module_id)
        order = len(self._children("video", module_id)) + 1
        return self._insert(
            "video",
            {
                "module_id": int(module_id),
                "title": str(title),
                "description": str(description or ""),
                "video_url": str(video_url),
                "order": order,
            },
        )

    def update_video(self, video_id: int, **fields: Any) -> Record:
        return self._update("video", video_id, fields)

    def delete_video(self, video_id: int) -> Record:
        return self._delete_child("video", video_id)

    def create_article(self, module_id: int, url: str, title: Optional[str] = None) -> Record:
        self._require("module", module_id)
        order = len(self._children("article", module_id)) + 1
        return self._insert(
            "article",
            {
                "module_id": int(module_id),
                "title": title or title_from_url(url),
                "url": str(url),
                "order": order,
            },
        )

    def update_article(self, article_id: int, **fields: Any) -> Record:
        return self._update("article", article_id, fields)

    def delete_article(self, article_id: int) -> Record:
        return self._delete_child("article", article_id)

    # --- Internals --------------------------------------------------------------

    def _list(self, table: str) -> List[Record]:
        return [copy.deepcopy(r) for r in self._tables[table].values()]

    def _children(self, table: str, module_id: int) -> List[Record]:
        rows = [r for r in self._tables[table].values() if r["module_id"] == int(module_id)]
        return [copy.deepcopy(r) for r in sorted(rows, key=lambda r: r["order"])]

    def _delete_child(self, table: str, record_id: int) -> Record:
        record = self._tables[table].pop(self._require(table, record_id)["id"])
        # Keep positions contiguous (1..n) inside the module.
        siblings = [r for r in self._tables[table].values() if r["module_id"] == record["module_id"]]
        for position, sibling in enumerate(sorted(siblings, key=lambda r: r["order"]), start=1):
            sibling["order"] = position
        logger.debug("deleted %s#%s", table, record["id"])
        return copy.deepcopy(record)

    def _require(self, table: str, record_id: Any) -> Record:
        try:
            key = int(record_id)
        except (TypeError, ValueError):
            raise RecordNotFoundError(f"Unknown {table} id: {record_id!r}") from None
        record = self._tables[table].get(key)
        if record is None:
            raise RecordNotFoundError(f"Unknown {table} id: {record_id!r}")
        return record

    def _insert(self, table: str, values: Record) -> Record:
        record_id = self._next_ids[table]
        self._next_ids[table] += 1
        record = {"id": record_id, **values}
        self._tables[table][record_id] = record
        logger.debug("created %s#%s", table, record_id)
        return copy.deepcopy(record)

    def _update(self, table: str, record_id: int, fields: Dict[str, Any]) -> Record:
        unknown = set(fields) - self._UPDATABLE[table]
        if unknown:
            raise ValueError(f"Cannot update {table} fields: {', '.join(sorted(unknown))}")
        record = self._require(table, record_id)
        record.update(fields)
        logger.debug("updated %s#%s fields=%s", table, record_id, sorted(fields))
        return copy.deepcopy(record)


__all__ = [
    "BackendError",
    "ContentBackend",
    "InMemoryContentBackend",
    "Record",
    "RecordNotFoundError",
    "title_from_url",
]
