"""
Page Loaders — Materialize Page Subtrees Before Traversal

A PageLoader is the host capability the aggregator awaits before it
reads any page. After `ensure_all_loaded()` returns, every page of the
document can be enumerated synchronously.

Implementations:
    - InMemoryPageLoader: subtrees registered up front (tests, embedding hosts)
    - JsonPageLoader: deferred page files next to a document JSON file

Design decisions:
    - Any page failing to load fails the whole call with PageLoadError;
      callers never see a half-loaded document as success
    - File reads and JSON parsing run in asyncio.to_thread
    - Loaders only attach subtrees; they never modify nodes
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol, Union

from .nodes import Document, Node, Page
from ..observability.logging import get_logger

logger = get_logger(__name__)


class PageLoadError(RuntimeError):
    """A page subtree could not be materialized."""

    def __init__(self, page_id: str, reason: str) -> None:
        super().__init__(f"Failed to load page {page_id!r}: {reason}")
        self.page_id = page_id
        self.reason = reason


class PageLoader(Protocol):
    """Host capability that makes every page safe to enumerate."""

    async def ensure_all_loaded(self) -> None:
        ...


# ──────────────────────────────────────────────────────────────
# In-memory loader
# ──────────────────────────────────────────────────────────────


class InMemoryPageLoader:
    """
    Loads pages from subtrees held in memory.

    Args:
        document: Document whose pages are loaded.
        subtrees: Children to attach per page id. Unlisted pages load empty.
        failing_pages: Page ids that raise PageLoadError when loaded.
        delay: Seconds to suspend before loading.
    """

    def __init__(
        self,
        document: Document,
        subtrees: Optional[Mapping[str, list[Node]]] = None,
        failing_pages: Iterable[str] = (),
        delay: float = 0.0,
    ) -> None:
        self._document = document
        self._subtrees = dict(subtrees or {})
        self._failing_pages = set(failing_pages)
        self._delay = delay
        self.load_calls = 0

    async def ensure_all_loaded(self) -> None:
        self.load_calls += 1
        await asyncio.sleep(self._delay)
        for page in self._document.pages:
            if page.page_id in self._failing_pages:
                raise PageLoadError(page.page_id, "access denied by host")
            if not page.is_loaded:
                page.attach(self._subtrees.get(page.page_id, []))


# ──────────────────────────────────────────────────────────────
# JSON file loader
# ──────────────────────────────────────────────────────────────


class JsonPageLoader:
    """
    Loads deferred pages from JSON files.

    A deferred page carries a `source` path, relative to `base_dir`. The
    file holds a list of nodes or an object with a "children" list.
    """

    def __init__(self, document: Document, base_dir: Union[str, Path] = ".") -> None:
        self._document = document
        self._base_dir = Path(base_dir)

    async def ensure_all_loaded(self) -> None:
        """
        Load every unloaded page.

        Raises:
            PageLoadError: If any page has no source, a missing or
                unreadable file, invalid JSON, or malformed nodes.
        """
        pending = [page for page in self._document.pages if not page.is_loaded]
        if not pending:
            return

        logger.debug("json_page_loader.loading", pages=len(pending))

        for page in pending:
            children = await asyncio.to_thread(self._read_page_sync, page)
            page.attach(children)
            logger.debug(
                "json_page_loader.page_loaded",
                page_id=page.page_id,
                top_level_nodes=len(children),
            )

    def _read_page_sync(self, page: Page) -> list[Node]:
        if page.source is None:
            raise PageLoadError(page.page_id, "page has no source")

        path = self._base_dir / page.source
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise PageLoadError(page.page_id, f"cannot read {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise PageLoadError(page.page_id, f"invalid JSON in {path}: {e}") from e

        if isinstance(raw, dict):
            raw = raw.get("children", [])
        if not isinstance(raw, list):
            raise PageLoadError(page.page_id, f"{path} does not contain a node list")

        try:
            return [Node.from_dict(node) for node in raw]
        except (KeyError, TypeError, AttributeError) as e:
            raise PageLoadError(page.page_id, f"malformed node in {path}: {e}") from e


def load_document(path: Union[str, Path]) -> tuple[Document, JsonPageLoader]:
    """
    Parse a document JSON file and build a loader for its deferred pages.

    Raises:
        FileNotFoundError: If the document file does not exist.
        ValueError: If the file is not a valid document.
    """
    resolved = Path(path).resolve()
    if not resolved.exists():
        raise FileNotFoundError(f"Document file not found: {resolved}")

    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
        document = Document.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Invalid document file {resolved}: {e}") from e

    logger.info(
        "document.loaded",
        path=str(resolved),
        pages=len(document.pages),
        deferred_pages=sum(1 for page in document.pages if not page.is_loaded),
    )
    return document, JsonPageLoader(document, base_dir=resolved.parent)
