"""
Pixel Aggregator — Total Rendered Area of a Document

Sums width × height over every leaf node of every page:
    ensure pages loaded → walk each page depth-first → sum leaf areas

Design decisions:
    - One suspension point per run (the page loader); traversal after it
      is synchronous
    - Load and traversal failures propagate unchanged; no partial total
      is returned and the run settles back to Idle
    - Leaves without numeric geometry contribute 0; numbers are not
      range-checked, so negative values are summed as-is
    - Overlapping runs are independent; each keeps its own total
"""

from __future__ import annotations

import itertools
import time
from collections import deque
from enum import Enum
from typing import Iterator, Optional, Union

from ..document.loader import PageLoader
from ..document.nodes import Document, Node, Page, is_leaf
from ..observability.logging import get_logger
from ..observability.metrics import (
    COMPUTE_COUNT,
    COMPUTE_LATENCY,
    LAST_TOTAL,
    LEAF_NODES,
    PAGE_LOAD_LATENCY,
)
from ..observability.tracing import get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)

Number = Union[int, float]


class AggregationState(str, Enum):
    """Lifecycle of one compute run. Done and Failed settle back to Idle."""

    IDLE = "idle"
    LOADING = "loading"
    TRAVERSING = "traversing"
    DONE = "done"
    FAILED = "failed"


def iter_leaves(page: Page) -> Iterator[Node]:
    """Yield the page's leaf nodes in depth-first order."""
    for node in page.walk():
        if is_leaf(node):
            yield node


def count_page_pixels(page: Page) -> tuple[Number, int]:
    """
    Sum leaf areas on a loaded page.

    Returns:
        (total, leaf_count) where leaf_count includes leaves without geometry.
    """
    total: Number = 0
    leaf_count = 0
    for node in iter_leaves(page):
        leaf_count += 1
        geometry = node.get_geometry()
        if geometry is not None:
            total += geometry.area
    return total, leaf_count


class PixelAggregator:
    """
    Computes the aggregate pixel area of a document.

    Args:
        document: Read-only document to traverse.
        loader: Capability that loads every page before traversal.
    """

    def __init__(self, document: Document, loader: PageLoader) -> None:
        self._document = document
        self._loader = loader
        self._run_ids = itertools.count(1)
        self._latest_run_id = 0
        self._state = AggregationState.IDLE
        self.transitions: deque[tuple[int, AggregationState]] = deque(maxlen=100)
        self.last_total: Optional[Number] = None

    @property
    def document(self) -> Document:
        return self._document

    @property
    def state(self) -> AggregationState:
        """State of the most recently started run."""
        return self._state

    def _transition(self, run_id: int, state: AggregationState) -> None:
        self.transitions.append((run_id, state))
        if run_id == self._latest_run_id:
            self._state = state

    async def compute_total_pixels(self) -> Number:
        """
        Load all pages and sum width × height over every leaf node.

        Returns:
            The total for this run.

        Raises:
            PageLoadError: If the loader cannot materialize a page.
            PageNotLoadedError: If the loader returned with a page still unloaded.
        """
        run_id = next(self._run_ids)
        self._latest_run_id = run_id
        start_time = time.perf_counter()

        with tracer.start_as_current_span("pixel_aggregator.compute_total_pixels") as span:
            span.set_attribute("pixelcount.run_id", run_id)
            self._transition(run_id, AggregationState.LOADING)
            logger.info("pixel_aggregator.compute.start", run_id=run_id)

            try:
                await self._loader.ensure_all_loaded()

                load_seconds = time.perf_counter() - start_time
                PAGE_LOAD_LATENCY.observe(load_seconds)
                logger.debug(
                    "pixel_aggregator.compute.loaded",
                    run_id=run_id,
                    load_ms=round(load_seconds * 1000, 1),
                )

                self._transition(run_id, AggregationState.TRAVERSING)
                total: Number = 0
                leaf_count = 0
                for page in self._document.pages:
                    page_total, page_leaves = count_page_pixels(page)
                    total += page_total
                    leaf_count += page_leaves
            except Exception as e:
                self._transition(run_id, AggregationState.FAILED)
                COMPUTE_COUNT.labels(status="error").inc()
                span.record_exception(e)
                logger.warning(
                    "pixel_aggregator.compute.failed",
                    run_id=run_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self._transition(run_id, AggregationState.IDLE)
                raise

            self._transition(run_id, AggregationState.DONE)
            elapsed = time.perf_counter() - start_time
            COMPUTE_COUNT.labels(status="success").inc()
            COMPUTE_LATENCY.observe(elapsed)
            LEAF_NODES.observe(leaf_count)
            LAST_TOTAL.set(total)
            span.set_attribute("pixelcount.total", total)
            span.set_attribute("pixelcount.leaf_count", leaf_count)

            logger.info(
                "pixel_aggregator.compute.complete",
                run_id=run_id,
                total=total,
                leaf_count=leaf_count,
                page_count=len(self._document.pages),
                elapsed_ms=round(elapsed * 1000, 1),
            )

            self.last_total = total
            self._transition(run_id, AggregationState.IDLE)
            return total
