"""
Document Module - Read-only document model and page loading

Pages, recursive node trees and the loader capability that
materializes page subtrees before traversal.
"""

from .nodes import Document, Geometry, Node, Page, PageNotLoadedError, is_leaf
from .loader import (
    InMemoryPageLoader,
    JsonPageLoader,
    PageLoader,
    PageLoadError,
    load_document,
)

__all__ = [
    "Document",
    "Geometry",
    "Node",
    "Page",
    "PageNotLoadedError",
    "is_leaf",
    "PageLoader",
    "PageLoadError",
    "InMemoryPageLoader",
    "JsonPageLoader",
    "load_document",
]
