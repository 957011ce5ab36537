"""
pixelcount - Rendered pixel area of hierarchical design documents

Loads every page of a document, walks each page's node tree and sums
width × height over all leaf nodes.
"""

__version__ = "1.0.0"
