"""Aggregator - Pixel area totals over document leaves"""
from .pixel_aggregator import (
    AggregationState,
    PixelAggregator,
    count_page_pixels,
    iter_leaves,
)

__all__ = [
    "AggregationState",
    "PixelAggregator",
    "count_page_pixels",
    "iter_leaves",
]
