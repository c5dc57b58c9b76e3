"""Flow allocation and diagram layout."""

from .allocator import FlowAllocation, FlowPartition, allocate, verify_conservation
from .layout import LayoutLink, LayoutNode, LayoutOptions, SankeyLayout, layout

__all__ = [
    "FlowAllocation",
    "FlowPartition",
    "LayoutLink",
    "LayoutNode",
    "LayoutOptions",
    "SankeyLayout",
    "allocate",
    "layout",
    "verify_conservation",
]
