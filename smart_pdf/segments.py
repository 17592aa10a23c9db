"""
Segment discovery.

Finds the children of an oversized block that the planner evaluates at the
next granularity level. Explicit `data-pdf-segment` markers win; without
them the strategy is chosen from the block's tag.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Tuple

from .measurement import MeasurementProvider


class SegmentStrategy(str, Enum):
    EXPLICIT_MARKER = "explicit_marker"
    LIST_ITEMS = "list_items"
    TABLE_ROWS = "table_rows"
    GENERIC_CHILDREN = "generic_children"


_TAG_STRATEGIES: Dict[str, SegmentStrategy] = {
    "UL": SegmentStrategy.LIST_ITEMS,
    "OL": SegmentStrategy.LIST_ITEMS,
    "TABLE": SegmentStrategy.TABLE_ROWS,
}

_Collector = Callable[[MeasurementProvider, Any], Awaitable[List[Any]]]

_COLLECTORS: Dict[SegmentStrategy, _Collector] = {
    SegmentStrategy.EXPLICIT_MARKER: lambda provider, node: provider.marked_children(node),
    SegmentStrategy.LIST_ITEMS: lambda provider, node: provider.list_items(node),
    SegmentStrategy.TABLE_ROWS: lambda provider, node: provider.table_rows(node),
    SegmentStrategy.GENERIC_CHILDREN: lambda provider, node: provider.element_children(node),
}


def strategy_for_tag(tag_name: str) -> SegmentStrategy:
    """Heuristic strategy for a node without explicit markers."""
    return _TAG_STRATEGIES.get(tag_name.upper(), SegmentStrategy.GENERIC_CHILDREN)


async def collect_segments(
    provider: MeasurementProvider,
    node: Any,
    strategy: SegmentStrategy,
) -> List[Any]:
    return list(await _COLLECTORS[strategy](provider, node))


async def discover_segments(
    provider: MeasurementProvider,
    node: Any,
) -> Tuple[SegmentStrategy, List[Any]]:
    """
    Return the strategy used and the segments found for `node`.

    Marked children are preferred. Otherwise lists yield their items,
    tables their rows and anything else its element children.
    """
    marked = await collect_segments(provider, node, SegmentStrategy.EXPLICIT_MARKER)
    if marked:
        return SegmentStrategy.EXPLICIT_MARKER, marked

    strategy = strategy_for_tag(await provider.tag_name(node))
    return strategy, await collect_segments(provider, node, strategy)
