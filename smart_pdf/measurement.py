"""
Measurement Provider contract.

The planner never touches the browser directly. It reads live geometry and
applies mutations through a MeasurementProvider, so it can run against a
Playwright page in production and an in-memory layout in tests.

Node handles are opaque to the planner; only the provider interprets them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Protocol

# Markers shared by the provider, the applier and the print stylesheet
KEEP_ATTRIBUTE = "data-pdf-keep"
SEGMENT_ATTRIBUTE = "data-pdf-segment"
SPACER_CLASS = "pdf-smart-spacer"
FRAGMENT_HOST_CLASS = "pdf-fragment-host"

KEEP_SELECTOR = f"[{KEEP_ATTRIBUTE}]"
SEGMENT_SELECTOR = f"[{SEGMENT_ATTRIBUTE}]"

# Elements that never take part in layout decisions
NON_LAYOUT_TAGS = frozenset({"SCRIPT", "STYLE"})


@dataclass(frozen=True)
class BlockGeometry:
    """Geometry of a node as measured right now."""

    top: float
    width: float
    height: float
    display: str = "block"
    visibility: str = "visible"

    @property
    def is_visible(self) -> bool:
        return (
            self.height > 0
            and self.width > 0
            and self.display != "none"
            and self.visibility != "hidden"
        )


class MutationKind(str, Enum):
    KEEP_TOGETHER = "keep_together"
    FRAGMENT_HOST = "fragment_host"
    INSERT_SPACER = "insert_spacer"


@dataclass(frozen=True)
class Mutation:
    """A single change to the live tree."""

    kind: MutationKind
    height_px: float = 0.0

    @classmethod
    def keep_together(cls) -> "Mutation":
        return cls(MutationKind.KEEP_TOGETHER)

    @classmethod
    def fragment_host(cls) -> "Mutation":
        return cls(MutationKind.FRAGMENT_HOST)

    @classmethod
    def spacer(cls, height_px: float) -> "Mutation":
        return cls(MutationKind.INSERT_SPACER, max(0.0, height_px))


class MeasurementProvider(Protocol):
    """Live access to the content tree being paginated."""

    async def root_blocks(self) -> List[Any]:
        """Keep-together roots in document order."""
        ...

    async def measure(self, node: Any) -> Optional[BlockGeometry]:
        """Fresh geometry for a node, or None when it cannot be measured."""
        ...

    async def tag_name(self, node: Any) -> str:
        """Upper-case tag name of a node."""
        ...

    async def marked_children(self, node: Any) -> List[Any]:
        """Direct children carrying the segment marker."""
        ...

    async def element_children(self, node: Any) -> List[Any]:
        """Direct element children, excluding script/style."""
        ...

    async def list_items(self, node: Any) -> List[Any]:
        """Direct `li` children of a list."""
        ...

    async def table_rows(self, node: Any) -> List[Any]:
        """All `tr` rows of a table."""
        ...

    async def inject_style(self, css: str) -> None:
        """Add a persistent stylesheet to the document."""
        ...

    async def mutate(self, node: Any, mutation: Mutation) -> None:
        """Apply a one-shot change to a node."""
        ...

    async def has_spacer(self, node: Any) -> bool:
        """True when a spacer already sits right before the node."""
        ...

    async def clear_spacers(self) -> int:
        """Remove every spacer left by a previous pass. Returns how many."""
        ...
