"""
In-memory stacked layout implementing the MeasurementProvider contract.

Blocks are laid out top to bottom: a node's children start at the node's
top, and a node's height is its own height plus the heights of its
children. Geometry is recomputed on every `measure`, so inserted spacers
shift everything after them the same way they do in a browser.
"""

from typing import Dict, List, Optional, Tuple

from smart_pdf.measurement import (
    FRAGMENT_HOST_CLASS,
    NON_LAYOUT_TAGS,
    SPACER_CLASS,
    BlockGeometry,
    Mutation,
    MutationKind,
)


class FakeNode:
    """A block in the fake document."""

    def __init__(
        self,
        tag: str = "DIV",
        height: float = 0.0,
        children: Optional[List["FakeNode"]] = None,
        keep: bool = False,
        segment: bool = False,
        width: float = 600.0,
        display: str = "block",
        visibility: str = "visible",
        spacer: bool = False,
        name: str = "",
    ):
        self.tag = tag.upper()
        self.own_height = height
        self.children: List[FakeNode] = list(children or [])
        self.keep = keep
        self.segment = segment
        self.width = width
        self.display = display
        self.visibility = visibility
        self.spacer = spacer
        self.name = name
        self.styles: Dict[str, str] = {}
        self.classes = {SPACER_CLASS} if spacer else set()
        self.parent: Optional[FakeNode] = None
        for child in self.children:
            child.parent = self

    @property
    def is_fragment_host(self) -> bool:
        return FRAGMENT_HOST_CLASS in self.classes

    @property
    def kept_together(self) -> bool:
        return self.styles.get("break-inside") == "avoid-page"

    def __repr__(self) -> str:
        return f"FakeNode({self.name or self.tag})"


def block(height: float = 0.0, *children: FakeNode, **kwargs) -> FakeNode:
    return FakeNode(height=height, children=list(children), **kwargs)


class FakeLayout:
    """MeasurementProvider over a FakeNode tree rooted at <body>."""

    def __init__(self, *children: FakeNode):
        self.body = FakeNode("BODY", children=list(children))
        self.injected_styles: List[str] = []
        self.mutations: List[Tuple[FakeNode, Mutation]] = []

    # ---- layout -------------------------------------------------------

    def _height(self, node: FakeNode) -> float:
        if node.display == "none":
            return 0.0
        return node.own_height + sum(self._height(child) for child in node.children)

    def _positions(self) -> Dict[int, float]:
        positions: Dict[int, float] = {}

        def place(node: FakeNode, top: float) -> None:
            positions[id(node)] = top
            cursor = top
            for child in node.children:
                place(child, cursor)
                cursor += self._height(child)

        place(self.body, 0.0)
        return positions

    def _walk(self, node: Optional[FakeNode] = None):
        node = node or self.body
        for child in node.children:
            yield child
            yield from self._walk(child)

    def spacer_heights(self) -> List[float]:
        return [node.own_height for node in self._walk() if node.spacer]

    # ---- MeasurementProvider -----------------------------------------

    async def root_blocks(self) -> List[FakeNode]:
        return [node for node in self._walk() if node.keep]

    async def measure(self, node: FakeNode) -> Optional[BlockGeometry]:
        top = self._positions().get(id(node))
        if top is None:
            return None
        height = self._height(node)
        return BlockGeometry(
            top=top,
            width=node.width if height > 0 else 0.0,
            height=height,
            display=node.display,
            visibility=node.visibility,
        )

    async def tag_name(self, node: FakeNode) -> str:
        return node.tag

    async def marked_children(self, node: FakeNode) -> List[FakeNode]:
        return [child for child in node.children if child.segment]

    async def element_children(self, node: FakeNode) -> List[FakeNode]:
        return [child for child in node.children if child.tag not in NON_LAYOUT_TAGS]

    async def list_items(self, node: FakeNode) -> List[FakeNode]:
        return [child for child in node.children if child.tag == "LI"]

    async def table_rows(self, node: FakeNode) -> List[FakeNode]:
        return [child for child in self._walk(node) if child.tag == "TR"]

    async def inject_style(self, css: str) -> None:
        self.injected_styles.append(css)

    async def mutate(self, node: FakeNode, mutation: Mutation) -> None:
        self.mutations.append((node, mutation))
        if mutation.kind is MutationKind.KEEP_TOGETHER:
            node.styles["break-inside"] = "avoid-page"
            node.styles["page-break-inside"] = "avoid"
        elif mutation.kind is MutationKind.FRAGMENT_HOST:
            node.classes.add(FRAGMENT_HOST_CLASS)
        elif mutation.kind is MutationKind.INSERT_SPACER:
            spacer = FakeNode(height=mutation.height_px, spacer=True, name="spacer")
            parent = node.parent
            spacer.parent = parent
            parent.children.insert(parent.children.index(node), spacer)

    async def has_spacer(self, node: FakeNode) -> bool:
        siblings = node.parent.children if node.parent else []
        position = siblings.index(node) if node in siblings else 0
        return position > 0 and siblings[position - 1].spacer

    async def clear_spacers(self) -> int:
        spacers = [node for node in self._walk() if node.spacer]
        for spacer in spacers:
            spacer.parent.children.remove(spacer)
        return len(spacers)


class Handle:
    """A throwaway reference to a FakeNode, like a browser element handle."""

    def __init__(self, node: FakeNode):
        self.node = node

    def __repr__(self) -> str:
        return f"Handle({self.node!r})"


class HandleLayout(FakeLayout):
    """FakeLayout that returns a new Handle for every element it hands out."""

    async def root_blocks(self) -> List[Handle]:
        return [Handle(node) for node in await super().root_blocks()]

    async def measure(self, handle: Handle) -> Optional[BlockGeometry]:
        return await super().measure(handle.node)

    async def tag_name(self, handle: Handle) -> str:
        return await super().tag_name(handle.node)

    async def marked_children(self, handle: Handle) -> List[Handle]:
        return [Handle(node) for node in await super().marked_children(handle.node)]

    async def element_children(self, handle: Handle) -> List[Handle]:
        return [Handle(node) for node in await super().element_children(handle.node)]

    async def list_items(self, handle: Handle) -> List[Handle]:
        return [Handle(node) for node in await super().list_items(handle.node)]

    async def table_rows(self, handle: Handle) -> List[Handle]:
        return [Handle(node) for node in await super().table_rows(handle.node)]

    async def mutate(self, handle: Handle, mutation: Mutation) -> None:
        await super().mutate(handle.node, mutation)

    async def has_spacer(self, handle: Handle) -> bool:
        return await super().has_spacer(handle.node)
