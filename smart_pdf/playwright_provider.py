"""
Measurement Provider backed by a live Playwright page.

Every call is a round trip to Chromium so geometry always reflects the
spacers inserted so far.
"""

from typing import Any, List, Optional

from .measurement import (
    FRAGMENT_HOST_CLASS,
    KEEP_SELECTOR,
    SEGMENT_SELECTOR,
    SPACER_CLASS,
    BlockGeometry,
    Mutation,
    MutationKind,
)


_MEASURE_JS = """
(el) => {
  if (!el.isConnected) {
    return null;
  }
  const rect = el.getBoundingClientRect();
  const style = window.getComputedStyle(el);
  return {
    top: rect.top + window.scrollY,
    width: rect.width,
    height: rect.height,
    display: style.display,
    visibility: style.visibility
  };
}
"""

_KEEP_TOGETHER_JS = """
(el) => {
  el.style.breakInside = 'avoid-page';
  el.style.pageBreakInside = 'avoid';
}
"""

_FRAGMENT_HOST_JS = """
(el, className) => {
  el.classList.add(className);
}
"""

_INSERT_SPACER_JS = """
(el, payload) => {
  if (!el.parentNode) {
    return;
  }
  const spacer = document.createElement('div');
  spacer.className = payload.className;
  spacer.setAttribute('aria-hidden', 'true');
  spacer.style.height = `${payload.height}px`;
  el.parentNode.insertBefore(spacer, el);
}
"""

_HAS_SPACER_JS = """
(el, className) => {
  const previous = el.previousElementSibling;
  return Boolean(previous && previous.classList.contains(className));
}
"""

_CLEAR_SPACERS_JS = """
(className) => {
  const spacers = document.querySelectorAll(`.${className}`);
  for (const spacer of Array.from(spacers)) {
    spacer.remove();
  }
  return spacers.length;
}
"""


class PlaywrightMeasurementProvider:
    """MeasurementProvider over a Playwright async `Page`."""

    def __init__(self, page):
        self.page = page

    async def root_blocks(self) -> List[Any]:
        return await self.page.query_selector_all(KEEP_SELECTOR)

    async def measure(self, node) -> Optional[BlockGeometry]:
        data = await node.evaluate(_MEASURE_JS)
        if not data:
            return None
        return BlockGeometry(
            top=float(data["top"]),
            width=float(data["width"]),
            height=float(data["height"]),
            display=data.get("display") or "block",
            visibility=data.get("visibility") or "visible",
        )

    async def tag_name(self, node) -> str:
        return (await node.evaluate("(el) => el.tagName")).upper()

    async def marked_children(self, node) -> List[Any]:
        return await node.query_selector_all(f":scope > {SEGMENT_SELECTOR}")

    async def element_children(self, node) -> List[Any]:
        return await node.query_selector_all(":scope > :not(script):not(style)")

    async def list_items(self, node) -> List[Any]:
        return await node.query_selector_all(":scope > li")

    async def table_rows(self, node) -> List[Any]:
        return await node.query_selector_all("tr")

    async def inject_style(self, css: str) -> None:
        await self.page.add_style_tag(content=css)

    async def mutate(self, node, mutation: Mutation) -> None:
        if mutation.kind is MutationKind.KEEP_TOGETHER:
            await node.evaluate(_KEEP_TOGETHER_JS)
        elif mutation.kind is MutationKind.FRAGMENT_HOST:
            await node.evaluate(_FRAGMENT_HOST_JS, FRAGMENT_HOST_CLASS)
        elif mutation.kind is MutationKind.INSERT_SPACER:
            await node.evaluate(
                _INSERT_SPACER_JS,
                {"className": SPACER_CLASS, "height": mutation.height_px},
            )
        else:
            raise ValueError(f"Unknown mutation: {mutation.kind}")

    async def has_spacer(self, node) -> bool:
        return bool(await node.evaluate(_HAS_SPACER_JS, SPACER_CLASS))

    async def clear_spacers(self) -> int:
        return int(await self.page.evaluate(_CLEAR_SPACERS_JS, SPACER_CLASS) or 0)
