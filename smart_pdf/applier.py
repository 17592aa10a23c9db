"""
Plan Applier.

Carries out the planner's decisions on the live tree: clears spacers left
by an earlier pass, injects the print stylesheet, and applies keep-together
hints, fragment-host markers and spacers.
"""

import logging
from typing import Any

from .measurement import (
    FRAGMENT_HOST_CLASS,
    KEEP_SELECTOR,
    SEGMENT_SELECTOR,
    SPACER_CLASS,
    MeasurementProvider,
    Mutation,
)

logger = logging.getLogger(__name__)

PRINT_STYLES = f"""
@media print {{
  body {{
    display: block !important;
    justify-content: initial !important;
  }}

  .container {{
    overflow: visible !important;
  }}

  .{SPACER_CLASS} {{
    display: block !important;
    margin: 0 !important;
    padding: 0 !important;
    border: 0 !important;
    width: 100% !important;
    background: transparent !important;
  }}

  {KEEP_SELECTOR},
  {SEGMENT_SELECTOR} {{
    break-inside: avoid-page !important;
    page-break-inside: avoid !important;
  }}

  .container,
  {KEEP_SELECTOR} {{
    -webkit-box-decoration-break: clone !important;
    box-decoration-break: clone !important;
  }}

  /* Fragment hosts keep padding and background; only shadows and clipping go */
  .{FRAGMENT_HOST_CLASS} {{
    box-shadow: none !important;
    overflow: visible !important;
    -webkit-box-decoration-break: clone !important;
    box-decoration-break: clone !important;
  }}
}}
"""


class PlanApplier:
    """
    Applies planning decisions through a MeasurementProvider.

    A block never gets two spacers in one pass. The check reads the live
    tree rather than the node handle, since a provider may hand out a new
    handle for the same element on every query.
    """

    def __init__(self, provider: MeasurementProvider, stylesheet: str = PRINT_STYLES):
        self.provider = provider
        self.stylesheet = stylesheet
        self._style_injected = False

    async def begin_pass(self) -> int:
        """
        Reset the tree for a fresh planning pass.

        Returns:
            Number of stale spacers removed
        """
        removed = await self.provider.clear_spacers()
        if removed:
            logger.debug(f"Removed {removed} spacer(s) from a previous pass")

        if not self._style_injected:
            await self.provider.inject_style(self.stylesheet)
            self._style_injected = True

        return removed

    async def keep_together(self, node: Any) -> None:
        await self.provider.mutate(node, Mutation.keep_together())

    async def mark_fragment_host(self, node: Any) -> None:
        await self.provider.mutate(node, Mutation.fragment_host())

    async def insert_spacer(self, node: Any, height_px: float) -> bool:
        """
        Insert a spacer of `height_px` right before `node`.

        Returns:
            False if the node already has a spacer from the current pass
        """
        if await self.provider.has_spacer(node):
            return False

        await self.provider.mutate(node, Mutation.spacer(height_px))
        return True
