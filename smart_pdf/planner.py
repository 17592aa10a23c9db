"""
Pagination Planner.

Walks the keep-together blocks of a live document and decides, block by
block, whether it would straddle a page boundary. Straddling blocks get a
spacer that pushes them to the next page; blocks too tall for any page
become fragment hosts and their segments are planned one level down.

Geometry is re-read for every block because each spacer shifts everything
after it, so the walk is strictly sequential.

Size bands for a block of height h against printable height H:
    h <  H - eps          fits: spacer-shifted if it straddles a boundary
    H - eps <= h <= H + eps  borderline: kept together, never moved or split
    h >  H + eps          oversized: fragment host, descend into segments
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from .applier import PlanApplier
from .dimensions import DimensionResolver
from .measurement import BlockGeometry, MeasurementProvider
from .segments import discover_segments

logger = logging.getLogger(__name__)

DEFAULT_EPSILON_PX = 2.0
DEFAULT_CONTINUATION_OFFSET = "10mm"
DEFAULT_MAX_DEPTH = 3


class BlockKind(str, Enum):
    """Granularity label of a block, derived from its depth."""

    ROOT = "root"
    SEGMENT = "segment"
    SUB_SEGMENT = "sub_segment"

    @classmethod
    def for_depth(cls, depth: int) -> "BlockKind":
        if depth <= 0:
            return cls.ROOT
        if depth == 1:
            return cls.SEGMENT
        return cls.SUB_SEGMENT


@dataclass(frozen=True)
class PlannerConfig:
    """
    Planner tuning.

    Attributes:
        epsilon_px: tolerance for measurement noise
        continuation_offset_px: room reserved at the top of a continuation page
        max_depth: granularity levels walked; 3 means Root, Segment, SubSegment
    """

    epsilon_px: float = DEFAULT_EPSILON_PX
    continuation_offset_px: float = DimensionResolver().to_pixels(DEFAULT_CONTINUATION_OFFSET)
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_settings(cls, settings, resolver: Optional[DimensionResolver] = None) -> "PlannerConfig":
        resolver = resolver or DimensionResolver()
        return cls(
            epsilon_px=settings.smart_epsilon_px,
            continuation_offset_px=resolver.to_pixels(settings.continuation_offset),
            max_depth=settings.planner_max_depth,
        )


@dataclass(frozen=True)
class SpacerDecision:
    """A spacer inserted before a block."""

    kind: BlockKind
    depth: int
    block_top_px: float
    block_height_px: float
    spacer_height_px: float


@dataclass
class PlanSummary:
    """What a planning pass did."""

    printable_height_px: float
    cleared_spacers: int = 0
    kept_together: int = 0
    fragment_hosts: int = 0
    left_unsplit: int = 0
    skipped: int = 0
    spacers: List[SpacerDecision] = field(default_factory=list)

    @property
    def spacer_count(self) -> int:
        return len(self.spacers)


class PaginationPlanner:
    """
    Inserts spacers so keep-together blocks do not straddle page boundaries.

    Usage:
        planner = PaginationPlanner(provider)
        summary = await planner.plan(printable_height_px)

    `plan` never raises: pagination is a refinement, and a failure here must
    not stop the PDF from being produced.
    """

    def __init__(
        self,
        provider: MeasurementProvider,
        config: Optional[PlannerConfig] = None,
        applier: Optional[PlanApplier] = None,
    ):
        self.provider = provider
        self.config = config or PlannerConfig()
        self.applier = applier or PlanApplier(provider)

    async def plan(
        self,
        printable_height_px: float,
        roots: Optional[Sequence[Any]] = None,
    ) -> PlanSummary:
        """
        Run one planning pass.

        Args:
            printable_height_px: usable content height per page
            roots: keep-together roots; discovered from the provider when None

        Returns:
            PlanSummary of the decisions taken
        """
        summary = PlanSummary(printable_height_px=printable_height_px)

        if printable_height_px <= 0:
            logger.warning(
                f"Printable height is {printable_height_px:.1f}px; skipping pagination planning"
            )
            return summary

        try:
            summary.cleared_spacers = await self.applier.begin_pass()
            if roots is None:
                roots = await self.provider.root_blocks()
        except Exception as e:
            logger.warning(f"Pagination planning aborted before the walk: {e}")
            return summary

        for root in roots:
            await self._plan_block(root, 0, printable_height_px, summary)

        logger.info(
            f"Pagination plan: {len(roots)} root(s), {summary.spacer_count} spacer(s), "
            f"{summary.fragment_hosts} fragment host(s), {summary.skipped} skipped "
            f"(printable height {printable_height_px:.1f}px)"
        )
        return summary

    async def _plan_block(
        self,
        node: Any,
        depth: int,
        printable_height_px: float,
        summary: PlanSummary,
    ) -> None:
        kind = BlockKind.for_depth(depth)

        try:
            segments = await self._evaluate_block(node, depth, printable_height_px, summary)
        except Exception as e:
            logger.warning(f"Skipping {kind.value} block at depth {depth}: {e}")
            summary.skipped += 1
            return

        for segment in segments:
            await self._plan_block(segment, depth + 1, printable_height_px, summary)

    async def _evaluate_block(
        self,
        node: Any,
        depth: int,
        printable_height_px: float,
        summary: PlanSummary,
    ) -> List[Any]:
        """Plan a single block. Returns the segments to descend into."""
        epsilon = self.config.epsilon_px
        kind = BlockKind.for_depth(depth)

        geometry = await self.provider.measure(node)
        if geometry is None or not geometry.is_visible:
            summary.skipped += 1
            return []

        await self.applier.keep_together(node)
        summary.kept_together += 1

        if geometry.height < printable_height_px - epsilon:
            await self._shift_if_straddling(node, kind, depth, geometry, printable_height_px, summary)
            return []

        if geometry.height <= printable_height_px + epsilon:
            logger.debug(
                f"{kind.value} block of {geometry.height:.1f}px matches the page height; left in place"
            )
            return []

        if depth + 1 >= self.config.max_depth:
            logger.debug(
                f"{kind.value} block of {geometry.height:.1f}px exceeds the page at the deepest level; "
                "left to span pages"
            )
            summary.left_unsplit += 1
            return []

        await self.applier.mark_fragment_host(node)
        summary.fragment_hosts += 1

        strategy, segments = await discover_segments(self.provider, node)
        logger.debug(
            f"{kind.value} block of {geometry.height:.1f}px is a fragment host; "
            f"{len(segments)} segment(s) via {strategy.value}"
        )
        return segments

    async def _shift_if_straddling(
        self,
        node: Any,
        kind: BlockKind,
        depth: int,
        geometry: BlockGeometry,
        printable_height_px: float,
        summary: PlanSummary,
    ) -> None:
        epsilon = self.config.epsilon_px
        used_in_page = geometry.top % printable_height_px
        remaining = printable_height_px - used_in_page

        # A block starting flush at a page top is never moved
        if used_in_page <= epsilon or geometry.height <= remaining - epsilon:
            return

        spacer_height = max(0.0, remaining + self.config.continuation_offset_px)
        if not await self.applier.insert_spacer(node, spacer_height):
            return

        summary.spacers.append(SpacerDecision(
            kind=kind,
            depth=depth,
            block_top_px=geometry.top,
            block_height_px=geometry.height,
            spacer_height_px=spacer_height,
        ))
        logger.debug(
            f"Spacer of {spacer_height:.1f}px before {kind.value} block "
            f"(top={geometry.top:.1f}px, height={geometry.height:.1f}px)"
        )
