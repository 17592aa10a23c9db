"""
Unit tests for the plan applier and segment discovery.
"""

import pytest

from smart_pdf.applier import PRINT_STYLES, PlanApplier
from smart_pdf.measurement import FRAGMENT_HOST_CLASS, SPACER_CLASS, Mutation, MutationKind
from smart_pdf.segments import SegmentStrategy, discover_segments, strategy_for_tag

from tests.smart_pdf.fake_layout import FakeLayout, Handle, HandleLayout, block


class TestMutation:
    """Tests for Mutation constructors."""

    def test_spacer_height_is_never_negative(self):
        assert Mutation.spacer(-3.0).height_px == 0.0
        assert Mutation.spacer(12.5) == Mutation(MutationKind.INSERT_SPACER, 12.5)


class TestPrintStyles:
    """Tests for the injected print stylesheet."""

    def test_covers_markers(self):
        assert "@media print" in PRINT_STYLES
        assert f".{SPACER_CLASS}" in PRINT_STYLES
        assert f".{FRAGMENT_HOST_CLASS}" in PRINT_STYLES
        assert "[data-pdf-keep]" in PRINT_STYLES
        assert "[data-pdf-segment]" in PRINT_STYLES
        assert "break-inside: avoid-page" in PRINT_STYLES


class TestPlanApplier:
    """Tests for PlanApplier."""

    @pytest.mark.asyncio
    async def test_style_injected_once(self):
        layout = FakeLayout(block(100))
        applier = PlanApplier(layout)

        await applier.begin_pass()
        await applier.begin_pass()

        assert layout.injected_styles == [PRINT_STYLES]

    @pytest.mark.asyncio
    async def test_begin_pass_clears_spacers(self):
        target = block(100)
        layout = FakeLayout(block(50), target)
        applier = PlanApplier(layout)
        await applier.insert_spacer(target, 40)

        removed = await applier.begin_pass()

        assert removed == 1
        assert layout.spacer_heights() == []

    @pytest.mark.asyncio
    async def test_one_spacer_per_node_per_pass(self):
        target = block(100)
        layout = FakeLayout(target)
        applier = PlanApplier(layout)
        await applier.begin_pass()

        assert await applier.insert_spacer(target, 40) is True
        assert await applier.insert_spacer(target, 60) is False
        assert layout.spacer_heights() == [40]

        await applier.begin_pass()
        assert await applier.insert_spacer(target, 60) is True
        assert layout.spacer_heights() == [60]

    @pytest.mark.asyncio
    async def test_spacer_check_reads_the_tree_not_the_handle(self):
        target = block(100)
        layout = HandleLayout(block(50), target)
        applier = PlanApplier(layout)
        await applier.begin_pass()

        assert await applier.insert_spacer(Handle(target), 40) is True
        assert await applier.insert_spacer(Handle(target), 60) is False
        assert layout.spacer_heights() == [40]

    @pytest.mark.asyncio
    async def test_keep_together_and_fragment_host(self):
        target = block(100)
        layout = FakeLayout(target)
        applier = PlanApplier(layout)

        await applier.keep_together(target)
        await applier.mark_fragment_host(target)

        assert target.kept_together
        assert target.is_fragment_host
        assert [m.kind for _, m in layout.mutations] == [
            MutationKind.KEEP_TOGETHER,
            MutationKind.FRAGMENT_HOST,
        ]


class TestSegmentDiscovery:
    """Tests for discover_segments."""

    def test_strategy_for_tag(self):
        assert strategy_for_tag("ul") is SegmentStrategy.LIST_ITEMS
        assert strategy_for_tag("OL") is SegmentStrategy.LIST_ITEMS
        assert strategy_for_tag("table") is SegmentStrategy.TABLE_ROWS
        assert strategy_for_tag("SECTION") is SegmentStrategy.GENERIC_CHILDREN

    @pytest.mark.asyncio
    async def test_marked_children_win_over_tag(self):
        marked = block(10, tag="li", segment=True)
        plain = block(10, tag="li")
        node = block(0, marked, plain, tag="ul")
        layout = FakeLayout(node)

        strategy, segments = await discover_segments(layout, node)

        assert strategy is SegmentStrategy.EXPLICIT_MARKER
        assert segments == [marked]

    @pytest.mark.asyncio
    async def test_list_items(self):
        items = [block(10, tag="li"), block(10, tag="li")]
        node = block(0, *items, tag="ol")

        strategy, segments = await discover_segments(FakeLayout(node), node)

        assert strategy is SegmentStrategy.LIST_ITEMS
        assert segments == items

    @pytest.mark.asyncio
    async def test_table_rows_include_nested_sections(self):
        head = block(10, tag="tr")
        body_rows = [block(10, tag="tr"), block(10, tag="tr")]
        node = block(0, block(0, head, tag="thead"), block(0, *body_rows, tag="tbody"), tag="table")

        strategy, segments = await discover_segments(FakeLayout(node), node)

        assert strategy is SegmentStrategy.TABLE_ROWS
        assert segments == [head] + body_rows

    @pytest.mark.asyncio
    async def test_generic_children_skip_script_and_style(self):
        para = block(10, tag="p")
        node = block(0, block(0, tag="style"), para, block(0, tag="script"), tag="section")

        strategy, segments = await discover_segments(FakeLayout(node), node)

        assert strategy is SegmentStrategy.GENERIC_CHILDREN
        assert segments == [para]

    @pytest.mark.asyncio
    async def test_leaf_has_no_segments(self):
        node = block(10, tag="p")

        strategy, segments = await discover_segments(FakeLayout(node), node)

        assert strategy is SegmentStrategy.GENERIC_CHILDREN
        assert segments == []
