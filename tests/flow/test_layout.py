"""Tests for zakatflow.flow.layout."""

import pytest

from zakatflow.core.config import Config
from zakatflow.financial.calculators.categories import CategoryKey
from zakatflow.financial.calculators.zakat import calculate
from zakatflow.flow.allocator import FlowPartition, allocate
from zakatflow.flow.layout import (
    FlowKind,
    LayoutLink,
    LayoutOptions,
    NodeKind,
    layout,
)


def _partition(category, amount, liability=0.0, obligation=0.0):
    return FlowPartition(
        category=category,
        label=category.value.title(),
        color="#000000",
        zakatable_amount=amount,
        liability_portion=liability,
        retained_portion=amount - liability - obligation,
        obligation_portion=obligation,
    )


class TestSourceColumn:
    def test_bars_and_gaps_fill_available_height(self, household_input):
        options = LayoutOptions()
        result = layout(allocate(calculate(household_input)), 800, 500, options)

        sources = result.sources
        total = sum(n.height for n in sources) + options.gap * (len(sources) - 1)
        assert total == pytest.approx(500 - options.top_margin - options.bottom_margin)
        assert sources[0].y == pytest.approx(options.top_margin)
        assert sources[-1].y + sources[-1].height == pytest.approx(500 - options.bottom_margin)

    def test_power_scaling_compresses_range(self):
        partitions = [_partition(CategoryKey.LIQUID, 1_000_000), _partition(CategoryKey.CRYPTO, 1_000)]
        result = layout(partitions, 800, 500)

        big, small = result.sources
        assert big.height / small.height == pytest.approx(1_000**0.6)
        assert small.height > 1.0

    def test_source_position(self):
        result = layout([_partition(CategoryKey.LIQUID, 100)], 800, 500)
        [node] = result.sources
        assert node.key == "liquid"
        assert node.x == 40
        assert node.width == 16
        assert node.kind is NodeKind.SOURCE

    def test_segments_are_linear(self):
        result = layout([_partition(CategoryKey.LIQUID, 1_000, liability=250, obligation=18.75)], 800, 500)
        [node] = result.sources
        thickness = {link.kind: link.source_thickness for link in result.links}

        assert thickness[FlowKind.LIABILITY] == pytest.approx(node.height * 0.25)
        assert thickness[FlowKind.OBLIGATION] == pytest.approx(node.height * 0.01875)
        assert sum(thickness.values()) == pytest.approx(node.height)


class TestSinkColumn:
    def test_sink_order_and_position(self):
        partitions = [_partition(CategoryKey.LIQUID, 1_000, liability=100, obligation=22.5)]
        result = layout(partitions, 800, 500)

        assert [n.key for n in result.sinks] == ["liability", "retained", "obligation"]
        assert all(n.x == 800 - 40 - 16 for n in result.sinks)
        tops = [n.y for n in result.sinks]
        assert tops == sorted(tops)

    def test_empty_sinks_omitted(self):
        result = layout([_partition(CategoryKey.LIQUID, 1_000)], 800, 500)
        assert [n.key for n in result.sinks] == ["retained"]

    def test_sinks_fit_canvas(self, household_input):
        result = layout(allocate(calculate(household_input)), 800, 500)
        bottom = max(n.y + n.height for n in result.sinks)
        assert bottom <= 500 - 30 + 1e-9

    def test_links_stack_inside_sink(self):
        partitions = [
            _partition(CategoryKey.LIQUID, 1_000, obligation=25),
            _partition(CategoryKey.METALS, 500, obligation=12.5),
        ]
        result = layout(partitions, 800, 500)
        obligation_sink = result.node("obligation")
        links = [link for link in result.links if link.kind is FlowKind.OBLIGATION]

        assert [link.source for link in links] == ["liquid", "metals"]
        assert sum(link.target_thickness for link in links) == pytest.approx(obligation_sink.height)
        first_top = links[0].target_y - links[0].target_thickness / 2
        assert first_top == pytest.approx(obligation_sink.y)

    def test_link_color_follows_source(self):
        result = layout([_partition(CategoryKey.LIQUID, 1_000, liability=10)], 800, 500)
        assert {link.color for link in result.links} == {"#000000"}


class TestEdgeCases:
    def test_no_partitions(self):
        result = layout([], 800, 500)
        assert result.nodes == []
        assert result.links == []

    def test_zero_partitions_ignored(self):
        result = layout([_partition(CategoryKey.LIQUID, 0.0)], 800, 500)
        assert result.nodes == []

    def test_canvas_too_small(self):
        partitions = [_partition(k, 100) for k in (CategoryKey.LIQUID, CategoryKey.METALS, CategoryKey.CRYPTO)]
        result = layout(partitions, 800, 70)
        assert result.nodes == []

    def test_missing_node(self):
        with pytest.raises(KeyError):
            layout([], 800, 500).node("liquid")


class TestLayoutLink:
    def test_path(self):
        link = LayoutLink(
            source="liquid",
            target="retained",
            kind=FlowKind.RETAINED,
            value=1.0,
            color="#000000",
            source_x=0,
            target_x=100,
            source_y=10,
            target_y=20,
            source_thickness=4,
            target_thickness=2,
        )
        assert link.thickness == 4
        assert link.path() == (
            "M 0.00 8.00 C 50.00 8.00, 50.00 19.00, 100.00 19.00 "
            "L 100.00 21.00 C 50.00 21.00, 50.00 12.00, 0.00 12.00 Z"
        )


class TestLayoutOptions:
    def test_from_config(self, tmp_dir):
        config = Config(data_dir=tmp_dir, defaults={"layout": {"gap": 4, "power_exponent": 1.0}})
        options = LayoutOptions.from_config(config)
        assert options.gap == 4.0
        assert options.power_exponent == 1.0
        assert options.node_width == 16.0

    def test_transform(self):
        options = LayoutOptions(power_exponent=0.5)
        assert options.transform(16) == pytest.approx(4)
        assert options.transform(0) == 0.0

    def test_to_dict(self, simple_input):
        data = layout(allocate(calculate(simple_input)), 800, 500).to_dict()
        assert data["width"] == 800
        assert {n["key"] for n in data["nodes"]} >= {"liquid", "investments", "retained", "obligation"}
        assert all(link["path"].startswith("M ") for link in data["links"])
