"""
Layout engine: proportional flow-diagram geometry from flow partitions.

Pure pixel mapping. Values are taken as given from the allocator; nothing
here changes an amount.

Left column: one bar per category, stacked top to bottom with a fixed gap.
Bar heights follow ``value ** power_exponent``, which compresses the range
so a small category stays visible next to a large one. One scale factor
per pass makes the bars plus gaps fill the available height exactly.

Inside a bar the liability, retained and obligation segments are sized
linearly, so segment boundaries stay value-accurate.

Right column: the liability, retained and obligation sinks, stacked in that
order, sized with the same transform and scale (shrunk uniformly only if
they would overflow the canvas).
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from zakatflow.core.config import Config
from zakatflow.financial.calculators.categories import LIABILITY_COLOR, OBLIGATION_COLOR, RETAINED_COLOR

from .allocator import FlowAllocation, FlowPartition


class NodeKind(StrEnum):
    SOURCE = "source"
    SINK = "sink"


class FlowKind(StrEnum):
    """Destination of a flow, in sink stacking order."""

    LIABILITY = "liability"
    RETAINED = "retained"
    OBLIGATION = "obligation"


SINK_ORDER: tuple[FlowKind, ...] = (FlowKind.LIABILITY, FlowKind.RETAINED, FlowKind.OBLIGATION)

SINK_LABELS: dict[FlowKind, str] = {
    FlowKind.LIABILITY: "Liabilities",
    FlowKind.RETAINED: "Retained Wealth",
    FlowKind.OBLIGATION: "Zakat Due",
}

SINK_COLORS: dict[FlowKind, str] = {
    FlowKind.LIABILITY: LIABILITY_COLOR,
    FlowKind.RETAINED: RETAINED_COLOR,
    FlowKind.OBLIGATION: OBLIGATION_COLOR,
}

CURVATURE = 0.5  # bezier control points at half the horizontal distance


@dataclass
class LayoutOptions:
    """Geometry parameters, in pixels unless noted."""

    node_width: float = 16.0
    padding: float = 40.0
    top_margin: float = 30.0
    bottom_margin: float = 30.0
    gap: float = 8.0
    power_exponent: float = 0.6

    @classmethod
    def from_config(cls, config: Config) -> "LayoutOptions":
        """Build from the ``layout`` section of a Config."""
        return cls(
            node_width=float(config.get("layout.node_width", cls.node_width)),
            padding=float(config.get("layout.padding", cls.padding)),
            top_margin=float(config.get("layout.top_margin", cls.top_margin)),
            bottom_margin=float(config.get("layout.bottom_margin", cls.bottom_margin)),
            gap=float(config.get("layout.gap", cls.gap)),
            power_exponent=float(config.get("layout.power_exponent", cls.power_exponent)),
        )

    def transform(self, value: float) -> float:
        return value**self.power_exponent if value > 0 else 0.0


@dataclass
class LayoutNode:
    """A bar. ``x``/``y`` is the top-left corner."""

    key: str
    label: str
    kind: NodeKind
    value: float
    color: str
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "kind": self.kind.value,
            "value": round(self.value, 2),
            "color": self.color,
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "width": round(self.width, 3),
            "height": round(self.height, 3),
        }


@dataclass
class LayoutLink:
    """A ribbon from a source bar segment to a slice of a sink.

    ``source_y`` and ``target_y`` are the vertical centers of each end;
    ``source_x`` is the right edge of the source bar and ``target_x`` the
    left edge of the sink.
    """

    source: str
    target: str
    kind: FlowKind
    value: float
    color: str
    source_x: float
    target_x: float
    source_y: float
    target_y: float
    source_thickness: float
    target_thickness: float

    @property
    def thickness(self) -> float:
        return self.source_thickness

    def path(self) -> str:
        """Closed cubic-bezier ribbon as an SVG path string."""
        sx, tx = self.source_x, self.target_x
        sy, ty = self.source_y, self.target_y
        ws, wt = self.source_thickness / 2, self.target_thickness / 2
        cx = (tx - sx) * CURVATURE

        def p(x: float, y: float) -> str:
            return f"{x:.2f} {y:.2f}"

        return (
            f"M {p(sx, sy - ws)} "
            f"C {p(sx + cx, sy - ws)}, {p(tx - cx, ty - wt)}, {p(tx, ty - wt)} "
            f"L {p(tx, ty + wt)} "
            f"C {p(tx - cx, ty + wt)}, {p(sx + cx, sy + ws)}, {p(sx, sy + ws)} Z"
        )

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "kind": self.kind.value,
            "value": round(self.value, 2),
            "color": self.color,
            "source_y": round(self.source_y, 3),
            "target_y": round(self.target_y, 3),
            "source_thickness": round(self.source_thickness, 3),
            "target_thickness": round(self.target_thickness, 3),
            "path": self.path(),
        }


@dataclass
class SankeyLayout:
    """Complete diagram geometry."""

    nodes: list[LayoutNode]
    links: list[LayoutLink]
    width: float
    height: float
    scale: float = 0.0

    @property
    def sources(self) -> list[LayoutNode]:
        return [n for n in self.nodes if n.kind is NodeKind.SOURCE]

    @property
    def sinks(self) -> list[LayoutNode]:
        return [n for n in self.nodes if n.kind is NodeKind.SINK]

    def node(self, key: str) -> LayoutNode:
        for n in self.nodes:
            if n.key == key:
                return n
        raise KeyError(key)

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "scale": self.scale,
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


@dataclass
class _Segment:
    partition: FlowPartition
    kind: FlowKind
    value: float
    top: float
    thickness: float


def _portions(partition: FlowPartition) -> dict[FlowKind, float]:
    return {
        FlowKind.LIABILITY: partition.liability_portion,
        FlowKind.RETAINED: partition.retained_portion,
        FlowKind.OBLIGATION: partition.obligation_portion,
    }


def layout(
    partitions: FlowAllocation | Sequence[FlowPartition],
    canvas_width: float,
    canvas_height: float,
    options: LayoutOptions | None = None,
) -> SankeyLayout:
    """Compute node and link geometry for a set of partitions.

    Args:
        partitions: Allocator output, or its partitions.
        canvas_width: Canvas width in pixels.
        canvas_height: Canvas height in pixels.
        options: Geometry parameters (defaults to LayoutOptions()).

    Returns:
        SankeyLayout. Empty when there is nothing to draw or no room to draw it.
    """
    options = options or LayoutOptions()
    if isinstance(partitions, FlowAllocation):
        partitions = partitions.partitions

    active = [p for p in partitions if p.zakatable_amount > 0]
    empty = SankeyLayout(nodes=[], links=[], width=canvas_width, height=canvas_height)
    if not active:
        return empty

    usable = canvas_height - options.top_margin - options.bottom_margin
    available = usable - options.gap * (len(active) - 1)
    if available <= 0:
        logger.warning(f"Canvas height {canvas_height} too small for {len(active)} bars")
        return empty

    scale = available / sum(options.transform(p.zakatable_amount) for p in active)

    # Left column
    source_x = options.padding
    nodes: list[LayoutNode] = []
    segments: list[_Segment] = []
    y = options.top_margin
    for p in active:
        height = options.transform(p.zakatable_amount) * scale
        nodes.append(
            LayoutNode(
                key=p.category.value,
                label=p.label,
                kind=NodeKind.SOURCE,
                value=p.zakatable_amount,
                color=p.color,
                x=source_x,
                y=y,
                width=options.node_width,
                height=height,
            )
        )
        cursor = y
        for kind, value in _portions(p).items():
            if value <= 0:
                continue
            thickness = height * value / p.zakatable_amount
            segments.append(_Segment(p, kind, value, cursor, thickness))
            cursor += thickness
        y += height + options.gap

    # Right column
    totals = {kind: sum(s.value for s in segments if s.kind is kind) for kind in SINK_ORDER}
    sink_kinds = [kind for kind in SINK_ORDER if totals[kind] > 0]
    heights = {kind: options.transform(totals[kind]) * scale for kind in sink_kinds}

    sink_gap = options.gap
    stacked = sum(heights.values()) + sink_gap * (len(sink_kinds) - 1)
    if stacked > usable:
        if usable - sink_gap * (len(sink_kinds) - 1) <= 0:
            sink_gap = 0.0
        shrink = (usable - sink_gap * (len(sink_kinds) - 1)) / sum(heights.values())
        heights = {kind: h * shrink for kind, h in heights.items()}
        logger.debug(f"Sink column shrunk by {shrink:.3f} to fit")

    sink_x = canvas_width - options.padding - options.node_width
    sink_top: dict[FlowKind, float] = {}
    y = options.top_margin
    for kind in sink_kinds:
        sink_top[kind] = y
        nodes.append(
            LayoutNode(
                key=kind.value,
                label=SINK_LABELS[kind],
                kind=NodeKind.SINK,
                value=totals[kind],
                color=SINK_COLORS[kind],
                x=sink_x,
                y=y,
                width=options.node_width,
                height=heights[kind],
            )
        )
        y += heights[kind] + sink_gap

    # Links, stacked inside each sink in source order
    links: list[LayoutLink] = []
    cursors = dict(sink_top)
    for s in segments:
        target_thickness = heights[s.kind] * s.value / totals[s.kind]
        links.append(
            LayoutLink(
                source=s.partition.category.value,
                target=s.kind.value,
                kind=s.kind,
                value=s.value,
                color=s.partition.color,
                source_x=source_x + options.node_width,
                target_x=sink_x,
                source_y=s.top + s.thickness / 2,
                target_y=cursors[s.kind] + target_thickness / 2,
                source_thickness=s.thickness,
                target_thickness=target_thickness,
            )
        )
        cursors[s.kind] += target_thickness

    return SankeyLayout(nodes=nodes, links=links, width=canvas_width, height=canvas_height, scale=scale)
