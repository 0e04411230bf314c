"""
Sequence-to-Graph Transformer

Converts one diagnosis's treatment lines into a single-chain flow graph
for Sankey-style rendering:

    Start -> line 1 -> line 2 -> ... -> line N

Every node label carries its line position ("(L3)"), so a treatment that
recurs later in the sequence becomes a new node instead of looping back to
an earlier one. Both functions here are pure; the same input always gives
the same labels, indices and edges.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from lotflow.models.graph import FlowEdge, FlowGraph
from lotflow.models.treatment import ResolvedLine, TreatmentLineRecord
from lotflow.sequence.normalize import normalize_records

log = logging.getLogger(__name__)

# Synthetic origin node, always index 0
ORIGIN_LABEL = "Start"

# Constant ribbon thickness for every link (visual only)
LINK_WEIGHT = 2

# Presentation width: max(MIN_WIDTH, node_count * PER_NODE_WIDTH)
MIN_WIDTH = 1200
PER_NODE_WIDTH = 200


def _line_label(line: ResolvedLine) -> str:
    return f"{line.name} (L{line.position})"


def _unique_label(label: str, ordinal: int, taken: set[str]) -> str:
    """Disambiguate a colliding label with the line's sorted ordinal."""
    candidate = f"{label} #{ordinal}"
    bump = 2
    while candidate in taken:
        candidate = f"{label} #{ordinal}.{bump}"
        bump += 1
    return candidate


def build_flow_graph(
    records: Iterable[TreatmentLineRecord | Mapping[str, Any]] | None,
) -> FlowGraph:
    """
    Build the flow graph for one diagnosis's treatment lines.

    Returns a FlowGraph with status "insufficient_data" (no nodes, no edges)
    when there are no records. Otherwise the graph has len(records) + 1
    nodes and len(records) edges. Records are ordered by resolved line
    position; records sharing a position keep their input order.

    Two lines that end up with the same label (same name and same
    position) are never merged: the later one gets a "#<n>" suffix, where
    n is its 1-based place in the sorted sequence, and a warning is added.
    """
    warnings: list[str] = []
    lines = normalize_records(records, warnings)
    if not lines:
        return FlowGraph(status="insufficient_data")

    ordered = sorted(lines, key=lambda line: line.position)

    labels = [ORIGIN_LABEL]
    taken = {ORIGIN_LABEL}
    for sorted_ordinal, line in enumerate(ordered, start=1):
        label = _line_label(line)
        if label in taken:
            unique = _unique_label(label, sorted_ordinal, taken)
            message = f"Duplicate line label {label!r}; emitted as {unique!r}"
            log.warning(message)
            warnings.append(message)
            label = unique
        labels.append(label)
        taken.add(label)

    edges = [
        FlowEdge(source=idx, target=idx + 1, value=LINK_WEIGHT)
        for idx in range(len(ordered))
    ]

    return FlowGraph(
        status="ok",
        node_labels=labels,
        edges=edges,
        lines=ordered,
        warnings=warnings,
    )


def compute_presentation_width(node_count: int) -> int:
    """Diagram width in display pixels for a graph with node_count nodes."""
    return max(MIN_WIDTH, node_count * PER_NODE_WIDTH)
