from typing import Literal

from pydantic import BaseModel

from lotflow.models.treatment import ResolvedLine

GraphStatus = Literal["ok", "insufficient_data"]


class FlowEdge(BaseModel):
    source: int
    target: int
    value: int  # ribbon thickness only, not a clinical quantity


class FlowGraph(BaseModel):
    status: GraphStatus = "ok"
    node_labels: list[str] = []
    edges: list[FlowEdge] = []
    lines: list[ResolvedLine] = []  # lines[i] backs node i + 1
    warnings: list[str] = []

    @property
    def is_empty(self) -> bool:
        return self.status == "insufficient_data"

    @property
    def node_count(self) -> int:
        return len(self.node_labels)

    def as_triples(self) -> list[tuple[int, int, int]]:
        return [(e.source, e.target, e.value) for e in self.edges]


class FlowGraphResponse(FlowGraph):
    width: int
    diagnosis_code: str | None = None
    diagnosis_name: str | None = None
