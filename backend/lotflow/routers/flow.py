from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from lotflow.models.graph import FlowGraph, FlowGraphResponse
from lotflow.models.treatment import DiagnosisLines, TreatmentLineRecord
from lotflow.sequence.selection import select_diagnosis
from lotflow.sequence.transformer import build_flow_graph, compute_presentation_width
from lotflow.services.lot_repository import SOURCE_ERRORS, fetch_patient_diagnoses, fetch_patient_ids

router = APIRouter()


class FlowGraphRequest(BaseModel):
    records: list[TreatmentLineRecord] = []
    diagnosis_code: str | None = None
    diagnosis_name: str | None = None


class WidthRequest(BaseModel):
    node_count: int = Field(ge=0)


def _to_response(
    graph: FlowGraph,
    diagnosis_code: str | None = None,
    diagnosis_name: str | None = None,
) -> FlowGraphResponse:
    return FlowGraphResponse(
        **graph.model_dump(),
        width=compute_presentation_width(graph.node_count),
        diagnosis_code=diagnosis_code,
        diagnosis_name=diagnosis_name,
    )


def _load_diagnoses(patient_id: str) -> list[DiagnosisLines]:
    try:
        return fetch_patient_diagnoses(patient_id)
    except SOURCE_ERRORS as exc:
        raise HTTPException(status_code=503, detail=f"Record source unavailable: {exc}") from exc


@router.post("/flow-graph", response_model=FlowGraphResponse)
async def flow_graph(request: FlowGraphRequest):
    """Build the treatment-sequence flow graph for one diagnosis's lines."""
    graph = build_flow_graph(request.records)
    return _to_response(graph, request.diagnosis_code, request.diagnosis_name)


@router.post("/width")
async def presentation_width(request: WidthRequest):
    """Diagram width for a given node count."""
    return {"width": compute_presentation_width(request.node_count)}


@router.get("/patients")
async def list_patients():
    """Return all patient ids with treatment-line data."""
    try:
        patients = fetch_patient_ids()
    except SOURCE_ERRORS as exc:
        raise HTTPException(status_code=503, detail=f"Record source unavailable: {exc}") from exc
    return {"patients": patients, "count": len(patients)}


@router.get("/patients/{patient_id}/diagnoses")
async def list_diagnoses(patient_id: str):
    """Return the patient's diagnoses with their line counts."""
    diagnoses = _load_diagnoses(patient_id)
    return {
        "patient_id": patient_id,
        "diagnoses": [
            {
                "diagnosis_code": d.diagnosis_code,
                "diagnosis_name": d.diagnosis_name,
                "line_count": len(d.lines),
            }
            for d in diagnoses
        ],
    }


@router.get("/patients/{patient_id}/flow-graph", response_model=FlowGraphResponse)
async def patient_flow_graph(
    patient_id: str,
    diagnosis_code: str | None = Query(None, description="Diagnosis to show; defaults to the first"),
):
    """Flow graph for the selected (or first) diagnosis of a patient."""
    diagnosis = select_diagnosis(_load_diagnoses(patient_id), diagnosis_code)
    if diagnosis is None:
        raise HTTPException(status_code=404, detail=f"No line-of-therapy data for patient {patient_id}")
    graph = build_flow_graph(diagnosis.lines)
    return _to_response(graph, diagnosis.diagnosis_code, diagnosis.diagnosis_name)
