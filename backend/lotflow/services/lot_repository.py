"""
Treatment-line retrieval

Fetches a patient's treatment lines grouped by diagnosis, from Supabase
when it is configured and from the CSV export otherwise.
"""

import logging

from supabase import Client, PostgrestAPIError, create_client

from lotflow.config import LOT_SUPABASE_TABLE, SUPABASE_ANON_KEY, SUPABASE_URL
from lotflow.data import lot_loader
from lotflow.models.treatment import DiagnosisLines, TreatmentLineRecord

log = logging.getLogger(__name__)

# Failures of the record source itself (missing/malformed export, Supabase API)
SOURCE_ERRORS = (OSError, ValueError, PostgrestAPIError)

_client: Client | None = None


def get_client() -> Client | None:
    """Shared Supabase client, or None when credentials are not configured."""
    global _client
    if _client is None and SUPABASE_URL and SUPABASE_ANON_KEY:
        log.info("Reading treatment lines from Supabase table %s", LOT_SUPABASE_TABLE)
        _client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)
    return _client


def _group_rows(rows: list[dict]) -> list[DiagnosisLines]:
    """Group flat treatment-line rows by diagnosis code, keeping first-seen order."""
    grouped: dict[str, DiagnosisLines] = {}
    for row in rows:
        code = str(row.get("diagnosis_code") or row.get("diagnosisCode") or "").strip()
        if not code:
            log.warning("Skipping treatment line without a diagnosis code: %s", row)
            continue
        if code not in grouped:
            grouped[code] = DiagnosisLines(
                diagnosis_code=code,
                diagnosis_name=str(row.get("diagnosis_name") or row.get("diagnosisName") or ""),
            )
        grouped[code].lines.append(TreatmentLineRecord.model_validate(row))
    return list(grouped.values())


def _fetch_from_supabase(client, patient_id: str) -> list[DiagnosisLines]:
    response = (
        client.table(LOT_SUPABASE_TABLE)
        .select("*")
        .eq("patient_id", patient_id)
        .execute()
    )
    return _group_rows(response.data or [])


def fetch_patient_diagnoses(patient_id: str) -> list[DiagnosisLines]:
    """Return the patient's treatment lines grouped by diagnosis (empty if none)."""
    client = get_client()
    if client is not None:
        return _fetch_from_supabase(client, patient_id)
    return lot_loader.get_patient_diagnoses(patient_id)


def fetch_patient_ids() -> list[str]:
    client = get_client()
    if client is not None:
        response = client.table(LOT_SUPABASE_TABLE).select("patient_id").execute()
        return list(dict.fromkeys(str(r["patient_id"]) for r in response.data or []))
    return lot_loader.list_patients()
