"""
Line-of-Therapy CSV Loader

Loads treatment-line rows from a CSV export (one row per line of therapy)
and serves them per patient, grouped by diagnosis.

Expected columns:
    patient_id, diagnosis_code, diagnosis_name,
    line_name, line_number, line_start, line_end

Older exports spell line_name/line_number as linename/linenumber; both
are accepted. Data is lazy-loaded on first access and cached in memory.
"""

import logging
from pathlib import Path

import pandas as pd

from lotflow.config import LOT_DATA_PATH
from lotflow.models.treatment import DiagnosisLines, TreatmentLineRecord

log = logging.getLogger(__name__)

_REQUIRED_COLUMNS = ["patient_id", "diagnosis_code"]

# Legacy column spellings → canonical names
_COLUMN_RENAMES = {
    "linename": "line_name",
    "linenumber": "line_number",
    "linestart": "line_start",
    "lineend": "line_end",
    "diagnosiscode": "diagnosis_code",
    "diagnosisname": "diagnosis_name",
    "patientid": "patient_id",
}

# Module-level cache
_lines: pd.DataFrame | None = None


def _load_lines(path: Path) -> pd.DataFrame:
    """Load and tidy the treatment-line CSV."""
    if not path.exists():
        raise FileNotFoundError(
            f"Line-of-therapy CSV not found at {path}. "
            "Set LOT_DATA_PATH to the export location."
        )

    df = pd.read_csv(path, dtype=str, encoding="utf-8-sig")
    df.columns = [c.strip().lower() for c in df.columns]
    # Canonical spelling wins when an export carries both
    renames = {k: v for k, v in _COLUMN_RENAMES.items() if k in df.columns and v not in df.columns}
    df = df.rename(columns=renames)

    missing = [c for c in _REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Line-of-therapy CSV {path} is missing columns: {missing}")

    if "diagnosis_name" not in df.columns:
        df["diagnosis_name"] = ""

    df = df.dropna(subset=["patient_id", "diagnosis_code"])
    df["patient_id"] = df["patient_id"].str.strip()
    df["diagnosis_code"] = df["diagnosis_code"].str.strip()
    df["diagnosis_name"] = df["diagnosis_name"].fillna("").str.strip()

    # NaN → None so missing optional fields read as absent downstream
    df = df.astype(object).where(df.notna(), None)

    log.info("Loaded %d treatment lines for %d patients from %s",
             len(df), df["patient_id"].nunique(), path)
    return df.reset_index(drop=True)


def _ensure_loaded() -> pd.DataFrame:
    global _lines
    if _lines is None:
        _lines = _load_lines(LOT_DATA_PATH)
    return _lines


def reset_cache():
    """Drop the cached CSV so the next access reloads it."""
    global _lines
    _lines = None


def list_patients() -> list[str]:
    """Return all patient ids present in the export, in first-seen order."""
    df = _ensure_loaded()
    return list(dict.fromkeys(df["patient_id"]))


def get_patient_diagnoses(patient_id: str) -> list[DiagnosisLines]:
    """
    Return one DiagnosisLines per diagnosis for the patient.

    Diagnoses appear in the order they first occur in the export; lines
    within a diagnosis keep their row order. Lines are never shared across
    diagnoses. Empty list for unknown patients.
    """
    df = _ensure_loaded()
    rows = df[df["patient_id"] == patient_id]
    if rows.empty:
        return []

    diagnoses = []
    for code, group in rows.groupby("diagnosis_code", sort=False):
        names = [n for n in group["diagnosis_name"] if n]
        diagnoses.append(DiagnosisLines(
            diagnosis_code=code,
            diagnosis_name=names[0] if names else "",
            lines=[TreatmentLineRecord.model_validate(r) for r in group.to_dict(orient="records")],
        ))
    return diagnoses
