from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

# Upstream feeds spell the same field several ways; first usable spelling wins.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "patient_id": ("patientId", "patientid", "patient_id"),
    "line_name": ("lineName", "linename", "line_name"),
    "line_number": ("lineNumber", "linenumber", "line_number"),
    "line_start": ("lineStart", "linestart", "line_start"),
    "line_end": ("lineEnd", "lineend", "line_end"),
}


def parse_position(value: Any) -> int | None:
    """Coerce a raw line number to a positive int, or None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    return value if value > 0 else None


class TreatmentLineRecord(BaseModel):
    """One reported treatment interval for a patient/diagnosis."""

    model_config = ConfigDict(extra="ignore")

    patient_id: str | None = None
    line_name: str = ""
    line_number: int | None = None  # None means unknown position
    line_start: str | None = None
    line_end: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _resolve_aliases(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        resolved = {}
        for field, names in _FIELD_ALIASES.items():
            for name in names:
                value = data.get(name)
                if value is None or value == "":
                    continue
                # An unusable line number falls through to the next spelling
                if field == "line_number" and parse_position(value) is None:
                    continue
                resolved[field] = value
                break
        return resolved

    @field_validator("patient_id", mode="before")
    @classmethod
    def _stringify_patient_id(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("line_name", mode="before")
    @classmethod
    def _stringify_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("line_number", mode="before")
    @classmethod
    def _coerce_line_number(cls, v: Any) -> int | None:
        return parse_position(v)

    @field_validator("line_start", "line_end", mode="before")
    @classmethod
    def _stringify_timestamp(cls, v: Any) -> str | None:
        if v is None:
            return None
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        return str(v)


class DiagnosisLines(BaseModel):
    """All treatment lines reported for one diagnosis of one patient."""

    diagnosis_code: str = Field(validation_alias=AliasChoices("diagnosisCode", "diagnosis_code"))
    diagnosis_name: str = Field(
        default="", validation_alias=AliasChoices("diagnosisName", "diagnosis_name")
    )
    lines: list[TreatmentLineRecord] = []


class ResolvedLine(BaseModel):
    """Canonical treatment line after normalization; the only shape the graph code sees."""

    model_config = ConfigDict(frozen=True)

    ordinal: int  # 1-based position in the input order
    position: int
    name: str
    position_inferred: bool = False
    patient_id: str | None = None
    line_start: str | None = None
    line_end: str | None = None
