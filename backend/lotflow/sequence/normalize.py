"""
Record normalization

Turns whatever the record source handed over (validated models or raw
mappings in any of the upstream spellings) into ResolvedLine objects with a
usable sequence position and display name. Nothing downstream of this module
deals with missing or alternate fields.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from lotflow.models.treatment import ResolvedLine, TreatmentLineRecord

log = logging.getLogger(__name__)

# Stand-in name for lines reported without a treatment description
PLACEHOLDER_NAME = "Unknown treatment"


def _to_record(raw: Any) -> TreatmentLineRecord | None:
    """Validate one input item; None when it is not a record at all."""
    if isinstance(raw, TreatmentLineRecord):
        return raw
    if isinstance(raw, Mapping):
        return TreatmentLineRecord.model_validate(raw)
    return None


def normalize_records(
    records: Iterable[TreatmentLineRecord | Mapping[str, Any]] | None,
    warnings: list[str] | None = None,
) -> list[ResolvedLine]:
    """
    Resolve every record to a ResolvedLine, keeping input order.

    The position comes from the record's line number when it has a usable
    one, otherwise from its 1-based place in the input. Items that are not
    records at all (None, strings, ...) still become a placeholder line so
    the sequence length is preserved; a note goes to warnings.
    """
    if records is None:
        return []

    resolved: list[ResolvedLine] = []
    for ordinal, raw in enumerate(records, start=1):
        record = _to_record(raw)
        if record is None:
            message = f"Line {ordinal} is not a treatment record ({type(raw).__name__}); shown as a placeholder"
            log.warning(message)
            if warnings is not None:
                warnings.append(message)
            record = TreatmentLineRecord()
        inferred = record.line_number is None
        if inferred:
            log.debug("Line %d has no usable line number; using ordinal position", ordinal)
        resolved.append(ResolvedLine(
            ordinal=ordinal,
            position=ordinal if inferred else record.line_number,
            name=record.line_name.strip() or PLACEHOLDER_NAME,
            position_inferred=inferred,
            patient_id=record.patient_id,
            line_start=record.line_start,
            line_end=record.line_end,
        ))
    return resolved
