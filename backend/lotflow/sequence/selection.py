from collections.abc import Sequence

from lotflow.models.treatment import DiagnosisLines


def select_diagnosis(
    diagnoses: Sequence[DiagnosisLines] | None,
    diagnosis_code: str | None = None,
) -> DiagnosisLines | None:
    """
    Pick the active diagnosis: exact code match if one was asked for,
    otherwise the first diagnosis available. None when there is nothing
    to pick from.
    """
    if not diagnoses:
        return None

    if diagnosis_code:
        wanted = diagnosis_code.strip()
        for diagnosis in diagnoses:
            if diagnosis.diagnosis_code == wanted:
                return diagnosis

    return diagnoses[0]
