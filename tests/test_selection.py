from lotflow.models.treatment import DiagnosisLines
from lotflow.sequence.selection import select_diagnosis


def mk_diagnosis(code, *names):
    return DiagnosisLines(
        diagnosis_code=code,
        diagnosis_name=f"dx {code}",
        lines=[{"lineName": n, "lineNumber": i} for i, n in enumerate(names, start=1)],
    )


DIAGNOSES = [mk_diagnosis("G30.9", "vitamin e"), mk_diagnosis("I10", "lisinopril", "amlodipine")]


def test_explicit_code_match():
    assert select_diagnosis(DIAGNOSES, "I10").diagnosis_code == "I10"


def test_code_is_trimmed():
    assert select_diagnosis(DIAGNOSES, " I10 ").diagnosis_code == "I10"


def test_defaults_to_first():
    assert select_diagnosis(DIAGNOSES).diagnosis_code == "G30.9"


def test_unknown_code_falls_back_to_first():
    assert select_diagnosis(DIAGNOSES, "C50").diagnosis_code == "G30.9"


def test_nothing_to_select():
    assert select_diagnosis([]) is None
    assert select_diagnosis(None, "I10") is None


def test_diagnosis_accepts_camel_case_payload():
    diagnosis = DiagnosisLines.model_validate({
        "diagnosisCode": "G30.9",
        "diagnosisName": "Alzheimer's disease",
        "lines": [{"linename": "vitamin e", "line_number": "1"}],
    })
    assert diagnosis.diagnosis_code == "G30.9"
    assert diagnosis.lines[0].line_name == "vitamin e"
    assert diagnosis.lines[0].line_number == 1
