import pytest
from fastapi.testclient import TestClient

from lotflow.data import lot_loader
from lotflow.main import app
from lotflow.services import lot_repository

SAMPLE_CSV = """patient_id,diagnosis_code,diagnosis_name,line_name,line_number,line_start,line_end
P001,G30.9,"Alzheimer's disease, unspecified",donepezil + vitamin e,2,2019-06-01,2020-02-15
P001,G30.9,"Alzheimer's disease, unspecified",vitamin e,1,2018-11-20,2019-05-31
P001,I10,Essential hypertension,lisinopril,1,2017-03-01,2018-01-10
P001,G30.9,"Alzheimer's disease, unspecified",donepezil + memantine,3,2020-02-16,
P001,I10,Essential hypertension,lisinopril + amlodipine,2,2018-01-11,
P002,E11.9,Type 2 diabetes mellitus,metformin,,2020-04-01,2021-04-01
P003,Z00.0,,,,,
"""


@pytest.fixture
def lot_csv(tmp_path, monkeypatch):
    path = tmp_path / "lines_of_therapy.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    monkeypatch.setattr(lot_loader, "LOT_DATA_PATH", path)
    lot_loader.reset_cache()
    yield path
    lot_loader.reset_cache()


@pytest.fixture
def client(lot_csv, monkeypatch):
    # Always serve from the CSV export, even if Supabase env vars are set
    monkeypatch.setattr(lot_repository, "get_client", lambda: None)
    return TestClient(app)
