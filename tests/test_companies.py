from fastapi.testclient import TestClient

from tests.utils import add_company, add_datapoint


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_list_companies_and_datapoints_ordered_by_id(client: TestClient, db_session):
    first = add_datapoint(db_session, "company_name", "Company Name")
    second = add_datapoint(db_session, "city", "City")
    acme = add_company(db_session, "Acme")
    globex = add_company(db_session, "Globex")

    response = client.get("/api/datapoints")
    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == [first.id, second.id]
    assert response.json()[0] == {"id": first.id, "key": "company_name", "label": "Company Name"}

    response = client.get("/api/companies")
    assert response.status_code == 200
    assert response.json() == [
        {"id": acme.id, "name": "Acme"},
        {"id": globex.id, "name": "Globex"},
    ]


def test_company_values_include_datapoints_without_value(client: TestClient, db_session):
    name = add_datapoint(db_session, "company_name", "Company Name")
    add_datapoint(db_session, "phone", "Phone")
    acme = add_company(db_session, "Acme", {name.id: "Acme Corp"})
    add_company(db_session, "Other", {name.id: "Other Corp"})

    response = client.get(f"/api/company/{acme.id}/values")

    assert response.status_code == 200
    assert response.json() == [
        {"key": "company_name", "label": "Company Name", "value": "Acme Corp"},
        {"key": "phone", "label": "Phone", "value": None},
    ]
