from fastapi.testclient import TestClient

from tests.utils import add_datapoint, add_mapping, add_template, make_pdf


def test_upload_records_page_count_and_stores_bytes(client: TestClient, db_session, template_store):
    pdf = make_pdf([(612, 792), (612, 792)])

    response = client.post(
        "/api/templates/upload",
        files={"file": ("invoice.pdf", pdf, "application/pdf")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["original_filename"] == "invoice.pdf"
    assert body["pages"] == 2
    assert template_store.read(body["stored_path"]) == pdf


def test_upload_unreadable_pdf_defaults_to_one_page(client: TestClient, db_session):
    response = client.post(
        "/api/templates/upload",
        files={"file": ("broken.pdf", b"not really a pdf", "application/pdf")},
    )

    assert response.status_code == 200
    assert response.json()["pages"] == 1


def test_upload_rejects_other_file_types(client: TestClient, db_session):
    response = client.post(
        "/api/templates/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400


def test_upload_without_file(client: TestClient, db_session):
    response = client.post("/api/templates/upload")
    assert response.status_code == 400
    assert response.json() == {"detail": "No file"}


def test_templates_listed_newest_first(client: TestClient, db_session, template_store):
    older = add_template(db_session, template_store, filename="a.pdf")
    newer = add_template(db_session, template_store, filename="b.pdf")

    response = client.get("/api/templates")

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == [newer.id, older.id]


def _without_ids(rows):
    return sorted(
        (row["datapoint_id"], row["page"], row["x"], row["y"], row["font_size"]) for row in rows
    )


def test_save_and_get_mappings(client: TestClient, db_session, template_store):
    name = add_datapoint(db_session, "company_name")
    city = add_datapoint(db_session, "city")
    template = add_template(db_session, template_store)
    mappings = [
        {"datapoint_id": name.id, "page": 1, "x": 0.1, "y": 0.2, "font_size": 14},
        {"datapoint_id": city.id, "page": 2, "x": 0.5, "y": 0.6},
    ]

    response = client.post(f"/api/templates/{template.id}/mappings", json={"mappings": mappings})
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    response = client.get(f"/api/templates/{template.id}/mappings")
    assert response.status_code == 200
    rows = response.json()
    assert [row["datapoint_id"] for row in rows] == [name.id, city.id]
    assert rows[0]["template_id"] == template.id
    assert (rows[0]["x"], rows[0]["y"], rows[0]["font_size"]) == (0.1, 0.2, 14.0)
    assert (rows[1]["page"], rows[1]["font_size"]) == (2, 12.0)


def test_saving_same_mappings_twice_is_idempotent(client: TestClient, db_session, template_store):
    name = add_datapoint(db_session, "company_name")
    template = add_template(db_session, template_store)
    mappings = [
        {"datapoint_id": name.id, "x": 0.3, "y": 0.4},
        {"datapoint_id": name.id, "page": 2, "x": 0.7, "y": 0.8, "font_size": 9},
    ]
    url = f"/api/templates/{template.id}/mappings"

    client.post(url, json={"mappings": mappings})
    first = client.get(url).json()
    client.post(url, json={"mappings": mappings})
    second = client.get(url).json()

    assert len(second) == 2
    assert _without_ids(first) == _without_ids(second)


def test_empty_list_clears_only_that_template(client: TestClient, db_session, template_store):
    name = add_datapoint(db_session, "company_name")
    cleared = add_template(db_session, template_store)
    untouched = add_template(db_session, template_store)
    add_mapping(db_session, cleared.id, name.id)
    add_mapping(db_session, untouched.id, name.id)

    response = client.post(f"/api/templates/{cleared.id}/mappings", json={"mappings": []})

    assert response.status_code == 200
    assert client.get(f"/api/templates/{cleared.id}/mappings").json() == []
    assert len(client.get(f"/api/templates/{untouched.id}/mappings").json()) == 1


def test_malformed_numbers_are_stored_and_read_back_safely(client: TestClient, db_session, template_store):
    name = add_datapoint(db_session, "company_name")
    template = add_template(db_session, template_store)
    mappings = [{"datapoint_id": name.id, "x": "left", "y": None, "font_size": "big"}]

    response = client.post(f"/api/templates/{template.id}/mappings", json={"mappings": mappings})
    assert response.status_code == 200

    rows = client.get(f"/api/templates/{template.id}/mappings").json()
    assert len(rows) == 1
    assert (rows[0]["page"], rows[0]["x"], rows[0]["y"], rows[0]["font_size"]) == (1, 0.0, 0.0, 12.0)


def test_mappings_must_be_a_list(client: TestClient, db_session, template_store):
    template = add_template(db_session, template_store)

    response = client.post(f"/api/templates/{template.id}/mappings", json={"mappings": {"x": 1}})
    assert response.status_code == 400

    response = client.post(f"/api/templates/{template.id}/mappings", json={})
    assert response.status_code == 400


def test_mappings_for_unknown_template(client: TestClient, db_session):
    name = add_datapoint(db_session, "company_name")

    response = client.post(
        "/api/templates/424242/mappings",
        json={"mappings": [{"datapoint_id": name.id, "x": 0.5, "y": 0.5}]},
    )
    assert response.status_code == 404


def test_mappings_with_unknown_datapoint_keep_previous_set(client: TestClient, db_session, template_store):
    name = add_datapoint(db_session, "company_name")
    template = add_template(db_session, template_store)
    add_mapping(db_session, template.id, name.id)

    response = client.post(
        f"/api/templates/{template.id}/mappings",
        json={"mappings": [{"datapoint_id": name.id + 1000, "x": 0.5, "y": 0.5}]},
    )

    assert response.status_code == 400
    rows = client.get(f"/api/templates/{template.id}/mappings").json()
    assert [row["datapoint_id"] for row in rows] == [name.id]
