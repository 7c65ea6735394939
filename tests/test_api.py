"""API 端到端测试"""

import pytest


@pytest.fixture
def token(client, alice):
    response = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret"})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def project_id(client, headers):
    response = client.post("/projects", json={"name": "Ventes"}, headers=headers)
    assert response.status_code == 201
    project_id = response.json()["id"]

    csv_content = b"m,v,label\nJan,10,a\nFeb,20,b\nJan,5,\n"
    response = client.post(
        f"/projects/{project_id}/data",
        files={"file": ("monthly.csv", csv_content, "text/csv")},
        headers=headers
    )
    assert response.status_code == 200
    return project_id


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_register_login_me(client):
    response = client.post("/auth/register", json={"name": "Carol", "email": "carol@example.com", "password": "pw"})
    assert response.status_code == 201
    assert "password_hash" not in response.json()

    assert client.post("/auth/register", json={"name": "C", "email": "carol@example.com", "password": "pw"}).status_code == 409
    assert client.post("/auth/login", json={"email": "carol@example.com", "password": "bad"}).status_code == 401

    token = client.post("/auth/login", json={"email": "carol@example.com", "password": "pw"}).json()["token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "carol@example.com"

    client.post("/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_requires_auth(client):
    assert client.get("/projects").status_code == 401
    assert client.get("/projects", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_upload_and_schema(client, headers, project_id):
    schema = client.get(f"/projects/{project_id}/schema", headers=headers).json()
    assert schema["row_count"] == 3
    assert {c["name"]: c["type"] for c in schema["columns"]} == {"m": "string", "v": "number", "label": "string"}

    summary = client.get("/projects", headers=headers).json()
    assert summary[0]["row_count"] == 3


def test_upload_rejects_bad_file(client, headers, project_id):
    response = client.post(
        f"/projects/{project_id}/data",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "parse_error"


def test_stats(client, headers, project_id):
    stats = client.get(f"/projects/{project_id}/stats", headers=headers).json()
    assert stats["v"]["sum"] == 35
    assert stats["label"]["missing"] == 1
    assert "mean" not in stats["m"]


def test_query_filters_sorts_and_paginates(client, headers, project_id):
    body = {
        "filters": [{"column": "v", "operator": "greaterThan", "value": 8}],
        "sort": {"column": "v", "direction": "desc"},
        "page": 1,
        "pageSize": 1
    }
    page = client.post(f"/projects/{project_id}/query", json=body, headers=headers).json()
    assert page["rows"] == [{"m": "Feb", "v": 20, "label": "b"}]
    assert page["total_rows"] == 2
    assert page["total_pages"] == 2


def test_query_search(client, headers, project_id):
    page = client.post(f"/projects/{project_id}/query", json={"search": "jan"}, headers=headers).json()
    assert page["total_rows"] == 2


def test_aggregate(client, headers, project_id):
    body = {"groupBy": "m", "aggregations": [{"column": "v", "function": "sum"}]}
    result = client.post(f"/projects/{project_id}/aggregate", json=body, headers=headers).json()
    assert result["row_count"] == 2
    assert {"m": "Jan", "v_sum": 15} in result["rows"]
    assert {"m": "Feb", "v_sum": 20} in result["rows"]


def test_query_with_object_or_unknown_operator(client, headers, project_id):
    url = f"/projects/{project_id}/query"
    response = client.post(url, json={"filters": [{"column": "m", "operator": "lessThan", "value": {"a": 1}}]}, headers=headers)
    assert response.status_code == 200
    assert response.json()["total_rows"] == 0

    response = client.post(url, json={"filters": [{"column": "v", "operator": "between", "value": [1, 9]}]}, headers=headers)
    assert response.status_code == 200
    assert response.json()["total_rows"] == 3


def test_aggregate_skips_unknown_function(client, headers, project_id):
    body = {"groupBy": "m", "aggregations": [{"column": "v", "function": "median"}, {"column": "v", "function": "sum"}]}
    response = client.post(f"/projects/{project_id}/aggregate", json=body, headers=headers)
    assert response.status_code == 200
    assert response.json()["rows"] == [{"m": "Jan", "v_sum": 15}, {"m": "Feb", "v_sum": 20}]


def test_upload_rejects_json_nan(client, headers, project_id):
    response = client.post(
        f"/projects/{project_id}/data",
        files={"file": ("rows.json", b'[{"m": "Jan", "v": NaN}]', "application/json")},
        headers=headers
    )
    assert response.status_code == 400
    assert response.json()["error"]["detail"] == {"constant": "NaN"}


def test_export(client, headers, project_id):
    body = {"sort": {"column": "v", "direction": "asc"}}
    response = client.post(f"/projects/{project_id}/export", json=body, headers=headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.split("\n")[:2] == ["m,v,label", "Jan,5,"]


def test_visualization_and_chart(client, headers, project_id):
    response = client.post(
        f"/projects/{project_id}/visualizations",
        json={"name": "Par mois", "type": "bar", "config": {"xAxis": "m", "yAxis": ["v"]}},
        headers=headers
    )
    assert response.status_code == 201
    viz_id = response.json()["id"]

    chart = client.get(f"/projects/{project_id}/visualizations/{viz_id}/chart", headers=headers).json()
    assert chart["option"]["xAxis"]["data"] == ["Jan", "Feb", "Jan"]
    assert chart["option"]["series"][0]["data"] == [10, 20, 5]

    assert client.get(f"/projects/{project_id}/visualizations/missing/chart", headers=headers).status_code == 404

    preview = client.post(
        f"/projects/{project_id}/chart",
        json={"type": "pie", "config": {"xAxis": "m", "yAxis": ["missing"]}},
        headers=headers
    )
    assert preview.status_code == 400


def test_permissions_and_activity(client, headers, project_id, bob):
    bob_token = client.post("/auth/login", json={"email": "bob@example.com", "password": "hunter2"}).json()["token"]
    bob_headers = {"Authorization": f"Bearer {bob_token}"}

    assert client.get(f"/projects/{project_id}", headers=bob_headers).status_code == 403
    assert client.get("/projects/unknown", headers=headers).status_code == 404

    response = client.post(f"/projects/{project_id}/collaborators", json={"user_id": bob.id}, headers=headers)
    assert response.status_code == 200
    assert client.get(f"/projects/{project_id}", headers=bob_headers).status_code == 200
    assert client.delete(f"/projects/{project_id}", headers=bob_headers).status_code == 403

    activity = client.get(f"/projects/{project_id}/activity", headers=headers).json()
    assert [a["type"] for a in activity] == ["project_created", "data_added", "collaborator_added"]

    assert client.delete(f"/projects/{project_id}", headers=headers).json() == {"success": True}
    assert [a["type"] for a in client.get("/activity", headers=headers).json()][-1] == "project_deleted"
