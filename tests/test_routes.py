import io
import json

import pytest

CSV_BYTES = b"width,height,label\n1,2,x\n2,4,y\n3,6,x\n4,8,y\n"


def upload(client, content=CSV_BYTES, filename="numbers.csv"):
    return client.post(
        "/api/analyses",
        data={"file": (io.BytesIO(content), filename)},
        content_type="multipart/form-data",
    )


@pytest.fixture
def saved_analysis(client):
    response = upload(client)
    assert response.status_code == 200
    return response.get_json()["analysis"]


def test_upload_falls_back_without_ai(saved_analysis):
    assert saved_analysis["file_name"] == "numbers.csv"
    assert saved_analysis["source"] == "fallback"
    assert saved_analysis["row_count"] == 4
    types = [insight["type"] for insight in saved_analysis["insights"]]
    assert types == ["pattern", "pattern", "trend"]
    assert any(chart["type"] == "scatter" for chart in saved_analysis["charts_config"])


def test_upload_uses_ai_result(client, ai_client):
    ai_client.analysis = {"summary": "Doubling", "insights": [], "chartConfigs": [{"type": "pie", "title": "label"}]}
    analysis = upload(client).get_json()["analysis"]

    assert analysis["source"] == "ai"
    assert analysis["summary"] == "Doubling"
    assert analysis["charts_config"][0]["data"]["labels"] == ["x", "y"]


def test_upload_requires_file(client):
    response = client.post("/api/analyses", data={}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json() == {"status": "error", "message": "No file selected"}


def test_upload_rejects_unsupported_format(client):
    response = upload(client, filename="data.json")
    assert response.status_code == 400
    assert "Unsupported file format" in response.get_json()["message"]


def test_upload_rejects_file_without_rows(client):
    response = upload(client, content=b"a,b\n")
    assert response.status_code == 400


def test_upload_removes_temporary_file(client, app):
    import os
    upload(client)
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == []


def test_analyze_records(client):
    records = [{"a": 1, "b": 2}, {"a": 2, "b": 4}, {"a": 3, "b": 6}]
    response = client.post("/api/analyze", json={"data": records})
    results = response.get_json()["results"]

    assert response.status_code == 200
    assert results["relationships"][0]["strength"] == 1.0
    assert set(results) == {"columns", "relationships", "insights", "chartConfigs"}


def test_analyze_records_empty(client):
    results = client.post("/api/analyze", json={"data": []}).get_json()["results"]
    assert results == {"columns": [], "relationships": [], "insights": [], "chartConfigs": []}


def test_analyze_records_validates_payload(client):
    assert client.post("/api/analyze", json={"data": "nope"}).status_code == 400


def test_list_get_and_delete_analysis(client, saved_analysis):
    listed = client.get("/api/analyses").get_json()["analyses"]
    assert [a["id"] for a in listed] == [saved_analysis["id"]]
    assert "file_data" not in listed[0]

    fetched = client.get(f"/api/analyses/{saved_analysis['id']}").get_json()["analysis"]
    assert len(fetched["file_data"]) == 4

    deleted = client.delete(f"/api/analyses/{saved_analysis['id']}")
    assert deleted.get_json()["file_name"] == "numbers.csv"
    assert client.get(f"/api/analyses/{saved_analysis['id']}").status_code == 404


def test_insights_filtering(client, saved_analysis):
    trends = client.get("/api/insights?type=trend").get_json()["insights"]
    assert len(trends) == 1
    assert trends[0]["fileName"] == "numbers.csv"

    everything = client.get("/api/insights").get_json()["insights"]
    assert len(everything) == 3

    assert client.get("/api/insights?type=bogus").status_code == 400


def test_dashboard(client, saved_analysis):
    data = client.get("/api/dashboard").get_json()
    assert data["stats"]["totalAnalyses"] == 1
    assert data["stats"]["chartsGenerated"] == len(saved_analysis["charts_config"])
    assert data["stats"]["sqlQueriesGenerated"] == 0
    assert data["recent_analyses"][0]["id"] == saved_analysis["id"]


def test_export(client, saved_analysis):
    response = client.get(f"/api/analyses/{saved_analysis['id']}/export/txt")
    assert response.status_code == 200
    assert "attachment" in response.headers["Content-Disposition"]
    assert b"DATA ANALYSIS REPORT" in response.data
    response.close()

    assert client.get(f"/api/analyses/{saved_analysis['id']}/export/pdf").status_code == 400
    assert client.get("/api/analyses/999/export/json").status_code == 404


def test_chat(client, ai_client, saved_analysis):
    url = f"/api/analyses/{saved_analysis['id']}/chat"
    assert client.post(url, json={}).status_code == 400

    fallback = client.post(url, json={"message": "how many rows?"}).get_json()["response"]
    assert "4 rows of data" in fallback

    ai_client.chat_response = "height is twice width."
    assert client.post(url, json={"message": "relation?"}).get_json()["response"] == "height is twice width."


def test_generate_sql(client, ai_client):
    tables = [{"name": "users", "columns": [{"name": "id", "type": "int"}]}]
    assert client.post("/api/sql/generate", json={"tables": [], "prompt": "x"}).status_code == 400

    ai_client.sql = "SELECT id FROM users"
    response = client.post("/api/sql/generate",
                           json={"tables": tables, "prompt": "only ids", "currentSql": "SELECT * FROM users"})
    assert response.get_json()["sql"] == "SELECT id FROM users"
    assert "Current query: SELECT * FROM users" in ai_client.calls[-1][1]


def test_execute_sql(client):
    assert client.post("/api/sql/execute", json={"sql": " "}).status_code == 400

    result = client.post("/api/sql/execute", json={"sql": "SELECT id, email FROM users"}).get_json()["result"]
    assert result["success"] is True
    assert result["columns"] == ["id", "email"]
    assert len(result["rows"]) == 5


def test_saved_queries(client):
    assert client.post("/api/sql/queries", json={"prompt": "", "sql": "SELECT 1"}).status_code == 400

    saved = client.post("/api/sql/queries", json={
        "prompt": "all users", "sql": "SELECT * FROM users",
        "tables": [{"name": "users"}], "executionResult": {"success": True},
    }).get_json()["query"]
    assert saved["title"] == "all users"
    assert saved["execution_result"] == {"success": True}

    listed = client.get("/api/sql/queries").get_json()["queries"]
    assert [q["id"] for q in listed] == [saved["id"]]
    assert client.get("/api/dashboard").get_json()["stats"]["sqlQueriesGenerated"] == 1

    assert client.delete(f"/api/sql/queries/{saved['id']}").status_code == 200
    assert client.delete(f"/api/sql/queries/{saved['id']}").status_code == 404


def reject_constant(token):
    raise ValueError(f"non-standard JSON token {token}")


def test_analyze_records_body_is_strict_json(client):
    records = [{"v": "Infinity"}, {"v": "1"}, {"v": "-Infinity"}]
    response = client.post("/api/analyze", json={"data": records})

    body = json.loads(response.get_data(as_text=True), parse_constant=reject_constant)
    [column] = body["results"]["columns"]
    assert column["type"] == "number"
    assert column["stats"]["max"] is None
    assert column["stats"]["min"] is None
    assert body["results"]["chartConfigs"][0]["data"]["datasets"][0]["data"] == [None, None, None]


def test_string_insights_from_ai_do_not_break_later_requests(client, ai_client):
    ai_client.analysis = {"summary": "s", "insights": "North leads", "chartConfigs": []}
    analysis = upload(client).get_json()["analysis"]

    response = client.get("/api/insights")
    assert response.status_code == 200
    assert response.get_json()["insights"] == []

    chat = client.post(f"/api/analyses/{analysis['id']}/chat", json={"message": "key insights?"})
    assert chat.status_code == 200
    assert client.get(f"/api/analyses/{analysis['id']}/export/csv").status_code == 200


@pytest.mark.parametrize("payload", [
    {"tables": [{"name": "users"}], "prompt": 42},
    {"tables": "users", "prompt": "all users"},
    {"tables": ["users"], "prompt": "all users"},
    {"tables": [{"name": "users"}], "prompt": "all users", "currentSql": ["SELECT 1"]},
])
def test_generate_sql_rejects_malformed_payload(client, payload):
    response = client.post("/api/sql/generate", json=payload)
    assert response.status_code == 400
    assert response.get_json()["status"] == "error"


@pytest.mark.parametrize("payload", [
    {"sql": "SELECT * FROM users", "tables": "users"},
    {"sql": "SELECT * FROM users", "tables": [1, 2]},
    {"sql": 7},
])
def test_execute_sql_rejects_malformed_payload(client, payload):
    assert client.post("/api/sql/execute", json=payload).status_code == 400


def test_save_query_rejects_non_string_prompt(client):
    assert client.post("/api/sql/queries", json={"prompt": ["a"], "sql": "SELECT 1"}).status_code == 400


def test_json_array_body_is_rejected(client):
    assert client.post("/api/sql/generate", json=[1, 2]).status_code == 400
    assert client.post("/api/analyze", json=[{"a": 1}]).status_code == 400


def test_execute_sql_skips_malformed_schema_columns(client):
    tables = [{"name": "users", "columns": [{"name": "id"}, "email", {"type": "text"}]}]
    result = client.post("/api/sql/execute", json={"sql": "SELECT * FROM users", "tables": tables}).get_json()["result"]
    assert result["columns"] == ["id"]
