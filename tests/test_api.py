"""
Tests for the HTTP API
"""
import pytest
from fastapi.testclient import TestClient

from judgement_drafter.app import main


@pytest.fixture
def client():
    main.sessions.clear()
    with TestClient(main.app) as test_client:
        yield test_client
    main.sessions.clear()


@pytest.fixture
def session_id(client):
    res = client.post("/api/sessions")
    assert res.status_code == 201
    return res.json()["sessionId"]


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_create_session_snapshot(client):
    body = client.post("/api/sessions").json()
    assert body["view"] == "edit"
    assert body["extracting"] is False
    assert body["drafting"] is False
    assert body["draft"] is None
    details = body["caseDetails"]
    assert details["courtName"] == "某某市中级人民法院"
    assert [p["role"] for p in details["plaintiffs"]] == ["plaintiff"]
    assert [p["role"] for p in details["defendants"]] == ["defendant"]


def test_unknown_session_is_404(client):
    assert client.get("/api/sessions/nope").status_code == 404
    assert client.post("/api/sessions/nope/draft").status_code == 404


def test_delete_session(client, session_id):
    assert client.delete(f"/api/sessions/{session_id}").status_code == 204
    assert client.get(f"/api/sessions/{session_id}").status_code == 404


def test_update_case_fields(client, session_id):
    res = client.patch(
        f"/api/sessions/{session_id}/case",
        json={"caseType": "criminal", "caseNumber": "(2024) 粤01刑初9号"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["caseDetails"]["caseType"] == "criminal"
    assert body["caseDetails"]["caseNumber"] == "(2024) 粤01刑初9号"
    assert body["partySections"][0] == {"role": "prosecutor", "title": "公诉机关"}


def test_update_case_rejects_unknown_case_type(client, session_id):
    res = client.patch(f"/api/sessions/{session_id}/case", json={"caseType": "maritime"})
    assert res.status_code == 422
    assert res.json()["detail"] == "Validation error"


def test_party_add_update_remove(client, session_id):
    res = client.post(f"/api/sessions/{session_id}/parties/third_party")
    assert res.status_code == 201
    assert len(res.json()["caseDetails"]["thirdParties"]) == 1

    res = client.patch(
        f"/api/sessions/{session_id}/parties/third_party/0",
        json={"name": "王五", "address": "某某市"},
    )
    assert res.status_code == 200
    party = res.json()["caseDetails"]["thirdParties"][0]
    assert party["name"] == "王五"
    assert party["role"] == "third_party"

    res = client.delete(f"/api/sessions/{session_id}/parties/third_party/0")
    assert res.status_code == 200
    assert res.json()["caseDetails"]["thirdParties"] == []


def test_party_bad_index_and_role(client, session_id):
    assert client.delete(f"/api/sessions/{session_id}/parties/plaintiff/3").status_code == 404
    assert client.post(f"/api/sessions/{session_id}/parties/judge").status_code == 422


def test_extract_blank_text_is_rejected(client, session_id, fake_gemini):
    res = client.post(f"/api/sessions/{session_id}/extract", json={"text": "   "})
    assert res.status_code == 400
    assert fake_gemini.calls == []


def test_extract_merges_parties(client, session_id, fake_gemini):
    fake_gemini.queue([{"role": "defendant", "name": "张三"}])

    res = client.post(f"/api/sessions/{session_id}/extract", json={"text": "被告张三"})

    assert res.status_code == 200
    body = res.json()
    assert [p["name"] for p in body["parties"]] == ["张三"]
    defendants = body["session"]["caseDetails"]["defendants"]
    assert [(p["role"], p["name"]) for p in defendants] == [("defendant", "张三")]


def test_extract_failure_is_generic(client, session_id, fake_gemini):
    fake_gemini.queue(RuntimeError("401 UNAUTHENTICATED"))
    res = client.post(f"/api/sessions/{session_id}/extract", json={"text": "被告张三"})
    assert res.status_code == 502
    assert res.json()["detail"] == main.EXTRACTION_FAILED_MESSAGE


def test_draft_and_document_view(client, session_id, fake_gemini, sample_draft):
    assert client.get(f"/api/sessions/{session_id}/document").status_code == 409
    fake_gemini.queue(sample_draft)

    res = client.post(f"/api/sessions/{session_id}/draft")

    assert res.status_code == 200
    body = res.json()
    assert body["view"] == "preview"
    assert body["draft"] == sample_draft

    page = client.get(f"/api/sessions/{session_id}/document")
    assert page.status_code == 200
    assert page.headers["content-type"].startswith("text/html")
    assert "判 决 结 果" in page.text
    assert "一、被告于本判决生效之日起十日内支付原告货款100000元；\n二、驳回原告其他诉讼请求。" in page.text

    res = client.post(f"/api/sessions/{session_id}/edit")
    assert res.json()["view"] == "edit"


def test_draft_failure_is_generic_and_stays_in_edit(client, session_id, fake_gemini):
    fake_gemini.queue("not json")
    res = client.post(f"/api/sessions/{session_id}/draft")
    assert res.status_code == 502
    assert res.json()["detail"] == main.DRAFT_FAILED_MESSAGE

    snap = client.get(f"/api/sessions/{session_id}").json()
    assert snap["view"] == "edit"
    assert snap["draft"] is None
