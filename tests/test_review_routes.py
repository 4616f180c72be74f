"""
Test: /review endpoints (options, example, reviews, drafts, history, quotas).
"""
import json

import httpx

from writing_assistant.models import AuthUser
from writing_assistant.routers.review import EMPTY_TEXT_DETAIL, ESSAY_FAILURE_DETAIL, THESIS_FAILURE_DETAIL

ESSAY = "Universities should record lectures. Recordings help students revise."

REVIEW = {
    "overallScore": "B+",
    "overallSummary": "Good argument.",
    "criteriaFeedback": [
        {"criterion": "Thesis", "score": "17/20", "feedback": "Clear.", "quote": "Universities should record lectures."},
    ],
}


def test_options_defaults(client):
    data = client.get("/review/options").json()
    assert data["essay_levels"] == ["Undergraduate", "Master’s"]
    assert data["thesis_levels"] == ["Undergraduate", "Master’s", "Doctoral"]
    assert data["default_essay_type"] == data["essay_types"]["Undergraduate"][0]
    assert data["default_thesis_chapter"] == data["thesis_chapters"]["Undergraduate"][0]


def test_example(client):
    data = client.get("/review/example").json()
    assert data["review_mode"] == "essay"
    assert data["level"] == "Undergraduate"
    assert data["essay_type"] == "Argumentative / persuasive"
    assert data["text"]


def test_review_requires_auth(client):
    resp = client.post("/review/essay", json={"text": ESSAY, "essay_type": "Reflective"})
    assert resp.status_code == 401


def test_essay_review_success(client, auth_headers, fake_gemini):
    fake_gemini.text_reply = "```json\n" + json.dumps(REVIEW) + "\n```"
    resp = client.post(
        "/review/essay",
        json={"text": ESSAY, "essay_type": "Argumentative / persuasive", "level": "Undergraduate"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["feedback"]["overallScore"] == "B+"
    assert body["feedback"]["criteriaFeedback"][0]["quote"] == "Universities should record lectures."
    assert body["anchors"][0] == {
        "criterion": "Thesis",
        "quote": "Universities should record lectures.",
        "found": True,
        "start": 0,
        "end": len("Universities should record lectures."),
    }


def test_empty_text_rejected_without_model_call(client, auth_headers, fake_gemini):
    resp = client.post("/review/essay", json={"text": "   \n", "essay_type": "Reflective"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == EMPTY_TEXT_DETAIL
    assert fake_gemini.calls == []


def test_unknown_rubric_is_404(client, auth_headers):
    resp = client.post(
        "/review/thesis",
        json={"text": ESSAY, "level": "Doctoral", "chapter": "Prologue"},
        headers=auth_headers,
    )
    assert resp.status_code == 404
    assert "Prologue" in resp.json()["detail"]


def test_model_failure_is_502(client, auth_headers, fake_gemini):
    fake_gemini.error = httpx.ConnectError("offline")
    resp = client.post("/review/essay", json={"text": ESSAY, "essay_type": "Reflective"}, headers=auth_headers)
    assert resp.status_code == 502
    assert resp.json()["detail"] == ESSAY_FAILURE_DETAIL


def test_invalid_model_output_is_502(client, auth_headers, fake_gemini):
    fake_gemini.text_reply = "Sorry, I can't."
    resp = client.post(
        "/review/thesis",
        json={"text": ESSAY, "level": "Master’s", "chapter": "Discussion"},
        headers=auth_headers,
    )
    assert resp.status_code == 502
    assert resp.json()["detail"] == THESIS_FAILURE_DETAIL


def test_text_limit(client, auth_headers, monkeypatch):
    from writing_assistant.routers import review
    monkeypatch.setattr(review.settings, "max_review_chars", 10)
    resp = client.post("/review/essay", json={"text": ESSAY, "essay_type": "Reflective"}, headers=auth_headers)
    assert resp.status_code == 413


def test_history_lists_newest_first(client, auth_headers, fake_gemini):
    fake_gemini.text_reply = json.dumps(REVIEW)
    client.post("/review/essay", json={"text": ESSAY, "essay_type": "Reflective"}, headers=auth_headers)
    client.post("/review/thesis", json={"text": ESSAY, "chapter": "Conclusion"}, headers=auth_headers)
    items = client.get("/review/history", headers=auth_headers).json()
    assert [i["target"] for i in items] == ["Conclusion", "Reflective"]
    detail = client.get(f"/review/history/{items[0]['id']}", headers=auth_headers).json()
    assert detail["feedback"]["overallSummary"] == "Good argument."
    assert detail["anchors"][0]["found"] is True


def test_history_item_of_unknown_id(client, auth_headers):
    assert client.get("/review/history/999", headers=auth_headers).status_code == 404


def test_highlight(client):
    resp = client.post("/review/highlight", json={"text": "One. Two. One.", "quote": "One."})
    assert [s["highlighted"] for s in resp.json()] == [True, False, True]


class TestDrafts:
    def test_round_trip(self, client, auth_headers):
        assert client.get("/review/draft/status", headers=auth_headers).json() == {"saved": False}
        assert client.get("/review/draft", headers=auth_headers).status_code == 404
        draft = {
            "review_mode": "thesis",
            "essay_text": "Chapter one...",
            "selected_essay_level": "Undergraduate",
            "selected_essay_type": "Reflective",
            "selected_thesis_level": "Doctoral",
            "selected_thesis_chapter": "Methodology",
        }
        assert client.put("/review/draft", json=draft, headers=auth_headers).status_code == 200
        assert client.get("/review/draft/status", headers=auth_headers).json() == {"saved": True}
        assert client.get("/review/draft", headers=auth_headers).json() == draft

    def test_save_overwrites_and_delete(self, client, auth_headers):
        client.put("/review/draft", json={"essay_text": "first"}, headers=auth_headers)
        client.put("/review/draft", json={"essay_text": "second"}, headers=auth_headers)
        assert client.get("/review/draft", headers=auth_headers).json()["essay_text"] == "second"
        assert client.delete("/review/draft", headers=auth_headers).status_code == 204
        assert client.get("/review/draft/status", headers=auth_headers).json() == {"saved": False}

    def test_invalid_mode(self, client, auth_headers):
        resp = client.put("/review/draft", json={"review_mode": "poem"}, headers=auth_headers)
        assert resp.status_code == 422


def test_request_limit(client, db_session_factory, fake_gemini):
    from writing_assistant.routers.auth import pwd_context

    db = db_session_factory()
    db.add(AuthUser(username="limited", password_hash=pwd_context.hash("pw"), requests_used=1, requests_limit=1))
    db.commit()
    db.close()
    token = client.post("/auth/token", data={"username": "limited", "password": "pw"}).json()["access_token"]
    resp = client.post(
        "/review/essay",
        json={"text": ESSAY, "essay_type": "Reflective"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 429
    assert fake_gemini.calls == []


def test_unknown_rubric_is_not_counted(client, db_session_factory, fake_gemini):
    from writing_assistant.routers.auth import pwd_context

    db = db_session_factory()
    db.add(AuthUser(username="counted", password_hash=pwd_context.hash("pw"), requests_used=0, requests_limit=5))
    db.commit()
    db.close()
    token = client.post("/auth/token", data={"username": "counted", "password": "pw"}).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.post("/review/essay", json={"text": ESSAY, "essay_type": "Nope"}, headers=headers).status_code == 404
    assert client.post("/review/thesis", json={"text": ESSAY, "chapter": "Epilogue"}, headers=headers).status_code == 404
    assert fake_gemini.calls == []

    db = db_session_factory()
    assert db.get(AuthUser, "counted").requests_used == 0
    db.close()
