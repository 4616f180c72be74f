"""
Test: /chat endpoints and transcript history.
"""
from writing_assistant.assistant import CHAT_ERROR_TEXT
from writing_assistant.gemini_client import GroundedResult


def test_message(client, auth_headers, fake_gemini):
    fake_gemini.text_reply = "Use **PEEL** paragraphs."
    resp = client.post("/chat/message", json={"message": "How do I structure a paragraph?"}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["request"] == {"sender": "user", "text": "How do I structure a paragraph?"}
    assert body["reply"] == {"sender": "ai", "text": "Use **PEEL** paragraphs."}
    assert "<strong>PEEL</strong>" in body["html"]


def test_message_failure_still_answers(client, auth_headers, fake_gemini):
    fake_gemini.error = RuntimeError("quota")
    resp = client.post("/chat/message", json={"message": "hello"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["reply"]["text"] == CHAT_ERROR_TEXT


def test_blank_message_rejected(client, auth_headers, fake_gemini):
    resp = client.post("/chat/message", json={"message": "  "}, headers=auth_headers)
    assert resp.status_code == 400
    assert fake_gemini.calls == []


def test_search_appends_sources(client, auth_headers, fake_gemini):
    fake_gemini.grounded_reply = GroundedResult(
        text="Harvard style uses author-date.",
        sources=[
            {"web": {"uri": "https://lib.example/harvard", "title": "Harvard guide"}},
            {"web": {"uri": "https://lib.example/harvard", "title": "Harvard guide"}},
        ],
    )
    body = client.post("/chat/search", json={"message": "Harvard referencing"}, headers=auth_headers).json()
    assert body["request"]["text"] == "**Online Search Request:**\nHarvard referencing"
    assert body["reply"]["text"].count("https://lib.example/harvard") == 1
    assert "**Sources Found:**" in body["reply"]["text"]
    assert 'target="_blank"' in body["html"]


def test_reference_check(client, auth_headers, fake_gemini):
    fake_gemini.grounded_reply = GroundedResult(text="Reference 1 exists.")
    body = client.post("/chat/references", json={"message": "Doe, J. (2019)."}, headers=auth_headers).json()
    assert body["request"]["text"].startswith("**Reference Check Request:**\n")
    assert body["reply"]["text"] == "Reference 1 exists."


def test_history_and_clear(client, auth_headers, fake_gemini):
    fake_gemini.text_reply = "Hi!"
    client.post("/chat/message", json={"message": "Hello"}, headers=auth_headers)
    history = client.get("/chat/history", headers=auth_headers).json()
    assert history == [{"sender": "user", "text": "Hello"}, {"sender": "ai", "text": "Hi!"}]
    assert client.delete("/chat/history", headers=auth_headers).status_code == 204
    assert client.get("/chat/history", headers=auth_headers).json() == []
