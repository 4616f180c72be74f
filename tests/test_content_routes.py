"""
Test: /content reference section.
"""
import pytest


def test_sections(client):
    data = client.get("/content/sections").json()
    assert data["default"] == "Essay Reviewer"
    assert data["sections"][-1] == "Essay Reviewer"
    assert len(data["sections"]) == 6


def test_essay_types_include_examples(client):
    data = client.get("/content/Essay Types").json()
    table = data["tables"][0]
    assert table["title"] == "Common Essay Types (Click row to see example)"
    assert table["headers"] == ["Level", "Essay Type", "Core Purpose", "Typical Disciplines"]
    assert len(table["rows"]) == len(table["details"])
    assert set(table["details"][0]) == {"title", "description", "text"}


def test_thesis_formats_has_checklist(client):
    tables = client.get("/content/Thesis Formats").json()["tables"]
    assert [t["title"] for t in tables] == ["Thesis Formats by Degree Level", "Quick Checklist for Each Level"]
    assert tables[1]["headers"] == ["Checklist Item", "Undergraduate", "Master’s", "Doctoral"]


@pytest.mark.parametrize("section, column", [("Thesis Marking Scheme", 3), ("Essay Marking Scheme", 3)])
def test_penalty_triggers_are_lists(client, section, column):
    rows = client.get(f"/content/{section}").json()["tables"][0]["rows"]
    assert all(isinstance(row[column], list) and row[column] for row in rows)


def test_writing_tips(client):
    table = client.get("/content/Writing Tips").json()["tables"][0]
    assert table["headers"] == ["Area", "What to Do", "Why It Works", "Quick Start Tools"]


def test_reviewer_and_unknown_sections(client):
    assert client.get("/content/Essay Reviewer").status_code == 404
    assert client.get("/content/Poetry").status_code == 404
