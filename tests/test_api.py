"""Tests for API endpoints (no external API keys required)."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from clipcore.api.main import app
from clipcore.oracle.null import NullOracle

client = TestClient(app)

SEGMENTS = [{"start": i * 20.0, "end": (i + 1) * 20.0, "text": f"segment {i}"} for i in range(5)]

VTT = """WEBVTT

00:00:00.000 --> 00:00:10.000
Welcome back to the channel everyone.

00:00:10.000 --> 00:00:30.000
Today we are talking about sourdough bread baking at home.

00:00:30.000 --> 00:01:00.000
First we need to build a healthy starter culture.

00:01:00.000 --> 00:02:00.000
Next comes the dough itself. Combine the active starter with bread flour.
"""


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


# --- Candidate windows ---


def test_windows_default_bounds():
    response = client.post("/api/windows", json={"segments": SEGMENTS})
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert data["windows"][0]["start"] == 20.0
    assert data["windows"][0]["end"] == 100.0
    assert data["windows"][0]["text"].startswith("segment 1")


def test_windows_custom_bounds():
    response = client.post(
        "/api/windows",
        json={"segments": SEGMENTS, "min_duration": 15, "max_duration": 40, "step": 20},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == len(data["windows"]) == 4
    assert all(15 <= w["duration"] <= 40 for w in data["windows"])


def test_windows_empty_segments():
    response = client.post("/api/windows", json={"segments": []})
    assert response.status_code == 200
    assert response.json() == {"windows": [], "count": 0}


def test_windows_validation():
    assert client.post("/api/windows", json={}).status_code == 422
    response = client.post("/api/windows", json={"segments": SEGMENTS, "step": -5})
    assert response.status_code == 422


# --- Chapters ---


def test_chapters_requires_input():
    response = client.post("/api/chapters", json={})
    assert response.status_code == 400
    assert "transcript" in response.json()["detail"]


def test_chapters_unknown_format_returns_400():
    response = client.post("/api/chapters", json={"content": "data", "format": "docx"})
    assert response.status_code == 400
    assert "Unknown transcript format" in response.json()["detail"]


def test_chapters_fallback_without_oracle():
    """With the oracle switched off the rule-based strategy answers."""
    with patch("clipcore.api.routes.chapters.build_oracle", return_value=NullOracle()):
        response = client.post("/api/chapters", json={"content": VTT, "format": "vtt"})
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "fallback"
    assert data["chapters"]
    assert data["markers"][0]["start"] == 0.0
    assert data["chapters_text"].startswith("00:00 ")


def test_chapters_short_transcript():
    with patch("clipcore.api.routes.chapters.build_oracle", return_value=NullOracle()):
        response = client.post("/api/chapters", json={"transcript": "Hi."})
    assert response.status_code == 200
    assert response.json() == {
        "source": "none",
        "chapters": [],
        "markers": [],
        "chapters_text": "",
    }


def test_chapters_with_oracle(make_oracle, transcript, anchor_response, title_response):
    oracle = make_oracle([anchor_response, title_response])
    with patch("clipcore.api.routes.chapters.build_oracle", return_value=oracle):
        response = client.post("/api/chapters", json={"transcript": transcript})
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "oracle"
    assert [c["title"] for c in data["chapters"]] == [
        "Preparing the Starter",
        "Mixing the Dough",
        "Baking the Loaf",
    ]
    assert data["markers"] == []


# --- Titles, description, tags ---


def test_content_fallback_without_oracle():
    with patch("clipcore.api.routes.content.build_oracle", return_value=NullOracle()):
        response = client.post(
            "/api/content",
            json={
                "transcript": "Welcome back to the channel everyone. Today we bake sourdough bread.",
                "video_path": "sourdough_basics.mp4",
                "title": "Sourdough Basics",
                "language": "en",
            },
        )
    assert response.status_code == 200
    assert response.json() == {
        "titles": ["sourdough basics"],
        "description": "Sourdough Basics\n",
        "tags": ["english", "sourdough", "basics"],
    }


def test_content_with_oracle(make_oracle, transcript):
    oracle = make_oracle(
        [
            "Sourdough Secrets Revealed\nBake Better Bread Today",
            "We build a lively sourdough starter, then bake a crusty loaf in a dutch oven.",
            "sourdough, starter, oven",
        ]
    )
    with patch("clipcore.api.routes.content.build_oracle", return_value=oracle):
        response = client.post("/api/content", json={"transcript": transcript})
    assert response.status_code == 200
    assert response.json() == {
        "titles": ["Sourdough Secrets Revealed", "Bake Better Bread Today"],
        "description": (
            "We build a lively sourdough starter, then bake a crusty loaf in a dutch oven."
        ),
        "tags": ["sourdough", "starter", "oven"],
    }


def test_content_empty_request():
    with patch("clipcore.api.routes.content.build_oracle", return_value=NullOracle()):
        response = client.post("/api/content", json={})
    assert response.status_code == 200
    assert response.json() == {"titles": [], "description": None, "tags": []}
