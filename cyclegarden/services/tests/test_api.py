"""HTTP tests for the garden, calendar, chat and health routes."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cyclegarden.config import get_settings
from cyclegarden.engine.base import Phase
from cyclegarden.engine.content import ALREADY_CARED_MESSAGE, WELCOME_MESSAGE
from cyclegarden.main import create_app
from cyclegarden.services.chatbot import FALLBACK_REPLIES

V1 = "/api/v1"


@pytest.fixture
def ready_client(api_client: TestClient) -> TestClient:
    """Client whose 28-day cycle started on 2026-02-10 (day 14 on the test date)."""
    resp = api_client.post(
        f"{V1}/garden/setup",
        json={"last_period_start": "2026-02-10", "cycle_length_days": 28},
    )
    assert resp.status_code == 201
    return api_client


# ---------------------------------------------------------------------------
# Garden
# ---------------------------------------------------------------------------


class TestGardenRoutes:
    def test_snapshot_before_setup(self, api_client: TestClient) -> None:
        resp = api_client.get(f"{V1}/garden")
        assert resp.status_code == 200
        body = resp.json()
        assert body["setup_required"] is True
        assert body["cycle_day"] == 1
        assert body["growth_level"] == pytest.approx(1.0)
        assert body["notice"] is None

    def test_setup_returns_welcome(self, api_client: TestClient) -> None:
        resp = api_client.post(
            f"{V1}/garden/setup",
            json={"last_period_start": "2026-02-10", "cycle_length_days": 28},
        )
        assert resp.status_code == 201
        assert resp.json()["message"] == WELCOME_MESSAGE

    @pytest.mark.parametrize(
        "payload",
        [
            {"last_period_start": "2026-02-10", "cycle_length_days": 0},
            {"last_period_start": "2026-02-10"},
            {"last_period_start": "not-a-date", "cycle_length_days": 28},
        ],
    )
    def test_setup_rejects_bad_input(self, api_client: TestClient, payload: dict) -> None:
        resp = api_client.post(f"{V1}/garden/setup", json=payload)
        assert resp.status_code == 422
        assert api_client.get(f"{V1}/garden").json()["setup_required"] is True

    def test_snapshot_after_setup(self, ready_client: TestClient) -> None:
        body = ready_client.get(f"{V1}/garden").json()
        assert body["setup_required"] is False
        assert body["cycle_day"] == 14
        assert body["phase"] == "follicular"
        assert body["plant_name"] == "Growing Sprout"
        assert body["days_until_next"] == 15
        assert body["progress"] == pytest.approx(0.5)

    def test_care_before_setup_conflicts(self, api_client: TestClient) -> None:
        resp = api_client.post(f"{V1}/garden/care", json={"action": "hydration"})
        assert resp.status_code == 409

    def test_mood_before_setup_conflicts(self, api_client: TestClient) -> None:
        resp = api_client.post(f"{V1}/garden/mood", json={"mood": "great"})
        assert resp.status_code == 409

    def test_care_once_per_day(self, ready_client: TestClient) -> None:
        first = ready_client.post(f"{V1}/garden/care", json={"action": "hydration"})
        assert first.status_code == 200
        assert first.json()["accepted"] is True
        assert first.json()["care_streak"] == 1
        assert first.json()["growth_level"] == pytest.approx(1.1)

        second = ready_client.post(f"{V1}/garden/care", json={"action": "rest"})
        assert second.status_code == 200
        assert second.json()["accepted"] is False
        assert second.json()["message"] == ALREADY_CARED_MESSAGE
        assert second.json()["growth_level"] == pytest.approx(1.1)

    def test_unknown_care_action_rejected(self, ready_client: TestClient) -> None:
        resp = ready_client.post(f"{V1}/garden/care", json={"action": "sunbathing"})
        assert resp.status_code == 422

    def test_mood_mirrors_into_calendar(self, ready_client: TestClient) -> None:
        resp = ready_client.post(f"{V1}/garden/mood", json={"mood": "great"})
        assert resp.status_code == 200
        assert resp.json()["phase"] == "follicular"
        assert resp.json()["date"] == "2026-02-23"

        entry = ready_client.get(f"{V1}/calendar/entries/2026-02-23").json()
        assert entry["notes"] == "Mood: Great 😊"

        history = ready_client.get(f"{V1}/garden").json()["mood_history"]
        assert history == [{"date": "2026-02-23", "mood": "great", "phase": "follicular"}]

    def test_tick_seeds_growth_clock(self, ready_client: TestClient) -> None:
        resp = ready_client.post(f"{V1}/garden/tick")
        assert resp.status_code == 200
        assert resp.json() == {"growth_added": 0.0, "growth_level": 1.0}


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


class TestCalendarRoutes:
    def test_put_entries_then_month_view(self, ready_client: TestClient) -> None:
        ready_client.put(
            f"{V1}/calendar/entries/2026-02-01",
            json={"flow_level": "heavy", "period_type": "start", "symptoms": ["cramps"]},
        )
        resp = ready_client.put(
            f"{V1}/calendar/entries/2026-02-04",
            json={"flow_level": "light", "period_type": "end"},
        )
        assert resp.status_code == 200
        assert resp.json()["period_type"] == "end"

        month = ready_client.get(f"{V1}/calendar/2026/2").json()
        assert month["year"] == 2026
        assert month["month"] == 2
        assert [e["date"] for e in month["entries"]] == [
            "2026-02-01",
            "2026-02-02",
            "2026-02-03",
            "2026-02-04",
        ]
        assert month["entries"][1]["notes"] == "auto-filled"
        assert month["entries"][0]["symptoms"] == ["cramps"]

    def test_other_month_is_empty(self, ready_client: TestClient) -> None:
        ready_client.put(
            f"{V1}/calendar/entries/2026-02-01",
            json={"flow_level": "heavy", "period_type": "start"},
        )
        assert ready_client.get(f"{V1}/calendar/2026/3").json()["entries"] == []

    def test_invalid_month_rejected(self, api_client: TestClient) -> None:
        assert api_client.get(f"{V1}/calendar/2026/13").status_code == 422

    def test_invalid_flow_rejected(self, ready_client: TestClient) -> None:
        resp = ready_client.put(
            f"{V1}/calendar/entries/2026-02-01",
            json={"flow_level": "torrential", "period_type": "start"},
        )
        assert resp.status_code == 422
        assert ready_client.get(f"{V1}/calendar/entries/2026-02-01").status_code == 404

    def test_missing_entry_is_404(self, api_client: TestClient) -> None:
        assert api_client.get(f"{V1}/calendar/entries/2026-02-01").status_code == 404

    def test_delete_is_idempotent(self, ready_client: TestClient) -> None:
        ready_client.put(
            f"{V1}/calendar/entries/2026-02-01",
            json={"flow_level": "heavy", "period_type": "start"},
        )
        assert ready_client.delete(f"{V1}/calendar/entries/2026-02-01").status_code == 204
        assert ready_client.delete(f"{V1}/calendar/entries/2026-02-01").status_code == 204
        assert ready_client.get(f"{V1}/calendar/entries/2026-02-01").status_code == 404

    def test_quick_period_start_defaults_to_today(self, ready_client: TestClient) -> None:
        resp = ready_client.post(f"{V1}/calendar/period-start")
        assert resp.status_code == 200
        body = resp.json()
        assert body["date"] == "2026-02-23"
        assert body["period_type"] == "start"
        assert body["flow_level"] == "medium"

        garden = ready_client.get(f"{V1}/garden").json()
        assert garden["cycle_day"] == 1
        assert garden["phase"] == "menstrual"
        assert garden["has_active_period"] is True

    def test_quick_period_end_fills_gap(self, ready_client: TestClient) -> None:
        ready_client.post(f"{V1}/calendar/period-start", json={"date": "2026-02-18"})
        resp = ready_client.post(f"{V1}/calendar/period-end", json={"date": "2026-02-22"})
        assert resp.json()["period_type"] == "end"
        assert resp.json()["flow_level"] == "light"

        entries = ready_client.get(f"{V1}/calendar/2026/2").json()["entries"]
        assert [e["date"] for e in entries] == [f"2026-02-{d}" for d in range(18, 23)]
        assert ready_client.get(f"{V1}/garden").json()["has_active_period"] is False


# ---------------------------------------------------------------------------
# Chat / health
# ---------------------------------------------------------------------------


class TestChatRoute:
    def test_offline_chat_uses_phase_fallback(self, ready_client: TestClient) -> None:
        resp = ready_client.post(f"{V1}/chat", json={"message": "Any tips for today?"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["fallback"] is True
        assert body["phase"] == "follicular"
        assert body["cycle_day"] == 14
        assert body["reply"] == FALLBACK_REPLIES[Phase.follicular]

    def test_empty_message_rejected(self, ready_client: TestClient) -> None:
        resp = ready_client.post(f"{V1}/chat", json={"message": "   "})
        assert resp.status_code == 422


class TestHealth:
    def test_health_reports_writable_storage(
        self, api_client: TestClient, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DATA_DIR", str(tmp_path / "health"))
        get_settings.cache_clear()
        try:
            resp = api_client.get("/health")
        finally:
            get_settings.cache_clear()

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["storage"] == "writable"
        assert not any((tmp_path / "health").iterdir())


class TestAppFactory:
    def test_title_and_debug_follow_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "Balcony Garden")
        monkeypatch.setenv("DEBUG", "true")
        get_settings.cache_clear()
        try:
            app = create_app()
        finally:
            get_settings.cache_clear()

        assert app.title == "Balcony Garden API"
        assert app.debug is True

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("APP_NAME", raising=False)
        monkeypatch.delenv("DEBUG", raising=False)
        get_settings.cache_clear()
        try:
            app = create_app()
        finally:
            get_settings.cache_clear()

        assert app.title == "Cycle Garden API"
        assert app.debug is False
