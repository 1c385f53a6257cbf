import json

import requests

from slottracker.ai.commentary import (
    UNAVAILABLE_TEXT,
    CommentaryService,
    LuckForecast,
)
from slottracker.ai.state import build_snapshot
from slottracker.catalog.slots import SlotConfig
from slottracker.simulation.outcome import SpinResult
from slottracker.state.aggregator import apply_batch
from slottracker.state.slot_stats import SlotStats


class FakeResponse:
    def __init__(self, payload, status_ok=True):
        self._payload = payload
        self._status_ok = status_ok

    def raise_for_status(self):
        if not self._status_ok:
            raise requests.HTTPError("500 Server Error")

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


def gemini_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_config():
    return SlotConfig(id="test-slot", name="Test Slot", rtp=96.0, hit_freq=0.25, volatility=1.0)


def stats_with_rtp(config, multiplier):
    batch = [SpinResult.from_multiplier(1.0, multiplier)] * 10
    return apply_batch(SlotStats.initial(config), config, batch)


def test_snapshot_is_json_serializable():
    config = make_config()
    stats = stats_with_rtp(config, 1.2)
    snapshot = build_snapshot(config, stats)

    assert json.loads(json.dumps(snapshot)) == snapshot
    assert snapshot["total_spins"] == 10
    assert snapshot["trend"] == "up"
    assert len(snapshot["recent_multipliers"]) == 10


def test_mock_forecast_follows_deviation():
    config = make_config()
    service = CommentaryService(use_mock=True)

    assert service.get_insights(config, stats_with_rtp(config, 1.5)).luck_forecast == LuckForecast.HOT
    assert service.get_insights(config, stats_with_rtp(config, 0.5)).luck_forecast == LuckForecast.COLD
    assert service.get_insights(config, stats_with_rtp(config, 0.96)).luck_forecast == LuckForecast.NEUTRAL
    assert service.get_insights(config, SlotStats.initial(config)).luck_forecast == LuckForecast.NEUTRAL


def test_mock_commentary_mentions_slot():
    config = make_config()
    insight = CommentaryService(use_mock=True).get_insights(config, stats_with_rtp(config, 1.0))
    assert "Test Slot" in insight.commentary
    assert insight.to_dict()["luck_forecast"] in {"Hot", "Cold", "Neutral"}


def test_real_mode_parses_model_reply():
    reply = json.dumps({"luckForecast": "hot", "commentary": "Sharks are biting."})
    session = FakeSession(response=FakeResponse(gemini_payload(reply)))
    service = CommentaryService(api_key="k", model="m", api_url="http://ai.test/", use_mock=False, session=session)

    config = make_config()
    insight = service.get_insights(config, stats_with_rtp(config, 1.0))

    assert insight.luck_forecast == LuckForecast.HOT
    assert insight.commentary == "Sharks are biting."
    url, kwargs = session.calls[0]
    assert url == "http://ai.test/m:generateContent"
    assert kwargs["params"] == {"key": "k"}
    assert "Test Slot" in kwargs["json"]["contents"][0]["parts"][0]["text"]


def test_real_mode_network_failure_returns_unavailable():
    session = FakeSession(exc=requests.ConnectionError("down"))
    service = CommentaryService(api_key="k", use_mock=False, session=session)

    config = make_config()
    insight = service.get_insights(config, stats_with_rtp(config, 1.0))

    assert insight.luck_forecast == LuckForecast.NEUTRAL
    assert insight.commentary == UNAVAILABLE_TEXT


def test_real_mode_http_error_returns_unavailable():
    session = FakeSession(response=FakeResponse({}, status_ok=False))
    service = CommentaryService(api_key="k", use_mock=False, session=session)

    config = make_config()
    assert service.get_insights(config, SlotStats.initial(config)).commentary == UNAVAILABLE_TEXT


def test_real_mode_garbage_reply_returns_unavailable():
    session = FakeSession(response=FakeResponse(gemini_payload("not json")))
    service = CommentaryService(api_key="k", use_mock=False, session=session)

    config = make_config()
    assert service.get_insights(config, SlotStats.initial(config)).commentary == UNAVAILABLE_TEXT
