"""AI luck-forecast commentary for a slot's live statistics."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional
import json
import logging
import random

import requests

from slottracker.catalog.slots import SlotConfig
from slottracker.config import (
    COMMENTARY_TIMEOUT,
    GEMINI_API_KEY,
    GEMINI_API_URL,
    GEMINI_MODEL,
    MOCK_COMMENTARY,
)
from slottracker.state.slot_stats import SlotStats
from .state import build_snapshot

logger = logging.getLogger(__name__)

# Deviation (percentage points) beyond which the mock forecaster calls a streak
MOCK_STREAK_THRESHOLD = 1.5

UNAVAILABLE_TEXT = "AI analysis unavailable. The forecaster could not be reached."


class LuckForecast(Enum):
    HOT = "Hot"
    COLD = "Cold"
    NEUTRAL = "Neutral"


@dataclass(frozen=True)
class SlotInsights:
    luck_forecast: LuckForecast
    commentary: str
    analysis_time: str

    def to_dict(self) -> Dict[str, str]:
        data = asdict(self)
        data["luck_forecast"] = self.luck_forecast.value
        return data


def unavailable_insights() -> SlotInsights:
    return SlotInsights(
        luck_forecast=LuckForecast.NEUTRAL,
        commentary=UNAVAILABLE_TEXT,
        analysis_time=_now(),
    )


def _now() -> str:
    return datetime.now().strftime("%H:%M:%S")


class CommentaryService:
    """
    Turns a slot snapshot into a short forecast label plus commentary.

    Real mode calls the Gemini generateContent REST endpoint. Mock mode
    derives the label from the live RTP deviation, for offline runs and
    tests.
    """

    def __init__(
        self,
        api_key: str = GEMINI_API_KEY,
        model: str = GEMINI_MODEL,
        api_url: str = GEMINI_API_URL,
        timeout: float = COMMENTARY_TIMEOUT,
        use_mock: bool = MOCK_COMMENTARY,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.use_mock = use_mock
        self.session = session or requests.Session()

        if self.use_mock:
            logger.info("CommentaryService initialized in MOCK_MODE")
        else:
            logger.info("CommentaryService initialized for model %s", self.model)

    def get_insights(self, config: SlotConfig, stats: SlotStats) -> SlotInsights:
        """Return commentary; never raises for service failures."""
        snapshot = build_snapshot(config, stats)

        if self.use_mock:
            return self._generate_mock_insights(snapshot)

        prompt = self._construct_prompt(snapshot)
        logger.debug("Commentary prompt:\n%s", prompt)

        try:
            text = self._query_model(prompt)
            return self._parse_response(text)
        except requests.RequestException as exc:
            logger.warning("Commentary request failed for %s: %s", config.id, exc)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning("Unparseable commentary response for %s: %s", config.id, exc)

        return unavailable_insights()

    def _query_model(self, prompt: str) -> str:
        resp = self.session.post(
            f"{self.api_url}/{self.model}:generateContent",
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"responseMimeType": "application/json"},
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        return data["candidates"][0]["content"]["parts"][0]["text"]

    @staticmethod
    def _parse_response(text: str) -> SlotInsights:
        payload = json.loads(text)
        forecast = LuckForecast(str(payload["luckForecast"]).capitalize())
        commentary = str(payload["commentary"]).strip()
        if not commentary:
            raise ValueError("empty commentary")
        return SlotInsights(
            luck_forecast=forecast,
            commentary=commentary,
            analysis_time=_now(),
        )

    def _generate_mock_insights(self, snapshot: Dict) -> SlotInsights:
        """Deterministic per slot and spin count, labelled by RTP deviation."""
        rng = random.Random(f"{snapshot['slot_id']}:{snapshot['total_spins']}")
        deviation = snapshot["rtp_deviation"]

        if snapshot["total_spins"] == 0:
            forecast = LuckForecast.NEUTRAL
        elif deviation > MOCK_STREAK_THRESHOLD:
            forecast = LuckForecast.HOT
        elif deviation < -MOCK_STREAK_THRESHOLD:
            forecast = LuckForecast.COLD
        else:
            forecast = LuckForecast.NEUTRAL

        mood = {
            LuckForecast.HOT: rng.choice(["running hot", "paying above the odds", "on a heater"]),
            LuckForecast.COLD: rng.choice(["running cold", "holding its payouts", "in a dry spell"]),
            LuckForecast.NEUTRAL: rng.choice(["tracking its math", "paying by the book", "close to theory"]),
        }[forecast]

        commentary = (
            f"{snapshot['name']} is {mood}: live RTP {snapshot['live_rtp']:.2f}% "
            f"vs {snapshot['theoretical_rtp']:.2f}% theoretical over "
            f"{snapshot['total_spins']:,} spins, best hit {snapshot['max_multiplier']:.0f}x."
        )
        return SlotInsights(luck_forecast=forecast, commentary=commentary, analysis_time=_now())

    @staticmethod
    def _construct_prompt(snapshot: Dict) -> str:
        return f"""You are a witty slot-machine analyst commenting on a live simulation.

Slot: {snapshot['name']} ({snapshot['provider']})
Theoretical RTP: {snapshot['theoretical_rtp']:.2f}%
Live RTP: {snapshot['live_rtp']:.2f}% (deviation {snapshot['rtp_deviation']:+.2f} pts)
Hit frequency: {snapshot['hit_freq'] * 100:.1f}%
Total spins: {snapshot['total_spins']}
Total wagered: {snapshot['total_stakes']:.2f}
Max multiplier: {snapshot['max_multiplier']:.1f}x
Trend: {snapshot['trend']}
Recent RTP snapshots: {snapshot['recent_rtp_history'][-10:]}

Give a short luck forecast for this slot. Respond as JSON:
{{
  "luckForecast": "Hot" | "Cold" | "Neutral",
  "commentary": "One or two sentences."
}}"""
