"""Read-only slot statistics APIs (pure Python and FastAPI adapters)."""
from typing import Dict, List, Optional
import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from slottracker.ai.commentary import CommentaryService, SlotInsights
from slottracker.analysis.window import summarize_slot
from slottracker.errors import InvalidConfiguration, UnknownAsset
from .aggregator import BatchAggregator
from .scheduler import SimulationScheduler

logger = logging.getLogger(__name__)


# -------------------------
# Pure Python snapshot API
# -------------------------
def get_slot_snapshot(aggregator: BatchAggregator, slot_id: str) -> Dict:
    """Serializable stats for one slot; raises UnknownAsset."""
    return aggregator.snapshot(slot_id).to_dict()


def get_spin_history(aggregator: BatchAggregator, slot_id: str, n: int = 100) -> List[Dict]:
    """Return up to the last n spins (oldest -> newest)."""
    if n <= 0:
        return []
    history = aggregator.snapshot(slot_id).history
    return [r.to_dict() for r in history[-n:]]


def get_network_summary(aggregator: BatchAggregator, scheduler: SimulationScheduler) -> Dict:
    return {
        "total_wagered": aggregator.total_wagered(),
        "stake": scheduler.stake,
        "active_slots": scheduler.active_slots(),
        "running": scheduler.running,
    }


# -------------------------
# FastAPI adapter
# -------------------------
class StakeUpdate(BaseModel):
    stake: float


def create_router(
    aggregator: BatchAggregator,
    scheduler: SimulationScheduler,
    commentary: Optional[CommentaryService] = None,
) -> APIRouter:
    """Build routes bound to one aggregator/scheduler pair."""
    router = APIRouter()
    commentary = commentary or CommentaryService()
    insights: Dict[str, SlotInsights] = {}

    def _config(slot_id: str):
        try:
            return aggregator.catalog.get(slot_id)
        except UnknownAsset:
            raise HTTPException(status_code=404, detail=f"Unknown slot: {slot_id}")

    @router.get("/slots")
    def list_slots():
        return [
            {**config.to_dict(), "active": scheduler.is_active(config.id)}
            for config in aggregator.catalog
        ]

    @router.get("/slots/{slot_id}/stats")
    def get_stats(slot_id: str):
        _config(slot_id)
        return get_slot_snapshot(aggregator, slot_id)

    @router.get("/slots/{slot_id}/history")
    def get_history(slot_id: str, limit: int = Query(100, ge=1, le=1000)):
        _config(slot_id)
        return get_spin_history(aggregator, slot_id, limit)

    @router.get("/slots/{slot_id}/summary")
    def get_summary(slot_id: str):
        config = _config(slot_id)
        return summarize_slot(aggregator.snapshot(slot_id), config)

    @router.post("/slots/{slot_id}/toggle")
    def toggle_slot(slot_id: str):
        _config(slot_id)
        active = scheduler.toggle(slot_id)
        logger.info("Slot %s tracking %s", slot_id, "enabled" if active else "disabled")
        return {"slot_id": slot_id, "active": active}

    @router.get("/network")
    def get_network():
        return get_network_summary(aggregator, scheduler)

    @router.post("/stake")
    def set_stake(update: StakeUpdate):
        try:
            scheduler.set_stake(update.stake)
        except InvalidConfiguration as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        return {"stake": scheduler.stake}

    @router.get("/slots/{slot_id}/insights")
    def get_insights(slot_id: str):
        _config(slot_id)
        cached = insights.get(slot_id)
        if cached is None:
            raise HTTPException(status_code=404, detail="No analysis yet")
        return cached.to_dict()

    @router.post("/slots/{slot_id}/insights")
    def refresh_insights(slot_id: str):
        config = _config(slot_id)
        insight = commentary.get_insights(config, aggregator.snapshot(slot_id))
        insights[slot_id] = insight
        return insight.to_dict()

    return router


def attach_to_app(
    app,
    aggregator: BatchAggregator,
    scheduler: SimulationScheduler,
    commentary: Optional[CommentaryService] = None,
) -> None:
    """Include slot routes on an existing FastAPI app."""
    app.include_router(create_router(aggregator, scheduler, commentary))
