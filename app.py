"""FastAPI bootstrap wiring the in-memory slot simulator."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from slottracker.ai.commentary import CommentaryService
from slottracker.catalog.slots import load_catalog
from slottracker.config import SIM_SEED
from slottracker.simulation.outcome import make_rng
from slottracker.state import stats_api
from slottracker.state.aggregator import BatchAggregator
from slottracker.state.scheduler import SimulationScheduler


def create_app(active_slots=None, start_scheduler: bool = True, commentary=None) -> FastAPI:
    aggregator = BatchAggregator(load_catalog(), rng=make_rng(SIM_SEED))
    aggregator.seed()
    scheduler = SimulationScheduler(aggregator, active_slots=active_slots)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_scheduler:
            scheduler.start()
        yield
        scheduler.stop()

    app = FastAPI(title="SlotTracker API", version="0.1.0", lifespan=lifespan)
    app.state.aggregator = aggregator
    app.state.scheduler = scheduler

    stats_api.attach_to_app(app, aggregator, scheduler, commentary or CommentaryService())

    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
