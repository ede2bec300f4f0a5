"""FastAPI entrypoint receiving build lifecycle events."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.models import EventPayload
from app.profiler import TimingCollector
from app.reporting import build_report, log_report

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Build Profiler API", version="0.1.0")

collector = TimingCollector()


@app.post("/events", status_code=202)
def record_event(payload: EventPayload) -> Dict[str, str]:
    """Feed one lifecycle event to the timing collector.

    Runs in FastAPI's worker threadpool, so events for different projects
    are recorded concurrently.
    """

    if not collector.enabled:
        return {"status": "disabled"}

    event = payload.to_event()
    if event is None:
        LOGGER.debug("Ignoring unknown event type %s", payload.type)
        return {"status": "ignored"}

    collector.on_event(event)
    return {"status": "recorded"}


@app.get("/report")
def report(sort: Optional[str] = Query(default=None, pattern="^(time|execution)$")) -> JSONResponse:
    """Return every timer recorded so far."""

    result = build_report(collector, sort=sort)
    log_report(result)
    return JSONResponse(content=result.model_dump(by_alias=True, mode="json"))


@app.delete("/report")
def reset_report() -> Dict[str, str]:
    """Forget all timers before the next build session."""

    collector.reset()
    LOGGER.info("Timing stores cleared")
    return {"status": "cleared"}


@app.get("/health")
async def healthcheck() -> Dict[str, Any]:
    """Simple health endpoint useful during development."""

    return {"status": "ok", "profiling": collector.enabled}
