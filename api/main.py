"""
LifeSim FastAPI backend.

Dev:        uvicorn api.main:app --host 127.0.0.1 --port 8000 --reload
"""

from __future__ import annotations

import asyncio
import json
import logging
import queue
import random
import sys
import threading
import uuid
from pathlib import Path
from typing import AsyncGenerator

import uvicorn
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

# ---------------------------------------------------------------------------
#  Path setup: project root must be importable in dev and when frozen
# ---------------------------------------------------------------------------

if getattr(sys, "frozen", False):
    _project_root = Path(sys._MEIPASS)  # type: ignore[attr-defined]
else:
    _project_root = Path(__file__).parent.parent

if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from main import run_main  # noqa: E402
from api.models import (  # noqa: E402
    AssignmentRequest,
    ChoiceRequest,
    CreateLifeRequest,
    LifeState,
    SaveRequest,
    TurnOutcome,
)
from lifesim.aging import life_stage  # noqa: E402
from lifesim.catalog import Catalog  # noqa: E402
from lifesim.config_loader import ConfigLoader  # noqa: E402
from lifesim.eligibility import available_education, available_professions, profession_income  # noqa: E402
from lifesim.models import CharacterSeed  # noqa: E402
from lifesim.persistence import SaveStore  # noqa: E402
from lifesim.rules import Rules  # noqa: E402
from lifesim.simulation import LifeSession  # noqa: E402
from lifesim.telemetry import LoggingTelemetry, Telemetry  # noqa: E402

router = APIRouter()


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
#  Session registry helpers
# ---------------------------------------------------------------------------


def _sessions(request: Request) -> dict[str, LifeSession]:
    return request.app.state.sessions


def _get_session(request: Request, session_id: str) -> LifeSession:
    session = _sessions(request).get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return session


def _require_alive(session: LifeSession) -> None:
    if not session.is_alive:
        raise HTTPException(status_code=409, detail="Character is dead")


def _register(request: Request, session: LifeSession) -> str:
    session_id = uuid.uuid4().hex
    _sessions(request)[session_id] = session
    return session_id


def _difficulty_id(session: LifeSession) -> str:
    return session.difficulty.id if session.difficulty else "medium"


def _state(session_id: str, session: LifeSession) -> LifeState:
    return LifeState(
        sessionId=session_id,
        character=_dump(session.character),
        decision=_dump(session.decision) if session.decision else None,
        lifeStage=life_stage(session.character.age),
        difficulty=_difficulty_id(session),
    )


# ---------------------------------------------------------------------------
#  Catalog endpoints
# ---------------------------------------------------------------------------


@router.get("/catalog/{table}")
def get_catalog_table(table: str, request: Request) -> list[dict]:
    catalog: Catalog = request.app.state.catalog
    tables = {
        "professions": catalog.professions,
        "education": catalog.education_levels,
        "diseases": catalog.diseases,
        "achievements": catalog.achievements,
        "milestones": catalog.milestones,
        "difficulty": catalog.difficulty_levels,
        "patterns": catalog.event_patterns,
    }
    if table not in tables:
        raise HTTPException(status_code=404, detail=f"Unknown catalog table: {table}")
    return [_dump(entry) for entry in tables[table]]


# ---------------------------------------------------------------------------
#  Life endpoints
# ---------------------------------------------------------------------------


@router.post("/lives", status_code=201)
def create_life(body: CreateLifeRequest, request: Request) -> LifeState:
    state = request.app.state
    session = LifeSession.start(
        CharacterSeed(name=body.name, country=body.country, birth_year=body.birthYear),
        state.catalog,
        body.difficulty,
        rules=state.rules,
        rng=random.Random(state.rng.getrandbits(64)),
        telemetry=state.telemetry,
    )
    if session is None:
        raise HTTPException(status_code=422, detail="Invalid character seed")
    return _state(_register(request, session), session)


@router.get("/lives/{session_id}")
def get_life(session_id: str, request: Request) -> LifeState:
    return _state(session_id, _get_session(request, session_id))


@router.delete("/lives/{session_id}")
def end_life(session_id: str, request: Request) -> dict[str, str]:
    _get_session(request, session_id)
    del _sessions(request)[session_id]
    return {"status": "ended"}


@router.post("/lives/{session_id}/decision")
def next_decision(session_id: str, request: Request) -> dict:
    session = _get_session(request, session_id)
    _require_alive(session)
    decision = session.next_decision()
    if decision is None:
        raise HTTPException(status_code=409, detail="No decision point available")
    return _dump(decision)


@router.post("/lives/{session_id}/choice")
def choose(session_id: str, body: ChoiceRequest, request: Request) -> TurnOutcome:
    session = _get_session(request, session_id)
    _require_alive(session)
    result = session.choose(body.choice)
    if result is None:
        raise HTTPException(status_code=409, detail="No active decision point")
    return TurnOutcome(
        sessionId=session_id,
        character=_dump(result.character),
        record=_dump(result.record),
        aged=result.aged,
        died=result.died,
        rewards=[_dump(r) for r in result.rewards],
    )


# ---------------------------------------------------------------------------
#  Career and education endpoints
# ---------------------------------------------------------------------------


@router.get("/lives/{session_id}/professions")
def list_professions(session_id: str, request: Request) -> list[dict]:
    session = _get_session(request, session_id)
    return [_dump(p) for p in available_professions(session.catalog, session.character.skills)]


@router.get("/lives/{session_id}/education")
def list_education(session_id: str, request: Request) -> list[dict]:
    session = _get_session(request, session_id)
    character = session.character
    return [_dump(e) for e in available_education(session.catalog, character.skills, character.age)]


@router.get("/lives/{session_id}/income")
def get_income(session_id: str, request: Request) -> dict[str, int]:
    session = _get_session(request, session_id)
    character = session.character
    return {"income": profession_income(session.catalog, character.profession, character.skills)}


@router.post("/lives/{session_id}/profession")
def assign_profession(session_id: str, body: AssignmentRequest, request: Request) -> LifeState:
    session = _get_session(request, session_id)
    _require_alive(session)
    if not session.assign_profession(body.id):
        raise HTTPException(status_code=422, detail=f"Not eligible for profession: {body.id}")
    return _state(session_id, session)


@router.post("/lives/{session_id}/education")
def enroll(session_id: str, body: AssignmentRequest, request: Request) -> LifeState:
    session = _get_session(request, session_id)
    _require_alive(session)
    if not session.enroll(body.id):
        raise HTTPException(status_code=422, detail=f"Cannot enroll in education: {body.id}")
    return _state(session_id, session)


@router.post("/lives/{session_id}/work")
def work(session_id: str, request: Request) -> LifeState:
    session = _get_session(request, session_id)
    _require_alive(session)
    if session.work() is None:
        raise HTTPException(status_code=409, detail="Character has no profession")
    return _state(session_id, session)


@router.post("/lives/{session_id}/treatment")
def treat_disease(session_id: str, request: Request) -> LifeState:
    session = _get_session(request, session_id)
    _require_alive(session)
    if not session.treat_disease():
        raise HTTPException(status_code=409, detail="No affordable treatment available")
    return _state(session_id, session)


# ---------------------------------------------------------------------------
#  Save slot endpoints
# ---------------------------------------------------------------------------


@router.get("/saves")
def list_saves(request: Request) -> list[str]:
    return request.app.state.save_store.list_slots()


@router.post("/lives/{session_id}/save")
def save_life(session_id: str, body: SaveRequest, request: Request) -> dict[str, str]:
    session = _get_session(request, session_id)
    if not request.app.state.save_store.save(body.slot, session.character, _difficulty_id(session)):
        raise HTTPException(status_code=422, detail=f"Could not save to slot: {body.slot}")
    return {"status": "saved", "slot": body.slot}


@router.post("/saves/{slot}/load", status_code=201)
def load_life(slot: str, request: Request) -> LifeState:
    state = request.app.state
    saved = state.save_store.load(slot)
    if saved is None:
        raise HTTPException(status_code=404, detail=f"Save slot not found: {slot}")
    session = LifeSession(
        saved.character,
        state.catalog,
        state.catalog.get_difficulty(saved.difficulty_id),
        rules=state.rules,
        rng=random.Random(state.rng.getrandbits(64)),
        telemetry=state.telemetry,
    )
    return _state(_register(request, session), session)


# ---------------------------------------------------------------------------
#  Batch simulation: SSE log streaming
# ---------------------------------------------------------------------------


class _QueueHandler(logging.Handler):
    """Forwards log records into a thread-safe queue for SSE streaming."""

    def __init__(self, log_queue: queue.Queue[str | None]) -> None:
        super().__init__()
        self._queue = log_queue

    def emit(self, record: logging.LogRecord) -> None:
        self._queue.put(self.format(record))


async def _stream_simulation(lives: int, seed: int | None) -> AsyncGenerator[str, None]:
    """Run a batch of auto-played lives in a background thread, yield SSE-formatted log lines."""
    log_queue: queue.Queue[str | None] = queue.Queue()
    handler = _QueueHandler(log_queue)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)

    exception_holder: list[Exception] = []

    def _run() -> None:
        try:
            run_main(lives, seed=seed)
        except Exception as exc:  # noqa: BLE001
            exception_holder.append(exc)
        finally:
            log_queue.put(None)  # sentinel: end of stream

    thread = threading.Thread(target=_run, daemon=True)
    thread.start()

    try:
        while True:
            try:
                message = log_queue.get(timeout=0.05)
            except queue.Empty:
                await asyncio.sleep(0)
                continue

            if message is None:
                break

            yield f"data: {json.dumps({'log': message})}\n\n"
            await asyncio.sleep(0)
    finally:
        root_logger.removeHandler(handler)

    thread.join(timeout=5)

    if exception_holder:
        yield f"data: {json.dumps({'error': str(exception_holder[0])})}\n\n"
    else:
        yield f"data: {json.dumps({'status': 'complete'})}\n\n"


@router.post("/simulation/run")
def run_simulation(lives: int = 20, seed: int | None = None) -> StreamingResponse:
    if not 1 <= lives <= 10_000:
        raise HTTPException(status_code=422, detail="lives must be between 1 and 10000")
    return StreamingResponse(
        _stream_simulation(lives, seed),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )


# ---------------------------------------------------------------------------
#  App setup
# ---------------------------------------------------------------------------


def create_app(
    catalog: Catalog | None = None,
    rules: Rules | None = None,
    save_store: SaveStore | None = None,
    telemetry: Telemetry | None = None,
    seed: int | None = None,
) -> FastAPI:
    """Build an app with its own session registry. Content tables load from disk unless given."""
    if catalog is None or rules is None:
        config_loader = ConfigLoader()
        catalog = catalog or config_loader.build_catalog()
        rules = rules or config_loader.get_rules()

    app = FastAPI(title="LifeSim API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.catalog = catalog
    app.state.rules = rules
    app.state.save_store = save_store or SaveStore()
    app.state.telemetry = telemetry or LoggingTelemetry()
    app.state.rng = random.Random(seed)
    app.state.sessions = {}
    app.include_router(router)
    return app


app = create_app()


# ---------------------------------------------------------------------------
#  Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
