"""API routes driving the dialogue manager over HTTP."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from gazapay.core.metrics import MetricsCollector
from gazapay.dialogue.base import DialogueEngine
from gazapay.memory.store import SessionStore

logger = logging.getLogger("gazapay.api")


def create_dialogue_router(
    engine: DialogueEngine,
    store: SessionStore,
    metrics: MetricsCollector,
) -> APIRouter:
    router = APIRouter(tags=["dialogue"])

    @router.post("/dialogue")
    async def dialogue_endpoint(payload: dict) -> dict:
        """Process one transcript for a session and return the assistant's reply."""

        transcript = payload.get("transcript")
        session_id = payload.get("sessionId")

        if not isinstance(transcript, str) or not transcript:
            raise HTTPException(status_code=400, detail="Transcript is required")
        if not isinstance(session_id, str) or not session_id:
            raise HTTPException(status_code=400, detail="Session ID is required")

        # Turns for one session are expected to arrive one at a time.
        result = engine.process(transcript, store.get(session_id))
        store.put(session_id, result.new_state)

        metrics.record_request(result.intent.value, result.new_state.waiting_for or "idle")
        logger.debug("Session %s now waiting for %s", session_id, result.new_state.waiting_for)

        return {
            "response": result.response,
            "intent": result.intent.value,
            "state": result.new_state.to_dict(),
        }

    @router.get("/dialogue")
    async def dialogue_admin(action: str | None = None, sessionId: str | None = None) -> dict:  # noqa: N803
        """Report active sessions, or clear one or all of them with ``action=clear``."""

        if action == "clear":
            if sessionId:
                store.delete(sessionId)
                return {"message": f"Session {sessionId} cleared"}
            store.clear()
            return {"message": "All sessions cleared"}

        return {"message": "Dialogue API", "activeSessions": len(store)}

    @router.get("/sessions", tags=["sessions"])
    async def list_sessions() -> list[dict]:
        """List stored sessions with their current state (development helper)."""

        return [
            {
                "session_id": record.session_id,
                "state": record.state.to_dict(),
                "created_at": record.created_at.isoformat(),
                "updated_at": record.updated_at.isoformat(),
            }
            for record in store.records()
        ]

    return router
