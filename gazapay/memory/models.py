"""Dataclasses describing stored dialogue sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from gazapay.dialogue.types import ConversationState


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class SessionRecord:
    """A conversation state as held by a session store."""

    session_id: str
    state: ConversationState
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
