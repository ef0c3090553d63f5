"""Dialogue engine abstract base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from .types import ConversationState, DialogueResult


class DialogueEngine(ABC):
    """Turns one transcript plus the prior state into a response and a new state."""

    @abstractmethod
    def process(
        self,
        transcript: str | None,
        state: ConversationState | Mapping[str, Any] | None = None,
    ) -> DialogueResult:
        """Return the outcome of a single conversational turn."""

    @abstractmethod
    def describe(self) -> str:
        """Human-readable summary of the engine strategy."""
