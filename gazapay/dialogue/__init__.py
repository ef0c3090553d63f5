"""Dialogue package exports."""

from .base import DialogueEngine
from .classifier import classify, match_confirmation
from .manager import DialogueManager
from .slots import extract_amount, extract_phone, is_valid_amount, is_valid_phone
from .templates import ResponseCatalog, load_catalog, render
from .types import (
    AwaitingConfirmation,
    AwaitingSlot,
    ConversationState,
    DialogueResult,
    Idle,
    Intent,
    SlotKey,
    required_slots,
)

__all__ = [
    "AwaitingConfirmation",
    "AwaitingSlot",
    "ConversationState",
    "DialogueEngine",
    "DialogueManager",
    "DialogueResult",
    "Idle",
    "Intent",
    "ResponseCatalog",
    "SlotKey",
    "classify",
    "extract_amount",
    "extract_phone",
    "is_valid_amount",
    "is_valid_phone",
    "load_catalog",
    "match_confirmation",
    "render",
    "required_slots",
]
