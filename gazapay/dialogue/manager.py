"""Rule-based slot-filling dialogue manager for banking requests."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from gazapay.core.errors import InvalidStateError
from gazapay.dialogue.base import DialogueEngine
from gazapay.dialogue.classifier import classify, match_confirmation
from gazapay.dialogue.slots import extract_amount, extract_phone, is_valid_amount, is_valid_phone
from gazapay.dialogue.templates import ResponseCatalog
from gazapay.dialogue.types import (
    AwaitingConfirmation,
    AwaitingSlot,
    ConversationState,
    DialogueResult,
    Intent,
    SlotKey,
    required_slots,
)

logger = logging.getLogger("gazapay.dialogue")

DEFAULT_MOCK_BALANCE = 5000

_EXTRACTORS = {
    SlotKey.AMOUNT: (extract_amount, is_valid_amount),
    SlotKey.PHONE: (extract_phone, is_valid_phone),
}


class DialogueManager(DialogueEngine):
    """Keyword classifier plus slot filling with an explicit confirmation turn.

    The manager holds configuration only. ``process`` never mutates the state it
    receives and never raises; every failure is reported through a response
    template and a state transition.
    """

    def __init__(
        self,
        catalog: ResponseCatalog | None = None,
        mock_balance: int = DEFAULT_MOCK_BALANCE,
    ) -> None:
        self.catalog = catalog if catalog is not None else ResponseCatalog()
        self.mock_balance = mock_balance

    def describe(self) -> str:
        return "Rule-based keyword dialogue manager with slot filling and confirmation"

    def process(
        self,
        transcript: str | None,
        state: ConversationState | Mapping[str, Any] | None = None,
    ) -> DialogueResult:
        text = transcript if isinstance(transcript, str) else ""
        current = self._coerce_state(state)

        stage = current.stage
        if isinstance(stage, AwaitingConfirmation):
            result = self._handle_confirmation(text, current)
        elif isinstance(stage, AwaitingSlot):
            result = self._handle_slot(text, current, stage.slot)
        else:
            result = self._handle_new_request(text)

        logger.debug(
            "Dialogue turn intent=%s waiting_for=%s -> %s",
            result.intent.value,
            current.waiting_for,
            result.new_state.waiting_for,
        )
        return result

    def _coerce_state(self, state: ConversationState | Mapping[str, Any] | None) -> ConversationState:
        if isinstance(state, ConversationState):
            return state
        try:
            return ConversationState.from_dict(state)
        except InvalidStateError as exc:
            logger.warning("Discarding malformed conversation state: %s", exc)
            return ConversationState.idle()

    # Awaiting confirmation

    def _handle_confirmation(self, text: str, state: ConversationState) -> DialogueResult:
        intent = state.intent or Intent.UNKNOWN
        answer = match_confirmation(text)

        if answer is False:
            return self._reset("confirm_cancelled", intent)
        if answer is True:
            return self._execute(intent)
        return DialogueResult(
            response=self.catalog.render("confirm_retry"),
            new_state=state,
            intent=intent,
        )

    def _execute(self, intent: Intent) -> DialogueResult:
        # No core-banking integration yet: confirming only reports success.
        logger.info("Executing %s request", intent.value)
        return self._reset(f"{intent.value}_done", intent)

    # Awaiting a slot value

    def _handle_slot(self, text: str, state: ConversationState, slot: SlotKey) -> DialogueResult:
        intent = state.intent or Intent.UNKNOWN
        extract, is_valid = _EXTRACTORS[slot]
        value = extract(text)

        if value is None or not is_valid(value):
            return DialogueResult(
                response=self.catalog.render(f"invalid_{slot.value}"),
                new_state=state,
                intent=intent,
            )

        slots = dict(state.slots)
        slots[slot.value] = value
        return self._advance(intent, slots)

    # Idle: a new request

    def _handle_new_request(self, text: str) -> DialogueResult:
        intent = classify(text)

        if intent is None:
            return self._reset("unknown", Intent.UNKNOWN)

        if intent is Intent.BALANCE:
            return self._reset("balance_show", intent, balance=self.mock_balance)

        slots: dict[str, Any] = {}
        for slot in required_slots(intent):
            extract, is_valid = _EXTRACTORS[slot]
            value = extract(text)
            if value is None:
                continue
            if not is_valid(value):
                # Unlike a reply to a slot prompt, a bad value given together with
                # the request drops the whole request.
                return self._reset(f"invalid_{slot.value}", intent)
            slots[slot.value] = value

        return self._advance(intent, slots)

    # Shared transitions

    def _advance(self, intent: Intent, slots: dict[str, Any]) -> DialogueResult:
        """Ask for the next missing slot, or for confirmation when none is missing."""

        for slot in required_slots(intent):
            if slot.value not in slots:
                return DialogueResult(
                    response=self.catalog.render(f"{intent.value}_need_{slot.value}"),
                    new_state=ConversationState(intent=intent, stage=AwaitingSlot(slot), slots=slots),
                    intent=intent,
                )

        return DialogueResult(
            response=self.catalog.render(f"{intent.value}_confirm", **slots),
            new_state=ConversationState(intent=intent, stage=AwaitingConfirmation(), slots=slots),
            intent=intent,
        )

    def _reset(self, template_key: str, intent: Intent, **values: Any) -> DialogueResult:
        return DialogueResult(
            response=self.catalog.render(template_key, **values),
            new_state=ConversationState.idle(),
            intent=intent,
        )
