"""Dialogue enums, conversation state and result structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union

from gazapay.core.errors import InvalidStateError
from gazapay.dialogue.slots import is_valid_amount, is_valid_phone


class Intent(str, Enum):
    """Banking actions the assistant understands."""

    TRANSFER = "transfer"
    WITHDRAW = "withdraw"
    RECHARGE = "recharge"
    BALANCE = "balance"
    UNKNOWN = "unknown"


class SlotKey(str, Enum):
    """Parameters an intent may require before it can be confirmed."""

    AMOUNT = "amount"
    PHONE = "phone"


# Request order matters: amount is always asked for before phone.
REQUIRED_SLOTS: dict[Intent, tuple[SlotKey, ...]] = {
    Intent.TRANSFER: (SlotKey.AMOUNT, SlotKey.PHONE),
    Intent.WITHDRAW: (SlotKey.AMOUNT,),
    Intent.RECHARGE: (SlotKey.AMOUNT,),
    Intent.BALANCE: (),
    Intent.UNKNOWN: (),
}


def required_slots(intent: Intent | None) -> tuple[SlotKey, ...]:
    """Return the slots ``intent`` needs, in the order they are requested."""

    if intent is None:
        return ()
    return REQUIRED_SLOTS[intent]


@dataclass(frozen=True, slots=True)
class Idle:
    """No action in progress."""

    @property
    def waiting_for(self) -> str | None:
        return None


@dataclass(frozen=True, slots=True)
class AwaitingSlot:
    """The next utterance should supply ``slot``."""

    slot: SlotKey

    @property
    def waiting_for(self) -> str | None:
        return self.slot.value


@dataclass(frozen=True, slots=True)
class AwaitingConfirmation:
    """All slots are filled; the next utterance should be yes or no."""

    @property
    def waiting_for(self) -> str | None:
        return "confirmation"


Stage = Union[Idle, AwaitingSlot, AwaitingConfirmation]

CONFIRMATION = "confirmation"


def _slot_is_valid(slot: SlotKey, value: Any) -> bool:
    if slot is SlotKey.AMOUNT:
        return is_valid_amount(value)
    return is_valid_phone(value)


@dataclass(frozen=True, slots=True)
class ConversationState:
    """Immutable snapshot of an in-progress conversation.

    ``slots`` is exposed as a read-only mapping; every transition builds a new
    state instead of editing the previous one.
    """

    intent: Intent | None = None
    stage: Stage = field(default_factory=Idle)
    slots: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "slots", MappingProxyType(dict(self.slots)))

        if self.intent is not None and not isinstance(self.intent, Intent):
            try:
                object.__setattr__(self, "intent", Intent(self.intent))
            except (TypeError, ValueError) as exc:
                raise InvalidStateError(f"unknown intent {self.intent!r}") from exc

        if self.intent is None and not isinstance(self.stage, Idle):
            raise InvalidStateError("a waiting stage requires an intent")

        allowed = {slot.value for slot in required_slots(self.intent)}
        if isinstance(self.stage, Idle):
            allowed = set()
        unexpected = set(self.slots) - allowed
        if unexpected:
            raise InvalidStateError(f"unexpected slots for {self.intent}: {sorted(unexpected)}")

        if isinstance(self.stage, AwaitingSlot) and self.stage.slot.value not in {
            slot.value for slot in required_slots(self.intent)
        }:
            raise InvalidStateError(f"{self.intent} never waits for {self.stage.slot.value}")

        for key, value in self.slots.items():
            if not _slot_is_valid(SlotKey(key), value):
                raise InvalidStateError(f"invalid {key} value {value!r}")

        if isinstance(self.stage, AwaitingConfirmation):
            if self.intent is Intent.BALANCE or self.intent is Intent.UNKNOWN:
                raise InvalidStateError(f"{self.intent.value} is never confirmed")
            missing = self.missing_slots()
            if missing:
                raise InvalidStateError(f"confirmation requires {missing[0].value}")

    @classmethod
    def idle(cls) -> "ConversationState":
        return cls()

    @property
    def is_idle(self) -> bool:
        return isinstance(self.stage, Idle)

    @property
    def waiting_for(self) -> str | None:
        return self.stage.waiting_for

    def missing_slots(self) -> list[SlotKey]:
        return [slot for slot in required_slots(self.intent) if slot.value not in self.slots]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form used by the HTTP layer and session stores."""

        return {
            "intent": self.intent.value if self.intent else None,
            "waitingFor": self.waiting_for,
            "extractedData": dict(self.slots),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "ConversationState":
        """Rebuild a state from its wire form; ``None`` yields the idle state."""

        if payload is None:
            return cls.idle()
        if not isinstance(payload, Mapping):
            raise InvalidStateError("state payload must be a mapping")

        raw_intent = payload.get("intent")
        try:
            intent = Intent(raw_intent) if raw_intent is not None else None
        except ValueError as exc:
            raise InvalidStateError(f"unknown intent {raw_intent!r}") from exc

        waiting_for = payload.get("waitingFor")
        stage: Stage
        if waiting_for is None:
            stage = Idle()
        elif waiting_for == CONFIRMATION:
            stage = AwaitingConfirmation()
        else:
            try:
                stage = AwaitingSlot(SlotKey(waiting_for))
            except ValueError as exc:
                raise InvalidStateError(f"unknown waitingFor {waiting_for!r}") from exc

        data = payload.get("extractedData") or {}
        if not isinstance(data, Mapping):
            raise InvalidStateError("extractedData must be a mapping")
        # Older clients stored explicit nulls for slots they had not filled yet.
        slots = {key: value for key, value in data.items() if value is not None}

        return cls(intent=intent, stage=stage, slots=slots)


@dataclass(frozen=True, slots=True)
class DialogueResult:
    """Outcome of processing one transcript."""

    response: str
    new_state: ConversationState
    intent: Intent
