import pytest

from gazapay.dialogue.manager import DialogueManager
from gazapay.dialogue.templates import DEFAULT_RESPONSES, ResponseCatalog
from gazapay.dialogue.types import (
    AwaitingConfirmation,
    AwaitingSlot,
    ConversationState,
    Intent,
    SlotKey,
)

IDLE = ConversationState.idle()


def confirming(intent, **slots):
    return ConversationState(intent=intent, stage=AwaitingConfirmation(), slots=slots)


def waiting(intent, slot, **slots):
    return ConversationState(intent=intent, stage=AwaitingSlot(slot), slots=slots)


@pytest.mark.parametrize("transcript", ["hello there", "", "   ", None])
def test_unrecognised_input_resets_to_idle(manager, transcript):
    result = manager.process(transcript, IDLE)

    assert result.intent is Intent.UNKNOWN
    assert result.response == DEFAULT_RESPONSES["unknown"]
    assert result.new_state == ConversationState.idle()


def test_missing_state_is_treated_as_idle(manager):
    result = manager.process("رصيدي")

    assert result.intent is Intent.BALANCE


def test_balance_is_single_turn(manager):
    result = manager.process("رصيدي من فضلك", IDLE)

    assert result.intent is Intent.BALANCE
    assert "5000" in result.response
    assert result.new_state.is_idle


def test_balance_uses_configured_mock_balance():
    manager = DialogueManager(mock_balance=1234)

    assert "1234" in manager.process("الرصيد", IDLE).response


def test_transfer_with_all_slots_goes_straight_to_confirmation(manager):
    result = manager.process("حول 500 الى 12345678", IDLE)

    assert result.intent is Intent.TRANSFER
    assert result.new_state.stage == AwaitingConfirmation()
    assert dict(result.new_state.slots) == {"amount": 500, "phone": "12345678"}
    assert result.response == DEFAULT_RESPONSES["transfer_confirm"].replace("{amount}", "500").replace(
        "{phone}", "12345678"
    )


def test_transfer_collects_phone_in_second_turn(manager):
    first = manager.process("حول 500", IDLE)

    assert first.new_state.waiting_for == "phone"
    assert dict(first.new_state.slots) == {"amount": 500}
    assert first.response == DEFAULT_RESPONSES["transfer_need_phone"]

    second = manager.process("12345678", first.new_state)

    assert second.intent is Intent.TRANSFER
    assert second.new_state.waiting_for == "confirmation"
    assert dict(second.new_state.slots) == {"amount": 500, "phone": "12345678"}


def test_transfer_asks_for_amount_first(manager):
    result = manager.process("حول", IDLE)

    assert result.new_state.stage == AwaitingSlot(SlotKey.AMOUNT)
    assert result.response == DEFAULT_RESPONSES["transfer_need_amount"]


def test_transfer_amount_then_phone_then_confirm(manager):
    state = manager.process("ارسل فلوس", IDLE).new_state
    state = manager.process("عشرين", state).new_state

    assert state.waiting_for == "phone"

    result = manager.process("الرقم 22334455", state)

    assert result.new_state.waiting_for == "confirmation"
    assert dict(result.new_state.slots) == {"amount": 20, "phone": "22334455"}


def test_amount_reply_completes_transfer_when_phone_known(manager):
    state = waiting(Intent.TRANSFER, SlotKey.AMOUNT, phone="12345678")

    result = manager.process("500", state)

    assert result.new_state.waiting_for == "confirmation"
    assert "500" in result.response and "12345678" in result.response


@pytest.mark.parametrize(
    ("transcript", "intent"),
    [("اسحب 200", Intent.WITHDRAW), ("عبي 100", Intent.RECHARGE)],
)
def test_single_slot_intents_confirm_immediately(manager, transcript, intent):
    result = manager.process(transcript, IDLE)

    assert result.intent is intent
    assert result.new_state.stage == AwaitingConfirmation()
    assert "phone" not in result.new_state.slots


def test_withdraw_without_amount_waits_for_it(manager):
    result = manager.process("اسحب", IDLE)

    assert result.new_state == waiting(Intent.WITHDRAW, SlotKey.AMOUNT)
    assert result.response == DEFAULT_RESPONSES["withdraw_need_amount"]


def test_invalid_amount_with_request_drops_the_request(manager):
    result = manager.process("اسحب صفر", IDLE)

    assert result.intent is Intent.WITHDRAW
    assert result.response == DEFAULT_RESPONSES["invalid_amount"]
    assert result.new_state.is_idle


@pytest.mark.parametrize("transcript", ["-5", "مرحبا"])
def test_invalid_amount_reply_keeps_waiting(manager, transcript):
    state = waiting(Intent.WITHDRAW, SlotKey.AMOUNT)

    result = manager.process(transcript, state)

    assert result.response == DEFAULT_RESPONSES["invalid_amount"]
    assert result.new_state is state
    assert result.intent is Intent.WITHDRAW


def test_invalid_phone_reply_keeps_waiting(manager):
    state = waiting(Intent.TRANSFER, SlotKey.PHONE, amount=500)

    result = manager.process("123456789", state)

    assert result.response == DEFAULT_RESPONSES["invalid_phone"]
    assert result.new_state is state


def test_confirmation_yes_executes_and_resets(manager):
    result = manager.process("نعم", confirming(Intent.WITHDRAW, amount=200))

    assert result.intent is Intent.WITHDRAW
    assert result.response == DEFAULT_RESPONSES["withdraw_done"]
    assert result.new_state == ConversationState.idle()


@pytest.mark.parametrize("intent", [Intent.TRANSFER, Intent.RECHARGE])
def test_confirmation_yes_selects_intent_done_template(manager, intent):
    slots = {"amount": 100, "phone": "12345678"} if intent is Intent.TRANSFER else {"amount": 100}

    result = manager.process("ok", confirming(intent, **slots))

    assert result.response == DEFAULT_RESPONSES[f"{intent.value}_done"]


def test_confirmation_no_cancels(manager):
    result = manager.process("لا", confirming(Intent.WITHDRAW, amount=200))

    assert result.intent is Intent.WITHDRAW
    assert result.response == DEFAULT_RESPONSES["confirm_cancelled"]
    assert result.new_state == ConversationState.idle()


def test_confirmation_ambiguous_reply_keeps_state(manager):
    state = confirming(Intent.WITHDRAW, amount=200)

    result = manager.process("ربما", state)

    assert result.response == DEFAULT_RESPONSES["confirm_retry"]
    assert result.new_state is state


def test_confirmation_ignores_new_intent_keywords(manager):
    state = confirming(Intent.WITHDRAW, amount=200)

    result = manager.process("رصيدي", state)

    assert result.new_state is state
    assert result.intent is Intent.WITHDRAW


def test_process_accepts_wire_state(manager):
    result = manager.process(
        "نعم",
        {"intent": "recharge", "waitingFor": "confirmation", "extractedData": {"amount": 100}},
    )

    assert result.response == DEFAULT_RESPONSES["recharge_done"]


def test_malformed_wire_state_resets_instead_of_raising(manager):
    result = manager.process("نعم", {"intent": "bogus", "waitingFor": "confirmation"})

    assert result.intent is Intent.UNKNOWN
    assert result.new_state.is_idle


def test_process_does_not_mutate_input_state(manager):
    state = waiting(Intent.TRANSFER, SlotKey.PHONE, amount=500)
    before = state.to_dict()

    manager.process("12345678", state)

    assert state.to_dict() == before


def test_process_is_deterministic(manager):
    state = waiting(Intent.TRANSFER, SlotKey.PHONE, amount=500)

    assert manager.process("12345678", state) == manager.process("12345678", state)


def test_overridden_templates_change_responses_only():
    catalog = ResponseCatalog().with_overrides({"balance_show": "Balance: {balance}"})
    manager = DialogueManager(catalog=catalog, mock_balance=10)

    result = manager.process("رصيدي", IDLE)

    assert result.response == "Balance: 10"
    assert result.new_state.is_idle


def test_describe(manager):
    assert "slot filling" in manager.describe()


def test_partial_template_table_does_not_break_processing():
    manager = DialogueManager(catalog=ResponseCatalog({"balance_show": "b {balance}"}))

    result = manager.process("hello", IDLE)

    assert result.intent is Intent.UNKNOWN
    assert result.response == DEFAULT_RESPONSES["unknown"]


def test_recharge_without_amount_waits_for_it(manager):
    result = manager.process("عبي", IDLE)

    assert result.intent is Intent.RECHARGE
    assert result.new_state == waiting(Intent.RECHARGE, SlotKey.AMOUNT)
    assert result.response == DEFAULT_RESPONSES["recharge_need_amount"]


def test_invalid_recharge_amount_with_request_drops_the_request(manager):
    result = manager.process("عبي صفر", IDLE)

    assert result.intent is Intent.RECHARGE
    assert result.response == DEFAULT_RESPONSES["invalid_amount"]
    assert result.new_state.is_idle


def test_number_word_inside_another_word_still_counts(manager):
    # "الفلوس" contains "الف", so it is read as 1000.
    result = manager.process("اسحب الفلوس", IDLE)

    assert result.new_state.stage == AwaitingConfirmation()
    assert dict(result.new_state.slots) == {"amount": 1000}
