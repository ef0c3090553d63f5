"""Keyword-based intent and confirmation classification."""

from __future__ import annotations

from typing import Iterable

from gazapay.dialogue.types import Intent

# Ordered by priority: when keywords of two intents both appear, the earlier
# intent wins.
INTENT_KEYWORDS: tuple[tuple[Intent, tuple[str, ...]], ...] = (
    (Intent.TRANSFER, ("حول", "ارسل", "رسل", "احول")),
    (Intent.WITHDRAW, ("سحب", "نسحب", "اسحب", "ابغ نسحب", "نبغ نسحب")),
    (Intent.RECHARGE, ("زيني", "الإنترنت", "نت", "عبّي", "عبي")),
    (Intent.BALANCE, ("رصيدي", "الرصيد", "شنه رصيدي", "كم عندي", "رصيد")),
)

CONFIRMATION_YES: tuple[str, ...] = ("نعم", "ايه", "تمام", "أكيد", "موافق", "صح", "yes", "ok")
CONFIRMATION_NO: tuple[str, ...] = ("لا", "لأ", "إلغاء", "الغي", "no", "cancel")


def normalize(transcript: str | None) -> str:
    return (transcript or "").casefold()


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def classify(transcript: str | None) -> Intent | None:
    """Return the first intent whose keywords appear in ``transcript``."""

    text = normalize(transcript)
    for intent, keywords in INTENT_KEYWORDS:
        if _contains_any(text, keywords):
            return intent
    return None


def match_confirmation(transcript: str | None) -> bool | None:
    """Classify a reply to a confirmation prompt.

    Returns ``False`` for a refusal, ``True`` for an acceptance and ``None``
    when neither was recognised. Refusal keywords are checked first, so a
    reply containing both counts as a refusal.
    """

    text = normalize(transcript)
    if _contains_any(text, CONFIRMATION_NO):
        return False
    if _contains_any(text, CONFIRMATION_YES):
        return True
    return None
