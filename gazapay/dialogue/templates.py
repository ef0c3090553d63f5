"""Response templates and placeholder rendering."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from gazapay.core.errors import TemplateError

logger = logging.getLogger("gazapay.templates")

DEFAULT_RESPONSES: dict[str, str] = {
    "transfer_confirm": "هل تؤكد تحويل {amount} أوقية إلى الرقم {phone}؟",
    "transfer_done": "تم تحويل المبلغ بنجاح ✅",
    "transfer_need_phone": "من فضلك، أدخل رقم الهاتف الذي تريد التحويل إليه.",
    "transfer_need_amount": "من فضلك، حدد المبلغ الذي تريد تحويله.",
    "withdraw_confirm": "هل تؤكد سحب {amount} أوقية من حسابك؟",
    "withdraw_done": "تم السحب بنجاح ✅",
    "withdraw_need_amount": "من فضلك، حدد المبلغ الذي تريد سحبه.",
    "balance_show": "رصيدك الحالي هو {balance} أوقية 💰",
    "recharge_confirm": "هل تريد تعبئة الإنترنت بمبلغ {amount} أوقية؟",
    "recharge_done": "تمت تعبئة الإنترنت بنجاح ✅",
    "recharge_need_amount": "من فضلك، حدد مبلغ التعبئة.",
    "unknown": "عذراً، لم أفهم طلبك. يمكنني مساعدتك في: تحويل الأموال، السحب، تعبئة الإنترنت، أو معرفة الرصيد.",
    "confirm_cancelled": "تم إلغاء العملية.",
    "confirm_retry": "من فضلك قل نعم أو لا.",
    "invalid_amount": "المبلغ غير صحيح. من فضلك أدخل رقماً صحيحاً.",
    "invalid_phone": "رقم الهاتف غير صحيح. من فضلك أدخل رقماً صحيحاً (8 أرقام).",
}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def render(template: str, values: Mapping[str, Any]) -> str:
    """Substitute ``{name}`` placeholders found in ``values``.

    Placeholders without a value are left untouched.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return str(values[name])

    return _PLACEHOLDER.sub(_replace, template)


def placeholders(template: str) -> set[str]:
    return set(_PLACEHOLDER.findall(template))


class ResponseCatalog:
    """Lookup table of response templates keyed by symbolic name."""

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        # Keys missing from ``templates`` keep their default text.
        self._templates = MappingProxyType({**DEFAULT_RESPONSES, **(templates or {})})

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __getitem__(self, key: str) -> str:
        return self._templates[key]

    def keys(self) -> list[str]:
        return list(self._templates)

    def render(self, key: str, **values: Any) -> str:
        template = self._templates.get(key)
        if template is None:
            logger.warning("Unknown response template %s; using fallback", key)
            template = self._templates["unknown"]

        text = render(template, values)
        unresolved = placeholders(text) & placeholders(template)
        if unresolved:
            logger.debug("Template %s rendered with unresolved placeholders: %s", key, sorted(unresolved))
        return text

    def with_overrides(self, overrides: Mapping[str, str]) -> "ResponseCatalog":
        """Return a copy where known keys are replaced by ``overrides``."""

        merged = dict(self._templates)
        for key, text in overrides.items():
            if key not in merged:
                logger.warning("Ignoring override for unknown response template %s", key)
                continue
            if not isinstance(text, str):
                raise TemplateError(f"template {key!r} must be a string")
            merged[key] = text
        return ResponseCatalog(merged)


def load_catalog(path: Path | None = None) -> ResponseCatalog:
    """Build the default catalog, applying YAML overrides from ``path`` if given."""

    catalog = ResponseCatalog()
    if path is None:
        return catalog

    try:
        with Path(path).open("r", encoding="utf-8") as handle:
            overrides = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise TemplateError(f"could not read response templates from {path}: {exc}") from exc

    if not isinstance(overrides, dict):
        raise TemplateError("response template file must contain a top-level mapping")

    logger.info("Loaded %d response template overrides from %s", len(overrides), path)
    return catalog.with_overrides(overrides)
