from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Tuple, Union

from ..schemas import FactCheckRequest, FactCheckResult
from .prompts import FALLBACK_ANALYZED_TEXT, FALLBACK_EXPLANATION


logger = logging.getLogger(__name__)

MAX_LOG_LEN = 1000
_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)

# Каждый шаг либо возвращает значение, либо None ("не подошло") и никогда не бросает.


def strict_parse(text: str) -> Optional[Dict[str, Any]]:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def fenced_body(text: str) -> Optional[str]:
    match = _FENCED_JSON.search(text)
    return match.group(1) if match else None


def brace_span(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or start >= end:
        return None
    return text[start : end + 1]


def parse_object(text: str) -> Optional[Dict[str, Any]]:
    if not text.startswith("{"):
        return None
    return strict_parse(text)


def extract_json(raw: str) -> Tuple[Optional[Dict[str, Any]], str]:
    """
    Достаёт JSON-объект из болтливого ответа модели.
    Возвращает (объект или None, название сработавшего шага) для логов.
    """
    text = (raw or "").strip()

    parsed = strict_parse(text)
    if parsed is not None:
        return parsed, "strict"

    working, path = text, "brace span"
    body = fenced_body(text)
    if body is not None:
        working, path = body, "fenced"

    span = brace_span(working)
    if span is not None:
        working = span

    return parse_object(working), path


def fallback_result(request: FactCheckRequest) -> FactCheckResult:
    # Текст из одних пробелов считается отсутствующим, как и в gate
    text = request.text if request.text and request.text.strip() else None
    return FactCheckResult(
        rating="Unverifiable",
        explanation=FALLBACK_EXPLANATION,
        analyzedText=text or request.url or FALLBACK_ANALYZED_TEXT,
        verificationSources=[],
    )


def extract_result(raw: str, request: FactCheckRequest) -> Union[Dict[str, Any], FactCheckResult]:
    """Разобранный объект как есть либо fallback-результат. Ошибки разбора наружу не выходят."""
    parsed, path = extract_json(raw)
    if parsed is None:
        logger.warning(
            "   ⚠️ Не удалось разобрать JSON модели, отдаём Unverifiable. Сырой ответ: %s",
            (raw or "")[:MAX_LOG_LEN],
        )
        return fallback_result(request)

    logger.info("   🧩 JSON извлечён (шаг: %s)", path)
    return parsed
