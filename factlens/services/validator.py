from __future__ import annotations

import logging
from typing import Any, Dict, Union

from ..errors import SchemaError
from ..schemas import RATINGS, FactCheckRequest, FactCheckResult
from .extractor import fallback_result


logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("rating", "explanation", "analyzedText")
_RATINGS_BY_LOWER = {rating.lower(): rating for rating in RATINGS}


def _normalize_rating(value: Any) -> str:
    if not isinstance(value, str):
        raise SchemaError("invalid response structure: rating must be a string")
    rating = _RATINGS_BY_LOWER.get(value.strip().lower())
    if rating is None:
        raise SchemaError(f"invalid response structure: unknown rating {value!r}")
    return rating


def _normalize_sources(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [source for source in value if isinstance(source, str) and source.strip()]


def check_shape(data: Any) -> Dict[str, Any]:
    """
    Проверяет обязательные поля и приводит verificationSources к списку.
    Бросает SchemaError, если объект нельзя считать ответом.
    """
    if not isinstance(data, dict):
        raise SchemaError("invalid response structure: expected a JSON object")

    missing = [field for field in REQUIRED_FIELDS if field not in data]
    if missing:
        raise SchemaError(f"invalid response structure: missing {', '.join(missing)}")

    for field in ("explanation", "analyzedText"):
        value = data[field]
        if not isinstance(value, str) or not value.strip():
            raise SchemaError(f"invalid response structure: {field} must be a non-empty string")

    return {
        "rating": _normalize_rating(data["rating"]),
        "explanation": data["explanation"],
        "analyzedText": data["analyzedText"],
        "verificationSources": _normalize_sources(data.get("verificationSources")),
    }


def validate_result(
    data: Union[Dict[str, Any], FactCheckResult],
    request: FactCheckRequest,
) -> FactCheckResult:
    """Невалидная структура не пробрасывается, а превращается в Unverifiable-fallback."""
    if isinstance(data, FactCheckResult):
        return data

    try:
        normalized = check_shape(data)
    except SchemaError as e:
        logger.warning(f"   ⚠️ {e.message}, используем fallback")
        return fallback_result(request)

    return FactCheckResult(**normalized)
