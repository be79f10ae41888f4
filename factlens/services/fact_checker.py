from __future__ import annotations

import logging

from ..schemas import FactCheckRequest, FactCheckResult
from .extractor import extract_result
from .gate import ensure_content
from .gemini_client import GeminiClient
from .validator import validate_result


logger = logging.getLogger(__name__)


def _preview(value: str | None, limit: int = 100) -> str:
    if not value:
        return "-"
    return f"{value[:limit]}{'...' if len(value) > limit else ''}"


async def fact_check(
    payload: FactCheckRequest,
    gemini_client: GeminiClient | None = None,
) -> FactCheckResult:
    """
    Полный цикл проверки: gate -> Gemini -> извлечение JSON -> валидация.

    ValidationError, ConfigurationError и UpstreamError пробрасываются вызывающему.
    Кривой ответ модели сюда не доходит: он уже превращён в Unverifiable.
    """
    logger.info("🔍 НАЧАЛО ПРОВЕРКИ")
    logger.info(f"   📝 Текст: {_preview(payload.text)}")
    logger.info(f"   🔗 URL: {_preview(payload.url)}")
    logger.info(f"   🖼️ Изображений: {len(payload.images or [])}")

    ensure_content(payload)

    gemini_client = gemini_client or GeminiClient()
    raw = await gemini_client.generate(payload)

    result = validate_result(extract_result(raw, payload), payload)

    logger.info(f"   📊 ИТОГОВЫЙ РЕЙТИНГ: {result.rating}")
    logger.info(f"   📚 Источников: {len(result.verificationSources)}")
    logger.info("   ✅ ПРОВЕРКА ЗАВЕРШЕНА")
    return result
