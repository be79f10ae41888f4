from __future__ import annotations

import logging

from ..errors import ValidationError
from ..schemas import FactCheckRequest


logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = "Either text, URL, or images must be provided for fact-checking"


def has_content(request: FactCheckRequest) -> bool:
    if request.text and request.text.strip():
        return True
    if request.url:
        return True
    return bool(request.images)


def ensure_content(request: FactCheckRequest) -> FactCheckRequest:
    """Пропускает запрос дальше без изменений либо бросает ValidationError."""
    if not has_content(request):
        logger.warning("❌ Запрос без текста, URL и изображений")
        raise ValidationError(NO_CONTENT_MESSAGE)
    return request
