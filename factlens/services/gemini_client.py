from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import ConfigurationError, UpstreamError
from ..schemas import FactCheckRequest
from .prompts import PROMPT_VERSION, SYSTEM_PROMPT, USER_INSTRUCTION


logger = logging.getLogger(__name__)

MAX_LOG_LEN = 1000
IMAGE_MIME_TYPE = "image/jpeg"
_DATA_URI_PREFIX = re.compile(r"^data:[^;,]+;base64,")

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"
TEMPERATURE = 0.2


def strip_data_uri(image: str) -> str:
    """'data:image/png;base64,AAAA' -> 'AAAA'; голый base64 возвращается как есть."""
    return _DATA_URI_PREFIX.sub("", image.strip(), count=1)


def build_contents(request: FactCheckRequest) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = []
    if request.url:
        parts.append({"text": f"URL to analyze: {request.url}"})
    if request.text and request.text.strip():
        parts.append({"text": f"Text to analyze: {request.text}"})
    for image in request.images or []:
        parts.append({"inlineData": {"mimeType": IMAGE_MIME_TYPE, "data": strip_data_uri(image)}})
    parts.append({"text": USER_INSTRUCTION})
    return [{"role": "user", "parts": parts}]


def build_tools(request: FactCheckRequest) -> List[Dict[str, Any]]:
    tools: List[Dict[str, Any]] = [{"google_search": {}}]
    if request.url:
        tools.append({"url_context": {}})
    return tools


def build_payload(request: FactCheckRequest) -> Dict[str, Any]:
    return {
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
        "contents": build_contents(request),
        "tools": build_tools(request),
        "safetySettings": [
            {"category": category, "threshold": SAFETY_THRESHOLD} for category in SAFETY_CATEGORIES
        ],
        "generationConfig": {"temperature": TEMPERATURE},
    }


def first_candidate_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise UpstreamError(f"Gemini blocked the request: {block_reason}")
        raise UpstreamError("Gemini returned no candidates")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text.strip():
        finish_reason = candidates[0].get("finishReason", "unknown")
        raise UpstreamError(f"Gemini returned no text content (finishReason: {finish_reason})")
    return text


class GeminiClient:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or get_settings()
        self.api_key = settings.GEMINI_API_KEY
        self.api_base = settings.GEMINI_API_BASE.rstrip("/")
        self.model = settings.GEMINI_MODEL
        self.timeout = settings.LLM_TIMEOUT
        # Подменяется в тестах на httpx.MockTransport
        self._transport = transport

        logger.info("🤖 GeminiClient init:")
        logger.info(f"   API Base: {self.api_base}")
        logger.info(f"   Model: {self.model}")
        logger.info(f"   API Key present: {bool(self.api_key)}")

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    async def generate(self, request: FactCheckRequest) -> str:
        """
        Один вызов generateContent без ретраев.
        Возвращает склеенный текст первого кандидата или бросает UpstreamError.
        """
        if not self.api_key:
            logger.error("❌ GEMINI_API_KEY not set")
            raise ConfigurationError("GEMINI_API_KEY is not configured")

        payload = build_payload(request)

        logger.info("🤖 GEMINI API ЗАПРОС:")
        logger.info(f"   🔗 URL: {self.endpoint}")
        logger.info(f"   📋 Параметры:")
        logger.info(f"      - prompt version: {PROMPT_VERSION}")
        logger.info(f"      - tools: {[next(iter(tool)) for tool in payload['tools']]}")
        logger.info(f"      - text: {bool(request.text)}, url: {bool(request.url)}, images: {len(request.images or [])}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.endpoint,
                    headers={
                        "x-goog-api-key": self.api_key,
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"   ❌ Ошибка запроса к Gemini API: {e}")
            raise UpstreamError(f"Gemini request failed: {e}") from e

        logger.info(f"   📡 ОТВЕТ Gemini API:")
        logger.info(f"      - Статус: {resp.status_code}")
        logger.info(f"      - Время ответа: {resp.elapsed.total_seconds():.2f}s")

        if resp.status_code != 200:
            logger.error(f"      ❌ Ошибка: {resp.text[:300]}")
            raise UpstreamError(f"Gemini API returned status {resp.status_code}: {resp.text[:300]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(f"Gemini API returned a non-JSON body: {e}") from e

        # Логируем использование токенов
        usage = data.get("usageMetadata", {})
        if usage:
            logger.info(f"      📊 Использовано токенов:")
            logger.info(f"         - prompt: {usage.get('promptTokenCount', 0)}")
            logger.info(f"         - completion: {usage.get('candidatesTokenCount', 0)}")
            logger.info(f"         - total: {usage.get('totalTokenCount', 0)}")

        content = first_candidate_text(data)
        logger.info(f"      🧾 Ответ (до {MAX_LOG_LEN} символов): {content[:MAX_LOG_LEN]}")
        return content
