from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from .config import Settings, get_settings
from .errors import FactLensError
from .schemas import ErrorResponse, FactCheckRequest, FactCheckResult
from .services.fact_checker import fact_check
from .services.gemini_client import GeminiClient
from .services.result_channel import (
    RESULT_PARAM,
    RESULTS_PATH,
    ResultStore,
    build_results_url,
    decode_result_param,
    get_result_store,
)

# Настройка логирования
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

RESULTS_URL_HEADER = "X-Results-URL"

# CORS для расширения браузера
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Expose-Headers": RESULTS_URL_HEADER,
}
FAILURE_DETAILS = "Failed to process fact-check request"


def get_store(settings: Settings = Depends(get_settings)) -> ResultStore:
    return get_result_store(settings)


def get_gemini_client(settings: Settings = Depends(get_settings)) -> GeminiClient:
    return GeminiClient(settings)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(FactLensError)
    async def factlens_error_handler(request: Request, exc: FactLensError):
        body = ErrorResponse(error=exc.message)
        if exc.status_code >= 500:
            logger.error(f"❌ Fact-check API error: {exc.message}")
            body = ErrorResponse(error=exc.message, details=FAILURE_DETAILS)
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(exclude_none=True),
            headers=CORS_HEADERS,
        )

    @app.get("/health")
    async def health():
        return {"status": "ok", "app": settings.app_name}

    @app.options("/api/fact-check")
    async def fact_check_preflight():
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)

    # Основной эндпоинт проверки
    @app.post("/api/fact-check", response_model=FactCheckResult)
    async def check_content(
        payload: FactCheckRequest,
        response: Response,
        store: ResultStore = Depends(get_store),
        gemini_client: GeminiClient = Depends(get_gemini_client),
        settings: Settings = Depends(get_settings),
    ):
        logger.info("=" * 80)
        logger.info("🎯 НОВЫЙ ЗАПРОС НА /api/fact-check")

        result = await fact_check(payload, gemini_client=gemini_client)
        store.set_result(result)
        response.headers.update(CORS_HEADERS)
        # Ссылка на страницу результатов для расширения (другой контекст, без общего слота)
        response.headers[RESULTS_URL_HEADER] = build_results_url(result, settings.PUBLIC_URL)

        logger.info("✅ ОТВЕТ СФОРМИРОВАН:")
        logger.info(f"   - Рейтинг: {result.rating}")
        logger.info(f"   - Источников: {len(result.verificationSources)}")
        logger.info("=" * 80)
        return result

    # Страница результатов: параметр из адреса важнее сохранённого значения
    @app.get(RESULTS_PATH, response_model=FactCheckResult)
    async def read_result(
        request: Request,
        store: ResultStore = Depends(get_store),
    ):
        encoded: Optional[str] = request.query_params.get(RESULT_PARAM)
        if encoded is not None:
            embedded = decode_result_param(encoded)
            if embedded is not None:
                store.set_result(embedded)
            # Убираем параметр из видимого адреса
            return RedirectResponse(RESULTS_PATH, status_code=status.HTTP_303_SEE_OTHER)

        result = store.consume_result()
        if result is None:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content=ErrorResponse(error="No fact-check result available").model_dump(exclude_none=True),
            )
        return result

    @app.delete(RESULTS_PATH, status_code=status.HTTP_204_NO_CONTENT)
    async def clear_result(store: ResultStore = Depends(get_store)):
        store.clear_result()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


app = create_app()


# Возможность запуска напрямую (но лучше через uvicorn)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("factlens.main:app", host="127.0.0.1", port=8000, reload=True)
