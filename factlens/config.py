from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Gemini / LLM
    GEMINI_API_KEY: str = ""
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    LLM_TIMEOUT: float = 60.0

    # Канал результата: "memory" (один процесс) или "database" (общий слот в БД)
    RESULT_STORE: str = "memory"
    DATABASE_URL: str = "sqlite:///./factlens.db"

    # Базовый адрес страницы результатов (для ссылок ?extensionData=...)
    PUBLIC_URL: str = "http://localhost:8000"

    app_name: str = "FactLens"
    debug: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()

    # Вывод диагностики при загрузке
    if settings.debug:
        print("\n📋 Configuration loaded:")
        print(f"   app_name: {settings.app_name}")
        print(f"   GEMINI_API_KEY: {'✅ Set' if settings.GEMINI_API_KEY else '❌ Missing'}")
        print(f"   GEMINI_MODEL: {settings.GEMINI_MODEL}")
        print(f"   RESULT_STORE: {settings.RESULT_STORE}")
        print(f"   DATABASE_URL: {settings.DATABASE_URL}")
        print(f"   LLM_TIMEOUT: {settings.LLM_TIMEOUT}s")
        print()
    return settings
