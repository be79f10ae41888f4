from __future__ import annotations


class FactLensError(Exception):
    """Базовая ошибка сервиса; status_code уходит в HTTP-ответ как есть."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FactLensError):
    """Во входящем запросе нет ни текста, ни URL, ни изображений."""

    status_code = 400


class ConfigurationError(FactLensError):
    """Не задан ключ или другая обязательная настройка upstream."""


class UpstreamError(FactLensError):
    """Вызов модели упал, вернул ноль кандидатов или пустой текст."""


class SchemaError(FactLensError):
    """Ответ модели разобран, но не содержит обязательных полей."""
