"""
Канал передачи результата от того, кто его получил (API / расширение), к тому, кто показывает.

Слот один на процесс (или на БД для DatabaseResultStore), последняя запись побеждает.
Владелец слота - страница результатов: она читает результат через consume_result(),
и после этого слот пуст.

Для контекстов без общей памяти результат дополнительно кладётся в адрес страницы:
/results?extensionData=<percent-encoded JSON>.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional
from urllib.parse import quote, unquote

from sqlalchemy.orm import sessionmaker

from ..config import Settings, get_settings
from ..db import create_db_engine, create_session_factory
from ..errors import ConfigurationError, SchemaError
from ..models import SLOT_ID, StoredResult
from ..schemas import FactCheckResult
from .validator import check_shape


logger = logging.getLogger(__name__)

RESULT_PARAM = "extensionData"
RESULTS_PATH = "/results"


class ResultStore(ABC):
    @abstractmethod
    def set_result(self, result: FactCheckResult) -> None:
        ...

    @abstractmethod
    def get_result(self) -> Optional[FactCheckResult]:
        ...

    @abstractmethod
    def clear_result(self) -> None:
        ...

    def consume_result(self) -> Optional[FactCheckResult]:
        result = self.get_result()
        if result is not None:
            self.clear_result()
        return result


class MemoryResultStore(ResultStore):
    def __init__(self):
        self._result: Optional[FactCheckResult] = None

    def set_result(self, result: FactCheckResult) -> None:
        self._result = result

    def get_result(self) -> Optional[FactCheckResult]:
        return self._result

    def clear_result(self) -> None:
        self._result = None


class DatabaseResultStore(ResultStore):
    """Слот в таблице stored_results: одна строка с фиксированным id."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def set_result(self, result: FactCheckResult) -> None:
        with self._session_factory() as db:
            db.merge(StoredResult(id=SLOT_ID, result_json=result.model_dump_json()))
            db.commit()

    def get_result(self) -> Optional[FactCheckResult]:
        with self._session_factory() as db:
            row = db.get(StoredResult, SLOT_ID)
            if row is None:
                return None
            return FactCheckResult.model_validate_json(row.result_json)

    def clear_result(self) -> None:
        with self._session_factory() as db:
            db.query(StoredResult).filter_by(id=SLOT_ID).delete()
            db.commit()


@lru_cache()
def _build_store(backend: str, database_url: str) -> ResultStore:
    if backend == "memory":
        return MemoryResultStore()
    if backend == "database":
        return DatabaseResultStore(create_session_factory(create_db_engine(database_url)))
    raise ConfigurationError(f"Unsupported result store: {backend}")


def get_result_store(settings: Optional[Settings] = None) -> ResultStore:
    settings = settings or get_settings()
    return _build_store(settings.RESULT_STORE, settings.DATABASE_URL)


def encode_result_param(result: FactCheckResult) -> str:
    return quote(result.model_dump_json(), safe="")


def build_results_url(result: FactCheckResult, base_url: Optional[str] = None) -> str:
    base_url = base_url or get_settings().PUBLIC_URL
    return f"{base_url.rstrip('/')}{RESULTS_PATH}?{RESULT_PARAM}={encode_result_param(result)}"


def decode_result_param(value: Optional[str]) -> Optional[FactCheckResult]:
    """
    Обратное к encode_result_param. Битый параметр означает "результата нет", а не ошибку.
    Принимает как сырое значение из адреса, так и уже раскодированное фреймворком.
    """
    if not value:
        return None

    text = value.strip()
    if not text.startswith("{"):
        text = unquote(text)

    try:
        return FactCheckResult(**check_shape(json.loads(text)))
    except (ValueError, RecursionError, SchemaError) as e:
        logger.warning(f"⚠️ Не удалось разобрать {RESULT_PARAM}: {e}")
        return None
