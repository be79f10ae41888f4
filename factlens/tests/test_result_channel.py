from urllib.parse import parse_qs, quote, urlsplit

import pytest

from factlens.config import Settings
from factlens.db import create_db_engine, create_session_factory
from factlens.errors import ConfigurationError
from factlens.schemas import FactCheckResult
from factlens.services.result_channel import (
    RESULT_PARAM,
    DatabaseResultStore,
    MemoryResultStore,
    build_results_url,
    decode_result_param,
    encode_result_param,
    get_result_store,
)


RESULT = FactCheckResult(
    rating="Misleading",
    explanation="Partly true: the figure is from 2019, not 2024 & later.",
    analyzedText="Unemployment **fell to 3%** last year?",
    verificationSources=["https://stats.example.org/q?a=1&b=2", "https://news.example.com/ü"],
)
OTHER = FactCheckResult(rating="True", explanation="ok", analyzedText="x")


@pytest.fixture
def memory_store():
    return MemoryResultStore()


@pytest.fixture
def database_store(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'results.db'}")
    try:
        yield DatabaseResultStore(create_session_factory(engine))
    finally:
        engine.dispose()


@pytest.fixture(params=["memory_store", "database_store"])
def store(request):
    return request.getfixturevalue(request.param)


def test_empty_store(store):
    assert store.get_result() is None
    assert store.consume_result() is None


def test_last_write_wins(store):
    store.set_result(RESULT)
    store.set_result(OTHER)
    assert store.get_result() == OTHER


def test_get_does_not_clear(store):
    store.set_result(RESULT)
    assert store.get_result() == RESULT
    assert store.get_result() == RESULT


def test_consume_returns_once(store):
    store.set_result(RESULT)
    assert store.consume_result() == RESULT
    assert store.get_result() is None


def test_clear(store):
    store.set_result(RESULT)
    store.clear_result()
    assert store.get_result() is None


def test_database_slot_is_shared_between_store_instances(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'shared.db'}")
    writer = DatabaseResultStore(create_session_factory(engine))
    reader = DatabaseResultStore(create_session_factory(engine))

    writer.set_result(RESULT)
    assert reader.consume_result() == RESULT
    assert writer.get_result() is None
    engine.dispose()


def test_get_result_store_backends(tmp_path):
    memory = get_result_store(Settings(RESULT_STORE="memory", _env_file=None))
    assert isinstance(memory, MemoryResultStore)
    assert get_result_store(Settings(RESULT_STORE="memory", _env_file=None)) is memory

    database = get_result_store(
        Settings(RESULT_STORE="database", DATABASE_URL=f"sqlite:///{tmp_path / 'f.db'}", _env_file=None)
    )
    assert isinstance(database, DatabaseResultStore)

    with pytest.raises(ConfigurationError):
        get_result_store(Settings(RESULT_STORE="redis", _env_file=None))


def test_url_round_trip():
    url = build_results_url(RESULT, "http://localhost:8000/")
    parts = urlsplit(url)
    assert parts.path == "/results"

    # parse_qs раскодирует значение так же, как это делает фреймворк
    value = parse_qs(parts.query)[RESULT_PARAM][0]
    assert decode_result_param(value) == RESULT


def test_decode_accepts_raw_percent_encoded_value():
    assert decode_result_param(encode_result_param(RESULT)) == RESULT


def test_encoded_param_has_no_reserved_characters():
    encoded = encode_result_param(RESULT)
    for char in "&?#= {}\"":
        assert char not in encoded


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "not json at all",
        quote("{broken"),
        quote('{"rating": "True"}'),
        quote('{"rating": "Maybe", "explanation": "e", "analyzedText": "t"}'),
        quote("[1, 2, 3]"),
        '{"a": ' + "[" * 5000 + "]" * 5000 + "}",
        quote('{"a": ' + "[" * 5000 + "]" * 5000 + "}"),
    ],
)
def test_bad_param_means_no_result(value):
    assert decode_result_param(value) is None


def test_results_url_defaults_to_public_url(monkeypatch):
    monkeypatch.setattr(
        "factlens.services.result_channel.get_settings",
        lambda: Settings(PUBLIC_URL="https://factlens.example/", _env_file=None),
    )
    url = build_results_url(RESULT)
    assert url.startswith(f"https://factlens.example/results?{RESULT_PARAM}=")
    assert decode_result_param(parse_qs(urlsplit(url).query)[RESULT_PARAM][0]) == RESULT
