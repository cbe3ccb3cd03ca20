import asyncio
import runpy

import pytest
import uvicorn

from config.settings import settings
from services.llm_client import (
    LLMResponseError,
    close_async_client,
    get_async_client,
    parse_json_object,
)
from services.metadata_service import MetadataService
from services.narrative import NarrativeEnhancementService


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    asyncio.run(close_async_client())
    yield
    asyncio.run(close_async_client())


def test_one_client_per_process(api_key):
    client = get_async_client()

    assert client is not None
    assert get_async_client() is client
    assert NarrativeEnhancementService().client is client
    assert MetadataService().client is client
    assert client.max_retries == 0


def test_closing_drops_the_shared_client(api_key):
    first = get_async_client()

    asyncio.run(close_async_client())

    assert get_async_client() is not first


def test_no_key_means_no_client(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    assert get_async_client() is None


def test_parse_json_object():
    assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    for bad in (None, "  ", "not json", "[1, 2]"):
        with pytest.raises(LLMResponseError):
            parse_json_object(bad)


def test_main_serves_on_configured_host_and_port(monkeypatch):
    served = {}
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: served.update(kwargs))
    monkeypatch.setattr(settings, "HOST", "127.0.0.1")
    monkeypatch.setattr(settings, "PORT", 9123)

    runpy.run_module("main", run_name="__main__")

    assert served == {"host": "127.0.0.1", "port": 9123}
