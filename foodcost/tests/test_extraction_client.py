"""Tests for the ingredient extraction client."""

from __future__ import annotations

import json
from decimal import Decimal
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from google.genai import errors

from foodcost.runtime import extraction_client
from foodcost.runtime.extraction_client import (
    ExtractionServiceUnavailable,
    build_config,
    extract_ingredients,
    parse_extraction_payload,
)
from foodcost.runtime.settings import ExtractionSettings

_SETTINGS = ExtractionSettings(model="test-model", api_key_env="TEST_EXTRACT_KEY", timeout=5)


class _FakeModels:
    def __init__(self, reply: Any) -> None:
        self.reply = reply
        self.calls: list[dict[str, Any]] = []

    def generate_content(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if isinstance(self.reply, Exception):
            raise self.reply
        return SimpleNamespace(text=self.reply)


class _FakeClient:
    def __init__(self, reply: Any) -> None:
        self.models = _FakeModels(reply)


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("TEST_EXTRACT_KEY", "k-123")
    return "k-123"


def test_extract_ingredients_parses_triples() -> None:
    client = _FakeClient(
        json.dumps(
            [
                {"name": "flour", "quantity": 2.5, "unit": "cups"},
                {"name": "eggs", "quantity": 2, "unit": "pc"},
            ]
        )
    )

    parsed = extract_ingredients("2.5 cups flour, 2 eggs", _SETTINGS, client=client)  # type: ignore[arg-type]

    assert [p.name for p in parsed] == ["flour", "eggs"]
    assert parsed[0].quantity == Decimal("2.5")
    assert parsed[1].unit == "pc"

    [call] = client.models.calls
    assert call["model"] == "test-model"
    assert call["contents"].endswith("2.5 cups flour, 2 eggs")
    assert call["config"].response_mime_type == "application/json"


def test_default_client_is_built_from_settings(api_key: str, monkeypatch: pytest.MonkeyPatch) -> None:
    built: list[dict[str, Any]] = []
    fake = _FakeClient('[{"name": "milk", "quantity": 1, "unit": "cup"}]')

    def _client_factory(**kwargs: Any) -> _FakeClient:
        built.append(kwargs)
        return fake

    monkeypatch.setattr(extraction_client.genai, "Client", _client_factory)
    settings = ExtractionSettings(api_key_env="TEST_EXTRACT_KEY", timeout=5, base_url="http://localhost:9000")

    parsed = extract_ingredients("1 cup milk", settings)

    assert [p.name for p in parsed] == ["milk"]
    [kwargs] = built
    assert kwargs["api_key"] == api_key
    assert kwargs["http_options"].timeout == 5000
    assert kwargs["http_options"].base_url == "http://localhost:9000"


def test_missing_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TEST_EXTRACT_KEY", raising=False)
    with pytest.raises(ExtractionServiceUnavailable, match="TEST_EXTRACT_KEY"):
        extract_ingredients("1 egg", _SETTINGS)


def test_blank_text_is_rejected(api_key: str) -> None:
    with pytest.raises(ValueError):
        extract_ingredients("   ", _SETTINGS)


def test_transport_error() -> None:
    client = _FakeClient(httpx.ConnectError("connection refused"))
    with pytest.raises(ExtractionServiceUnavailable, match="connect"):
        extract_ingredients("1 egg", _SETTINGS, client=client)  # type: ignore[arg-type]


def test_api_error_status() -> None:
    error = errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})
    client = _FakeClient(error)
    with pytest.raises(ExtractionServiceUnavailable, match="503"):
        extract_ingredients("1 egg", _SETTINGS, client=client)  # type: ignore[arg-type]


@pytest.mark.parametrize("reply", [None, "", "not json", '{"name": "x"}', '["flour"]'])
def test_malformed_replies(reply: str | None) -> None:
    with pytest.raises(ExtractionServiceUnavailable):
        extract_ingredients("1 egg", _SETTINGS, client=_FakeClient(reply))  # type: ignore[arg-type]


def test_parse_extraction_payload_keeps_missing_fields_empty() -> None:
    parsed = parse_extraction_payload('[{"name": "salt"}, {"quantity": "3"}]')
    assert parsed[0].quantity is None
    assert parsed[0].unit is None
    assert parsed[1].name is None
    assert parsed[1].quantity == Decimal("3")


def test_parse_extraction_payload_rejects_non_objects() -> None:
    with pytest.raises(ExtractionServiceUnavailable):
        parse_extraction_payload('["flour"]')


def test_config_requests_json_list() -> None:
    config = build_config()
    assert config.response_mime_type == "application/json"
    assert config.response_schema is not None
