import asyncio
import json

import httpx
import pytest

from rucheng_dialect.app.data.loader import LoadLifecycle, ReadinessState, parse_payload
from rucheng_dialect.app.data.sources import (
    FileDictionarySource,
    HttpDictionarySource,
    build_dictionary_source,
)
from rucheng_dialect.core import DictionaryStore, MalformedDictionaryError, TransportError


def fetch_over_http(handler):
    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            source = HttpDictionarySource("https://dict.example.org/data/rucheng_data.json", client=client)
            return await source.fetch()

    return asyncio.run(scenario())


def test_http_source_returns_body_on_success():
    body = json.dumps({"汝": [{"phonetic": "ru35"}]}, ensure_ascii=False).encode("utf-8")

    assert fetch_over_http(lambda request: httpx.Response(200, content=body)) == body


def test_http_source_raises_transport_error_on_status():
    with pytest.raises(TransportError) as excinfo:
        fetch_over_http(lambda request: httpx.Response(503))

    assert excinfo.value.status_code == 503
    assert "503" in str(excinfo.value)


def test_http_source_raises_transport_error_on_network_failure():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError):
        fetch_over_http(handler)


def test_file_source_reads_bytes(tmp_path):
    path = tmp_path / "rucheng_data.json"
    path.write_text('{"城": [{"phonetic": "cheŋ21"}]}', encoding="utf-8")

    payload = asyncio.run(FileDictionarySource(path).fetch())

    assert parse_payload(payload) == {"城": [{"phonetic": "cheŋ21"}]}


def test_file_source_missing_file_is_transport_error(tmp_path):
    with pytest.raises(TransportError):
        asyncio.run(FileDictionarySource(tmp_path / "missing.json").fetch())


def test_parse_payload_rejects_invalid_json():
    with pytest.raises(MalformedDictionaryError):
        parse_payload(b"{broken")


def test_build_dictionary_source_selects_by_asset_base(tmp_path):
    http_source = build_dictionary_source("https://dict.example.org/site/")
    file_source = build_dictionary_source(str(tmp_path), "data/custom.json")

    assert isinstance(http_source, HttpDictionarySource)
    assert http_source.url == "https://dict.example.org/site/data/rucheng_data.json"
    assert isinstance(file_source, FileDictionarySource)
    assert file_source.path == tmp_path / "data" / "custom.json"


def test_lifecycle_over_missing_file_fails_cleanly(tmp_path):
    lifecycle = LoadLifecycle(
        store=DictionaryStore(),
        source=FileDictionarySource(tmp_path / "data" / "rucheng_data.json"),
    )

    asyncio.run(lifecycle.initialize())

    assert lifecycle.state is ReadinessState.FAILED
    assert lifecycle.failure_reason
