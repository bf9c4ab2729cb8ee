"""Tests for the provider HTTP client."""
import httpx
import pytest

import factories
from media_resolver.errors import UpstreamResponseError
from media_resolver.services.platform_detector import Platform
from media_resolver.services.provider_client import ENDPOINT_TABLE, ProviderClient, has_endpoints, supported_platforms


BASE_URL = "https://api.example.test"


def make_client(handler):
    return ProviderClient(api_key="test-key", base_url=BASE_URL, client=factories.mock_async_client(handler))


class TestProviderClient:
    @pytest.mark.asyncio
    async def test_get_sends_bearer_token_and_params(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=factories.envelope({"ok": True}))

        envelope = await make_client(handler).get("/api/v1/douyin/app/v3/fetch_one_video", {"aweme_id": "123"})

        assert envelope.is_success
        assert envelope.data == {"ok": True}
        request = seen[0]
        assert request.headers["Authorization"] == "Bearer test-key"
        assert request.url.path == "/api/v1/douyin/app/v3/fetch_one_video"
        assert request.url.params["aweme_id"] == "123"

    @pytest.mark.asyncio
    async def test_http_error_status_raises(self):
        client = make_client(lambda request: httpx.Response(404, json={"detail": "not found"}))

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await client.get("/api/v1/x", {})

        assert exc_info.value.response.status_code == 404

    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed_envelope(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>gateway</html>"))

        with pytest.raises(UpstreamResponseError) as exc_info:
            await client.get("/api/v1/x", {})

        assert exc_info.value.code == 3002

    @pytest.mark.asyncio
    async def test_envelope_error_code_is_returned_not_raised(self):
        client = make_client(lambda request: httpx.Response(200, json=factories.envelope(None, code=2002)))

        envelope = await client.get("/api/v1/x", {})

        assert envelope.code == 2002
        assert not envelope.is_success

    def test_base_url_trailing_slash_trimmed(self):
        client = ProviderClient(api_key="k", base_url="https://api.example.test/")
        assert client.base_url == "https://api.example.test"


class TestEndpointsFor:
    def test_douyin_primary_then_backup(self):
        endpoints = make_client(lambda request: httpx.Response(200)).endpoints_for(Platform.DOUYIN, "123")
        assert [e.label for e in endpoints] == ["douyin:primary", "douyin:backup-1"]

    @pytest.mark.asyncio
    async def test_fetch_calls_matching_path(self):
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append((request.url.path, dict(request.url.params)))
            return httpx.Response(200, json=factories.envelope({"ok": True}))

        endpoints = make_client(handler).endpoints_for(Platform.XIAOHONGSHU, "64b7c8e9")
        await endpoints[1].fetch()

        assert paths == [("/api/v1/xiaohongshu/web/get_note_info", {"note_id": "64b7c8e9"})]

    def test_unsupported_platform_has_no_endpoints(self):
        client = make_client(lambda request: httpx.Response(200))
        assert client.endpoints_for(Platform.WEISHI, "abc") == []
        assert client.endpoints_for(Platform.UNKNOWN, "abc") == []

    def test_every_supported_platform_has_a_primary(self):
        for platform, (param, paths) in ENDPOINT_TABLE.items():
            assert param
            assert paths, platform
            assert has_endpoints(platform)
        assert Platform.WEISHI not in supported_platforms()
