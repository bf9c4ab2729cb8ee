"""End-to-end tests for the resolution pipeline with a mocked network."""
import httpx
import pytest

import factories
from media_resolver.config import Settings
from media_resolver.models import ResolutionFailure, ResolutionResult, VideoMedia
from media_resolver.services.resolver import MediaResolver


API_HOST = "api.example.test"
AWEME_ID = "7345678901234567890"


def make_settings() -> Settings:
    settings = Settings()
    settings.TIKHUB_API_KEY = "test-key"
    settings.TIKHUB_BASE_URL = f"https://{API_HOST}"
    settings.ENDPOINT_TIMEOUT_SECONDS = 2.0
    settings.SHORTLINK_TIMEOUT_SECONDS = 2.0
    return settings


class RecordingHandler:
    """Answers shortlink hops and provider calls; remembers every request."""

    def __init__(self, api_responses=None, redirects=None):
        self.api_responses = list(api_responses or [])
        self.redirects = redirects or {}
        self.requests = []

    @property
    def api_requests(self):
        return [r for r in self.requests if r.url.host == API_HOST]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == API_HOST:
            return self.api_responses.pop(0)
        location = self.redirects.get(str(request.url))
        if location:
            return httpx.Response(302, headers={"Location": location})
        return httpx.Response(200, text="<html></html>")


def make_resolver(handler: RecordingHandler) -> MediaResolver:
    return MediaResolver(settings=make_settings(), client=factories.mock_async_client(handler))


class TestResolveFailuresBeforeNetwork:
    @pytest.mark.asyncio
    async def test_no_link(self):
        handler = RecordingHandler()
        outcome = await make_resolver(handler).resolve("just some words, no link here")

        assert isinstance(outcome, ResolutionFailure)
        assert outcome.kind == "no_link"
        assert outcome.message == "No link found in the shared text"
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_unknown_platform(self):
        handler = RecordingHandler()
        outcome = await make_resolver(handler).resolve("https://example.com/watch/1")

        assert outcome.kind == "unsupported_platform"
        assert outcome.message == "Unsupported platform link"
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_platform_without_provider_endpoints(self):
        handler = RecordingHandler()
        outcome = await make_resolver(handler).resolve("https://weishi.qq.com/weishi/feed/abc123")

        assert outcome.kind == "unsupported_platform"
        assert outcome.platform == "weishi"
        assert outcome.message == "Weishi links are not supported yet"
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_missing_content_id(self):
        handler = RecordingHandler()
        outcome = await make_resolver(handler).resolve("https://www.douyin.com/user/someone")

        assert outcome.kind == "invalid_id"
        assert outcome.platform == "douyin"
        assert outcome.message == "Could not extract the Douyin video ID from the link"
        assert handler.api_requests == []


class TestResolveSuccess:
    @pytest.mark.asyncio
    async def test_douyin_share_text_through_shortlink(self):
        handler = RecordingHandler(
            redirects={
                "https://v.douyin.com/abc123/": f"https://www.iesdouyin.com/share/video/{AWEME_ID}/?region=CN",
            },
            api_responses=[
                httpx.Response(200, json=factories.envelope({"aweme_detail": factories.douyin_video_detail()})),
            ],
        )

        outcome = await make_resolver(handler).resolve(
            "7.43 Sunset over the river https://v.douyin.com/abc123/ copy this link and open Douyin"
        )

        assert isinstance(outcome, ResolutionResult)
        assert isinstance(outcome.media, VideoMedia)
        assert outcome.media.id == AWEME_ID
        assert "playwm" not in outcome.media.video_url
        assert outcome.media.duration == 15
        assert outcome.provider_calls == 1
        assert outcome.estimated_cost == pytest.approx(0.002)
        assert outcome.parse_time_ms >= 0
        assert outcome.network_time_ms <= outcome.parse_time_ms + 1

        api_request = handler.api_requests[0]
        assert api_request.url.params["aweme_id"] == AWEME_ID
        assert api_request.headers["Authorization"] == "Bearer test-key"

    @pytest.mark.asyncio
    async def test_backup_endpoint_after_server_error(self):
        handler = RecordingHandler(api_responses=[
            httpx.Response(503),
            httpx.Response(200, json=factories.envelope({"aweme_details": [factories.douyin_video_detail()]})),
        ])

        outcome = await make_resolver(handler).resolve(f"https://www.douyin.com/video/{AWEME_ID}")

        assert isinstance(outcome, ResolutionResult)
        assert outcome.provider_calls == 2
        assert outcome.estimated_cost == pytest.approx(0.004)
        assert [r.url.path for r in handler.api_requests] == [
            "/api/v1/douyin/app/v3/fetch_one_video",
            "/api/v1/douyin/app/v3/fetch_one_video_v2",
        ]

    @pytest.mark.asyncio
    async def test_empty_envelope_falls_through_to_backup(self):
        handler = RecordingHandler(api_responses=[
            httpx.Response(200, json=factories.envelope({})),
            httpx.Response(200, json=factories.envelope(factories.xiaohongshu_note("normal"))),
        ])

        outcome = await make_resolver(handler).resolve(
            "https://www.xiaohongshu.com/explore/64b7c8e9000000001203f2a1"
        )

        assert isinstance(outcome, ResolutionResult)
        assert outcome.media.kind == "gallery"
        assert outcome.provider_calls == 2


class TestResolveUpstreamFailures:
    @pytest.mark.asyncio
    async def test_xiaohongshu_not_found(self):
        handler = RecordingHandler(api_responses=[httpx.Response(404, json={"detail": "not found"})])

        outcome = await make_resolver(handler).resolve(
            "https://www.xiaohongshu.com/explore/64b7c8e9000000001203f2a1"
        )

        assert isinstance(outcome, ResolutionFailure)
        assert outcome.kind == "upstream_client"
        assert outcome.message == "The note may be private or deleted"
        assert outcome.upstream_code == 404
        assert len(handler.api_requests) == 1

    @pytest.mark.asyncio
    async def test_all_endpoints_unavailable(self):
        handler = RecordingHandler(api_responses=[httpx.Response(502), httpx.Response(503)])

        outcome = await make_resolver(handler).resolve(f"https://www.douyin.com/video/{AWEME_ID}")

        assert outcome.kind == "upstream_unavailable"
        assert outcome.upstream_code == 503
        assert outcome.platform == "douyin"

    @pytest.mark.asyncio
    async def test_quota_exhausted_envelope(self):
        handler = RecordingHandler(api_responses=[
            httpx.Response(200, json=factories.envelope(None, code=2002)),
        ])

        outcome = await make_resolver(handler).resolve("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        assert outcome.kind == "upstream_unavailable"
        assert outcome.message == "API quota has been used up"
        assert outcome.upstream_code == 2002

    @pytest.mark.asyncio
    async def test_unmappable_payload(self):
        handler = RecordingHandler(api_responses=[
            httpx.Response(200, json=factories.envelope({"unexpected": True})),
        ])

        outcome = await make_resolver(handler).resolve("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        assert outcome.kind == "mapping"
        assert outcome.message.startswith("Unexpected YouTube data format")

    @pytest.mark.asyncio
    async def test_payload_of_unexpected_shape_is_mapping_failure(self):
        detail = factories.douyin_video_detail()
        detail["author"] = "someone"
        handler = RecordingHandler(api_responses=[
            httpx.Response(200, json=factories.envelope({"aweme_detail": detail})),
            httpx.Response(200, json=factories.envelope({"aweme_detail": detail})),
        ])

        outcome = await make_resolver(handler).resolve(f"https://www.douyin.com/video/{AWEME_ID}")

        assert isinstance(outcome, ResolutionFailure)
        assert outcome.kind == "mapping"
        assert len(handler.api_requests) == 2
