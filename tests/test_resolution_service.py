"""Tests for the ResolutionService boundary operation."""

import pytest

from yt_audio_resolver.application.services.resolution_service import ResolutionService
from yt_audio_resolver.application.services.resolver import Resolver
from yt_audio_resolver.domain.audio.entities import ResolutionFailure
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.shared.exceptions import InvalidVideoIdError


@pytest.fixture
def recording_adapter(make_adapter, make_descriptor):
    return make_adapter("only", result=make_descriptor("Only"))


@pytest.fixture
def service(recording_adapter):
    return ResolutionService(Resolver([recording_adapter]))


class TestResolutionService:
    """Tests for input validation and delegation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["", "short", "dQw4w9WgXc!", "dQw4w9WgXcQX"])
    async def test_invalid_id_contacts_no_adapter(self, service, recording_adapter, raw):
        """Should reject malformed ids before any provider is called."""
        with pytest.raises(InvalidVideoIdError):
            await service.resolve(raw)

        assert recording_adapter.calls == []

    @pytest.mark.asyncio
    async def test_resolves_raw_string_id(self, service, recording_adapter, video_id):
        result = await service.resolve("dQw4w9WgXcQ")

        assert result.source == "Only"
        assert recording_adapter.calls == [video_id]

    @pytest.mark.asyncio
    async def test_strips_whitespace_before_resolving(self, service, recording_adapter, video_id):
        await service.resolve("  dQw4w9WgXcQ ")

        assert recording_adapter.calls == [video_id]

    @pytest.mark.asyncio
    async def test_returns_failure_when_all_adapters_fail(self, make_adapter, video_id):
        """Should return, not raise, the aggregated failure."""
        failing = make_adapter("failing", error=ProviderError.no_audio())
        service = ResolutionService(Resolver([failing]))

        result = await service.resolve(video_id)

        assert isinstance(result, ResolutionFailure)
        assert result.errors == {"failing": "No audio formats found"}

    @pytest.mark.asyncio
    async def test_resolve_url_extracts_id(self, service, recording_adapter, video_id):
        """Should accept a pasted watch URL."""
        result = await service.resolve_url("https://youtu.be/dQw4w9WgXcQ?si=abc")

        assert result.source == "Only"
        assert recording_adapter.calls == [video_id]

    @pytest.mark.asyncio
    async def test_resolve_url_rejects_foreign_url(self, service, recording_adapter):
        with pytest.raises(InvalidVideoIdError):
            await service.resolve_url("https://example.com/watch?v=dQw4w9WgXcQ")

        assert recording_adapter.calls == []

    def test_exposes_resolver(self, service):
        assert isinstance(service.resolver, Resolver)
