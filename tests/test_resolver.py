"""
Unit Tests for the fan-out Resolver

Tests for:
- Priority order and the raced tier / sequential tail split
- Deterministic tie-break between concurrently succeeding adapters
- Cancellation of losing adapters
- Failure aggregation with one entry per attempted adapter
- Per-adapter budgets and the overall deadline
- Recovery from unexpected adapter exceptions
"""

import asyncio

import pytest

from yt_audio_resolver.application.services.resolver import Resolver
from yt_audio_resolver.domain.audio.entities import AudioDescriptor, ResolutionFailure
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.shared.enums import AttemptOutcome


def _outcome(result: ResolutionFailure, provider: str) -> AttemptOutcome | None:
    return {a.provider: a.outcome for a in result.attempts}.get(provider)


# =============================================================================
# Configuration Tests
# =============================================================================


class TestResolverConfiguration:
    """Tests for tier splitting."""

    def test_splits_raced_tier_and_tail(self, make_adapter):
        adapters = [make_adapter(name) for name in ("a", "b", "c", "d")]
        resolver = Resolver(adapters, raced_tier_size=2)

        assert [a.name for a in resolver.raced_tier] == ["a", "b"]
        assert [a.name for a in resolver.sequential_tail] == ["c", "d"]

    def test_raced_tier_clamped_to_adapter_count(self, make_adapter):
        resolver = Resolver([make_adapter("a")], raced_tier_size=5)

        assert len(resolver.raced_tier) == 1
        assert resolver.sequential_tail == ()

    def test_raced_tier_at_least_one(self, make_adapter):
        resolver = Resolver([make_adapter("a"), make_adapter("b")], raced_tier_size=0)

        assert [a.name for a in resolver.raced_tier] == ["a"]

    def test_budget_scales_with_mirrors(self, make_adapter):
        """Should allow one timeout per mirror."""
        adapter = make_adapter("a", timeout=4.0)
        assert adapter.budget == 4.0

        adapter.mirrors = ("https://one", "https://two", "https://three")
        assert adapter.budget == 12.0


# =============================================================================
# Success Path Tests
# =============================================================================


class TestResolverSuccess:
    """Tests for first-success-wins semantics."""

    @pytest.mark.asyncio
    async def test_lower_priority_success_after_higher_failure(
        self, make_adapter, make_descriptor, video_id
    ):
        """Should return the second adapter's descriptor when the first fails."""
        first = make_adapter("first", error=ProviderError.http_error(502))
        second = make_adapter("second", result=make_descriptor("Second"))
        resolver = Resolver([first, second], raced_tier_size=1)

        result = await resolver.resolve(video_id)

        assert isinstance(result, AudioDescriptor)
        assert result.source == "Second"
        assert first.calls == [video_id]
        assert second.calls == [video_id]

    @pytest.mark.asyncio
    async def test_tail_not_called_when_raced_tier_succeeds(
        self, make_adapter, make_descriptor, video_id
    ):
        """Should never touch the sequential tail after a raced success."""
        raced = make_adapter("raced", result=make_descriptor("Raced"))
        tail = make_adapter("tail", result=make_descriptor("Tail"))
        resolver = Resolver([raced, tail], raced_tier_size=1)

        result = await resolver.resolve(video_id)

        assert result.source == "Raced"
        assert tail.calls == []

    @pytest.mark.asyncio
    async def test_higher_priority_wins_tie_even_when_slower(
        self, make_adapter, make_descriptor, video_id
    ):
        """Should prefer the higher-priority success over a faster lower-priority one."""
        slow_first = make_adapter("first", result=make_descriptor("First"), delay=0.05)
        fast_second = make_adapter("second", result=make_descriptor("Second"))
        resolver = Resolver([slow_first, fast_second], raced_tier_size=2)

        result = await resolver.resolve(video_id)

        assert result.source == "First"

    @pytest.mark.asyncio
    async def test_tie_break_is_deterministic(self, make_adapter, make_descriptor, video_id):
        """Should return the same winner on every run."""
        winners = set()
        for _ in range(5):
            first = make_adapter("first", result=make_descriptor("First"), delay=0.01)
            second = make_adapter("second", result=make_descriptor("Second"))
            third = make_adapter("third", result=make_descriptor("Third"))
            resolver = Resolver([first, second, third], raced_tier_size=3)
            winners.add((await resolver.resolve(video_id)).source)

        assert winners == {"First"}

    @pytest.mark.asyncio
    async def test_faster_lower_priority_returned_once_higher_fails(
        self, make_adapter, make_descriptor, video_id
    ):
        """Should hold a lower-priority success until every predecessor has failed."""
        first = make_adapter("first", error=ProviderError.no_audio(), delay=0.05)
        second = make_adapter("second", result=make_descriptor("Second"))
        resolver = Resolver([first, second], raced_tier_size=2)

        result = await resolver.resolve(video_id)

        assert result.source == "Second"
        assert first.calls == [video_id]

    @pytest.mark.asyncio
    async def test_losers_are_cancelled(self, make_adapter, make_descriptor, video_id):
        """Should cancel still-running raced adapters once a winner is decided."""
        winner = make_adapter("winner", result=make_descriptor("Winner"))
        slow = make_adapter("slow", hang=True)
        slower = make_adapter("slower", hang=True)
        resolver = Resolver([winner, slow, slower], raced_tier_size=3)

        result = await resolver.resolve(video_id)

        assert result.source == "Winner"
        assert slow.cancelled
        assert slower.cancelled

    @pytest.mark.asyncio
    async def test_repeated_calls_return_identical_metadata(self, make_adapter, video_id):
        """Should keep metadata stable even when each call yields a fresh stream URL."""
        counter = iter(range(100))

        def _fresh(vid):
            return AudioDescriptor.for_video(
                vid,
                audio_url=f"https://cdn.example.com/{next(counter)}.webm",
                source="Test",
                title="Song",
                uploader="Artist",
                duration_seconds=212,
            )

        resolver = Resolver([make_adapter("only", result=_fresh)])

        first = await resolver.resolve(video_id)
        second = await resolver.resolve(video_id)

        assert first.audio_url != second.audio_url
        assert (first.title, first.uploader, first.duration_seconds) == (
            second.title,
            second.uploader,
            second.duration_seconds,
        )


# =============================================================================
# Failure Path Tests
# =============================================================================


class TestResolverFailure:
    """Tests for total failure aggregation."""

    @pytest.mark.asyncio
    async def test_failure_has_one_entry_per_adapter(self, make_adapter, video_id):
        """Should record exactly one non-empty error per attempted adapter, in order."""
        adapters = [
            make_adapter("cobalt", error=ProviderError.unreachable("Connection failed: refused")),
            make_adapter("piped", error=ProviderError.http_error(500)),
            make_adapter("invidious", error=ProviderError.malformed("Response was not valid JSON")),
            make_adapter("youtube_tv", error=ProviderError.not_playable("Private video")),
            make_adapter("heuristic", error=ProviderError.no_audio()),
        ]
        resolver = Resolver(adapters, raced_tier_size=2)

        result = await resolver.resolve(video_id)

        assert isinstance(result, ResolutionFailure)
        assert result.video_id == video_id
        assert list(result.errors) == ["cobalt", "piped", "invidious", "youtube_tv", "heuristic"]
        assert all(message for message in result.errors.values())
        assert [a.outcome for a in result.attempts] == [
            AttemptOutcome.UNREACHABLE,
            AttemptOutcome.HTTP_ERROR,
            AttemptOutcome.PARSE_ERROR,
            AttemptOutcome.NOT_PLAYABLE,
            AttemptOutcome.NO_AUDIO_FOUND,
        ]

    @pytest.mark.asyncio
    async def test_failure_kind_recorded_for_failed_predecessor(self, make_adapter, video_id):
        """Should keep the precise failure kind of each adapter."""
        first = make_adapter("first", error=ProviderError.http_error(429))
        second = make_adapter("second", error=ProviderError.no_audio())
        resolver = Resolver([first, second], raced_tier_size=1)

        result = await resolver.resolve(video_id)

        assert _outcome(result, "first") is AttemptOutcome.HTTP_ERROR
        assert result.errors["first"] == "HTTP 429"

    @pytest.mark.asyncio
    async def test_unexpected_exception_recorded_as_unreachable(self, make_adapter, video_id):
        """Should never let an adapter bug escape the resolver."""
        buggy = make_adapter("buggy", error=KeyError("streamingData"))
        resolver = Resolver([buggy])

        result = await resolver.resolve(video_id)

        assert isinstance(result, ResolutionFailure)
        assert _outcome(result, "buggy") is AttemptOutcome.UNREACHABLE
        assert "streamingData" in result.errors["buggy"]

    @pytest.mark.asyncio
    async def test_hung_adapter_abandoned_after_budget(
        self, make_adapter, make_descriptor, video_id
    ):
        """Should give up on an adapter after its budget and move on."""
        hung = make_adapter("hung", hang=True, timeout=0.05)
        fallback = make_adapter("fallback", result=make_descriptor("Fallback"))
        resolver = Resolver([hung, fallback], raced_tier_size=1)

        result = await resolver.resolve(video_id)

        assert result.source == "Fallback"
        assert hung.cancelled

    @pytest.mark.asyncio
    async def test_budget_expiry_recorded_as_timeout(self, make_adapter, video_id):
        hung = make_adapter("hung", hang=True, timeout=0.05)
        resolver = Resolver([hung])

        result = await resolver.resolve(video_id)

        assert _outcome(result, "hung") is AttemptOutcome.TIMEOUT
        assert result.errors["hung"] == "Gave up after 0.05s"


# =============================================================================
# Deadline and Cancellation Tests
# =============================================================================


class TestResolverDeadline:
    """Tests for the overall deadline and caller cancellation."""

    @pytest.mark.asyncio
    async def test_deadline_records_in_flight_adapters_as_timeout(self, make_adapter, video_id):
        """Should return a failure listing every adapter it had started."""
        failed = make_adapter("failed", error=ProviderError.http_error(503))
        hung = make_adapter("hung", hang=True, timeout=30.0)
        never = make_adapter("never", hang=True, timeout=30.0)
        resolver = Resolver([failed, hung, never], raced_tier_size=2)

        result = await resolver.resolve(video_id, deadline=0.05)

        assert isinstance(result, ResolutionFailure)
        assert _outcome(result, "failed") is AttemptOutcome.HTTP_ERROR
        assert _outcome(result, "hung") is AttemptOutcome.TIMEOUT
        assert result.errors["hung"] == "Resolution deadline exceeded"
        assert _outcome(result, "never") is None
        assert never.calls == []
        assert hung.cancelled

    @pytest.mark.asyncio
    async def test_configured_overall_timeout_applies(self, make_adapter, video_id):
        hung = make_adapter("hung", hang=True, timeout=30.0)
        resolver = Resolver([hung], overall_timeout=0.05)

        result = await resolver.resolve(video_id)

        assert _outcome(result, "hung") is AttemptOutcome.TIMEOUT

    @pytest.mark.asyncio
    async def test_deadline_in_sequential_tail(self, make_adapter, video_id):
        """Should expire a tail adapter that is mid-flight when the deadline hits."""
        first = make_adapter("first", error=ProviderError.no_audio())
        tail = make_adapter("tail", hang=True, timeout=30.0)
        resolver = Resolver([first, tail], raced_tier_size=1)

        result = await resolver.resolve(video_id, deadline=0.05)

        assert list(result.errors) == ["first", "tail"]
        assert _outcome(result, "tail") is AttemptOutcome.TIMEOUT

    @pytest.mark.asyncio
    async def test_caller_cancellation_propagates(self, make_adapter, video_id):
        """Should cancel every in-flight adapter when the caller is cancelled."""
        first = make_adapter("first", hang=True, timeout=30.0)
        second = make_adapter("second", hang=True, timeout=30.0)
        resolver = Resolver([first, second], raced_tier_size=2)

        task = asyncio.create_task(resolver.resolve(video_id))
        await asyncio.sleep(0.02)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert first.cancelled
        assert second.cancelled
