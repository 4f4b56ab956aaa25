"""Fan-out resolver driving provider adapters in priority order.

The first ``raced_tier_size`` adapters run concurrently. A raced success is
only accepted once every higher-priority raced adapter has failed, so when
two adapters would both succeed the higher-priority one always wins. The
remaining adapters run one at a time, and only if the whole raced tier failed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from yt_audio_resolver.application.interfaces.provider_adapter import ProviderAdapter
from yt_audio_resolver.domain.audio.entities import (
    AudioDescriptor,
    ProviderAttempt,
    ResolutionFailure,
)
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.audio.value_objects import VideoId
from yt_audio_resolver.domain.shared.enums import AttemptOutcome
from yt_audio_resolver.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

ResolutionResult = AudioDescriptor | ResolutionFailure


@dataclass
class _AttemptLog:
    """Attempts of a single resolve() call, keyed by priority index."""

    attempts: dict[int, ProviderAttempt] = field(default_factory=dict)
    in_flight: dict[int, tuple[str, float]] = field(default_factory=dict)

    def start(self, index: int, provider: str) -> None:
        self.in_flight[index] = (provider, time.monotonic())

    def record(self, index: int, attempt: ProviderAttempt) -> None:
        self.in_flight.pop(index, None)
        self.attempts[index] = attempt

    def expire_in_flight(self) -> None:
        now = time.monotonic()
        for index, (provider, started) in list(self.in_flight.items()):
            self.record(
                index,
                ProviderAttempt(
                    provider=provider,
                    outcome=AttemptOutcome.TIMEOUT,
                    detail=ErrorMessages.DEADLINE_EXCEEDED,
                    elapsed_seconds=now - started,
                ),
            )

    def ordered(self) -> tuple[ProviderAttempt, ...]:
        return tuple(self.attempts[index] for index in sorted(self.attempts))


class Resolver:
    """Resolve a video id through an ordered set of provider adapters."""

    def __init__(
        self,
        adapters: Sequence[ProviderAdapter],
        *,
        raced_tier_size: int = 1,
        overall_timeout: float | None = None,
    ) -> None:
        self._adapters = tuple(adapters)
        self._raced_tier_size = max(1, min(raced_tier_size, len(self._adapters) or 1))
        self._overall_timeout = overall_timeout

    @property
    def adapters(self) -> tuple[ProviderAdapter, ...]:
        return self._adapters

    @property
    def raced_tier(self) -> tuple[ProviderAdapter, ...]:
        return self._adapters[: self._raced_tier_size]

    @property
    def sequential_tail(self) -> tuple[ProviderAdapter, ...]:
        return self._adapters[self._raced_tier_size :]

    async def resolve(
        self, video_id: VideoId, deadline: float | None = None
    ) -> ResolutionResult:
        """Return the first descriptor any adapter produces, or the aggregated failure.

        Args:
            video_id: Validated video id.
            deadline: Seconds allowed for the whole call. Falls back to the
                configured overall timeout; ``None`` means unbounded.
        """
        timeout = deadline if deadline is not None else self._overall_timeout
        log = _AttemptLog()
        started = time.monotonic()
        logger.info(LogTemplates.RESOLVE_STARTED, video_id)

        descriptor: AudioDescriptor | None = None
        try:
            async with asyncio.timeout(timeout):
                descriptor = await self._run(video_id, log)
        except TimeoutError:
            logger.warning(LogTemplates.RESOLVE_DEADLINE_EXCEEDED, timeout, video_id)
            log.expire_in_flight()

        if descriptor is not None:
            logger.info(
                LogTemplates.RESOLVE_SUCCEEDED,
                video_id,
                descriptor.source,
                time.monotonic() - started,
            )
            return descriptor

        failure = ResolutionFailure(video_id=video_id, attempts=log.ordered())
        logger.warning(LogTemplates.RESOLVE_FAILED, video_id, failure.errors)
        return failure

    async def _run(self, video_id: VideoId, log: _AttemptLog) -> AudioDescriptor | None:
        descriptor = await self._race(video_id, log)
        if descriptor is not None:
            return descriptor

        if self.sequential_tail:
            logger.info(LogTemplates.RACED_TIER_FAILED, video_id)

        offset = len(self.raced_tier)
        for position, adapter in enumerate(self.sequential_tail):
            index = offset + position
            log.start(index, adapter.name)
            attempt, descriptor = await self._attempt(adapter, video_id)
            log.record(index, attempt)
            if descriptor is not None:
                return descriptor
        return None

    async def _race(self, video_id: VideoId, log: _AttemptLog) -> AudioDescriptor | None:
        tier = self.raced_tier
        if not tier:
            return None

        tasks: dict[asyncio.Task[tuple[ProviderAttempt, AudioDescriptor | None]], int] = {}
        for index, adapter in enumerate(tier):
            log.start(index, adapter.name)
            task = asyncio.create_task(
                self._attempt(adapter, video_id), name=f"resolve-{adapter.name}-{video_id}"
            )
            tasks[task] = index

        results: dict[int, AudioDescriptor | None] = {}
        pending = set(tasks)
        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    attempt, descriptor = task.result()
                    index = tasks[task]
                    log.record(index, attempt)
                    results[index] = descriptor

                winner = self._decide(len(tier), results)
                if winner is not None:
                    for task in pending:
                        logger.debug(
                            LogTemplates.PROVIDER_CANCELLED, tier[tasks[task]].name, winner.source
                        )
                        log.in_flight.pop(tasks[task], None)
                    return winner
            return None
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    @staticmethod
    def _decide(
        tier_size: int, results: dict[int, AudioDescriptor | None]
    ) -> AudioDescriptor | None:
        """Highest-priority success whose every predecessor has already failed."""
        for index in range(tier_size):
            if index not in results:
                return None
            descriptor = results[index]
            if descriptor is not None:
                return descriptor
        return None

    async def _attempt(
        self, adapter: ProviderAdapter, video_id: VideoId
    ) -> tuple[ProviderAttempt, AudioDescriptor | None]:
        name = adapter.name
        budget = adapter.budget
        started = time.monotonic()
        logger.debug(LogTemplates.PROVIDER_ATTEMPT, name, video_id)

        def _failed(outcome: AttemptOutcome, detail: str) -> tuple[ProviderAttempt, None]:
            return (
                ProviderAttempt(
                    provider=name,
                    outcome=outcome,
                    detail=detail,
                    elapsed_seconds=time.monotonic() - started,
                ),
                None,
            )

        try:
            async with asyncio.timeout(budget):
                descriptor = await adapter.resolve(video_id)
        except TimeoutError:
            logger.warning(LogTemplates.PROVIDER_TIMED_OUT, name, budget, video_id)
            return _failed(
                AttemptOutcome.TIMEOUT, ErrorMessages.ADAPTER_TIMED_OUT.format(budget=budget)
            )
        except ProviderError as e:
            logger.info(LogTemplates.PROVIDER_FAILED, name, video_id, e.message, e.kind)
            return _failed(AttemptOutcome.from_error_kind(e.kind), e.message)
        except Exception as e:
            logger.exception(LogTemplates.PROVIDER_UNEXPECTED_ERROR, name, video_id)
            return _failed(
                AttemptOutcome.UNREACHABLE,
                ErrorMessages.UNEXPECTED_ADAPTER_ERROR.format(error=str(e) or e.__class__.__name__),
            )

        logger.info(LogTemplates.PROVIDER_SUCCEEDED, name, video_id)
        attempt = ProviderAttempt(
            provider=name,
            outcome=AttemptOutcome.SUCCESS,
            detail=descriptor.source,
            elapsed_seconds=time.monotonic() - started,
        )
        return attempt, descriptor
