"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the resolver is defined here once,
so models can simply annotate their fields::

    from yt_audio_resolver.domain.shared.types import HttpUrlStr, NonEmptyStr

    class MyModel(BaseModel):
        url: HttpUrlStr
        name: NonEmptyStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Domain-specific numeric constraints ─────────────────────────────

DurationSeconds = Annotated[int, Field(ge=0, le=864_000)]
"""Media duration in seconds: 0 … 864 000 (ten days, covers long livestream VODs)."""
