"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the HTTP client, provider adapters, the
resolver, and the resolution service. Components are created on-demand
and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import httpx

    from ..application.interfaces.provider_adapter import ProviderAdapter
    from ..application.services.resolution_service import ResolutionService
    from ..application.services.resolver import Resolver
    from .settings import Settings

# Upper bound for connection-pool waits; per-request timeouts come from each adapter.
_CLIENT_DEFAULT_TIMEOUT = 15.0


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # Infrastructure
    _http_client: httpx.AsyncClient | None = None
    _adapters: tuple[ProviderAdapter, ...] | None = None

    # Application services
    _resolver: Resolver | None = None
    _resolution_service: ResolutionService | None = None

    # === Infrastructure ===

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get the shared outbound HTTP client."""
        if self._http_client is None:
            import httpx

            self._http_client = httpx.AsyncClient(
                timeout=_CLIENT_DEFAULT_TIMEOUT,
                follow_redirects=True,
            )
        return self._http_client

    @property
    def adapters(self) -> tuple[ProviderAdapter, ...]:
        """Get the provider adapters in configured priority order."""
        if self._adapters is None:
            from ..infrastructure.providers.registry import build_adapters

            self._adapters = tuple(
                build_adapters(
                    self.settings.resolver.provider_order,
                    self.settings.providers,
                    self.http_client,
                )
            )
        return self._adapters

    # === Application Services ===

    @property
    def resolver(self) -> Resolver:
        """Get the fan-out resolver."""
        if self._resolver is None:
            from ..application.services.resolver import Resolver

            resolver_settings = self.settings.resolver
            self._resolver = Resolver(
                self.adapters,
                raced_tier_size=resolver_settings.raced_tier_size,
                overall_timeout=resolver_settings.overall_timeout,
            )
            logger.info(
                LogTemplates.PROVIDERS_CONFIGURED,
                len(self._resolver.adapters),
                ", ".join(a.name for a in self._resolver.raced_tier),
            )
        return self._resolver

    @property
    def resolution_service(self) -> ResolutionService:
        """Get the resolution service."""
        if self._resolution_service is None:
            from ..application.services.resolution_service import ResolutionService

            self._resolution_service = ResolutionService(self.resolver)
        return self._resolution_service

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.info(LogTemplates.HTTP_CLIENT_CLOSED)

        self._adapters = None
        self._resolver = None
        self._resolution_service = None


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
