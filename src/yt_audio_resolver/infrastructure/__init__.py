"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Providers (Cobalt, Piped, Invidious, YouTube internal clients,
  downloader APIs, local yt-dlp, heuristic scrapers)
- HTTP (FastAPI boundary with CORS)
"""
