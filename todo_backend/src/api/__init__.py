"""
FastAPI Todo Server package.

The application instance lives in `src.api.main:app`; `src.api.client`
holds the HTTP client used by front ends and scripts.
"""
