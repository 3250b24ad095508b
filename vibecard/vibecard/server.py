"""FastAPI application exposing ``POST /api/generate`` for one variant."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vibecard.pipeline import Pipeline

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def client_ip(request: Request) -> str:
    """Best-effort client identifier behind common proxies."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    for header in ("x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def create_app(pipeline_factory: Callable[[], Pipeline]) -> FastAPI:
    """Create the application; *pipeline_factory* is called once per request."""
    app = FastAPI(title="vibecard", version="0.1.0")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/generate")
    async def generate(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse(
                {"success": False, "error": "Invalid request: body must be valid JSON"},
                status_code=400,
            )
        response = await pipeline_factory().handle(payload, client_ip(request))
        return JSONResponse(response.body, status_code=response.status_code)

    @app.options("/api/generate")
    async def generate_options() -> JSONResponse:
        return JSONResponse({}, headers=CORS_HEADERS)

    return app
