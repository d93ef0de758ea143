# scribe/gateway/app.py
# scribe-gateway  (or: uvicorn scribe.gateway.app:app --factory)
"""HTTP surface of the transcription gateway."""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from openai import OpenAI

from scribe.config import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGINS,
    Settings,
    load_settings,
)
from scribe.database import create_supabase_client
from scribe.gateway.handler import TranscriptionGateway
from scribe.gateway.provider import WhisperTranscriber
from scribe.insights import enrich_transcript
from scribe.llm import init_ai_clients
from scribe.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def create_app(gateway: TranscriptionGateway) -> FastAPI:
    app = FastAPI(title="Scribe Gateway", version="0.1.0")

    # Preflight OPTIONS requests are answered here
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/process-audio")
    async def process_audio(request: Request):
        authorization = request.headers.get("authorization")
        try:
            payload = await request.json()
        except ValueError:
            logger.warning("Request body is not valid JSON")
            payload = None
        return await run_in_threadpool(gateway.handle, payload, authorization)

    return app


def build_gateway(settings: Settings) -> TranscriptionGateway:
    """Wire the gateway to real clients. Without an OpenAI key it runs in demo mode."""
    transcriber = None
    if settings.transcription_configured:
        transcriber = WhisperTranscriber(OpenAI(api_key=settings.openai_api_key))
    else:
        logger.warning("OPENAI_API_KEY is not set; the gateway will answer with sample data")

    clients = init_ai_clients(settings)

    def analyzer(transcript: str) -> dict:
        return enrich_transcript(transcript, settings.analysis_model, clients)

    return TranscriptionGateway(
        transcriber=transcriber,
        client_factory=lambda token: create_supabase_client(settings, access_token=token),
        analyzer=analyzer if any(clients) else None,
    )


def app() -> FastAPI:
    """App factory for `uvicorn --factory`."""
    settings = load_settings()
    setup_logging(settings.log_level)
    return create_app(build_gateway(settings))


def main():
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("Starting gateway", extra={"host": settings.gateway_host, "port": settings.gateway_port})
    uvicorn.run(
        create_app(build_gateway(settings)),
        host=settings.gateway_host,
        port=settings.gateway_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
