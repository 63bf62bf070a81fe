import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

import httpx
import uvicorn
from fastapi.middleware.cors import CORSMiddleware

from studygen.core.config import settings
from studygen.core.logging import set_request_id, setup_logging
from studygen.apis.flashcards.main import router as flashcards_router
from studygen.apis.recommendations.main import router as recommendations_router
from studygen.apis.explain_it.main import router as explain_it_router
from studygen.apis.lectures.main import router as lectures_router
from studygen.modules.generation.client import HttpEndpointClient


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    async with httpx.AsyncClient() as http:
        app.state.endpoint_client = HttpEndpointClient(
            http,
            gemini_api_key=settings.gemini_api_key,
            openrouter_api_key=settings.openrouter_api_key,
            google_base_url=settings.generation.google_base_url,
            openrouter_base_url=settings.generation.openrouter_base_url,
        )
        try:
            yield
        finally:
            app.state.endpoint_client = None


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def tag_request(request: Request, call_next):
        set_request_id(request.headers.get("x-request-id") or uuid.uuid4().hex[:8])
        return await call_next(request)

    app.include_router(flashcards_router)
    app.include_router(recommendations_router)
    app.include_router(explain_it_router)
    app.include_router(lectures_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
            "models": [c.label for c in settings.generation.candidates()],
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        print(f"An error occurred when starting the server: {e}.")
